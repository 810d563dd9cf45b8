"""Explorer session state.

The only state carried between explorer commands is the current
directory (plus whether the loop is still running). It lives in an
explicit session object rather than the process working directory, so a
sequence of commands can be replayed and the resulting state inspected.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ExplorerSession:
    """Mutable state of one interactive explorer.

    Attributes:
        current_directory: Absolute path of an existing directory. Relative
            command arguments are resolved against it.
        running: False once the user has asked to leave.
    """

    current_directory: Path
    running: bool = True

    @classmethod
    def start(cls, directory: Path | None = None) -> "ExplorerSession":
        """Open a session rooted at ``directory`` (default: process cwd).

        Raises:
            NotADirectoryError: If ``directory`` is not an existing directory.
        """
        start_dir = (directory or Path.cwd()).resolve()
        if not start_dir.is_dir():
            raise NotADirectoryError(f"Not a directory: {start_dir}")
        return cls(current_directory=start_dir)

    def resolve(self, arg: str) -> Path:
        """Join a command argument onto the current directory.

        Absolute arguments replace the current directory entirely.
        """
        return self.current_directory / arg

    def change_directory(self, arg: str) -> bool:
        """Move to another directory if it exists.

        Args:
            arg: Target directory, relative or absolute.

        Returns:
            True if the current directory changed, False if the target is
            not an existing directory (the current directory is kept).
        """
        target = self.resolve(arg)
        if not target.is_dir():
            logger.debug("Rejected cd to %s", target)
            return False
        self.current_directory = target.resolve()
        return True

    def stop(self) -> None:
        """Mark the session as finished."""
        self.running = False
