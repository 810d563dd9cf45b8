"""Explorer domain models.

This module defines the data structures the explorer works with: a
point-in-time metadata snapshot of one filesystem entry, the parsed form
of one command line, and one section of a directory listing.
"""

import os
import stat
from dataclasses import dataclass, field
from pathlib import Path

DIR_MARKER = "<DIR>"


@dataclass(frozen=True, slots=True)
class FileItem:
    """Metadata snapshot of a single filesystem entry.

    Captured once from a directory enumeration (or a stat call) and never
    updated; two snapshots of the same path are independent.

    Attributes:
        path: Filesystem path of the entry.
        is_dir: Whether the entry is a directory.
        size: Size in bytes. Always 0 for directories and other
            non-regular files; not a byte count when is_dir is True.
        modified: Modification time in seconds since the epoch, or None
            when the host cannot report it.
    """

    path: Path
    is_dir: bool
    size: int
    modified: float | None = None

    def __post_init__(self) -> None:
        """Validate file item data after initialization."""
        if self.size < 0:
            msg = f"Size cannot be negative, got {self.size}"
            raise ValueError(msg)

    @classmethod
    def from_stat(cls, path: Path, st: os.stat_result) -> "FileItem":
        """Build a FileItem from an already fetched stat result."""
        is_dir = stat.S_ISDIR(st.st_mode)
        is_file = stat.S_ISREG(st.st_mode)
        return cls(
            path=path,
            is_dir=is_dir,
            size=st.st_size if is_file else 0,
            modified=getattr(st, "st_mtime", None),
        )

    @classmethod
    def from_entry(cls, entry: os.DirEntry[str]) -> "FileItem":
        """Build a FileItem from one directory enumeration result.

        Symbolic links are described as themselves, not as their targets.

        Raises:
            OSError: If the entry's metadata cannot be read.
        """
        return cls.from_stat(Path(entry.path), entry.stat(follow_symlinks=False))

    @classmethod
    def from_path(cls, path: Path) -> "FileItem":
        """Build a FileItem by stat-ing a path, following symbolic links.

        Raises:
            OSError: If the path does not exist or cannot be read.
        """
        return cls.from_stat(path, path.stat())

    @property
    def name(self) -> str:
        """Final path component (the path itself for roots)."""
        return self.path.name or str(self.path)

    @property
    def modified_display(self) -> str:
        """Modification time as whole epoch seconds, or "n/a"."""
        if self.modified is None:
            return "n/a"
        return str(int(self.modified))

    def format_line(self, name_width: int = 40, size_width: int = 10) -> str:
        """Render the entry as one fixed-width listing line.

        Layout: type marker, right-justified size (blank for directories),
        left-justified name padded to ``name_width``, modification time.
        Names wider than the column are cut and end with an ellipsis.
        """
        marker = DIR_MARKER if self.is_dir else " " * len(DIR_MARKER)
        size = "" if self.is_dir else str(self.size)
        name = self.name
        if len(name) > name_width:
            name = name[: name_width - 1] + "…"
        return f"{marker} {size:>{size_width}} {name:<{name_width}} {self.modified_display}"


@dataclass(frozen=True, slots=True)
class Command:
    """One parsed explorer input line.

    Attributes:
        verb: First whitespace-separated token.
        args: Remaining tokens, in order.
    """

    verb: str
    args: tuple[str, ...] = ()

    def arg(self, index: int) -> str | None:
        """Return the argument at ``index``, or None if absent."""
        if index < len(self.args):
            return self.args[index]
        return None


def parse_command(line: str) -> Command | None:
    """Tokenize an input line on whitespace.

    Args:
        line: Raw input line.

    Returns:
        Command for the line, or None if the line is blank.
    """
    parts = line.split()
    if not parts:
        return None
    return Command(verb=parts[0], args=tuple(parts[1:]))


@dataclass(frozen=True, slots=True)
class ListingSection:
    """Entries of one enumerated directory, in display order.

    Attributes:
        directory: Directory that was enumerated.
        items: Snapshots of its entries, sorted by name.
    """

    directory: Path
    items: tuple[FileItem, ...] = field(default_factory=tuple)
