"""Interactive explorer command loop.

Reads one line at a time, splits it into a verb and arguments, resolves
path arguments against the session's current directory and runs the
matching primitive. The dispatcher is the single place where primitive
failures become printed diagnostics: a failing command never ends the
loop, only ``exit``/``quit`` or the end of the input stream does.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from datrain.core.config import ExplorerSettings
from datrain.explorer.models import Command, parse_command
from datrain.explorer.operations import (
    copy_dir,
    copy_file,
    delete_path,
    iter_numbered_lines,
    move_path,
    read_text,
    rename_path,
    stat_path,
    touch_file,
    write_text,
)
from datrain.explorer.session import ExplorerSession
from datrain.explorer.traversal import dir_size, iter_listing, iter_tree, search_files
from datrain.utils.formatting import console as default_console
from datrain.utils.formatting import err_console as default_err_console
from datrain.utils.formatting import format_size, printable

logger = logging.getLogger(__name__)

COMMAND_NAMES: tuple[str, ...] = (
    "ls",
    "cd",
    "pwd",
    "cp",
    "mv",
    "rm",
    "cat",
    "touch",
    "rename",
    "find",
    "stat",
    "lines",
    "write",
    "append",
    "du",
    "tree",
    "help",
    "exit",
    "quit",
)

HELP_LINE = "Commands: " + ", ".join(COMMAND_NAMES)
UNKNOWN_COMMAND_LINE = f"Unknown command. {HELP_LINE}"


def describe_os_error(exc: OSError) -> str:
    """Render an OSError as "<reason>: <path>" for the user."""
    reason = exc.strerror or str(exc)
    if exc.filename is None:
        return reason
    if exc.filename2 is not None:
        return f"{reason}: {exc.filename} -> {exc.filename2}"
    return f"{reason}: {exc.filename}"


@dataclass(frozen=True, slots=True)
class _Verb:
    """Dispatch table entry."""

    handler: Callable[[Command], None]
    usage: str = ""
    min_args: int = 0


class Explorer:
    """Command dispatcher driving one ExplorerSession.

    Args:
        session: State the commands read and update.
        settings: Prompt label and listing widths.
        out: Console for command output.
        err: Console for warnings and errors.
        read_line: Prompts for and returns one input line. Raises EOFError
            when input is exhausted. Defaults to reading from ``out``.
    """

    def __init__(
        self,
        session: ExplorerSession,
        settings: ExplorerSettings | None = None,
        *,
        out: Console | None = None,
        err: Console | None = None,
        read_line: Callable[[str], str] | None = None,
    ) -> None:
        self.session = session
        self._settings = settings or ExplorerSettings()
        self._out = out or default_console
        self._err = err or default_err_console
        self._read_line = read_line or self._console_input
        self._verbs: dict[str, _Verb] = {
            "ls": _Verb(self._ls, "[-r]"),
            "cd": _Verb(self._cd, "<dir>", 1),
            "pwd": _Verb(self._pwd),
            "cp": _Verb(self._cp, "<src> <dst>", 2),
            "mv": _Verb(self._mv, "<src> <dst>", 2),
            "rm": _Verb(self._rm, "<target>", 1),
            "cat": _Verb(self._cat, "<file>", 1),
            "touch": _Verb(self._touch, "<file>", 1),
            "rename": _Verb(self._rename, "<src> <dst>", 2),
            "find": _Verb(self._find, "<pattern>", 1),
            "stat": _Verb(self._stat, "<file>", 1),
            "lines": _Verb(self._lines, "<file>", 1),
            "write": _Verb(self._write_file, "<file> <text>", 2),
            "append": _Verb(self._append_file, "<file> <text>", 2),
            "du": _Verb(self._du),
            "tree": _Verb(self._tree),
            "help": _Verb(self._help),
            "exit": _Verb(self._exit),
            "quit": _Verb(self._exit),
        }

    @property
    def prompt(self) -> str:
        """Prompt text embedding the current directory."""
        return f"{self._settings.prompt_label}:{printable(self.session.current_directory)}> "

    def run(self) -> ExplorerSession:
        """Read and execute commands until the session stops.

        End of input (EOF or Ctrl-C at the prompt) stops the session too.

        Returns:
            The session in its final state.
        """
        while self.session.running:
            try:
                line = self._read_line(self.prompt)
            except (EOFError, KeyboardInterrupt):
                self._out.print()
                self.session.stop()
                break
            self.execute(line)
        return self.session

    def execute(self, line: str) -> bool:
        """Execute one input line.

        Args:
            line: Raw input line.

        Returns:
            Whether the session is still running.
        """
        command = parse_command(line)
        if command is None:
            return self.session.running

        verb = self._verbs.get(command.verb)
        if verb is None:
            self._emit(UNKNOWN_COMMAND_LINE)
            return self.session.running

        if len(command.args) < verb.min_args:
            usage = f"{printable(command.verb)} {verb.usage}"
            self._err.print(f"[warning]Usage:[/] {escape(usage)}")
            return self.session.running

        try:
            verb.handler(command)
        except OSError as e:
            logger.debug("Command %r failed", line, exc_info=True)
            self._error(f"{command.verb}: {describe_os_error(e)}")
        except ValueError as e:
            # Arguments the OS cannot represent, e.g. an embedded NUL
            self._error(f"{command.verb}: {e}")
        except RecursionError:
            self._error(f"{command.verb}: directory tree too deep (symbolic link loop?)")
        return self.session.running

    # === Output helpers ===

    def _console_input(self, prompt: str) -> str:
        return self._out.input(prompt, markup=False, emoji=False)

    def _emit(self, text: str, style: str | None = None) -> None:
        """Write text verbatim (no markup, highlighting or wrapping)."""
        self._out.out(printable(text), style=style, highlight=False)

    def _note(self, message: str) -> None:
        self._out.print(f"[muted]{escape(printable(message))}[/]")

    def _error(self, message: str) -> None:
        self._err.print(f"[error]Error:[/] {escape(printable(message))}")

    def _warn_unreadable(self, path: Path, exc: OSError) -> None:
        reason = printable(exc.strerror or exc)
        self._err.print(
            f"[warning]Warning:[/] Cannot access {escape(printable(path))}: {escape(reason)}"
        )

    def _path(self, arg: str) -> Path:
        return self.session.resolve(arg)

    # === Handlers ===

    def _ls(self, command: Command) -> None:
        recursive = command.arg(0) == "-r"
        for section in iter_listing(
            self.session.current_directory,
            recursive=recursive,
            on_error=self._warn_unreadable,
        ):
            self._emit(f"\nListing: {section.directory}", style="bold_header")
            for item in section.items:
                self._emit(
                    item.format_line(self._settings.name_width, self._settings.size_width),
                    style="directory" if item.is_dir else None,
                )

    def _cd(self, command: Command) -> None:
        target = command.args[0]
        if not self.session.change_directory(target):
            self._error(f"Not a directory: {target}")

    def _pwd(self, command: Command) -> None:
        self._emit(str(self.session.current_directory))

    def _cp(self, command: Command) -> None:
        src, dst = self._path(command.args[0]), self._path(command.args[1])
        if src.is_dir():
            copy_dir(src, dst)
            self._note(f"Copied directory {src} -> {dst}")
        else:
            copied = copy_file(src, dst)
            self._note(f"Copied {copied} bytes to {dst}")

    def _mv(self, command: Command) -> None:
        move_path(self._path(command.args[0]), self._path(command.args[1]))

    def _rm(self, command: Command) -> None:
        delete_path(self._path(command.args[0]))

    def _cat(self, command: Command) -> None:
        text = read_text(self._path(command.args[0]))
        self._out.out(text, highlight=False, end="" if text.endswith("\n") else "\n")

    def _touch(self, command: Command) -> None:
        touch_file(self._path(command.args[0]))

    def _rename(self, command: Command) -> None:
        rename_path(self._path(command.args[0]), self._path(command.args[1]))

    def _find(self, command: Command) -> None:
        for match in search_files(
            self.session.current_directory,
            command.args[0],
            on_error=self._warn_unreadable,
        ):
            self._emit(str(match))

    def _stat(self, command: Command) -> None:
        item = stat_path(self._path(command.args[0]))
        self._emit(f"Path: {item.path}")
        self._emit(f"Is directory: {str(item.is_dir).lower()}")
        self._emit(f"Size: {'-' if item.is_dir else item.size}")
        if item.modified is not None:
            stamp = datetime.fromtimestamp(item.modified, tz=UTC).isoformat()
            self._emit(f"Modified: {stamp} ({item.modified_display})")

    def _lines(self, command: Command) -> None:
        for line in iter_numbered_lines(self._path(command.args[0])):
            self._emit(line)

    def _write_file(self, command: Command) -> None:
        write_text(self._path(command.args[0]), " ".join(command.args[1:]))

    def _append_file(self, command: Command) -> None:
        write_text(self._path(command.args[0]), " ".join(command.args[1:]), append=True)

    def _du(self, command: Command) -> None:
        total = dir_size(self.session.current_directory)
        self._emit(f"Total size: {total} bytes ({format_size(total)})")

    def _tree(self, command: Command) -> None:
        for line in iter_tree(self.session.current_directory):
            self._emit(line)

    def _help(self, command: Command) -> None:
        self._emit(HELP_LINE)

    def _exit(self, command: Command) -> None:
        self.session.stop()
