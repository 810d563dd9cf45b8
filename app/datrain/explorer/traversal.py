"""Directory traversal primitives.

Breadth-first listing and search walk an explicit deque worklist, so
traversal depth is not bounded by the call stack and a single unreadable
directory can be reported and skipped without abandoning its siblings.
Size aggregation uses an explicit stack for the same reason. Tree
printing is a plain recursive pre-order descent.

Directory symlinks are followed by search, size aggregation and tree
printing. There is no cycle detection: a link pointing at one of its
own ancestors makes those walks loop until the OS or interpreter gives up.
"""

import logging
import os
from collections import deque
from collections.abc import Callable, Iterator
from pathlib import Path

from datrain.explorer.models import FileItem, ListingSection

logger = logging.getLogger(__name__)

# Receives the path that could not be read and the error raised for it.
ErrorHandler = Callable[[Path, OSError], None]


def _log_error(path: Path, exc: OSError) -> None:
    logger.warning("Cannot access %s: %s", path, exc.strerror or exc)


def _sorted_entries(directory: Path) -> list[os.DirEntry[str]]:
    """Enumerate a directory, sorted by entry name.

    Raises:
        OSError: If the directory cannot be enumerated.
    """
    with os.scandir(directory) as it:
        return sorted(it, key=lambda e: e.name)


def iter_listing(
    root: Path,
    recursive: bool = False,
    on_error: ErrorHandler | None = None,
) -> Iterator[ListingSection]:
    """List a directory, optionally descending breadth-first.

    Every entry of a directory is yielded together, as one section,
    before any subdirectory is expanded. In non-recursive mode only
    ``root`` is enumerated.

    Args:
        root: Directory to list.
        recursive: If True, enqueue subdirectories for later expansion.
        on_error: Called for each directory or entry that cannot be read.
            Defaults to logging a warning. Traversal always continues.

    Yields:
        ListingSection per successfully enumerated directory.
    """
    report = on_error or _log_error
    queue: deque[Path] = deque([root])

    while queue:
        current = queue.popleft()
        try:
            entries = _sorted_entries(current)
        except OSError as e:
            report(current, e)
            continue

        items: list[FileItem] = []
        for entry in entries:
            try:
                item = FileItem.from_entry(entry)
            except OSError as e:
                # Entry vanished or became unreadable mid-walk
                report(Path(entry.path), e)
                continue
            items.append(item)
            if recursive and item.is_dir:
                queue.append(item.path)

        yield ListingSection(directory=current, items=tuple(items))


def search_files(
    root: Path,
    pattern: str,
    on_error: ErrorHandler | None = None,
) -> Iterator[Path]:
    """Find files whose name contains ``pattern``.

    Matching is a case-sensitive literal substring test on the file name;
    no glob or regex interpretation. Directories are walked breadth-first
    but never reported as matches.

    Args:
        root: Directory to search under.
        pattern: Substring to look for.
        on_error: Called for each directory that cannot be enumerated.
            Defaults to logging a warning. The search always continues.

    Yields:
        Full path of each matching file.
    """
    report = on_error or _log_error
    queue: deque[Path] = deque([root])

    while queue:
        current = queue.popleft()
        try:
            entries = _sorted_entries(current)
        except OSError as e:
            report(current, e)
            continue

        for entry in entries:
            path = Path(entry.path)
            if entry.is_dir():
                queue.append(path)
            elif pattern in entry.name:
                yield path


def dir_size(path: Path) -> int:
    """Total size in bytes of a file or directory tree.

    For a file, its own length. For a directory, the sum of the lengths
    of every file beneath it. Nothing is cached; each call walks the
    whole tree again.

    Raises:
        OSError: On the first entry or directory that cannot be read.
    """
    if not path.is_dir():
        return path.stat().st_size

    total = 0
    stack: list[Path] = [path]
    while stack:
        current = stack.pop()
        with os.scandir(current) as it:
            for entry in it:
                if entry.is_dir():
                    stack.append(Path(entry.path))
                else:
                    total += entry.stat().st_size
    return total


def iter_tree(path: Path, prefix: str = "") -> Iterator[str]:
    """Render a directory tree, depth-first and pre-order.

    Each line is the entry name, directories suffixed with ``/``.
    Children are indented two spaces more than their parent.

    Args:
        path: Entry to start from.
        prefix: Indentation for ``path`` itself.

    Yields:
        One line per entry.

    Raises:
        OSError: If a directory cannot be enumerated.
    """
    name = path.name or str(path)
    if not path.is_dir():
        yield f"{prefix}{name}"
        return

    yield f"{prefix}{name}/"
    for entry in _sorted_entries(path):
        yield from iter_tree(Path(entry.path), prefix + "  ")
