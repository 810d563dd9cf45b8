"""Filesystem mutation and content primitives.

Each function is a thin, synchronous wrapper over the host filesystem
API. Failures surface as OSError and abort the operation at the first
error; nothing is retried and partial results are left on disk. In
particular a directory move is a copy followed by a delete, so a failure
midway leaves both a partial destination and the (possibly partially
deleted) source behind.
"""

import errno
import logging
import os
import shutil
import stat
from collections.abc import Callable, Iterator
from pathlib import Path

from datrain.explorer.models import FileItem

logger = logging.getLogger(__name__)

COPY_BUFFER_SIZE = 64 * 1024
TEXT_ENCODING = "utf-8"

# Propagates permission bits from the first path onto the second.
PermissionCopier = Callable[[Path, Path], None]


def copy_file(
    src: Path,
    dst: Path,
    copy_mode: PermissionCopier | None = shutil.copymode,
) -> int:
    """Copy one file's bytes, then its permission bits.

    The destination is created or truncated.

    Args:
        src: File to copy.
        dst: Destination file path.
        copy_mode: Permission propagation step. ``shutil.copymode`` by
            default; pass None on hosts where mode bits mean nothing.

    Returns:
        Number of bytes copied.

    Raises:
        shutil.SameFileError: If ``dst`` is ``src``; opening it for writing
            would truncate the source.
        OSError: If either file cannot be opened, read or written.
    """
    if dst.exists() and os.path.samefile(src, dst):
        raise shutil.SameFileError(f"{src} and {dst} are the same file")
    with open(src, "rb") as fsrc, open(dst, "wb") as fdst:
        shutil.copyfileobj(fsrc, fdst, COPY_BUFFER_SIZE)
        copied = fdst.tell()
    if copy_mode is not None:
        copy_mode(src, dst)
    logger.debug("Copied %d bytes from %s to %s", copied, src, dst)
    return copied


def copy_dir(
    src: Path,
    dst: Path,
    copy_mode: PermissionCopier | None = shutil.copymode,
) -> None:
    """Recursively copy a directory tree, depth-first.

    ``dst`` is created if missing and reused if present. Files inside it
    are overwritten unconditionally.

    Raises:
        OSError: If ``dst`` is ``src`` or lies inside it, or on the first
            entry that cannot be copied.
    """
    if dst.resolve().is_relative_to(src.resolve()):
        raise OSError(errno.EINVAL, "Cannot copy a directory into itself", str(dst))
    dst.mkdir(exist_ok=True)
    with os.scandir(src) as it:
        entries = sorted(it, key=lambda e: e.name)
    for entry in entries:
        src_path = Path(entry.path)
        dst_path = dst / entry.name
        if entry.is_dir():
            copy_dir(src_path, dst_path, copy_mode)
        else:
            copy_file(src_path, dst_path, copy_mode)


def move_path(src: Path, dst: Path) -> None:
    """Move a file or directory.

    Files and symbolic links (including links to directories) are moved
    with a single atomic rename. Directories are copied and then the
    source is deleted; this is not atomic.

    Raises:
        OSError: If the rename, copy or delete fails.
    """
    if src.is_dir() and not src.is_symlink():
        copy_dir(src, dst)
        shutil.rmtree(src)
    else:
        os.rename(src, dst)


def delete_path(path: Path) -> None:
    """Delete a file, symlink or directory tree immediately.

    A symlink to a directory removes the link, not the target.

    Raises:
        OSError: If the path does not exist or cannot be removed.
    """
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def rename_path(src: Path, dst: Path) -> None:
    """Rename a file or directory with a single filesystem call."""
    os.rename(src, dst)


def touch_file(path: Path) -> None:
    """Create an empty file, or bump its modification time if it exists.

    The parent directory must already exist.
    """
    path.touch(exist_ok=True)


def _not_text(path: Path, exc: UnicodeDecodeError) -> OSError:
    return OSError(errno.EILSEQ, f"Not valid {TEXT_ENCODING} text ({exc.reason})", str(path))


def read_text(path: Path) -> str:
    """Read a whole file as text.

    Raises:
        OSError: If the file cannot be read or is not valid text.
    """
    try:
        return path.read_text(encoding=TEXT_ENCODING)
    except UnicodeDecodeError as e:
        raise _not_text(path, e) from e


def iter_numbered_lines(path: Path) -> Iterator[str]:
    """Yield each line of a file prefixed with its 1-based line number.

    Line numbers are right-justified to four columns and the line
    terminator is stripped.

    Raises:
        OSError: If the file cannot be read or is not valid text.
    """
    try:
        with open(path, encoding=TEXT_ENCODING, newline="") as f:
            for number, line in enumerate(f, start=1):
                text = line.removesuffix("\n").removesuffix("\r")
                yield f"{number:>4}: {text}"
    except UnicodeDecodeError as e:
        raise _not_text(path, e) from e


def write_text(path: Path, text: str, append: bool = False) -> None:
    """Write text to a file in one shot.

    The file is created if absent. Without ``append`` existing content is
    truncated first; with it the text goes at end-of-file. The parent
    directory is never created.

    Raises:
        OSError: If the file cannot be opened or written.
    """
    mode = "a" if append else "w"
    with open(path, mode, encoding=TEXT_ENCODING) as f:
        f.write(text)


def stat_path(path: Path) -> FileItem:
    """Snapshot a path's metadata, following symlinks.

    Raises:
        OSError: If the path does not exist or cannot be read.
    """
    return FileItem.from_path(path)


def restrict_to_owner(path: Path) -> int:
    """Limit access to a path to its owner.

    Files become read/write for the owner only (0o600), directories
    read/write/search for the owner only (0o700). Only the path itself
    changes; directory contents keep their modes.

    Returns:
        The mode bits that were applied.

    Raises:
        OSError: If the path does not exist or its mode cannot be changed.
    """
    if path.is_dir():
        mode = stat.S_IRWXU
    elif path.exists():
        mode = stat.S_IRUSR | stat.S_IWUSR
    else:
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))
    path.chmod(mode)
    return mode
