"""Unit tests for filesystem mutation and content primitives."""

import shutil
import stat
from pathlib import Path
from unittest.mock import MagicMock, patch

import datrain.explorer.operations as operations
import pytest
from datrain.explorer.operations import (
    copy_dir,
    copy_file,
    delete_path,
    iter_numbered_lines,
    move_path,
    read_text,
    rename_path,
    restrict_to_owner,
    stat_path,
    touch_file,
    write_text,
)


def _mode(path: Path) -> int:
    return stat.S_IMODE(path.stat().st_mode)


class TestCopyFile:
    """Tests for copy_file."""

    def test_copies_bytes_and_returns_count(self, tmp_path: Path) -> None:
        """Destination gets identical bytes and the count is returned."""
        src = tmp_path / "src.bin"
        payload = bytes(range(256)) * 1000
        src.write_bytes(payload)

        copied = copy_file(src, tmp_path / "dst.bin")

        assert copied == len(payload)
        assert (tmp_path / "dst.bin").read_bytes() == payload

    def test_propagates_permission_bits(self, tmp_path: Path) -> None:
        """The destination receives the source's mode."""
        src = tmp_path / "run.sh"
        src.write_text("#!/bin/sh\n")
        src.chmod(0o750)

        copy_file(src, tmp_path / "copy.sh")

        assert _mode(tmp_path / "copy.sh") == 0o750

    def test_truncates_existing_destination(self, tmp_path: Path) -> None:
        """An existing longer destination is overwritten completely."""
        (tmp_path / "src").write_text("short")
        (tmp_path / "dst").write_text("a much longer original")

        copy_file(tmp_path / "src", tmp_path / "dst")

        assert (tmp_path / "dst").read_text() == "short"

    def test_custom_permission_step(self, tmp_path: Path) -> None:
        """The injected permission copier is called with both paths."""
        (tmp_path / "src").write_text("x")
        copier = MagicMock()

        copy_file(tmp_path / "src", tmp_path / "dst", copy_mode=copier)

        copier.assert_called_once_with(tmp_path / "src", tmp_path / "dst")

    def test_permission_step_disabled(self, tmp_path: Path) -> None:
        """Passing None skips permission propagation."""
        (tmp_path / "src").write_text("x")

        assert copy_file(tmp_path / "src", tmp_path / "dst", copy_mode=None) == 1

    def test_same_file_refused(self, sample_tree: Path) -> None:
        """Copying a file onto itself fails without truncating it."""
        with pytest.raises(shutil.SameFileError):
            copy_file(sample_tree / "f.txt", sample_tree / "." / "f.txt")

        assert (sample_tree / "f.txt").read_bytes() == b"x" * 10

    def test_hard_link_refused(self, sample_tree: Path) -> None:
        """A hard link to the source counts as the same file."""
        (sample_tree / "alias.txt").hardlink_to(sample_tree / "f.txt")

        with pytest.raises(shutil.SameFileError):
            copy_file(sample_tree / "f.txt", sample_tree / "alias.txt")

        assert (sample_tree / "f.txt").read_bytes() == b"x" * 10

    def test_missing_source_raises(self, tmp_path: Path) -> None:
        """A missing source propagates the OS error."""
        with pytest.raises(FileNotFoundError):
            copy_file(tmp_path / "missing", tmp_path / "dst")


class TestCopyDir:
    """Tests for copy_dir."""

    def test_copies_tree(self, sample_tree: Path, tmp_path: Path) -> None:
        """Every file and directory is reproduced under the destination."""
        dst = tmp_path / "copy"

        copy_dir(sample_tree, dst)

        assert (dst / "f.txt").read_bytes() == b"x" * 10
        assert (dst / "B" / "g.txt").read_bytes() == b"y" * 20
        assert (dst / "empty").is_dir()

    def test_second_copy_overwrites(self, sample_tree: Path, tmp_path: Path) -> None:
        """Copying onto an existing destination merges and overwrites."""
        dst = tmp_path / "copy"
        copy_dir(sample_tree, dst)
        (dst / "f.txt").write_text("stale")
        (dst / "extra.txt").write_text("kept")

        copy_dir(sample_tree, dst)

        assert (dst / "f.txt").read_bytes() == b"x" * 10
        assert (dst / "extra.txt").read_text() == "kept"

    def test_copy_into_itself_refused(self, sample_tree: Path) -> None:
        """A destination inside the source is rejected before anything is created."""
        with pytest.raises(OSError, match="Cannot copy a directory into itself"):
            copy_dir(sample_tree / "B", sample_tree / "B" / "inner")

        assert not (sample_tree / "B" / "inner").exists()

    def test_copy_onto_itself_refused(self, sample_tree: Path) -> None:
        """Copying a directory onto itself is rejected."""
        with pytest.raises(OSError, match="Cannot copy a directory into itself"):
            copy_dir(sample_tree / "B", sample_tree / "B")


class TestMovePath:
    """Tests for move_path."""

    def test_moves_file(self, tmp_path: Path) -> None:
        """A file move leaves nothing at the source."""
        (tmp_path / "a.txt").write_text("data")

        move_path(tmp_path / "a.txt", tmp_path / "b.txt")

        assert not (tmp_path / "a.txt").exists()
        assert (tmp_path / "b.txt").read_text() == "data"

    def test_moves_directory(self, sample_tree: Path, tmp_path: Path) -> None:
        """A directory move copies the tree and removes the source."""
        dst = tmp_path / "moved"

        move_path(sample_tree, dst)

        assert not sample_tree.exists()
        assert (dst / "B" / "g.txt").read_bytes() == b"y" * 20

    def test_directory_move_failure_leaves_both_sides(
        self, sample_tree: Path, tmp_path: Path
    ) -> None:
        """A copy failure midway leaves a partial destination and the full source."""
        dst = tmp_path / "moved"
        real_copy_file = operations.copy_file
        calls: list[Path] = []

        def fail_second(src: Path, target: Path, copy_mode: object = None) -> int:
            calls.append(src)
            if len(calls) == 2:
                raise PermissionError(13, "Permission denied", str(src))
            return real_copy_file(src, target)

        with (
            patch("datrain.explorer.operations.copy_file", side_effect=fail_second),
            pytest.raises(PermissionError),
        ):
            move_path(sample_tree, dst)

        assert (dst / "B" / "g.txt").read_bytes() == b"y" * 20
        assert not (dst / "f.txt").exists()
        assert (sample_tree / "f.txt").read_bytes() == b"x" * 10
        assert (sample_tree / "B" / "g.txt").read_bytes() == b"y" * 20

    def test_moves_directory_symlink_as_link(self, tmp_path: Path) -> None:
        """A link to a directory is renamed, not copied."""
        real = tmp_path / "real"
        real.mkdir()
        (real / "big.txt").write_text("payload")
        link = tmp_path / "link"
        link.symlink_to(real)

        move_path(link, tmp_path / "moved")

        assert not link.is_symlink()
        assert (tmp_path / "moved").is_symlink()
        assert (tmp_path / "moved").resolve() == real.resolve()
        assert (real / "big.txt").read_text() == "payload"


class TestDeletePath:
    """Tests for delete_path."""

    def test_deletes_file(self, sample_tree: Path) -> None:
        """Files are unlinked."""
        delete_path(sample_tree / "f.txt")

        assert not (sample_tree / "f.txt").exists()

    def test_deletes_directory_recursively(self, sample_tree: Path) -> None:
        """Non-empty directories are removed with their contents."""
        delete_path(sample_tree / "B")

        assert not (sample_tree / "B").exists()

    def test_deletes_symlink_not_target(self, sample_tree: Path, tmp_path: Path) -> None:
        """Removing a link to a directory leaves the directory alone."""
        link = tmp_path / "link"
        link.symlink_to(sample_tree / "B")

        delete_path(link)

        assert not link.exists()
        assert (sample_tree / "B" / "g.txt").exists()

    def test_missing_raises(self, tmp_path: Path) -> None:
        """Deleting a missing path raises."""
        with pytest.raises(FileNotFoundError):
            delete_path(tmp_path / "missing")


class TestSmallOperations:
    """Tests for rename, touch and stat."""

    def test_rename(self, sample_tree: Path) -> None:
        """Rename moves the entry to its new name."""
        rename_path(sample_tree / "f.txt", sample_tree / "renamed.txt")

        assert (sample_tree / "renamed.txt").exists()
        assert not (sample_tree / "f.txt").exists()

    def test_touch_creates_empty_file(self, tmp_path: Path) -> None:
        """Touch creates a zero-length file."""
        touch_file(tmp_path / "new")

        assert (tmp_path / "new").read_bytes() == b""

    def test_touch_keeps_existing_content(self, sample_tree: Path) -> None:
        """Touching an existing file does not truncate it."""
        touch_file(sample_tree / "f.txt")

        assert (sample_tree / "f.txt").read_bytes() == b"x" * 10

    def test_touch_missing_parent_raises(self, tmp_path: Path) -> None:
        """Parent directories are never created."""
        with pytest.raises(FileNotFoundError):
            touch_file(tmp_path / "no" / "such" / "file")

    def test_stat_file(self, sample_tree: Path) -> None:
        """Stat reports size for files."""
        item = stat_path(sample_tree / "f.txt")

        assert item.is_dir is False
        assert item.size == 10

    def test_stat_directory(self, sample_tree: Path) -> None:
        """Stat reports directories with size 0."""
        item = stat_path(sample_tree / "B")

        assert item.is_dir is True
        assert item.size == 0


class TestTextContent:
    """Tests for read_text, iter_numbered_lines and write_text."""

    def test_read_text(self, tmp_path: Path) -> None:
        """Whole file content is returned."""
        (tmp_path / "a.txt").write_text("one\ntwo\n", encoding="utf-8")

        assert read_text(tmp_path / "a.txt") == "one\ntwo\n"

    def test_read_invalid_text_raises_oserror(self, tmp_path: Path) -> None:
        """Undecodable bytes are reported as an OSError naming the file."""
        (tmp_path / "bin").write_bytes(b"\xff\xfe\x00bad")

        with pytest.raises(OSError, match="Not valid utf-8 text") as exc_info:
            read_text(tmp_path / "bin")

        assert exc_info.value.filename == str(tmp_path / "bin")

    def test_numbered_lines(self, tmp_path: Path) -> None:
        """Lines are numbered from 1 with a four-column number."""
        (tmp_path / "a.txt").write_bytes(b"alpha\r\nbeta\ngamma")

        lines = list(iter_numbered_lines(tmp_path / "a.txt"))

        assert lines == ["   1: alpha", "   2: beta", "   3: gamma"]

    def test_numbered_lines_empty_file(self, tmp_path: Path) -> None:
        """An empty file yields no lines."""
        (tmp_path / "empty").write_text("")

        assert list(iter_numbered_lines(tmp_path / "empty")) == []

    def test_numbered_lines_invalid_text(self, tmp_path: Path) -> None:
        """Undecodable content raises an OSError."""
        (tmp_path / "bin").write_bytes(b"ok\n\xff\xff\n")

        with pytest.raises(OSError, match="Not valid utf-8 text"):
            list(iter_numbered_lines(tmp_path / "bin"))

    def test_write_truncates(self, tmp_path: Path) -> None:
        """Write replaces existing content."""
        target = tmp_path / "a.txt"
        target.write_text("old content")

        write_text(target, "new")

        assert target.read_text() == "new"

    def test_append_adds_at_end(self, tmp_path: Path) -> None:
        """Append adds without a separator."""
        target = tmp_path / "a.txt"
        write_text(target, "hello")

        write_text(target, " world", append=True)

        assert target.read_text() == "hello world"

    def test_append_creates_file(self, tmp_path: Path) -> None:
        """Append creates a missing file."""
        write_text(tmp_path / "new.txt", "x", append=True)

        assert (tmp_path / "new.txt").read_text() == "x"

    def test_write_missing_parent_raises(self, tmp_path: Path) -> None:
        """The parent directory is never created."""
        with pytest.raises(FileNotFoundError):
            write_text(tmp_path / "missing" / "a.txt", "x")


class TestRestrictToOwner:
    """Tests for restrict_to_owner."""

    def test_file_becomes_0600(self, tmp_path: Path) -> None:
        """Files are limited to owner read/write."""
        target = tmp_path / "secret.txt"
        target.write_text("s")
        target.chmod(0o644)

        mode = restrict_to_owner(target)

        assert mode == 0o600
        assert _mode(target) == 0o600

    def test_directory_becomes_0700(self, tmp_path: Path) -> None:
        """Directories keep owner search permission."""
        target = tmp_path / "private"
        target.mkdir(mode=0o755)
        (target / "inner.txt").write_text("i")
        (target / "inner.txt").chmod(0o644)

        mode = restrict_to_owner(target)

        assert mode == 0o700
        assert _mode(target) == 0o700
        assert _mode(target / "inner.txt") == 0o644

    def test_missing_path_raises(self, tmp_path: Path) -> None:
        """A missing path raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            restrict_to_owner(tmp_path / "missing")
