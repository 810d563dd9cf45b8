"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import io
from pathlib import Path

import pytest
from datrain.core.theme import get_rich_theme
from rich.console import Console


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Small directory tree used by traversal tests.

    Layout::

        root/
          f.txt      (10 bytes)
          B/
            g.txt    (20 bytes)
          empty/
    """
    root = tmp_path / "root"
    root.mkdir()
    (root / "f.txt").write_bytes(b"x" * 10)
    (root / "B").mkdir()
    (root / "B" / "g.txt").write_bytes(b"y" * 20)
    (root / "empty").mkdir()
    return root


@pytest.fixture
def out_buffer() -> io.StringIO:
    """Buffer capturing explorer standard output."""
    return io.StringIO()


@pytest.fixture
def err_buffer() -> io.StringIO:
    """Buffer capturing explorer error output."""
    return io.StringIO()


def _buffer_console(buffer: io.StringIO) -> Console:
    return Console(file=buffer, theme=get_rich_theme(), width=200, color_system=None)


@pytest.fixture
def out_console(out_buffer: io.StringIO) -> Console:
    """Themed, colorless console writing into out_buffer."""
    return _buffer_console(out_buffer)


@pytest.fixture
def err_console(err_buffer: io.StringIO) -> Console:
    """Themed, colorless console writing into err_buffer."""
    return _buffer_console(err_buffer)


@pytest.fixture
def mock_wmic_output() -> str:
    """Sample wmic logicaldisk CSV output (columns in wmic's alphabetical order)."""
    return (
        "\r\n"
        "Node,DeviceID,FreeSpace,Size,VolumeName\r\n"
        "HOST,E:,1048576,4194304,BACKUP\r\n"
        "HOST,F:,,,\r\n"
        "HOST,G:\r\n"
    )


@pytest.fixture
def mock_lsblk_output() -> str:
    """Sample lsblk --raw output."""
    return (
        "/dev/sda1  500107862016 100000000 / 0\n"
        "/dev/sdb1 MY\\x20STICK 8004304896 4002152448 /media/user/MY\\x20STICK 1\n"
        "/dev/sdc1 CARD 2000000000  /media/user/CARD 1\n"
        "/dev/sdd1  1000 1000  1\n"
        "garbage line\n"
    )
