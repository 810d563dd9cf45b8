"""OneDrive folder mirroring.

Copies plain files from a local source directory into the folder the
OneDrive client watches; the client does the actual upload. Only the top
level of the source is mirrored and every file is attempted even if
earlier ones fail.
"""

import logging
import os
import shutil
from collections.abc import Mapping
from pathlib import Path

from datrain.sync.models import SyncResult

logger = logging.getLogger(__name__)

SYNC_PROBE_NAME = "DatRainCacheTest.txt"


def find_sync_folder(
    override: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    """Locate the local OneDrive folder.

    Candidates, first existing directory wins:
    1. ``override`` (from configuration or the command line)
    2. ``$OneDrive`` (set by the OneDrive client on Windows)
    3. ``$USERPROFILE/OneDrive``
    4. ``~/OneDrive``

    Args:
        override: Explicit folder to use.
        environ: Environment to read. Defaults to ``os.environ``.

    Returns:
        The folder, or None if no candidate exists.
    """
    env = os.environ if environ is None else environ
    candidates: list[Path] = []
    if override:
        candidates.append(Path(override).expanduser())
    if env.get("OneDrive"):
        candidates.append(Path(env["OneDrive"]))
    if env.get("USERPROFILE"):
        candidates.append(Path(env["USERPROFILE"]) / "OneDrive")
    candidates.append(Path.home() / "OneDrive")

    for candidate in candidates:
        if candidate.is_dir():
            return candidate
        logger.debug("Sync folder candidate missing: %s", candidate)
    return None


def mirror_to_sync_folder(source: Path, target: Path) -> list[SyncResult]:
    """Copy every plain file in ``source`` into ``target``.

    Subdirectories are not descended into. Existing files in ``target``
    are overwritten. A failure on one file is recorded and the batch
    continues.

    Args:
        source: Directory to read files from.
        target: Sync folder to copy into.

    Returns:
        One SyncResult per plain file in ``source``, in name order.

    Raises:
        OSError: If ``source`` itself cannot be enumerated.
    """
    with os.scandir(source) as it:
        entries = sorted(it, key=lambda e: e.name)

    results: list[SyncResult] = []
    for entry in entries:
        try:
            if not entry.is_file(follow_symlinks=False):
                continue
        except OSError:
            continue
        src = Path(entry.path)
        dest = target / entry.name
        try:
            shutil.copy(src, dest)
        except OSError as e:
            logger.warning("Failed to copy %s: %s", src, e)
            results.append(SyncResult(source=src, destination=dest, success=False, error=str(e)))
            continue
        logger.info("Copied %s to %s", src, dest)
        results.append(SyncResult(source=src, destination=dest, success=True))
    return results


def write_sync_probe(target: Path) -> Path:
    """Write a small marker file into the sync folder.

    Useful to confirm the OneDrive client picks up new files.

    Returns:
        Path of the probe file.

    Raises:
        OSError: If the probe cannot be written.
    """
    probe = target / SYNC_PROBE_NAME
    probe.write_text("This is a DatRain sync test.\n", encoding="utf-8")
    return probe
