"""Download cache.

Copies newly downloaded files into a cache directory. When a detector
command is configured, each new file is vetted first: the detector is
run with the file path appended and must print ``OK`` for the file to be
cached. ``MALICIOUS`` rejects it; any other output, or a detector that
cannot run, leaves it undetermined and uncached.
"""

import logging
import os
import shutil
from pathlib import Path

from datrain.sync.models import CacheResult, CacheStatus
from datrain.utils.shell import CommandRunner, run_command, run_guarded

logger = logging.getLogger(__name__)

VERDICT_OK = "OK"
VERDICT_MALICIOUS = "MALICIOUS"


def _vet(
    detector: list[str],
    path: Path,
    run: CommandRunner,
) -> tuple[CacheStatus | None, str | None]:
    """Run the detector on one file.

    Returns:
        (None, None) if the file may be cached, otherwise the blocking
        status and an optional detail message.
    """
    result = run_guarded(run, [*detector, str(path)])
    verdict = result.stdout.strip()
    if result.success and verdict == VERDICT_OK:
        return None, None
    if verdict == VERDICT_MALICIOUS:
        return CacheStatus.MALICIOUS, None
    detail = result.stderr.strip() or verdict or f"exit status {result.returncode}"
    return CacheStatus.UNDETERMINED, detail


def cache_downloads(
    downloads_dir: Path,
    cache_dir: Path,
    detector: list[str] | None = None,
    run: CommandRunner = run_command,
) -> list[CacheResult]:
    """Cache plain files from ``downloads_dir`` that are not cached yet.

    Files already present in ``cache_dir`` (by name) are left alone.
    ``cache_dir`` is created if needed. Copies keep file metadata.

    Args:
        downloads_dir: Directory to read new files from.
        cache_dir: Directory to cache them into.
        detector: Command vetting each file, or None to cache everything.
        run: Command runner used for the detector.

    Returns:
        One CacheResult per plain file in ``downloads_dir``, in name order.

    Raises:
        OSError: If ``downloads_dir`` cannot be enumerated or
            ``cache_dir`` cannot be created.
    """
    with os.scandir(downloads_dir) as it:
        entries = sorted(it, key=lambda e: e.name)
    cache_dir.mkdir(parents=True, exist_ok=True)

    results: list[CacheResult] = []
    for entry in entries:
        if not entry.is_file():
            continue
        dest = cache_dir / entry.name
        if dest.exists():
            results.append(CacheResult(name=entry.name, status=CacheStatus.ALREADY_CACHED))
            continue

        if detector:
            blocked, detail = _vet(detector, Path(entry.path), run)
            if blocked is not None:
                logger.warning("Not caching %s: %s", entry.name, blocked.value)
                results.append(CacheResult(name=entry.name, status=blocked, error=detail))
                continue

        try:
            shutil.copy2(entry.path, dest)
        except OSError as e:
            results.append(CacheResult(name=entry.name, status=CacheStatus.FAILED, error=str(e)))
            continue
        logger.info("Cached %s", entry.name)
        results.append(CacheResult(name=entry.name, status=CacheStatus.CACHED))
    return results
