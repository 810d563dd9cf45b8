"""Sync result models."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Result of mirroring one file into the sync folder.

    Attributes:
        source: File that was copied.
        destination: Path it was copied to.
        success: Whether the copy completed.
        error: Error message if the copy failed, None otherwise.
    """

    source: Path
    destination: Path
    success: bool
    error: str | None = None


class CacheStatus(str, Enum):
    """Outcome for one file offered to the download cache.

    Attributes:
        CACHED: File was vetted (or no detector is configured) and copied.
        ALREADY_CACHED: A file with the same name is already in the cache.
        MALICIOUS: Detector flagged the file; it was not copied.
        UNDETERMINED: Detector gave no verdict or could not run.
        FAILED: Copying into the cache failed.
    """

    CACHED = "cached"
    ALREADY_CACHED = "already_cached"
    MALICIOUS = "malicious"
    UNDETERMINED = "undetermined"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CacheResult:
    """Result of offering one downloaded file to the cache.

    Attributes:
        name: File name.
        status: What happened to the file.
        error: Detail for UNDETERMINED and FAILED outcomes.
    """

    name: str
    status: CacheStatus
    error: str | None = None
