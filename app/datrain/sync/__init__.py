"""Folder mirroring and download caching.

This module provides the OneDrive mirroring helpers and the download
cache together with their result models.
"""

from datrain.sync.downloads import cache_downloads
from datrain.sync.models import CacheResult, CacheStatus, SyncResult
from datrain.sync.onedrive import find_sync_folder, mirror_to_sync_folder, write_sync_probe

__all__ = [
    "CacheResult",
    "CacheStatus",
    "SyncResult",
    "cache_downloads",
    "find_sync_folder",
    "mirror_to_sync_folder",
    "write_sync_probe",
]
