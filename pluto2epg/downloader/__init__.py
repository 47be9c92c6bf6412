"""
pluto2epg.downloader - Download management module

Handles the HTTP download of the channel guide and its snapshot cache.
"""

from .base import DownloadError, OptimizedDownloader
from .guide import FetchResult, FetchStatus, GuideDownloader

__all__ = [
    "DownloadError",
    "OptimizedDownloader",
    "FetchResult",
    "FetchStatus",
    "GuideDownloader",
]
