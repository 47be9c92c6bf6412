"""
pluto2epg - Pluto TV playlist and guide grabber

A modular Python implementation for downloading the Pluto TV channel guide
with time-based caching, favorites filtering, and M3U8/XMLTV generation.
"""

__version__ = "1.0.0"
__author__ = "pluto2epg contributors"
__license__ = "GPL-3.0"

from .args import ArgumentParser
from .config import ConfigManager
from .downloader import FetchResult, FetchStatus, GuideDownloader, OptimizedDownloader
from .favorites import FavoritesFilter
from .parser import Channel, Episode, GuideParser, Programme
from .playlist import PlaylistGenerator, normalize_tag_id, rewrite_stream_url
from .utils import CacheManager, TimeUtils
from .xmltv import XmltvGenerator

__all__ = [
    "ArgumentParser",
    "ConfigManager",
    "FetchResult",
    "FetchStatus",
    "GuideDownloader",
    "OptimizedDownloader",
    "FavoritesFilter",
    "Channel",
    "Episode",
    "GuideParser",
    "Programme",
    "PlaylistGenerator",
    "normalize_tag_id",
    "rewrite_stream_url",
    "CacheManager",
    "TimeUtils",
    "XmltvGenerator",
]
