"""
Guide downloader for pluto2epg

Requests the channel listing for a time window, classifies the outcome and
keeps the snapshot cache up to date.
"""

import enum
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..utils import CacheManager, TimeUtils
from .base import DownloadError, OptimizedDownloader


class FetchStatus(enum.Enum):
    SUCCESS = "success"
    UNAVAILABLE = "unavailable"
    ERROR = "error"


@dataclass
class FetchResult:
    """Outcome of a guide fetch"""

    status: FetchStatus
    data: Any = None
    error: Optional[str] = None
    from_cache: bool = False

    @classmethod
    def success(cls, data: Any, from_cache: bool = False) -> "FetchResult":
        return cls(FetchStatus.SUCCESS, data=data, from_cache=from_cache)

    @classmethod
    def unavailable(cls) -> "FetchResult":
        return cls(FetchStatus.UNAVAILABLE)

    @classmethod
    def failure(cls, error: str) -> "FetchResult":
        return cls(FetchStatus.ERROR, error=error)

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.SUCCESS


class GuideDownloader:
    """Downloads the Pluto TV channel guide"""

    DEFAULT_API_URL = "http://api.pluto.tv/v2/channels"
    DEFAULT_HOURS = 8

    def __init__(
        self,
        downloader: OptimizedDownloader,
        cache_manager: CacheManager,
        api_url: str = DEFAULT_API_URL,
        hours: int = DEFAULT_HOURS,
    ):
        self.downloader = downloader
        self.cache_manager = cache_manager
        self.api_url = api_url
        self.hours = hours

    def build_url(self, now: datetime) -> str:
        """Build the channel listing URL for [now, now + hours]"""
        start, stop = TimeUtils.calculate_guide_window(now, self.hours)
        return "%s?start=%s&stop=%s" % (
            self.api_url,
            TimeUtils.encode_window_time(start),
            TimeUtils.encode_window_time(stop),
        )

    @staticmethod
    def classify(data: Any) -> FetchResult:
        """An empty payload means the service is not offered in this region"""
        if not data:
            return FetchResult.unavailable()
        return FetchResult.success(data)

    def fetch(self, now: datetime) -> FetchResult:
        """Fetch live guide data and refresh the cache on success"""
        url = self.build_url(now)

        try:
            content = self.downloader.download(url)
        except DownloadError as e:
            logging.error("Guide download failed: %s", str(e))
            return FetchResult.failure(str(e))

        try:
            data = json.loads(content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logging.error("Invalid JSON received from %s: %s", self.api_url, str(e))
            return FetchResult.failure(f"Invalid JSON: {e}")

        result = self.classify(data)
        if result.status is FetchStatus.UNAVAILABLE:
            logging.info("Pluto TV is not available in your country.")
            return result

        logging.info("Grabbing EPG...")
        logging.debug("Using %s, writing %s.", self.api_url, self.cache_manager.cache_file.name)
        self.cache_manager.save(content)
        return result

    def load_guide(self, now: datetime, use_cache: bool = True) -> FetchResult:
        """Return fresh cached data when possible, otherwise fetch live data"""
        if use_cache:
            cached = self.cache_manager.load(now)
            if cached is not None:
                result = self.classify(cached)
                result.from_cache = True
                return result
        else:
            logging.info("Cache disabled, fetching live guide data")

        return self.fetch(now)
