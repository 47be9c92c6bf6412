"""
pluto2epg.utils - Utilities and cache management

Provides the guide snapshot cache and the time conversions shared by the
downloader, the parser and the XMLTV generator.
"""

import json
import logging
import urllib.parse
from datetime import datetime, timedelta, timezone, tzinfo
from pathlib import Path
from typing import Any, Optional, Tuple, Union


class TimeUtils:
    """Time and date utilities"""

    # 2020-03-24 21:00:00.000+0000
    WINDOW_FORMAT = "%Y-%m-%d %H:00:00.000%z"
    XMLTV_FORMAT = "%Y%m%d%H%M%S %z"
    DATE_FORMAT = "%Y%m%d"

    @staticmethod
    def ensure_aware(now: datetime) -> datetime:
        """Attach the local timezone to naive datetimes"""
        if now.tzinfo is None:
            return now.astimezone()
        return now

    @staticmethod
    def format_window_time(moment: datetime) -> str:
        """Format a guide window boundary, truncated to the hour"""
        return TimeUtils.ensure_aware(moment).strftime(TimeUtils.WINDOW_FORMAT)

    @staticmethod
    def encode_window_time(moment: datetime) -> str:
        """Format and percent-encode a guide window boundary for the query string"""
        return urllib.parse.quote(TimeUtils.format_window_time(moment), safe="")

    @staticmethod
    def calculate_guide_window(now: datetime, hours: int) -> Tuple[datetime, datetime]:
        """Calculate the [now, now + hours] window requested from the API"""
        start = TimeUtils.ensure_aware(now)
        return start, start + timedelta(hours=hours)

    @staticmethod
    def parse_timestamp(value: Any) -> Optional[datetime]:
        """Parse an API timestamp (ISO 8601 string or epoch milliseconds)"""
        if value is None or value == "":
            return None

        try:
            if isinstance(value, (int, float)):
                return datetime.fromtimestamp(value / 1000, tz=timezone.utc)

            text = str(value).strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            parsed = datetime.fromisoformat(text)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
        except (ValueError, TypeError, OverflowError, OSError):
            logging.debug("Unparseable timestamp: %s", value)
            return None

    @staticmethod
    def conv_time(moment: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
        """Convert datetime to XMLTV time format with explicit UTC offset"""
        if moment is None:
            return ""
        return moment.astimezone(tz).strftime(TimeUtils.XMLTV_FORMAT)

    @staticmethod
    def conv_date(moment: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
        """Convert datetime to XMLTV date (YYYYMMDD)"""
        if moment is None:
            return ""
        return moment.astimezone(tz).strftime(TimeUtils.DATE_FORMAT)


class CacheManager:
    """Manages the guide snapshot cache"""

    DEFAULT_MAX_AGE = 1800  # 30 minutes

    def __init__(self, cache_file: Union[str, Path], max_age: int = DEFAULT_MAX_AGE):
        self.cache_file = Path(cache_file)
        self.max_age = max_age

    def get_age(self, now: datetime) -> Optional[float]:
        """Age of the snapshot in seconds, or None when there is no snapshot"""
        try:
            mtime = self.cache_file.stat().st_mtime
        except FileNotFoundError:
            return None
        except OSError as e:
            logging.warning("Cannot stat cache file %s: %s", self.cache_file, str(e))
            return None

        return TimeUtils.ensure_aware(now).timestamp() - mtime

    def load(self, now: datetime) -> Optional[Any]:
        """Load the snapshot if fresh, None signals a live fetch is needed"""
        age = self.get_age(now)

        if age is None:
            logging.debug("No cache file found: %s", self.cache_file)
            return None

        if age > self.max_age:
            logging.debug(
                "Cache file %s is %d seconds old (limit %d), ignoring",
                self.cache_file.name,
                age,
                self.max_age,
            )
            return None

        try:
            with open(self.cache_file, "rb") as f:
                data = json.loads(f.read())
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logging.warning("Corrupt cache file %s, ignoring: %s", self.cache_file, str(e))
            return None
        except OSError as e:
            logging.warning("Error reading cache file %s: %s", self.cache_file, str(e))
            return None

        logging.info(
            "Using %s, it's under %d minutes old.", self.cache_file.name, self.max_age // 60
        )
        return data

    def save(self, content: bytes) -> bool:
        """Save raw payload, overwriting any previous snapshot"""
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_file, "wb") as f:
                f.write(content)
            logging.debug("Cache written: %s (%d bytes)", self.cache_file, len(content))
            return True
        except OSError as e:
            logging.warning("Error saving cache file %s: %s", self.cache_file, str(e))
            return False

