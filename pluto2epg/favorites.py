"""
pluto2epg.favorites - Favorite channel filtering

Restricts the guide to a list of channel names read from a plain text file,
one name per line, and reports favorites that matched no channel.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .parser import Channel


class FavoritesFilter:
    """Name based channel allow-list"""

    def __init__(self, names: Optional[Iterable[str]] = None):
        self.names: List[str] = []
        self.tracker: Dict[str, int] = {}
        self.matched: List[str] = []
        self.channel_count = 0

        for name in names or []:
            if name not in self.tracker:
                self.names.append(name)
                self.tracker[name] = 0

    @classmethod
    def from_file(cls, path: Union[str, Path, None]) -> "FavoritesFilter":
        """Load favorites, a missing file gives an empty (pass-through) filter"""
        if path is None:
            return cls()

        path = Path(path)
        if not path.exists():
            logging.debug("No favorites file found: %s", path)
            return cls()

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logging.warning("Cannot read favorites file %s: %s", path, str(e))
            return cls()

        names = []
        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            names.append(line)

        logging.debug("Loaded %d favorites from %s", len(names), path)
        return cls(names)

    def is_empty(self) -> bool:
        return not self.names

    def matches(self, channel: Channel) -> bool:
        """Exact, case-sensitive name match (always true for an empty filter)"""
        self.channel_count += 1

        if self.is_empty():
            return True

        if channel.name in self.tracker:
            self.tracker[channel.name] += 1
            self.matched.append(channel.name)
            return True
        return False

    def filter(self, channels: Iterable[Channel]) -> List[Channel]:
        """Keep matching channels in input order"""
        return [channel for channel in channels if self.matches(channel)]

    def unmatched(self) -> List[str]:
        """Favorites that matched no channel"""
        return [name for name in self.names if self.tracker[name] == 0]

    def log_summary(self):
        """Log matched channels and unknown favorites"""
        if self.is_empty():
            logging.info("No favorites specified, loading all channels.")
            return

        logging.info(
            "Favorites filter returned %d/%d channels", len(self.matched), self.channel_count
        )
        for name in self.matched:
            logging.debug("  Favorite matched: %s", name)

        unmatched = self.unmatched()
        if unmatched:
            logging.warning("Unknown favorites (no matching channel): %s", ", ".join(unmatched))
