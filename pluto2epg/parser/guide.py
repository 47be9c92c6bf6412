"""
Guide data parser for pluto2epg
"""

import logging
from typing import Any, Dict, List, Optional

from ..utils import TimeUtils
from .models import Channel, Episode, Programme


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


class GuideParser:
    """Parses the channel listing JSON into Channel records"""

    def __init__(self):
        self.channels: List[Channel] = []
        self.skipped = 0

    def parse(self, data: Any) -> List[Channel]:
        """Parse all channels, keeping the order of the listing"""
        self.channels = []
        self.skipped = 0

        if isinstance(data, dict):
            # Some API versions wrap the listing
            data = data.get("channels", [])

        if not isinstance(data, list):
            logging.warning("Unexpected guide payload type: %s", type(data).__name__)
            return self.channels

        for raw in data:
            channel = self.parse_channel(raw)
            if channel is None:
                self.skipped += 1
                continue
            self.channels.append(channel)

        logging.info(
            "Parsed %d channels (%d stitched)",
            len(self.channels),
            sum(1 for c in self.channels if c.is_stitched),
        )
        if self.skipped:
            logging.warning("Skipped %d malformed channel entries", self.skipped)

        return self.channels

    def parse_channel(self, raw: Any) -> Optional[Channel]:
        if not isinstance(raw, dict) or not raw.get("name"):
            logging.debug("Ignoring channel entry without name: %r", raw)
            return None

        stitched = raw.get("stitched") or {}
        stream_urls = [
            entry["url"]
            for entry in stitched.get("urls", []) or []
            if isinstance(entry, dict) and entry.get("url")
        ]

        logo = raw.get("solidLogoPNG") or {}

        return Channel(
            id=_text(raw.get("_id")),
            name=_text(raw.get("name")),
            slug=_text(raw.get("slug")),
            number=_text(raw.get("number")),
            is_stitched=bool(raw.get("isStitched")),
            logo=_text(logo.get("path")) if isinstance(logo, dict) else "",
            programmes=[
                self.parse_programme(t) for t in raw.get("timelines") or [] if isinstance(t, dict)
            ],
            stream_urls=stream_urls,
        )

    def parse_programme(self, raw: Dict) -> Programme:
        episode = raw.get("episode") or {}

        return Programme(
            start=TimeUtils.parse_timestamp(raw.get("start")),
            stop=TimeUtils.parse_timestamp(raw.get("stop")),
            title=_text(raw.get("title")),
            episode=Episode(
                name=_text(episode.get("name")),
                description=_text(episode.get("description")),
                first_aired=TimeUtils.parse_timestamp(episode.get("firstAired")),
                genre=_text(episode.get("genre")),
                sub_genre=_text(episode.get("subGenre")),
                number=_text(episode.get("number")),
            ),
        )
