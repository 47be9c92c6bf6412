"""
pluto2epg.playlist - M3U8 playlist generation

Builds one playlist entry per stitched channel, sorted by name, with the
stream URL rewritten to carry the web client identification parameters.
"""

import logging
import re
import urllib.parse
import uuid
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .parser import Channel

# Query parameters identifying a web client; deviceId and sid are generated per channel
CLIENT_PARAMS = [
    ("appName", "web"),
    ("appVersion", "unknown"),
    ("clientTime", "0"),
    ("deviceDNT", "0"),
    ("deviceId", None),
    ("deviceMake", "Chrome"),
    ("deviceModel", "web"),
    ("deviceType", "web"),
    ("deviceVersion", "unknown"),
    ("includeExtendedEvents", "false"),
    ("sid", None),
    ("serverSideAds", "false"),
]

ACCENTS = str.maketrans(
    {
        "é": "e",
        "è": "e",
        "ë": "e",
        "ê": "e",
        "à": "a",
        "À": "a",
        "ç": "c",
        "ô": "o",
    }
)
WHITESPACE = re.compile(r"\s")
PUNCTUATION = re.compile(r"[':\-,#?!/]")


def normalize_tag_id(name: str, country: str = "ca") -> str:
    """Derive an ASCII-safe tvg-id from a channel name"""
    tag = name.translate(ACCENTS)
    tag = WHITESPACE.sub("", tag)
    tag = tag.replace("+", "Plus")
    tag = PUNCTUATION.sub("", tag)
    return f"{tag}.{country}"


def rewrite_stream_url(
    url: str, device_id: Optional[str] = None, sid: Optional[str] = None
) -> str:
    """Set the client identification parameters on a stream URL

    Parameters already present keep their position and get the new value,
    missing ones are appended, unrelated parameters are left untouched.
    """
    overrides = {}
    for key, value in CLIENT_PARAMS:
        if key == "deviceId":
            value = device_id or str(uuid.uuid1())
        elif key == "sid":
            value = sid or str(uuid.uuid4())
        overrides[key] = value

    parts = urllib.parse.urlsplit(url)
    segments = []
    seen = set()
    # Unrelated segments are kept byte-for-byte, only client params are re-encoded
    for segment in parts.query.split("&") if parts.query else []:
        key = urllib.parse.unquote_plus(segment.split("=", 1)[0])
        if key in overrides:
            if key in seen:
                continue
            seen.add(key)
            segment = urllib.parse.urlencode([(key, overrides[key])])
        segments.append(segment)

    missing = [(key, overrides[key]) for key, _ in CLIENT_PARAMS if key not in seen]
    if missing:
        segments.append(urllib.parse.urlencode(missing))

    return urllib.parse.urlunsplit(parts._replace(query="&".join(segments)))


def sort_channels(channels: Iterable[Channel]) -> List[Channel]:
    """Order channels by name, case-insensitively"""
    return sorted(channels, key=lambda c: (c.name.casefold(), c.name))


class PlaylistGenerator:
    """Generates M3U8 playlists from parsed channels"""

    HEADER = "#EXTM3U"

    def __init__(
        self,
        country: str = "ca",
        url_rewriter: Callable[[str], str] = rewrite_stream_url,
    ):
        self.country = country
        self.url_rewriter = url_rewriter
        self.channel_count = 0

    def build(self, channels: Iterable[Channel]) -> str:
        """Build playlist text"""
        self.channel_count = 0
        lines = [self.HEADER]

        for channel in sort_channels(channels):
            if not channel.is_stitched:
                logging.debug("Skipping 'fake' channel %s.", channel.name)
                continue

            if not channel.stream_urls:
                logging.warning("Stitched channel %s has no stream URL, skipping", channel.name)
                continue

            stream_url = self.url_rewriter(channel.stream_urls[0])
            tag_id = normalize_tag_id(channel.name, self.country)

            lines.append(f'#EXTINF:-1 tvg-id="{tag_id}",{channel.name}')
            lines.append(stream_url)
            self.channel_count += 1
            logging.info("Adding %s channel.", channel.name)

        return "\n".join(lines) + "\n"

    def write(self, channels: Iterable[Channel], playlist_file: Path) -> bool:
        """Build and write the playlist, overwriting previous contents"""
        try:
            content = self.build(channels)
            playlist_file = Path(playlist_file)
            playlist_file.parent.mkdir(parents=True, exist_ok=True)
            playlist_file.write_text(content, encoding="utf-8")
        except OSError as e:
            logging.error("Error writing playlist %s: %s", playlist_file, str(e))
            return False

        logging.info("Wrote the M3U8 tuner to %s!", playlist_file.name)
        return True
