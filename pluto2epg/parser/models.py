"""
Guide data records for pluto2epg
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class Episode:
    name: str = ""
    description: str = ""
    first_aired: Optional[datetime] = None
    genre: str = ""
    sub_genre: str = ""
    number: str = ""


@dataclass
class Programme:
    start: Optional[datetime]
    stop: Optional[datetime]
    title: str = ""
    episode: Episode = field(default_factory=Episode)

    @property
    def sub_title(self) -> str:
        """Episode name, empty when it only repeats the title"""
        if self.title == self.episode.name:
            return ""
        return self.episode.name


@dataclass
class Channel:
    id: str
    name: str
    slug: str = ""
    number: str = ""
    is_stitched: bool = False
    logo: str = ""
    programmes: List[Programme] = field(default_factory=list)
    stream_urls: List[str] = field(default_factory=list)
