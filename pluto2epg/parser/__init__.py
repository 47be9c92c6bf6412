"""
pluto2epg.parser - Data parsing module

Turns the raw channel listing into typed channel and programme records.
Pure parsing logic without HTTP or caching responsibilities.
"""

from .guide import GuideParser
from .models import Channel, Episode, Programme

__all__ = [
    "GuideParser",
    "Channel",
    "Episode",
    "Programme",
]
