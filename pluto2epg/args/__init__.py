"""
pluto2epg.args - Command line argument parsing module

Provides argument parsing and validation for the pluto2epg grabber with
baseline XMLTV capabilities.
"""

from .base import ArgumentParser
from .validator import ArgumentValidator
from .path_manager import PathManager

__all__ = [
    "ArgumentParser",
    "ArgumentValidator",
    "PathManager",
]
