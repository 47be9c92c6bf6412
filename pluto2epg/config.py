"""
pluto2epg.config - Configuration management

Handles the optional XML configuration file, default values and command line
overrides for the current run.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, Optional

from .args.validator import ArgumentValidator


class ConfigManager:
    """Manages pluto2epg configuration"""

    DEFAULT_CONFIG = """<?xml version="1.0" encoding="utf-8"?>
<settings version="1">
  <!-- Guide source -->
  <setting id="apiurl">http://api.pluto.tv/v2/channels</setting>
  <setting id="hours">8</setting>
  <setting id="timeout">30</setting>

  <!-- Playlist -->
  <setting id="country">ca</setting>

  <!-- Files (relative paths are resolved against the base directory) -->
  <setting id="cachefile">cache.json</setting>
  <setting id="cachemaxage">1800</setting>
  <setting id="favorites">pluto-favorites</setting>
  <setting id="playlist">playlist.m3u8</setting>
  <setting id="epgfile">epg.xml</setting>

  <!-- Log retention (days) -->
  <setting id="relogs">30</setting>
</settings>"""

    VALID_SETTINGS = {
        "apiurl": str,
        "hours": int,
        "timeout": int,
        "country": str,
        "cachefile": str,
        "cachemaxage": int,
        "favorites": str,
        "playlist": str,
        "epgfile": str,
        "relogs": int,
    }

    DEFAULTS = {
        "apiurl": "http://api.pluto.tv/v2/channels",
        "hours": 8,
        "timeout": 30,
        "country": "ca",
        "cachefile": "cache.json",
        "cachemaxage": 1800,
        "favorites": "pluto-favorites",
        "playlist": "playlist.m3u8",
        "epgfile": "epg.xml",
        "relogs": 30,
    }

    PATH_SETTINGS = ("cachefile", "favorites", "playlist", "epgfile")

    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = Path(config_file) if config_file else None
        self.settings: Dict[str, Any] = dict(self.DEFAULTS)
        self.version: str = "1"
        self.config_changes: Dict[str, str] = {}

    def load_config(self, **overrides) -> Dict[str, Any]:
        """Load configuration file, then apply command line overrides"""
        self.settings = dict(self.DEFAULTS)
        self.config_changes = {}

        if self.config_file is not None:
            if not self.config_file.exists():
                self._create_default_config()
            self._parse_config_file()

        # Override with command line arguments (for this execution only)
        for key, value in overrides.items():
            if value is None:
                continue
            if key not in self.VALID_SETTINGS:
                raise ValueError(f"Unknown setting: {key}")

            value = self._convert(key, value)
            if self.settings.get(key) != value:
                self.config_changes[key] = f"{self.settings.get(key)} → {value} (from command line)"
            self.settings[key] = value

        self._validate_config()
        return self.settings

    def _create_default_config(self):
        """Create default configuration file"""
        logging.info("Creating default configuration: %s", self.config_file)
        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w", encoding="utf-8") as f:
            f.write(self.DEFAULT_CONFIG)

    def _parse_config_file(self):
        """Parse XML configuration file"""
        try:
            root = ET.parse(self.config_file).getroot()
        except ET.ParseError as e:
            logging.error("Cannot parse configuration file %s: %s", self.config_file, e)
            raise ValueError(f"Invalid configuration file {self.config_file}: {e}") from e

        logging.info("Reading configuration from: %s", self.config_file)
        self.version = root.attrib.get("version", "1")

        for setting in root.findall("setting"):
            setting_id = setting.get("id")
            setting_value = setting.get("value")
            if setting_value is None:
                setting_value = setting.text

            logging.debug("Config setting: %s = %s", setting_id, setting_value)

            if setting_id not in self.VALID_SETTINGS:
                logging.warning(
                    "Unknown configuration setting: %s = %s (ignored)", setting_id, setting_value
                )
                continue

            if setting_value is None or not setting_value.strip():
                # Empty value keeps the default
                continue

            self.settings[setting_id] = self._convert(setting_id, setting_value.strip())

    def _convert(self, key: str, value: Any) -> Any:
        """Type-convert a setting value"""
        expected_type = self.VALID_SETTINGS[key]
        if expected_type == int:
            try:
                return int(value)
            except (ValueError, TypeError) as e:
                raise ValueError(f'Setting "{key}" must be an integer, got: {value}') from e
        return str(value)

    def _validate_config(self):
        """Validate setting ranges"""
        if not 1 <= self.settings["hours"] <= 24:
            raise ValueError(f"Setting \"hours\" must be 1-24, got: {self.settings['hours']}")

        if self.settings["timeout"] <= 0:
            raise ValueError(f"Setting \"timeout\" must be positive, got: {self.settings['timeout']}")

        if self.settings["cachemaxage"] < 0:
            raise ValueError(
                f"Setting \"cachemaxage\" must be 0 or more, got: {self.settings['cachemaxage']}"
            )

        if not ArgumentValidator.COUNTRY_PATTERN.match(self.settings["country"]):
            raise ValueError(
                f"Setting \"country\" must be a two-letter lowercase code, got: {self.settings['country']}"
            )

        if not self.settings["apiurl"].lower().startswith(("http://", "https://")):
            raise ValueError(f"Setting \"apiurl\" must be HTTP/HTTPS: {self.settings['apiurl']}")

    def get_paths(self, base_dir: Path) -> Dict[str, Path]:
        """Resolve file settings against base_dir"""
        paths = {}
        for key in self.PATH_SETTINGS:
            path = Path(self.settings[key]).expanduser()
            paths[key] = path if path.is_absolute() else Path(base_dir) / path
        return paths

    def log_config_summary(self):
        """Log configuration summary"""
        logging.info("Configuration values processed:")
        for key in self.VALID_SETTINGS:
            if key in self.config_changes:
                logging.info("  %s: %s", key, self.config_changes[key])
            else:
                logging.info("  %s: %s", key, self.settings.get(key))
