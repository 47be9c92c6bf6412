"""
Path management module for pluto2epg

Resolves the base directory and the default configuration file location.
"""

from pathlib import Path
from typing import Dict, Optional


class PathManager:
    """Manages default paths"""

    CONFIG_NAME = "pluto2epg.xml"

    @staticmethod
    def get_defaults(base_dir: Optional[Path] = None) -> Dict[str, Path]:
        """
        Get default paths

        Args:
            base_dir: Base directory, the current directory when omitted

        Returns:
            Dict containing base_dir and config_file
        """
        base_dir = Path(base_dir).expanduser() if base_dir else Path.cwd()

        return {
            "base_dir": base_dir,
            "config_file": base_dir / PathManager.CONFIG_NAME,
        }

    @staticmethod
    def create_directories(defaults: Dict[str, Path]):
        """Create the base directory"""
        defaults["base_dir"].mkdir(parents=True, exist_ok=True)
