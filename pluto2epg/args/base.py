"""
Main argument parser module for pluto2epg

Orchestrates argument parsing, validation, and special actions handling.
Provides baseline XMLTV grabber capabilities.
"""

import argparse
import sys
from pathlib import Path

from .path_manager import PathManager
from .validator import ArgumentValidator


class ArgumentParser:
    """Command line argument parser for pluto2epg"""

    def __init__(self):
        self.parser = self._create_parser()
        self.validator = ArgumentValidator()
        self.path_manager = PathManager()

    def _create_parser(self):
        """Create the argument parser with all options"""
        parser = argparse.ArgumentParser(
            prog="pluto2epg",
            description="Pluto TV playlist and guide grabber (pluto.tv)",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_epilog_text(),
        )

        # XMLTV baseline capabilities
        parser.add_argument(
            "--description", "-d", action="store_true",
            help="Show grabber description and exit"
        )

        parser.add_argument(
            "--version", "-v", action="store_true",
            help="Show version and exit"
        )

        parser.add_argument(
            "--capabilities", "-c", action="store_true",
            help="Show capabilities and exit"
        )

        # Log level selection
        level_group = parser.add_mutually_exclusive_group()
        level_group.add_argument(
            "--warning", "-w", action="store_true",
            help="Only warnings and errors"
        )

        level_group.add_argument(
            "--debug", action="store_true",
            help="All debug information (very verbose)"
        )

        parser.add_argument(
            "--quiet", "-q", action="store_true",
            help="No console output, logs to --log-file only"
        )

        parser.add_argument(
            "--log-file", type=Path,
            help="Also write logs to this file (rotated daily)"
        )

        # Files
        parser.add_argument(
            "--basedir", type=Path,
            help="Base directory for relative file paths (default: current directory)"
        )

        parser.add_argument(
            "--config-file", type=Path,
            help="Configuration file path (default: BASEDIR/pluto2epg.xml if present)"
        )

        parser.add_argument(
            "--favorites", type=Path,
            help="Favorites file, one channel name per line (default: pluto-favorites)"
        )

        parser.add_argument(
            "--cache-file", type=Path,
            help="Guide cache file (default: cache.json)"
        )

        parser.add_argument(
            "--playlist", type=Path,
            help="M3U8 playlist output file (default: playlist.m3u8)"
        )

        parser.add_argument(
            "--output", "-o", type=Path,
            help="XMLTV output file (default: epg.xml)"
        )

        # Guide parameters
        parser.add_argument(
            "--hours", type=int,
            help="Length of the guide window in hours (1-24, default: 8)"
        )

        parser.add_argument(
            "--country", type=str,
            help="Country suffix for playlist tvg-id values (default: ca)"
        )

        parser.add_argument(
            "--timeout", type=int,
            help="HTTP timeout in seconds (default: 30)"
        )

        parser.add_argument(
            "--no-cache", action="store_true",
            help="Ignore the cached guide and always download"
        )

        return parser

    def _get_epilog_text(self):
        """Get the epilog help text"""
        return """
Examples:
  pluto2epg --capabilities
  pluto2epg
  pluto2epg --basedir ~/pluto --hours 12 --debug
  pluto2epg --favorites my-channels.txt --playlist tv.m3u8 --output tv.xml
  pluto2epg --no-cache --country us

Files:
  cache.json       Raw guide snapshot, reused for 30 minutes
  pluto-favorites  Optional list of channel names to keep
  playlist.m3u8    Generated playlist
  epg.xml          Generated XMLTV guide

Logging Levels:
  (default)       Info, warnings and errors to console (stderr)
  --warning       Only warnings and errors
  --debug         All debug information
  --quiet         No console output
        """

    def parse_args(self, args=None):
        """Parse command line arguments with validation"""
        args = self.parser.parse_args(args)

        # Handle special actions that exit immediately
        if self._handle_special_actions(args):
            sys.exit(0)

        self._validate_args(args)

        return args

    def _handle_special_actions(self, args) -> bool:
        """Handle special actions that exit immediately"""
        if args.description:
            print("Pluto TV (api.pluto.tv using pluto2epg)")
            return True

        if args.version:
            from .. import __version__
            print(__version__)
            return True

        if args.capabilities:
            print("baseline")
            return True

        return False

    def _validate_args(self, args):
        """Validate argument values"""
        errors = []

        for valid, error in (
            self.validator.validate_hours(args.hours),
            self.validator.validate_country(args.country),
            self.validator.validate_timeout(args.timeout),
        ):
            if not valid:
                errors.append(error)

        if errors:
            self.parser.error("; ".join(errors))

    def get_logging_config(self, args):
        """Determine logging configuration from arguments"""
        config = {
            "level": "default",
            "console": not args.quiet,
            "log_file": args.log_file,
        }

        if args.debug:
            config["level"] = "debug"
        elif args.warning:
            config["level"] = "warning"

        return config

    def get_config_overrides(self, args):
        """Map command line options onto configuration settings"""
        return {
            "hours": args.hours,
            "country": args.country,
            "timeout": args.timeout,
            "cachefile": args.cache_file,
            "favorites": args.favorites,
            "playlist": args.playlist,
            "epgfile": args.output,
        }

    def get_defaults(self, args):
        """Get default paths for this run"""
        return self.path_manager.get_defaults(args.basedir)
