#!/usr/bin/env python3
"""
pluto2epg - Pluto TV playlist and guide grabber

Fetches the channel guide (or reuses a fresh snapshot), applies the favorites
filter and writes the M3U8 playlist and the XMLTV guide.
"""

import logging
import logging.handlers
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from .args import ArgumentParser
from .config import ConfigManager
from .downloader import FetchStatus, GuideDownloader, OptimizedDownloader
from .favorites import FavoritesFilter
from .parser import GuideParser
from .playlist import PlaylistGenerator
from .utils import CacheManager
from .xmltv import XmltvGenerator

from . import __version__


def setup_logging(logging_config: dict, retention_days: int = 30):
    """Setup logging configuration according to specified levels"""
    if logging_config["level"] == "warning":
        level = logging.WARNING
    elif logging_config["level"] == "debug":
        level = logging.DEBUG
    else:  # default
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    log_file: Optional[Path] = logging_config.get("log_file")
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.TimedRotatingFileHandler(
            log_file, when="midnight", backupCount=retention_days, encoding="utf-8"
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(message)s", datefmt="%Y/%m/%d %H:%M:%S")
        )
        root_logger.addHandler(file_handler)

    if logging_config["console"]:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root_logger.addHandler(console_handler)

    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())


def run(
    config: Dict[str, Any],
    paths: Dict[str, Path],
    now: datetime,
    use_cache: bool = True,
    session: Optional[requests.Session] = None,
) -> int:
    """Run the grab pipeline once, returning the process exit code"""
    cache_manager = CacheManager(paths["cachefile"], max_age=config["cachemaxage"])
    downloader = OptimizedDownloader(timeout=config["timeout"], session=session)

    try:
        guide_downloader = GuideDownloader(
            downloader, cache_manager, api_url=config["apiurl"], hours=config["hours"]
        )
        result = guide_downloader.load_guide(now, use_cache=use_cache)
        logging.debug(
            "Network: %d requests, %d bytes downloaded",
            downloader.total_requests,
            downloader.bytes_downloaded,
        )
    finally:
        downloader.close()

    if result.status is FetchStatus.UNAVAILABLE:
        logging.info("No guide data available, no files written")
        return 0

    if result.status is FetchStatus.ERROR:
        logging.error("Cannot retrieve guide: %s", result.error)
        return 1

    channels = GuideParser().parse(result.data)

    # Filter channels
    favorites_filter = FavoritesFilter.from_file(paths["favorites"])
    if not favorites_filter.is_empty():
        channels = favorites_filter.filter(channels)
    else:
        logging.debug("No favorites specified (%s), loading all channels.", paths["favorites"])
    favorites_filter.log_summary()

    xmltv_generator = XmltvGenerator(tz=now.tzinfo)
    if not xmltv_generator.write(channels, paths["epgfile"]):
        return 1

    playlist_generator = PlaylistGenerator(country=config["country"])
    if not playlist_generator.write(channels, paths["playlist"]):
        return 1

    logging.info(
        "%d Channels and %d Programmes written (%d playlist entries)",
        xmltv_generator.station_count,
        xmltv_generator.episode_count,
        playlist_generator.channel_count,
    )
    return 0


def main(argv=None):
    """Main application entry point"""
    start_time = time.time()

    arg_parser = ArgumentParser()
    args = arg_parser.parse_args(argv)

    defaults = arg_parser.get_defaults(args)
    config_file = args.config_file
    if config_file is None and defaults["config_file"].exists():
        config_file = defaults["config_file"]

    logging_config = arg_parser.get_logging_config(args)

    try:
        config_manager = ConfigManager(config_file)
        config = config_manager.load_config(**arg_parser.get_config_overrides(args))
    except (ValueError, OSError) as e:
        setup_logging(logging_config)
        logging.error("Configuration error: %s", str(e))
        return 1

    setup_logging(logging_config, retention_days=config["relogs"])

    try:
        logging.info("=" * 60)
        logging.info("pluto2epg session started - Version %s", __version__)
        if config_file:
            logging.info("Configuration loaded from: %s", config_file)
        config_manager.log_config_summary()

        arg_parser.path_manager.create_directories(defaults)
        paths = config_manager.get_paths(defaults["base_dir"])

        now = datetime.now().astimezone()
        status = run(config, paths, now, use_cache=not args.no_cache)

        logging.info("Total execution time: %.2f seconds", time.time() - start_time)
        if status == 0:
            logging.info("pluto2epg session ended successfully")
        else:
            logging.info("pluto2epg session ended with error")
        logging.info("=" * 60)
        return status

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        return 1
    except Exception as e:
        logging.exception("Critical error: %s", str(e))
        logging.info("pluto2epg session ended with error")
        logging.info("=" * 60)
        return 1


if __name__ == "__main__":
    sys.exit(main())
