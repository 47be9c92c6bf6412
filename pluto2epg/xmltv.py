"""
pluto2epg.xmltv - XMLTV generation

Builds the XMLTV guide tree for stitched channels, in the order of the
channel listing, and writes it to disk.
"""

import logging
import xml.etree.ElementTree as ET
from datetime import tzinfo
from pathlib import Path
from typing import Iterable, Optional

from .parser import Channel, Programme
from .utils import TimeUtils


class XmltvGenerator:
    """Generates XMLTV files from parsed channels"""

    SOURCE_INFO = {
        "source-info-url": "https://pluto.tv/",
        "source-info-name": "pluto.tv",
        "generator-info-name": "pluto2epg",
    }

    def __init__(self, tz: Optional[tzinfo] = None, lang: str = "en"):
        self.tz = tz
        self.lang = lang
        self.station_count = 0
        self.episode_count = 0

    def build_tree(self, channels: Iterable[Channel]) -> ET.Element:
        """Build the <tv> tree: channel elements first, then programmes"""
        self.station_count = 0
        self.episode_count = 0

        tv = ET.Element("tv", self.SOURCE_INFO)
        programmes = []

        for channel in channels:
            if not channel.is_stitched:
                continue

            self._add_channel(tv, channel)
            self.station_count += 1

            for programme in channel.programmes:
                logging.debug(
                    "Adding instance of %s to channel %s.", programme.title, channel.name
                )
                programmes.append(self._programme_element(channel, programme))

        tv.extend(programmes)
        self.episode_count = len(programmes)
        return tv

    def _add_channel(self, tv: ET.Element, channel: Channel):
        element = ET.SubElement(tv, "channel", {"id": channel.slug})
        ET.SubElement(element, "display-name").text = channel.name
        ET.SubElement(element, "display-name").text = channel.number
        ET.SubElement(element, "icon", {"src": channel.logo})

    def _programme_element(self, channel: Channel, programme: Programme) -> ET.Element:
        episode = programme.episode
        lang = {"lang": self.lang}

        element = ET.Element(
            "programme",
            {
                "start": TimeUtils.conv_time(programme.start, self.tz),
                "stop": TimeUtils.conv_time(programme.stop, self.tz),
                "channel": channel.slug,
            },
        )
        ET.SubElement(element, "title", lang).text = programme.title
        ET.SubElement(element, "sub-title", lang).text = programme.sub_title
        ET.SubElement(element, "desc", lang).text = episode.description
        ET.SubElement(element, "date").text = TimeUtils.conv_date(episode.first_aired, self.tz)
        ET.SubElement(element, "category", lang).text = episode.genre
        ET.SubElement(element, "category", lang).text = episode.sub_genre
        ET.SubElement(element, "episode-num", {"system": "onscreen"}).text = episode.number
        return element

    def to_string(self, tv: ET.Element) -> str:
        """Render the tree with tab indentation"""
        ET.indent(tv, space="\t")
        return ET.tostring(tv, encoding="unicode")

    def write(self, channels: Iterable[Channel], xmltv_file: Path) -> bool:
        """Build the guide and write it, overwriting previous contents"""
        try:
            tv = self.build_tree(channels)
            xmltv_file = Path(xmltv_file)
            xmltv_file.parent.mkdir(parents=True, exist_ok=True)

            with open(xmltv_file, "w", encoding="utf-8") as f:
                f.write('<?xml version="1.0" encoding="utf-8"?>\n')
                f.write('<!DOCTYPE tv SYSTEM "xmltv.dtd">\n')
                f.write(self.to_string(tv))
                f.write("\n")
        except OSError as e:
            logging.error("Error writing XMLTV %s: %s", xmltv_file, str(e))
            return False

        logging.info(
            "XMLTV file created: %s (%d channels, %d programmes)",
            xmltv_file.name,
            self.station_count,
            self.episode_count,
        )
        return True
