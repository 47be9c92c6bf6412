import xml.etree.ElementTree as ET
from datetime import timedelta, timezone

import pytest

from pluto2epg.parser import Channel, GuideParser, Programme
from pluto2epg.xmltv import XmltvGenerator


@pytest.fixture
def channels(channels_payload):
    return GuideParser().parse(channels_payload)


def test_channels_follow_listing_order(channels):
    tv = XmltvGenerator(tz=timezone.utc).build_tree(channels)

    assert [c.get("id") for c in tv.findall("channel")] == ["comedy-central", "action-movies"]
    # channel elements precede programmes
    assert [child.tag for child in tv][:2] == ["channel", "channel"]


def test_channel_element(channels):
    channel = XmltvGenerator(tz=timezone.utc).build_tree(channels).find("channel")

    assert [e.text for e in channel.findall("display-name")] == ["Comedy Central", "101"]
    assert channel.find("icon").get("src") == "http://images.pluto.tv/cc.png"


def test_placeholder_channel_is_absent(channels):
    generator = XmltvGenerator(tz=timezone.utc)
    tv = generator.build_tree(channels)

    assert "pluto-tv-placeholder" not in ET.tostring(tv, encoding="unicode")
    assert generator.station_count == 2
    assert generator.episode_count == 3


def test_programme_element(channels):
    tv = XmltvGenerator(tz=timezone.utc).build_tree(channels)
    programme = tv.findall("programme")[1]

    assert programme.get("start") == "20200324213000 +0000"
    assert programme.get("stop") == "20200324220000 +0000"
    assert programme.get("channel") == "comedy-central"
    assert programme.find("title").text == "Key & Peele"
    assert programme.find("title").get("lang") == "en"
    assert programme.find("sub-title").text == "Substitute Teacher"
    assert programme.find("desc").text == "A classic."
    assert programme.find("date").text == "20120201"
    assert [c.text for c in programme.findall("category")] == ["Comedy", "Sketch"]
    episode_num = programme.find("episode-num")
    assert episode_num.get("system") == "onscreen"
    assert episode_num.text == "7"


def test_sub_title_is_empty_when_equal_to_title(channels):
    programme = XmltvGenerator(tz=timezone.utc).build_tree(channels).find("programme")

    assert programme.find("title").text == "Roast Battle"
    assert programme.find("sub-title") is not None
    assert not programme.find("sub-title").text


def test_timestamps_use_requested_timezone(channels):
    eastern = timezone(timedelta(hours=-4))
    programme = XmltvGenerator(tz=eastern).build_tree(channels).find("programme")

    assert programme.get("start") == "20200324170000 -0400"


def test_missing_episode_data_is_empty():
    channel = Channel(
        id="1",
        name="Bare",
        slug="bare",
        is_stitched=True,
        programmes=[Programme(start=None, stop=None, title="Untitled")],
    )

    programme = XmltvGenerator().build_tree([channel]).find("programme")

    assert programme.get("start") == ""
    assert programme.findtext("desc") == ""
    assert programme.findtext("date") == ""
    assert programme.findtext("episode-num") == ""


def test_write_escapes_and_indents(tmp_path, channels):
    xmltv_file = tmp_path / "epg.xml"
    xmltv_file.write_text("stale", encoding="utf-8")

    assert XmltvGenerator(tz=timezone.utc).write(channels, xmltv_file)

    content = xmltv_file.read_text(encoding="utf-8")
    assert content.startswith('<?xml version="1.0" encoding="utf-8"?>\n')
    assert "Jokes &amp; &lt;insults&gt;" in content
    assert "\n\t<channel id=\"comedy-central\">" in content
    assert "stale" not in content

    tv = ET.parse(xmltv_file).getroot()
    assert tv.tag == "tv"
    assert tv.get("source-info-name") == "pluto.tv"
    assert len(tv.findall("programme")) == 3
