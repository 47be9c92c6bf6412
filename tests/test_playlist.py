import urllib.parse
import uuid

import pytest

from pluto2epg.parser import Channel, GuideParser
from pluto2epg.playlist import (
    PlaylistGenerator,
    normalize_tag_id,
    rewrite_stream_url,
    sort_channels,
)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Téléfilm Français", "TelefilmFrancais.ca"),
        ("Comedy Central", "ComedyCentral.ca"),
        ("CBS+ News: Live!", "CBSPlusNewsLive.ca"),
        ("Rock 'n' Roll, #1?", "RocknRoll1.ca"),
        ("AC/DC - Côté À", "ACDCCotea.ca"),
        ("Tab\tSeparated", "TabSeparated.ca"),
    ],
)
def test_normalize_tag_id(name, expected):
    assert normalize_tag_id(name) == expected


def test_normalize_tag_id_country_suffix():
    assert normalize_tag_id("Pluto TV Kids", "us") == "PlutoTVKids.us"


def query(url):
    return urllib.parse.parse_qsl(urllib.parse.urlsplit(url).query, keep_blank_values=True)


def test_rewrite_sets_client_params():
    url = rewrite_stream_url("http://example.test/master.m3u8", device_id="dev", sid="sess")
    params = dict(query(url))

    assert params == {
        "appName": "web",
        "appVersion": "unknown",
        "clientTime": "0",
        "deviceDNT": "0",
        "deviceId": "dev",
        "deviceMake": "Chrome",
        "deviceModel": "web",
        "deviceType": "web",
        "deviceVersion": "unknown",
        "includeExtendedEvents": "false",
        "sid": "sess",
        "serverSideAds": "false",
    }
    assert url.startswith("http://example.test/master.m3u8?")


def test_rewrite_keeps_unrelated_params_and_replaces_known_ones():
    url = rewrite_stream_url(
        "http://example.test/master.m3u8?advertisingId=&terminate=false&deviceId=old&appName=old",
        device_id="dev",
        sid="sess",
    )
    params = query(url)

    assert params[:4] == [
        ("advertisingId", ""),
        ("terminate", "false"),
        ("deviceId", "dev"),
        ("appName", "web"),
    ]
    assert [key for key, _ in params].count("deviceId") == 1


def test_rewrite_keeps_unrelated_segments_verbatim():
    url = rewrite_stream_url(
        "http://example.test/master.m3u8?title=a%20b&flag&path=%7Euser&appName=old&appName=dup",
        device_id="dev",
        sid="sess",
    )
    segments = urllib.parse.urlsplit(url).query.split("&")

    assert segments[:4] == ["title=a%20b", "flag", "path=%7Euser", "appName=web"]
    assert "appName=dup" not in segments
    assert "deviceId=dev" in segments
    assert segments[-1] == "serverSideAds=false"


def test_rewrite_generates_fresh_identifiers():
    params = dict(query(rewrite_stream_url("http://example.test/master.m3u8")))

    assert uuid.UUID(params["deviceId"]).version == 1
    assert uuid.UUID(params["sid"]).version == 4


def test_rewriting_twice_only_changes_identifiers():
    original = "http://example.test/master.m3u8?terminate=false&appName=old"
    first = rewrite_stream_url(original)
    second = rewrite_stream_url(first)

    first_params = query(first)
    second_params = query(second)

    assert [key for key, _ in first_params] == [key for key, _ in second_params]
    changed = {
        key for (key, a), (_, b) in zip(first_params, second_params) if a != b
    }
    assert changed == {"deviceId", "sid"}


def test_sort_channels_is_lexicographic():
    channels = [Channel(id="1", name="Comedy Central"), Channel(id="2", name="Action Movies")]

    assert [c.name for c in sort_channels(channels)] == ["Action Movies", "Comedy Central"]


def test_build_playlist(channels_payload):
    channels = GuideParser().parse(channels_payload)
    generator = PlaylistGenerator(url_rewriter=lambda url: url + "#rewritten")

    lines = generator.build(channels).splitlines()

    assert lines[0] == "#EXTM3U"
    assert lines[1] == '#EXTINF:-1 tvg-id="ActionMovies.ca",Action Movies'
    assert lines[2] == "http://stitcher.pluto.tv/stitch/hls/channel/5e2/master.m3u8#rewritten"
    assert lines[3] == '#EXTINF:-1 tvg-id="ComedyCentral.ca",Comedy Central'
    assert len(lines) == 5
    assert generator.channel_count == 2


def test_placeholder_channels_are_skipped(channels_payload):
    channels = GuideParser().parse(channels_payload)

    content = PlaylistGenerator().build(channels)

    assert "Placeholder" not in content
    assert "5e3" not in content


def test_stitched_channel_without_url_is_skipped():
    channel = Channel(id="1", name="Broken", is_stitched=True)

    assert PlaylistGenerator().build([channel]) == "#EXTM3U\n"


def test_write_playlist(tmp_path, channels_payload):
    playlist_file = tmp_path / "playlist.m3u8"
    playlist_file.write_text("stale", encoding="utf-8")
    channels = GuideParser().parse(channels_payload)

    assert PlaylistGenerator(country="us").write(channels, playlist_file)

    content = playlist_file.read_text(encoding="utf-8")
    assert content.startswith("#EXTM3U\n")
    assert 'tvg-id="ActionMovies.us"' in content
    assert "stale" not in content
