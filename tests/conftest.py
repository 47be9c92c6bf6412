import json
from datetime import datetime, timezone

import pytest
import requests


STREAM_URL = (
    "http://stitcher.pluto.tv/stitch/hls/channel/5e1/master.m3u8"
    "?advertisingId=&terminate=false&deviceId=old-device&appName=old"
)


def make_channels():
    """A small channel listing shaped like the api.pluto.tv response"""
    return [
        {
            "_id": "5e1",
            "slug": "comedy-central",
            "name": "Comedy Central",
            "number": 101,
            "isStitched": True,
            "solidLogoPNG": {"path": "http://images.pluto.tv/cc.png"},
            "stitched": {"urls": [{"type": "hls", "url": STREAM_URL}]},
            "timelines": [
                {
                    "start": "2020-03-24T21:00:00.000Z",
                    "stop": "2020-03-24T21:30:00.000Z",
                    "title": "Roast Battle",
                    "episode": {
                        "name": "Roast Battle",
                        "description": "Jokes & <insults>",
                        "firstAired": "2019-01-01T00:00:00.000Z",
                        "genre": "Comedy",
                        "subGenre": "Stand-up",
                        "number": 3,
                    },
                },
                {
                    "start": "2020-03-24T21:30:00.000Z",
                    "stop": "2020-03-24T22:00:00.000Z",
                    "title": "Key & Peele",
                    "episode": {
                        "name": "Substitute Teacher",
                        "description": "A classic.",
                        "firstAired": "2012-02-01T00:00:00.000Z",
                        "genre": "Comedy",
                        "subGenre": "Sketch",
                        "number": 7,
                    },
                },
            ],
        },
        {
            "_id": "5e2",
            "slug": "action-movies",
            "name": "Action Movies",
            "number": 55,
            "isStitched": True,
            "solidLogoPNG": {"path": "http://images.pluto.tv/am.png"},
            "stitched": {
                "urls": [{"type": "hls", "url": "http://stitcher.pluto.tv/stitch/hls/channel/5e2/master.m3u8"}]
            },
            "timelines": [
                {
                    "start": "2020-03-24T21:00:00.000Z",
                    "stop": "2020-03-24T23:00:00.000Z",
                    "title": "Die Hard",
                    "episode": {"name": "Die Hard"},
                }
            ],
        },
        {
            "_id": "5e3",
            "slug": "pluto-tv-placeholder",
            "name": "Placeholder",
            "number": 0,
            "isStitched": False,
            "timelines": [
                {
                    "start": "2020-03-24T21:00:00.000Z",
                    "stop": "2020-03-24T23:00:00.000Z",
                    "title": "Nothing",
                    "episode": {"name": "Nothing"},
                }
            ],
        },
    ]


class FakeResponse:
    def __init__(self, content: bytes, status_code: int = 200):
        self.content = content
        self.status_code = status_code


class FakeSession:
    """Stands in for requests.Session, recording every GET"""

    def __init__(self, content=b"", status_code=200, exc=None):
        self.content = content
        self.status_code = status_code
        self.exc = exc
        self.calls = []
        self.closed = False

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.exc is not None:
            raise self.exc
        return FakeResponse(self.content, self.status_code)

    def close(self):
        self.closed = True


@pytest.fixture
def channels_payload():
    return make_channels()


@pytest.fixture
def channels_json(channels_payload):
    return json.dumps(channels_payload).encode("utf-8")


@pytest.fixture
def now():
    return datetime(2020, 3, 24, 21, 17, 42, tzinfo=timezone.utc)


@pytest.fixture
def fake_session(channels_json):
    return FakeSession(content=channels_json)


@pytest.fixture
def connection_error_session():
    return FakeSession(exc=requests.exceptions.ConnectionError("unreachable"))


@pytest.fixture
def session_factory():
    return FakeSession
