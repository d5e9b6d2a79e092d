"""Test configuration and fixtures"""

import json
from pathlib import Path

import pytest

from tube_archive.archive.catalog import Catalog
from tube_archive.archive.models import Video
from tube_archive.archive.playlists import PlaylistRegistry
from tube_archive.core.exceptions import YouTubeApiError
from tube_archive.youtube.models import RemoteVideo


THUMBNAIL_URI = "data:image/jpeg;base64,/9j/AA=="


@pytest.fixture
def project_dir(tmp_path):
    """Empty archive folder"""
    path = tmp_path / "archive"
    path.mkdir()
    return path


@pytest.fixture
def sample_videos():
    """Five catalog records, A to E"""
    return [
        Video(
            id=f"vid{letter}",
            label=f"Video {letter}",
            description=f"About {letter}",
            channel="UCchannel",
            channel_name="Some Channel",
            published_at="2020-01-01T00:00:00.000Z",
        )
        for letter in "ABCDE"
    ]


@pytest.fixture
def catalog(sample_videos):
    return Catalog(sample_videos)


@pytest.fixture
def registry(project_dir, catalog):
    return PlaylistRegistry(project_dir)


@pytest.fixture
def make_remote():
    """Factory for RemoteVideo snapshots"""
    def factory(video_id, title=None, available=True, thumbnails=None):
        return RemoteVideo(
            video_id=video_id,
            title=title or f"Remote {video_id}",
            description="remote description",
            channel_id="UCremote",
            channel_name="Remote Channel",
            published_at="2021-06-01T12:00:00Z",
            thumbnails=thumbnails if thumbnails is not None else {"high": f"https://i.ytimg.com/{video_id}.jpg"},
            available=available,
        )
    return factory


class FakeYouTubeClient:
    """In-memory stand-in for YouTubeClient"""

    def __init__(self, playlists=None, videos=None):
        self.playlists = playlists or {}
        self.videos = videos or {}
        self.requested = []

    def playlist_items(self, playlist_id, label=None):
        self.requested.append(playlist_id)
        items = self.playlists.get(playlist_id)
        if isinstance(items, Exception):
            raise items
        if items is None:
            raise YouTubeApiError(f"Playlist {playlist_id} not found", status_code=404)
        return list(items)

    def video(self, video_id):
        return self.videos.get(video_id)


@pytest.fixture
def make_client():
    """Factory for in-memory API clients: make_client(playlists=..., videos=...)"""
    return FakeYouTubeClient


@pytest.fixture
def thumbnail_uri():
    """Data URI returned by the thumbnail_fetcher fixture"""
    return THUMBNAIL_URI


@pytest.fixture
def thumbnail_fetcher():
    """Thumbnail fetcher that never touches the network"""
    calls = []

    def fetch(url):
        calls.append(url)
        return THUMBNAIL_URI

    fetch.calls = calls
    return fetch


class FakeYoutubeDL:
    """
    Minimal YoutubeDL replacement.

    Writes "<title> [<id>].mp4" and one caption file into the output folder,
    or raises when the URL is listed in `failing`.
    """

    failing: set = set()
    cookie_only: set = set()
    calls: list = []

    def __init__(self, options):
        self.options = options

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def extract_info(self, url, download=True):
        FakeYoutubeDL.calls.append((url, dict(self.options)))
        video_id = url.rsplit("=", 1)[-1]
        if url in self.failing:
            raise RuntimeError("ERROR: Video unavailable")
        if url in self.cookie_only and "cookiesfrombrowser" not in self.options:
            raise RuntimeError("ERROR: Sign in to confirm your age")

        home = Path(self.options["paths"]["home"])
        if not self.options.get("skip_download"):
            (home / f"Title [{video_id}].mp4").write_bytes(b"media")
        (home / f"Title [{video_id}].en.vtt").write_text("WEBVTT\n", encoding="utf-8")
        return {"id": video_id}


@pytest.fixture
def fake_ydl():
    FakeYoutubeDL.failing = set()
    FakeYoutubeDL.cookie_only = set()
    FakeYoutubeDL.calls = []
    return FakeYoutubeDL


@pytest.fixture
def legacy_dir(tmp_path):
    """yt-dlp output folder with two complete downloads and one bare info file"""
    path = tmp_path / "legacy"
    path.mkdir()

    for video_id, title in (("vidA", "Legacy A"), ("vidX", "Legacy X")):
        (path / f"{title} [{video_id}].mp4").write_bytes(b"media")
        (path / f"{title} [{video_id}].en.vtt").write_text("WEBVTT\n", encoding="utf-8")
        info = {
            "id": video_id,
            "fulltitle": title,
            "title": title.lower(),
            "description": "legacy description",
            "channel_id": "UClegacy",
            "channel": "Legacy Channel",
            "timestamp": 1577836800,
            "thumbnails": [
                {"url": f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg", "resolution": "480x360"},
            ],
        }
        (path / f"{title} [{video_id}].info.json").write_text(json.dumps(info), encoding="utf-8")

    (path / "Orphan [vidY].info.json").write_text(json.dumps({"id": "vidY", "title": "Y"}), encoding="utf-8")
    return path
