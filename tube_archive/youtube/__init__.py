"""YouTube Data API access: client, remote models and thumbnail download."""

from tube_archive.youtube.client import YouTubeClient
from tube_archive.youtube.models import RemoteVideo
from tube_archive.youtube.thumbnails import fetch_thumbnail

__all__ = ["YouTubeClient", "RemoteVideo", "fetch_thumbnail"]
