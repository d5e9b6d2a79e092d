"""
Archive model: video catalog, playlist store and their persistence.

Components:
    - models: Video and Playlist records
    - catalog: Catalog, the deduplicated set of videos
    - labels: renumbering of playlist label annotations
    - membership: MembershipIndex, video ID -> playlist IDs
    - playlists: PlaylistRegistry, all playlists plus the index
    - codec: videos.json and <label>.ini formats
    - reconcile: fetch-merge of remote playlists (imported on its own,
      it depends on tube_archive.youtube)

Usage:
    from tube_archive.archive import Catalog, PlaylistRegistry, Video
"""

from tube_archive.archive.catalog import Catalog
from tube_archive.archive.models import Playlist, Video
from tube_archive.archive.playlists import PlaylistRegistry

__all__ = [
    "Catalog",
    "Playlist",
    "PlaylistRegistry",
    "Video",
]
