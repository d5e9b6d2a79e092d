"""
Reverse index from video ID to the playlists that contain it.

The index is derived state: it is built on first query by one scan over
every playlist and then kept in step by PlaylistRegistry, which calls
add()/discard() in the same operation that mutates a playlist's video
list. It is only rebuilt after invalidate(), e.g. on project reload.
"""

from typing import Callable, Iterable

from tube_archive.archive.models import Playlist


class MembershipIndex:
    """
    Lazily built video ID -> set of playlist IDs map.
    
    Args:
        source: Callable returning the playlists to scan when the index has
                to be (re)built.
    """
    
    def __init__(self, source: Callable[[], Iterable[Playlist]]) -> None:
        self._source = source
        self._index: dict[str, set[str]] | None = None
    
    @property
    def is_built(self) -> bool:
        return self._index is not None
    
    def _get(self) -> dict[str, set[str]]:
        if self._index is None:
            index: dict[str, set[str]] = {}
            for playlist in self._source():
                for video in playlist.videos:
                    index.setdefault(video.id, set()).add(playlist.id)
            self._index = index
        return self._index
    
    def add(self, video_id: str, playlist_id: str) -> None:
        self._get().setdefault(video_id, set()).add(playlist_id)
    
    def discard(self, video_id: str, playlist_id: str) -> None:
        playlist_ids = self._get().get(video_id)
        if playlist_ids is not None:
            playlist_ids.discard(playlist_id)
            if not playlist_ids:
                del self._index[video_id]
    
    def playlist_ids(self, video_id: str) -> set[str]:
        """Copy of the IDs of playlists containing video_id."""
        return set(self._get().get(video_id, ()))
    
    def is_orphan(self, video_id: str) -> bool:
        return not self._get().get(video_id)
    
    def invalidate(self) -> None:
        """Drop the index; the next query rebuilds it from the playlists."""
        self._index = None
