"""
Video catalog: the deduplicated set of every known video.

Each video is stored once, keyed by its YouTube ID, no matter how many
playlists reference it. The catalog enforces no referential integrity
toward playlists: deleting a video that is still a playlist member is the
caller's mistake. Callers detach it first (PlaylistRegistry.remove_video) and
delete its files (VideoFileManager.wipe_video_files).

Usage:
    catalog = Catalog()
    video = catalog.get(video_id)
    if video is None:
        catalog.add(Video(id=video_id, label=title))
    
    for video in catalog.missing():
        ...
"""

import threading
from typing import Iterator

from tube_archive.archive.models import Video
from tube_archive.core.exceptions import InvariantViolation


class Catalog:
    """
    In-memory video catalog.
    
    Persisted by tube_archive.archive.codec as videos.json.
    
    Thread Safety:
        add() and delete() hold a lock so worker pools can register videos.
        Iteration works on a snapshot.
    """
    
    def __init__(self, videos: list[Video] | None = None) -> None:
        self._videos: dict[str, Video] = {}
        self._lock = threading.Lock()
        for video in videos or []:
            self.add(video)
    
    def get(self, video_id: str) -> Video | None:
        return self._videos.get(video_id)
    
    def add(self, video: Video) -> None:
        """
        Register a new video.
        
        Raises:
            InvariantViolation: If a video with the same ID is already
                                registered. Callers decide add-vs-reuse
                                with get() first.
        """
        with self._lock:
            if video.id in self._videos:
                raise InvariantViolation(f"Video {video.id} is already in the catalog")
            self._videos[video.id] = video
    
    def delete(self, video_id: str) -> Video | None:
        """Remove and return a video, or None when it is unknown."""
        with self._lock:
            return self._videos.pop(video_id, None)
    
    def missing(self) -> list[Video]:
        """Videos that have no media file yet."""
        return [video for video in self if video.file is None]
    
    def __iter__(self) -> Iterator[Video]:
        return iter(list(self._videos.values()))
    
    def __len__(self) -> int:
        return len(self._videos)
    
    def __contains__(self, video_id: str) -> bool:
        return video_id in self._videos
