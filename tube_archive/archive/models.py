"""
Data models for the archive.

Video and Playlist are plain mutable dataclasses: videos are updated in
place by metadata edits and file pulls, playlists by membership commands
and the fetch merge. Neither knows about the other's containers; the
video -> playlists relation lives in the MembershipIndex.

Usage:
    from tube_archive.archive.models import Video, Playlist
    
    video = Video(id="dQw4w9WgXcQ", label="Some Title")
    playlist = Playlist(id=new_playlist_id(), label="Music", source_id="PL...")
"""

import secrets
from dataclasses import dataclass, field
from typing import Any


WATCH_URL = "https://www.youtube.com/watch?v={id}"
CHANNEL_URL = "https://www.youtube.com/channel/{id}"

# Order of keys in videos.json; keeps saved output byte-stable
VIDEO_FIELDS = (
    "id",
    "label",
    "description",
    "channel",
    "channelName",
    "publishedAt",
    "thumbnail",
    "sourceUrl",
    "file",
    "captions",
)


def new_playlist_id() -> str:
    """Random playlist ID for playlists whose file has no `id = ` line."""
    return secrets.token_hex(8)


@dataclass
class Video:
    """
    Metadata record for one piece of content.
    
    A video is "complete" when `file` is set and "missing" otherwise. The
    `id` never changes after creation; everything else may be edited.
    
    Attributes:
        id: YouTube video ID (11 characters for real videos), primary key.
        label: Title shown in listings and used in file names.
        description: Free text description.
        channel: Channel ID of the uploader.
        channel_name: Display name of the uploader.
        published_at: ISO-8601 timestamp, e.g. "2009-10-25T06:57:33Z".
        thumbnail: "data:image/jpeg;base64,..." URI, or None.
        source_url: Explicit source URL, or None for the canonical watch URL.
        file: Media file path relative to the videos directory, or None.
        captions: Caption file paths relative to the videos directory.
    """
    id: str
    label: str
    description: str = ""
    channel: str = ""
    channel_name: str = ""
    published_at: str = ""
    thumbnail: str | None = None
    source_url: str | None = None
    file: str | None = None
    captions: list[str] | None = None
    
    @property
    def url(self) -> str:
        return self.source_url or WATCH_URL.format(id=self.id)
    
    @property
    def channel_url(self) -> str | None:
        if not self.channel:
            return None
        return CHANNEL_URL.format(id=self.channel)
    
    @property
    def is_missing(self) -> bool:
        return self.file is None
    
    def to_dict(self) -> dict[str, Any]:
        """
        Convert to the videos.json record format.
        
        Keys are emitted in VIDEO_FIELDS order.
        """
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "channel": self.channel,
            "channelName": self.channel_name,
            "publishedAt": self.published_at,
            "thumbnail": self.thumbnail,
            "sourceUrl": self.source_url,
            "file": self.file,
            "captions": list(self.captions) if self.captions is not None else None,
        }
    
    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Video":
        """
        Reconstruct a Video from a videos.json record.
        
        Older catalogs stored the channel display name under "channel" and
        the channel ID under "channelId"; those records are migrated on load
        and written back in the current layout on the next save.
        
        Raises:
            KeyError: If "id" or "label" is missing.
        """
        channel = data.get("channel") or ""
        channel_name = data.get("channelName")
        if channel_name is None and "channelId" in data:
            channel_name = channel
            channel = data.get("channelId") or ""
        
        captions = data.get("captions")
        
        return cls(
            id=data["id"],
            label=data["label"],
            description=data.get("description") or "",
            channel=channel,
            channel_name=channel_name or "",
            published_at=data.get("publishedAt") or "",
            thumbnail=data.get("thumbnail"),
            source_url=data.get("sourceUrl"),
            file=data.get("file"),
            captions=list(captions) if captions else None,
        )


@dataclass
class Playlist:
    """
    Ordered, named view of videos.
    
    Attributes:
        id: Stable handle used by the web API (the label may change).
        label: Display name; also the playlist file name. Unique.
        source_id: Remote YouTube playlist ID, or None for a manually
                   curated playlist that fetch leaves alone.
        videos: Ordered member videos, no duplicates.
        labels: Sparse annotations keyed by position; the text at position
                i is shown before videos[i]. A key equal to len(videos)
                annotates the end of the list.
    
    Mutate `videos` and `labels` through PlaylistRegistry only, so the
    membership index stays in sync.
    """
    id: str
    label: str
    source_id: str | None = None
    videos: list[Video] = field(default_factory=list)
    labels: dict[int, str] = field(default_factory=dict)
    
    @property
    def size(self) -> int:
        return len(self.videos)
    
    @property
    def url(self) -> str | None:
        if self.source_id is None:
            return None
        return f"https://www.youtube.com/playlist?list={self.source_id}"
    
    def index_of(self, video_id: str) -> int:
        """Position of a video in this playlist, or -1."""
        for index, video in enumerate(self.videos):
            if video.id == video_id:
                return index
        return -1
    
    def __contains__(self, video_id: str) -> bool:
        return self.index_of(video_id) != -1
