"""
Data models for YouTube Data API resources.

RemoteVideo is the immutable snapshot of one video as the API reports it,
either as an item of a playlist listing or as a videos.list resource. The
two shapes keep some fields in different places; the from_* constructors
smooth that over.

Usage:
    from tube_archive.youtube.models import RemoteVideo
    
    remote = RemoteVideo.from_playlist_item(item)
    if remote.available:
        video = remote.to_video()
"""

from dataclasses import dataclass, field
from typing import Any

from tube_archive.archive.models import Video


# Preferred thumbnail sizes, best first
THUMBNAIL_PREFERENCE = ("standard", "high")


@dataclass(frozen=True)
class RemoteVideo:
    """
    Immutable snapshot of a video's remote metadata.
    
    Attributes:
        video_id: YouTube video ID.
        title: Video title.
        description: Video description.
        channel_id: ID of the channel that owns the video. In playlist
                    listings this is the video owner, not the playlist owner.
        channel_name: Display name of that channel.
        published_at: ISO-8601 publish time of the video itself.
        thumbnails: Thumbnail size name ("default", "high", ...) -> URL.
        available: False for private or deleted playlist entries, which
                   carry no videoPublishedAt.
    """
    video_id: str
    title: str
    description: str = ""
    channel_id: str = ""
    channel_name: str = ""
    published_at: str = ""
    thumbnails: dict[str, str] = field(default_factory=dict)
    available: bool = True
    
    @classmethod
    def from_playlist_item(cls, item: dict[str, Any]) -> "RemoteVideo":
        """
        Create from a playlistItems.list item (part=snippet,contentDetails).
        
        The snippet's publishedAt is when the item was added to the
        playlist; the video's own publish time lives in contentDetails.
        """
        snippet = item.get("snippet", {})
        details = item.get("contentDetails", {})
        
        video_id = details.get("videoId") or snippet.get("resourceId", {}).get("videoId", "")
        published = details.get("videoPublishedAt")
        
        return cls(
            video_id=video_id,
            title=snippet.get("title", ""),
            description=snippet.get("description", ""),
            channel_id=snippet.get("videoOwnerChannelId") or snippet.get("channelId", ""),
            channel_name=snippet.get("videoOwnerChannelTitle") or snippet.get("channelTitle", ""),
            published_at=published or "",
            thumbnails=_thumbnail_urls(snippet),
            available=published is not None,
        )
    
    @classmethod
    def from_video_resource(cls, resource: dict[str, Any]) -> "RemoteVideo":
        """Create from a videos.list resource (part=snippet)."""
        snippet = resource.get("snippet", {})
        
        return cls(
            video_id=resource.get("id", ""),
            title=snippet.get("title", ""),
            description=snippet.get("description", ""),
            channel_id=snippet.get("channelId", ""),
            channel_name=snippet.get("channelTitle", ""),
            published_at=snippet.get("publishedAt", ""),
            thumbnails=_thumbnail_urls(snippet),
        )
    
    def thumbnail_url(self) -> str | None:
        """URL of the preferred thumbnail size, or None."""
        for size in THUMBNAIL_PREFERENCE:
            url = self.thumbnails.get(size)
            if url:
                return url
        return None
    
    def to_video(self) -> Video:
        """New catalog record (no thumbnail, no files) for this video."""
        return Video(
            id=self.video_id,
            label=self.title,
            description=self.description,
            channel=self.channel_id,
            channel_name=self.channel_name,
            published_at=self.published_at,
        )
    
    def apply_to(self, video: Video) -> None:
        """Overwrite a catalog record's metadata with the remote values."""
        video.label = self.title
        video.description = self.description
        video.channel = self.channel_id
        video.channel_name = self.channel_name
        video.published_at = self.published_at


def _thumbnail_urls(snippet: dict[str, Any]) -> dict[str, str]:
    thumbnails = snippet.get("thumbnails") or {}
    return {
        size: info["url"]
        for size, info in thumbnails.items()
        if isinstance(info, dict) and info.get("url")
    }
