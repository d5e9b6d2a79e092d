"""
Pydantic schemas for the read-only web API.

These schemas define the response structures served to the archive viewer.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class PlaylistSummary(BaseModel):
    """One entry of the playlist list."""
    
    id: Optional[str] = Field(None, description="Playlist ID; None for the All Videos entry")
    label: str
    url: Optional[str] = Field(None, description="Remote playlist URL, if synced")
    size: int
    thumbnail: str = Field(..., description="Thumbnail URL of the first video")


class LabelDisplay(BaseModel):
    """A label annotation shown before the video at `position`."""
    
    position: int
    text: str


class VideoDisplay(BaseModel):
    """A video as listed inside a playlist."""
    
    id: str
    label: str
    url: str = Field(..., description="YouTube watch URL or explicit source URL")
    file: Optional[str] = Field(None, description="Media URL on this server; None when missing")
    thumbnail: str
    captions: Optional[List[str]] = None
    channel: Optional[str] = Field(None, description="Channel display name")
    channel_url: Optional[str] = None
    published_at: str


class PlaylistDetail(BaseModel):
    """A playlist with its videos and label annotations."""
    
    id: Optional[str] = None
    label: str
    url: Optional[str] = None
    labels: List[LabelDisplay] = []
    videos: List[VideoDisplay]


class VideoDetail(VideoDisplay):
    """Full metadata of a single video."""
    
    description: str
    channel_id: Optional[str] = None
    playlists: List[str] = Field(default_factory=list, description="IDs of playlists containing the video")
