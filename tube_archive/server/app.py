"""
Read-only web API over an archive project.

Routes:
    GET /api/playlists            "All Videos" then every playlist
    GET /api/playlists/{id}       one playlist with labels and videos
    GET /api/videos               every video (the "All Videos" view)
    GET /api/videos/{id}          one video's full metadata
    GET /api/thumbnail/{id}       the embedded thumbnail image
    GET /videos/...               media and caption files

The app reads the project it was created with and never writes to it.

Usage:
    app = create_app(project)
    uvicorn.run(app, host=config.server.host, port=config.server.port)
"""

from urllib.parse import quote

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.staticfiles import StaticFiles

from tube_archive import __version__
from tube_archive.archive.models import Playlist, Video
from tube_archive.core.logger import get_logger
from tube_archive.project import Project
from tube_archive.server.schemas import (
    LabelDisplay,
    PlaylistDetail,
    PlaylistSummary,
    VideoDetail,
    VideoDisplay,
)
from tube_archive.youtube.thumbnails import decode_data_uri


logger = get_logger(__name__)

ALL_VIDEOS_LABEL = "All Videos"
MISSING_THUMBNAIL_URL = "/api/thumbnail/invalid"

router = APIRouter(prefix="/api", tags=["archive"])


def get_project(request: Request) -> Project:
    """Dependency returning the project the app was created for."""
    return request.app.state.project


# ========================================
# Helper Functions
# ========================================

def _thumbnail_url(video: Video | None) -> str:
    if video is not None and video.thumbnail:
        return f"/api/thumbnail/{quote(video.id)}"
    return MISSING_THUMBNAIL_URL


def _file_url(relative: str) -> str:
    return f"/videos/{quote(relative)}"


def _video_display(video: Video) -> VideoDisplay:
    return VideoDisplay(
        id=video.id,
        label=video.label,
        url=video.url,
        file=_file_url(video.file) if video.file else None,
        thumbnail=_thumbnail_url(video),
        captions=[_file_url(c) for c in video.captions] if video.captions else None,
        channel=video.channel_name or None,
        channel_url=video.channel_url,
        published_at=video.published_at,
    )


def _playlist_summary(playlist: Playlist) -> PlaylistSummary:
    return PlaylistSummary(
        id=playlist.id,
        label=playlist.label,
        url=playlist.url,
        size=playlist.size,
        thumbnail=_thumbnail_url(playlist.videos[0] if playlist.videos else None),
    )


# ========================================
# Endpoints
# ========================================

@router.get("/playlists", response_model=list[PlaylistSummary])
def list_playlists(project: Project = Depends(get_project)) -> list[PlaylistSummary]:
    videos = list(project.catalog)
    everything = PlaylistSummary(
        id=None,
        label=ALL_VIDEOS_LABEL,
        size=len(videos),
        thumbnail=_thumbnail_url(videos[0] if videos else None),
    )
    return [everything] + [_playlist_summary(p) for p in project.playlists]


@router.get("/playlists/{playlist_id}", response_model=PlaylistDetail)
def get_playlist(playlist_id: str, project: Project = Depends(get_project)) -> PlaylistDetail:
    playlist = project.playlists.get(playlist_id)
    if playlist is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Playlist not found")
    
    return PlaylistDetail(
        id=playlist.id,
        label=playlist.label,
        url=playlist.url,
        labels=[
            LabelDisplay(position=position, text=text)
            for position, text in sorted(playlist.labels.items())
        ],
        videos=[_video_display(v) for v in playlist.videos],
    )


@router.get("/videos", response_model=PlaylistDetail)
def list_videos(project: Project = Depends(get_project)) -> PlaylistDetail:
    return PlaylistDetail(
        label=ALL_VIDEOS_LABEL,
        videos=[_video_display(v) for v in project.catalog],
    )


@router.get("/videos/{video_id}", response_model=VideoDetail)
def get_video(video_id: str, project: Project = Depends(get_project)) -> VideoDetail:
    video = project.catalog.get(video_id)
    if video is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Video not found")
    
    display = _video_display(video)
    return VideoDetail(
        **display.model_dump(),
        description=video.description,
        channel_id=video.channel or None,
        playlists=[p.id for p in project.playlists.playlists_containing(video)],
    )


@router.get("/thumbnail/{video_id}")
def get_thumbnail(video_id: str, project: Project = Depends(get_project)) -> Response:
    video = project.catalog.get(video_id)
    decoded = decode_data_uri(video.thumbnail) if video is not None and video.thumbnail else None
    if decoded is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Thumbnail not found")
    
    media_type, content = decoded
    return Response(content=content, media_type=media_type)


def create_app(project: Project) -> FastAPI:
    """
    Build the FastAPI application for a project.
    
    The catalog and playlists are loaded eagerly so a broken project fails
    at startup rather than on the first request.
    """
    project.catalog
    project.playlists
    
    app = FastAPI(
        title="tube-archive",
        description="Read-only view of a YouTube playlist archive",
        version=__version__,
    )
    app.state.project = project
    app.include_router(router)
    app.mount("/videos", StaticFiles(directory=project.files.path), name="videos")
    
    logger.debug(f"Web API created for {project.path}")
    return app
