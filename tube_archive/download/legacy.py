"""
Import from a legacy archive.

A legacy archive is any folder of earlier yt-dlp downloads, named
"<title> [<id>].<ext>" and optionally accompanied by "<title> [<id>].info.json"
metadata and ".vtt" captions. Two imports are supported:

    legacy pull:  for videos already in the catalog, copy in the media and
                  captions they are missing.
    legacy fetch: create catalog records from the .info.json files and
                  append the videos to a playlist.

Both run the per-video file work in a pool of `video_workers` threads;
catalog and playlist changes happen on the calling thread after the pool
joins. Per-video problems are reported and skipped.
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from tube_archive.archive.catalog import Catalog
from tube_archive.archive.models import Playlist, Video
from tube_archive.archive.playlists import PlaylistRegistry
from tube_archive.core.config import DEFAULT_VIDEO_WORKERS
from tube_archive.core.exceptions import ArchiveError, UserError
from tube_archive.core.file_manager import SourceFiles, VideoFileManager, index_source_directory
from tube_archive.core.logger import get_logger, log_item_failure
from tube_archive.utils import format_timestamp
from tube_archive.youtube.thumbnails import fetch_thumbnail


logger = get_logger(__name__)

# Thumbnail resolutions tried, best first; only .jpg variants are used
INFO_THUMBNAIL_RESOLUTIONS = ("640x480", "480x360")


@dataclass
class ImportStats:
    """
    Statistics from a legacy import.
    
    Attributes:
        videos: Media files imported.
        captions: Caption files imported.
        created: New catalog records (legacy fetch only).
        added: Videos appended to the playlist (legacy fetch only).
        failed: Videos skipped because of a problem.
    """
    videos: int = 0
    captions: int = 0
    created: int = 0
    added: int = 0
    failed: int = 0


def parse_info_file(
    path: Path,
    thumbnail_fetcher: Callable[[str], str | None] = fetch_thumbnail
) -> Video:
    """
    Build a Video from a yt-dlp .info.json file.
    
    The thumbnail is downloaded from the 640x480 or 480x360 JPEG listed in
    the file; when neither works the video has no thumbnail.
    
    Raises:
        UserError: If the file is unreadable or lacks id/fulltitle.
    """
    try:
        data: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
        video_id = data["id"]
        title = data.get("fulltitle") or data["title"]
    except (OSError, ValueError, KeyError, TypeError) as e:
        raise UserError(f"Invalid info file \"{path}\": {e}", details={"path": str(path)}) from e
    
    thumbnail = None
    for resolution in INFO_THUMBNAIL_RESOLUTIONS:
        url = next(
            (
                t.get("url") for t in data.get("thumbnails") or []
                if t.get("resolution") == resolution and ".jpg" in (t.get("url") or "")
            ),
            None
        )
        if url is None:
            continue
        thumbnail = thumbnail_fetcher(url)
        if thumbnail is not None:
            break
    
    if thumbnail is None:
        log_item_failure(
            logger, video_id, title, "download thumbnail",
            "no usable thumbnail in info file", level=logging.WARNING
        )
    
    timestamp = data.get("timestamp")
    published_at = ""
    if isinstance(timestamp, (int, float)):
        published_at = format_timestamp(datetime.fromtimestamp(timestamp, timezone.utc))
    
    return Video(
        id=video_id,
        label=title,
        description=data.get("description") or "",
        channel=data.get("channel_id") or "",
        channel_name=data.get("channel") or "",
        published_at=published_at,
        thumbnail=thumbnail,
    )


def _import_captions(files: VideoFileManager, video: Video, source: SourceFiles) -> int:
    for caption_file in source.caption_files:
        files.import_captions_file(video, caption_file)
    return len(source.caption_files)


def legacy_pull(
    catalog: Catalog,
    files: VideoFileManager,
    source_dir: Path,
    workers: int = DEFAULT_VIDEO_WORKERS
) -> ImportStats:
    """
    Copy missing media and captions for catalog videos from source_dir.
    
    Returns:
        ImportStats. Videos whose media is not in the legacy folder count
        as failed.
    """
    index = index_source_directory(source_dir)
    stats = ImportStats()
    
    def import_one(video: Video, source: SourceFiles | None) -> tuple[int, int]:
        imported_video = 0
        imported_captions = 0
        if video.file is None and source is not None and source.video_file is not None:
            logger.info(f"Importing video \"{video.label}\"")
            files.import_video_file(video, source.video_file)
            imported_video = 1
        if not video.captions and source is not None and source.caption_files:
            logger.info(f"Importing captions \"{video.label}\"")
            imported_captions = _import_captions(files, video, source)
        return imported_video, imported_captions
    
    jobs: list[tuple[Video, SourceFiles | None]] = []
    for video in catalog:
        source = index.get(video.id)
        if video.file is None and (source is None or source.video_file is None):
            log_item_failure(logger, video.id, video.label, "import", "Cannot find video in legacy archive")
            stats.failed += 1
        jobs.append((video, source))
    
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(import_one, video, source): video for video, source in jobs}
        for future in as_completed(futures):
            video = futures[future]
            try:
                imported_video, imported_captions = future.result()
            except (OSError, ArchiveError) as e:
                log_item_failure(logger, video.id, video.label, "import", str(e))
                stats.failed += 1
                continue
            stats.videos += imported_video
            stats.captions += imported_captions
    
    logger.info(f"Imported {stats.videos} video file(s) and {stats.captions} caption file(s)")
    return stats


def legacy_fetch(
    catalog: Catalog,
    registry: PlaylistRegistry,
    playlist: Playlist,
    files: VideoFileManager,
    source_dir: Path,
    workers: int = DEFAULT_VIDEO_WORKERS,
    thumbnail_fetcher: Callable[[str], str | None] = fetch_thumbnail
) -> ImportStats:
    """
    Import every video of a legacy folder into the catalog and a playlist.
    
    Videos unknown to the catalog need both an info file and a media file.
    Known videos only get captions they are missing. Every imported or
    known video is appended to playlist, in index (file name) order,
    unless it is already a member.
    """
    index = index_source_directory(source_dir)
    stats = ImportStats()
    
    def import_one(video_id: str, source: SourceFiles) -> Video | None:
        video = catalog.get(video_id)
        if video is None:
            if source.info_file is None:
                log_item_failure(logger, video_id, video_id, "import", "legacy video has no info file")
                return None
            if source.video_file is None:
                log_item_failure(logger, video_id, video_id, "import", "legacy video has no video file")
                return None
            
            logger.info(f"Importing video \"{source.video_file.name}\"")
            video = parse_info_file(source.info_file, thumbnail_fetcher)
            files.import_video_file(video, source.video_file)
        
        if not video.captions and source.caption_files:
            _import_captions(files, video, source)
        return video
    
    imported: dict[str, Video] = {}
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(import_one, video_id, source): video_id
            for video_id, source in index.items()
        }
        for future in as_completed(futures):
            video_id = futures[future]
            try:
                video = future.result()
            except (OSError, ArchiveError) as e:
                log_item_failure(logger, video_id, video_id, "import", str(e))
                video = None
            if video is None:
                stats.failed += 1
            else:
                imported[video_id] = video
    
    for video_id in index:
        video = imported.get(video_id)
        if video is None:
            continue
        if video_id not in catalog:
            catalog.add(video)
            stats.created += 1
            stats.videos += 1
        if video_id not in playlist:
            registry.append_video(playlist, video)
            stats.added += 1
    
    logger.info(
        f"Imported {stats.created} new video(s), added {stats.added} to \"{playlist.label}\", "
        f"{stats.failed} failed"
    )
    return stats
