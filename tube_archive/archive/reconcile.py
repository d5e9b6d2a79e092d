"""
Fetch-merge: reconcile remote playlist order with the local archive.

For each playlist that has a source ID the remote items are fetched and
merged into the catalog and the playlist:

    1. Unavailable (private/deleted) items are skipped with a warning.
    2. Unknown videos are created in the catalog; their thumbnails are
       downloaded in the background, best effort.
    3. Videos that already belong to the playlist are left where they are.
       The merge never reorders existing members, so hand-made ordering
       survives every fetch.
    4. A new member is inserted right after the closest preceding remote
       item that is already in the playlist. With no such anchor it goes
       to the "New" band (see _insert_without_anchor).

Re-running the merge with the same remote data changes nothing.

Concurrency:
    Playlist listings are fetched by a pool of `playlist_workers` threads.
    Each finished listing is merged on the calling thread, one playlist at
    a time, as the fetches complete. Thumbnail downloads run in a second
    pool of `video_workers` threads and only ever write the thumbnail of
    the video they were started for. Nothing is saved here; the caller
    saves once after fetch_playlists() returns. If any listing fails, the
    YouTubeApiError propagates and the caller must not save.

Usage:
    results = fetch_playlists(catalog, registry, client)
    save_catalog(catalog, catalog_path)
    registry.save()
"""

from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable

from tube_archive.archive.catalog import Catalog
from tube_archive.archive.labels import NEW_LABEL, find_label, merge_label, next_label_position
from tube_archive.archive.models import Playlist, Video
from tube_archive.archive.playlists import PlaylistRegistry
from tube_archive.core.config import DEFAULT_PLAYLIST_WORKERS, DEFAULT_VIDEO_WORKERS
from tube_archive.core.logger import get_logger
from tube_archive.youtube.client import YouTubeClient
from tube_archive.youtube.models import RemoteVideo
from tube_archive.youtube.thumbnails import attach_thumbnail, fetch_thumbnail


logger = get_logger(__name__)


@dataclass
class MergeResult:
    """
    Outcome of merging one playlist.
    
    Attributes:
        playlist: The merged playlist.
        added: Videos newly inserted into the playlist, in merge order.
        created: New catalog records with the remote data for their
                 thumbnail download.
        skipped: IDs of unavailable remote items.
    """
    playlist: Playlist
    added: list[Video] = field(default_factory=list)
    created: list[tuple[Video, RemoteVideo]] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def _anchor_position(playlist: Playlist, prior_ids: list[str]) -> int | None:
    """Index after the latest prior remote item that is a playlist member."""
    for video_id in reversed(prior_ids):
        index = playlist.index_of(video_id)
        if index != -1:
            return index + 1
    return None


def _insert_without_anchor(registry: PlaylistRegistry, playlist: Playlist, video: Video) -> None:
    """
    Place a new video that has no member before it in remote order.
    
    - Playlist without labels: append.
    - A label reading exactly "New": insert at the end of the New band,
      i.e. where the next label starts, or append when New is last.
    - Labels but no New band: append and start a New band at the video.
    """
    if not playlist.labels:
        registry.append_video(playlist, video)
        return
    
    new_position = find_label(playlist.labels, NEW_LABEL)
    if new_position is None:
        index = len(playlist.videos)
        registry.append_video(playlist, video)
        merge_label(playlist.labels, index, NEW_LABEL)
        return
    
    next_position = next_label_position(playlist.labels, new_position)
    if next_position is None:
        registry.append_video(playlist, video)
    else:
        registry.insert_video(playlist, video, min(next_position, len(playlist.videos)))


def merge_remote_items(
    catalog: Catalog,
    registry: PlaylistRegistry,
    playlist: Playlist,
    items: list[RemoteVideo]
) -> MergeResult:
    """
    Merge one playlist's remote items, in remote order.
    
    Args:
        catalog: Catalog receiving new videos.
        registry: Registry owning playlist.
        playlist: The local playlist.
        items: Remote items in remote playlist order.
    
    Returns:
        MergeResult describing what changed. Thumbnails are not fetched
        here; see MergeResult.created.
    """
    result = MergeResult(playlist=playlist)
    seen: list[str] = []
    
    for remote in items:
        if not remote.available:
            logger.warning(f"[{playlist.label}] Skipping private video \"{remote.video_id}\"")
            result.skipped.append(remote.video_id)
            continue
        
        video = catalog.get(remote.video_id)
        if video is None:
            video = remote.to_video()
            catalog.add(video)
            result.created.append((video, remote))
        
        prior = list(seen)
        seen.append(video.id)
        
        if video.id in playlist:
            continue
        
        logger.info(f"[{playlist.label}] New video: {video.label}")
        
        position = _anchor_position(playlist, prior)
        if position is None:
            _insert_without_anchor(registry, playlist, video)
        else:
            registry.insert_video(playlist, video, position)
        result.added.append(video)
    
    return result


def fetch_playlists(
    catalog: Catalog,
    registry: PlaylistRegistry,
    client: YouTubeClient,
    playlist_workers: int = DEFAULT_PLAYLIST_WORKERS,
    video_workers: int = DEFAULT_VIDEO_WORKERS,
    thumbnail_fetcher: Callable[[str], str | None] = fetch_thumbnail
) -> list[MergeResult]:
    """
    Fetch and merge every playlist that has a source ID.
    
    Returns when all merges and thumbnail downloads are done.
    
    Args:
        catalog: Project catalog.
        registry: Project playlists.
        client: API client used for the listings.
        playlist_workers: Concurrent playlist listings.
        video_workers: Concurrent thumbnail downloads.
        thumbnail_fetcher: url -> data URI or None.
    
    Returns:
        One MergeResult per fetched playlist, in completion order.
    
    Raises:
        YouTubeApiError: If any listing fails. Pending listings are
                         cancelled; merges already applied stay in memory
                         and must not be saved.
    """
    targets = [playlist for playlist in registry if playlist.source_id is not None]
    if not targets:
        logger.info("No playlists with a source to fetch")
        return []
    
    logger.info(f"Fetching {len(targets)} playlist(s)")
    results: list[MergeResult] = []
    thumbnail_futures: list[Future] = []
    
    with ThreadPoolExecutor(max_workers=playlist_workers) as playlist_pool, \
            ThreadPoolExecutor(max_workers=video_workers) as thumbnail_pool:
        futures = {
            playlist_pool.submit(client.playlist_items, playlist.source_id, playlist.label): playlist
            for playlist in targets
        }
        
        try:
            for future in as_completed(futures):
                playlist = futures[future]
                items = future.result()
                result = merge_remote_items(catalog, registry, playlist, items)
                results.append(result)
                
                for video, remote in result.created:
                    thumbnail_futures.append(
                        thumbnail_pool.submit(attach_thumbnail, video, remote, thumbnail_fetcher)
                    )
        except BaseException:
            for future in futures:
                future.cancel()
            for future in thumbnail_futures:
                future.cancel()
            raise
        
        for future in as_completed(thumbnail_futures):
            future.result()
    
    added = sum(len(result.added) for result in results)
    created = sum(len(result.created) for result in results)
    logger.info(f"Fetch complete: {added} new playlist entries, {created} new videos")
    return results
