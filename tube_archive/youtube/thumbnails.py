"""
Thumbnail download.

Thumbnails are embedded into videos.json as data URIs, so the archive stays
viewable without network access. Fetching one is best effort: any failure
leaves the video without a thumbnail and is reported, never raised.
"""

import base64
import logging
from typing import Callable

import requests

from tube_archive.archive.models import Video
from tube_archive.core.logger import get_logger, log_item_failure
from tube_archive.youtube.models import RemoteVideo


logger = get_logger(__name__)

DATA_URI_PREFIX = "data:image/jpeg;base64,"
THUMBNAIL_TIMEOUT = 30


def fetch_thumbnail(url: str, session: requests.Session | None = None) -> str | None:
    """
    Download an image and return it as a JPEG data URI.
    
    Returns:
        "data:image/jpeg;base64,..." or None if the request failed.
    """
    getter = session or requests
    try:
        response = getter.get(url, timeout=THUMBNAIL_TIMEOUT)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.debug(f"Thumbnail request for {url} failed: {e}")
        return None
    
    return DATA_URI_PREFIX + base64.b64encode(response.content).decode("ascii")


def decode_data_uri(data_uri: str) -> tuple[str, bytes] | None:
    """
    Split a base64 data URI into (media type, bytes).
    
    Returns:
        None if data_uri is not a base64 data URI.
    """
    if not data_uri.startswith("data:"):
        return None
    header, _, payload = data_uri[5:].partition(",")
    media_type, _, encoding = header.partition(";")
    if encoding != "base64":
        return None
    try:
        return media_type or "application/octet-stream", base64.b64decode(payload, validate=True)
    except ValueError:
        return None


def attach_thumbnail(
    video: Video,
    remote: RemoteVideo,
    fetcher: Callable[[str], str | None] = fetch_thumbnail
) -> bool:
    """
    Download the preferred thumbnail of remote and store it on video.
    
    Runs in a worker thread; only this video is touched.
    
    Returns:
        True if the thumbnail was stored. On failure the video keeps its
        previous thumbnail and the failure is reported.
    """
    url = remote.thumbnail_url()
    if url is None:
        log_item_failure(
            logger, video.id, video.label, "download thumbnail",
            "no standard or high resolution thumbnail", level=logging.WARNING
        )
        return False
    
    thumbnail = fetcher(url)
    if thumbnail is None:
        log_item_failure(
            logger, video.id, video.label, "download thumbnail",
            f"request for {url} failed", level=logging.WARNING
        )
        return False
    
    video.thumbnail = thumbnail
    return True
