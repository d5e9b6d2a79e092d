"""
YouTube Data API v3 client.

Only the two read endpoints the archive needs are wrapped:
    - playlistItems.list: every item of a playlist, page by page (50/page)
    - videos.list: metadata of a single video

Every HTTP or network failure is raised as YouTubeApiError; the fetch
command lets it propagate so nothing from the failing batch is saved.

Usage:
    client = YouTubeClient(api_key)
    items = client.playlist_items("PLxxxxxxxx", label="Music")
    remote = client.video("dQw4w9WgXcQ")
"""

from typing import Any

import requests

from tube_archive.core.exceptions import YouTubeApiError
from tube_archive.core.logger import get_logger
from tube_archive.youtube.models import RemoteVideo


logger = get_logger(__name__)

API_BASE_URL = "https://www.googleapis.com/youtube/v3"
PAGE_SIZE = 50
REQUEST_TIMEOUT = 30


class YouTubeClient:
    """
    Thin requests-based wrapper around the YouTube Data API.
    
    Attributes:
        api_key: API key sent with every request.
        session: requests.Session used for all calls; tests pass a fake.
    
    Thread Safety:
        A requests.Session may be shared by the fetch worker threads for
        plain GET requests.
    """
    
    def __init__(
        self,
        api_key: str,
        session: requests.Session | None = None,
        base_url: str = API_BASE_URL
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.session = session or requests.Session()
    
    def _get(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        """
        GET an API endpoint and return the decoded JSON body.
        
        Raises:
            YouTubeApiError: On network errors, non-2xx responses or an
                             undecodable body.
        """
        url = f"{self.base_url}/{endpoint}"
        query = dict(params, key=self.api_key)
        
        try:
            response = self.session.get(url, params=query, timeout=REQUEST_TIMEOUT)
        except requests.exceptions.RequestException as e:
            raise YouTubeApiError(
                f"Request to {endpoint} failed: {e}",
                details={"endpoint": endpoint, "original_error": str(e)}
            ) from e
        
        if response.status_code >= 400:
            raise YouTubeApiError(
                f"YouTube API returned HTTP {response.status_code} for {endpoint}: "
                f"{_error_reason(response)}",
                details={"endpoint": endpoint, "params": params},
                status_code=response.status_code
            )
        
        try:
            return response.json()
        except ValueError as e:
            raise YouTubeApiError(
                f"Invalid JSON from {endpoint}",
                details={"endpoint": endpoint},
                status_code=response.status_code
            ) from e
    
    def playlist_items(self, playlist_id: str, label: str | None = None) -> list[RemoteVideo]:
        """
        Fetch every item of a playlist in playlist order.
        
        Unavailable (private/deleted) items are included with
        available=False; the caller decides what to do with them.
        
        Args:
            playlist_id: Remote playlist ID.
            label: Local playlist label for log messages.
        
        Raises:
            YouTubeApiError: If any page fails.
        """
        label = label or playlist_id
        items: list[RemoteVideo] = []
        page_token: str | None = None
        page = 1
        
        while True:
            logger.debug(f"[{label}] Downloading first {page * PAGE_SIZE} videos...")
            params = {
                "part": "snippet,contentDetails",
                "playlistId": playlist_id,
                "maxResults": PAGE_SIZE,
            }
            if page_token is not None:
                params["pageToken"] = page_token
            
            data = self._get("playlistItems", params)
            items.extend(RemoteVideo.from_playlist_item(item) for item in data.get("items", []))
            
            page_token = data.get("nextPageToken")
            if not page_token:
                break
            page += 1
        
        return items
    
    def video(self, video_id: str) -> RemoteVideo | None:
        """
        Fetch a single video's metadata.
        
        Returns:
            The video, or None when the API does not know the ID.
        """
        data = self._get("videos", {"part": "snippet", "id": video_id})
        items = data.get("items") or []
        if not items:
            return None
        return RemoteVideo.from_video_resource(items[0])


def _error_reason(response: requests.Response) -> str:
    try:
        error = response.json().get("error", {})
    except ValueError:
        return response.reason or "unknown error"
    if isinstance(error, dict):
        return error.get("message") or response.reason or "unknown error"
    return str(error)
