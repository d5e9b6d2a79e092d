"""
Utility functions for tube-archive.

This module provides small helpers used across the application:
    - Filename sanitization (using yt-dlp's sanitize_filename)
    - Extraction of playlist/video IDs from pasted YouTube URLs
    - Validation of hand-entered video IDs
    - Normalization of operator-entered dates

Usage:
    from tube_archive.utils import (
        sanitize_filename,
        extract_playlist_id,
        normalize_timestamp
    )
"""

import re
from datetime import datetime, timezone

from dateutil import parser as date_parser
from yt_dlp.utils import sanitize_filename as yt_dlp_sanitize

from tube_archive.core.exceptions import UserError


_PLAYLIST_ID_PATTERN = re.compile(r"list=([\w-]+)")
_VIDEO_ID_PATTERN = re.compile(r"[\w-]+")


def sanitize_filename(name: str, restricted: bool = False) -> str:
    """
    Sanitize a string for use as a filename.
    
    Uses yt-dlp's sanitize_filename so imported files are named the same
    way yt-dlp names the files it downloads.
    
    Examples:
        sanitize_filename("AC/DC")         # "AC⧸DC"
        sanitize_filename("What?")         # "What？"
    """
    return yt_dlp_sanitize(name, restricted=restricted)


def extract_playlist_id(url_or_id: str) -> str:
    """
    Extract a YouTube playlist ID from a URL or return the ID as-is.
    
    Examples:
        extract_playlist_id("https://www.youtube.com/playlist?list=PLabc-1_x")
        # Returns: "PLabc-1_x"
        
        extract_playlist_id("https://youtu.be/xyz?list=PLabc&index=3")
        # Returns: "PLabc"
        
        extract_playlist_id("PLabc")
        # Returns: "PLabc"
    
    Raises:
        UserError: If the input is empty.
    """
    value = url_or_id.strip()
    match = _PLAYLIST_ID_PATTERN.search(value)
    if match:
        return match.group(1)
    if not value:
        raise UserError("Playlist URL or ID must not be empty")
    return value


def validate_video_id(video_id: str) -> str:
    """
    Check that a hand-entered video ID can be stored in a playlist file.
    
    Playlist lines end the ID at the first space, so IDs are limited to
    letters, digits, `_` and `-`.
    
    Raises:
        UserError: If the ID is empty or has any other character.
    """
    if not _VIDEO_ID_PATTERN.fullmatch(video_id):
        raise UserError(
            f"Invalid video ID \"{video_id}\", use only letters, digits, _ and -",
            details={"video_id": video_id}
        )
    return video_id


def normalize_timestamp(value: str) -> str:
    """
    Parse an operator-entered date and return it as ISO-8601 UTC.
    
    Naive dates are taken as UTC.
    
    Examples:
        normalize_timestamp("2020-05-01")              # "2020-05-01T00:00:00.000Z"
        normalize_timestamp("2020-05-01T12:00+02:00")  # "2020-05-01T10:00:00.000Z"
    
    Raises:
        UserError: If the value is not a recognizable date.
    """
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError) as e:
        raise UserError(f"Invalid date \"{value}\"", details={"value": value}) from e
    
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return format_timestamp(parsed)


def format_timestamp(moment: datetime) -> str:
    """Format an aware datetime the way published dates are stored."""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def now_timestamp() -> str:
    return format_timestamp(datetime.now(timezone.utc))
