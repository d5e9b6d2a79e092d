"""
Download module for tube-archive.

This module provides functionality for:
- pull / pull captions: media and caption download with yt-dlp
- legacy pull / legacy fetch: imports from a folder of earlier downloads

Usage:
    from tube_archive.download import Downloader, legacy_pull, legacy_fetch
"""

from tube_archive.download.downloader import Downloader, DownloadStats, YtDlpSilentLogger
from tube_archive.download.legacy import ImportStats, legacy_fetch, legacy_pull, parse_info_file

__all__ = [
    "Downloader",
    "DownloadStats",
    "YtDlpSilentLogger",
    "ImportStats",
    "legacy_fetch",
    "legacy_pull",
    "parse_info_file",
]
