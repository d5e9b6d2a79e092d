"""
tube-archive: Keep a local, curated archive of YouTube playlists.

An archive is a plain folder: a catalog of every known video, one text file
per playlist, and the downloaded media and captions. Remote playlists are
merged into the local ones without ever losing local edits.

Architecture:
    fetch (archive/reconcile.py): Merge remote playlists
        - List each source playlist through the YouTube Data API
        - Add unknown videos to the catalog
        - Insert new entries next to their remote neighbours
        - Fetch thumbnails for new videos

    pull (download/downloader.py): Download media
        - Download missing media and captions with yt-dlp
        - Retry with browser cookies when a download fails

    legacy (download/legacy.py): Import earlier downloads
        - Copy media and captions from a yt-dlp output folder
        - Rebuild catalog records from .info.json files

Modules:
    core/       - Configuration, logging, exceptions, progress, media files
    archive/    - Catalog, playlists, membership index, file formats, fetch
    youtube/    - YouTube Data API client and thumbnails
    download/   - yt-dlp downloads and legacy imports
    server/     - Read-only web API
    utils/      - Filename, URL, date and caption helpers
    project.py  - One loaded archive folder
    cli.py      - Command-line interface

Usage:
    Command Line:
        tube-archive --project ~/Archive playlist add "https://www.youtube.com/playlist?list=..."
        tube-archive --project ~/Archive fetch
        tube-archive --project ~/Archive pull

    Python API:
        from tube_archive.project import Project
        from tube_archive.archive.reconcile import fetch_playlists
        from tube_archive.youtube import YouTubeClient

        project = Project(Path("~/Archive").expanduser())
        client = YouTubeClient(project.api_key)
        fetch_playlists(project.catalog, project.playlists, client)
        project.save()
"""

__version__ = "0.1.0"
__author__ = "tube-archive contributors"
