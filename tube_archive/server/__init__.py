"""Read-only web API (FastAPI) over an archive project."""

from tube_archive.server.app import create_app

__all__ = ["create_app"]
