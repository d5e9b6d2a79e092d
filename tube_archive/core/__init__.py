"""
Core module for tube-archive.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging system with multiple outputs
    - progress: Rich progress bars for batch commands
    - file_manager: Media and caption files of the archive

Usage:
    from tube_archive.core import (
        Config, load_config,
        setup_logging, get_logger,
        ArchiveError, UserError, ConfigError
    )
"""

from tube_archive.core.config import (
    Config,
    DownloadConfig,
    ServerConfig,
    YouTubeConfig,
    load_config,
    resolve_api_key,
)
from tube_archive.core.exceptions import (
    ArchiveError,
    CatalogError,
    ConfigError,
    DownloadError,
    InvariantViolation,
    PlaylistFileError,
    UserError,
    YouTubeApiError,
)
from tube_archive.core.logger import (
    get_logger,
    log_item_failure,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "YouTubeConfig",
    "DownloadConfig",
    "ServerConfig",
    "load_config",
    "resolve_api_key",
    # Exceptions
    "ArchiveError",
    "ConfigError",
    "UserError",
    "PlaylistFileError",
    "CatalogError",
    "YouTubeApiError",
    "DownloadError",
    "InvariantViolation",
    # Logger
    "setup_logging",
    "get_logger",
    "log_item_failure",
    "shutdown_logging",
]
