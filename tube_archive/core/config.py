"""
Configuration management for tube-archive.

This module handles loading, validating, and providing access to the
per-project configuration stored in config.yaml inside the archive folder.

The configuration file is optional. Every field has a default, so a bare
folder is a valid project. It contains:
    - YouTube Data API key (may also come from the environment or token.txt)
    - Worker counts for the concurrent fetch/download batches
    - yt-dlp settings used by the pull commands
    - Host and port for the read-only web API

Example config.yaml:
    youtube:
      api_key: "AIza..."
    
    download:
      playlist_workers: 4
      video_workers: 10
      cookies_from_browser: chrome   # null disables the cookie retry
      format: null                   # yt-dlp format selector
    
    server:
      host: "127.0.0.1"
      port: 8080

API Key Lookup Order:
    1. youtube.api_key in config.yaml
    2. YOUTUBE_API_KEY environment variable (a project .env file is loaded)
    3. token.txt in the project folder
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from tube_archive.core.exceptions import ConfigError, UserError


# Configuration file name (always inside the project folder)
CONFIG_FILENAME = "config.yaml"

# Legacy API key file kept next to the archive data
TOKEN_FILENAME = "token.txt"

API_KEY_ENV_VAR = "YOUTUBE_API_KEY"

DEFAULT_PLAYLIST_WORKERS = 4
DEFAULT_VIDEO_WORKERS = 10
DEFAULT_COOKIES_BROWSER = "chrome"
DEFAULT_SERVER_HOST = "127.0.0.1"
DEFAULT_SERVER_PORT = 8080


@dataclass(frozen=True)
class YouTubeConfig:
    """
    YouTube Data API configuration.
    
    Attributes:
        api_key: API key from config.yaml, or None to fall back to the
                 environment and token.txt.
    """
    api_key: str | None = None


@dataclass(frozen=True)
class DownloadConfig:
    """
    Concurrency and yt-dlp configuration.
    
    Attributes:
        playlist_workers: Concurrent playlist fetches during `fetch`. Default 4.
        video_workers: Concurrent video-level tasks (thumbnails, downloads,
                       legacy imports). Default 10.
        cookies_from_browser: Browser yt-dlp reads cookies from when a
                              plain download fails. None disables the retry.
        format: Optional yt-dlp format selector. None lets yt-dlp choose.
    """
    playlist_workers: int = DEFAULT_PLAYLIST_WORKERS
    video_workers: int = DEFAULT_VIDEO_WORKERS
    cookies_from_browser: str | None = DEFAULT_COOKIES_BROWSER
    format: str | None = None


@dataclass(frozen=True)
class ServerConfig:
    """
    Read-only web API configuration.
    
    Attributes:
        host: Interface to bind. Default 127.0.0.1.
        port: TCP port. Default 8080.
    """
    host: str = DEFAULT_SERVER_HOST
    port: int = DEFAULT_SERVER_PORT


@dataclass(frozen=True)
class Config:
    """
    Complete project configuration (frozen).
    
    Example:
        config = load_config(Path("~/Archive").expanduser())
        print(f"Using {config.download.video_workers} download workers")
    """
    youtube: YouTubeConfig = YouTubeConfig()
    download: DownloadConfig = DownloadConfig()
    server: ServerConfig = ServerConfig()


def load_config(project_dir: Path) -> Config:
    """
    Load and validate config.yaml from a project folder.
    
    Args:
        project_dir: The archive project folder.
    
    Returns:
        Config: Frozen configuration, with defaults when the file is absent.
    
    Raises:
        ConfigError: If the file has invalid YAML syntax, is not a mapping,
                     or contains invalid values.
    """
    config_path = project_dir / CONFIG_FILENAME
    
    if not config_path.exists():
        return Config()
    
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e
    
    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e
    
    # An empty file is the same as no file
    if raw_config is None:
        return Config()
    
    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )
    
    return Config(
        youtube=_parse_youtube_config(_section(raw_config, "youtube")),
        download=_parse_download_config(_section(raw_config, "download")),
        server=_parse_server_config(_section(raw_config, "server")),
    )


def resolve_api_key(project_dir: Path, config: Config) -> str:
    """
    Find the YouTube Data API key for a project.
    
    Raises:
        UserError: If no key is configured anywhere. Raised lazily, only
                   by commands that actually call the API.
    """
    if config.youtube.api_key:
        return config.youtube.api_key
    
    load_dotenv(project_dir / ".env")
    env_key = os.environ.get(API_KEY_ENV_VAR, "").strip()
    if env_key:
        return env_key
    
    token_path = project_dir / TOKEN_FILENAME
    if token_path.exists():
        token = token_path.read_text(encoding="utf-8").strip()
        if token:
            return token
    
    raise UserError(
        f"Missing YouTube API key (set youtube.api_key in {CONFIG_FILENAME}, "
        f"{API_KEY_ENV_VAR} or {TOKEN_FILENAME})"
    )


def _section(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a config section, validating it is a mapping."""
    section = raw_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a dictionary",
            details={"section": name}
        )
    return section


def _positive_int(section: dict[str, Any], field: str, default: int, prefix: str) -> int:
    value = section.get(field)
    if value is None:
        return default
    # bool is a subclass of int
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(
            f"'{prefix}.{field}' must be a positive integer",
            details={"field": f"{prefix}.{field}", "value": value}
        )
    return value


def _optional_str(section: dict[str, Any], field: str, default: str | None, prefix: str) -> str | None:
    if field not in section:
        return default
    value = section[field]
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(
            f"'{prefix}.{field}' must be a non-empty string or null",
            details={"field": f"{prefix}.{field}"}
        )
    return value.strip()


def _parse_youtube_config(section: dict[str, Any]) -> YouTubeConfig:
    return YouTubeConfig(api_key=_optional_str(section, "api_key", None, "youtube"))


def _parse_download_config(section: dict[str, Any]) -> DownloadConfig:
    """
    Parse the download section, applying defaults for missing fields.
    
    Raises:
        ConfigError: If a worker count is not a positive integer.
    """
    return DownloadConfig(
        playlist_workers=_positive_int(
            section, "playlist_workers", DEFAULT_PLAYLIST_WORKERS, "download"
        ),
        video_workers=_positive_int(
            section, "video_workers", DEFAULT_VIDEO_WORKERS, "download"
        ),
        cookies_from_browser=_optional_str(
            section, "cookies_from_browser", DEFAULT_COOKIES_BROWSER, "download"
        ),
        format=_optional_str(section, "format", None, "download"),
    )


def _parse_server_config(section: dict[str, Any]) -> ServerConfig:
    host = _optional_str(section, "host", DEFAULT_SERVER_HOST, "server") or DEFAULT_SERVER_HOST
    port = _positive_int(section, "port", DEFAULT_SERVER_PORT, "server")
    if port > 65535:
        raise ConfigError(
            "'server.port' must be a valid TCP port",
            details={"field": "server.port", "value": port}
        )
    return ServerConfig(host=host, port=port)
