"""
Exception classes for tube-archive.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message and an optional details
dictionary, and the hierarchy separates the failure modes the CLI reports
differently.

Exception Hierarchy:
    ArchiveError (base)
        ConfigError - config.yaml issues
        UserError - bad input or missing project state
            PlaylistFileError - malformed playlist file
        CatalogError - videos.json issues
        YouTubeApiError - YouTube Data API transport issues
        DownloadError - media/caption download issues

    InvariantViolation is deliberately NOT an ArchiveError: it signals a
    programming bug and is never caught by the CLI.
"""


class ArchiveError(Exception):
    """
    Base exception for all tube-archive errors.
    
    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (video IDs, paths).
    
    Example:
        try:
            project.catalog
        except ArchiveError as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """
    
    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.
        
        Args:
            message: Human-readable error description shown to the operator.
            details: Optional dictionary containing additional context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(ArchiveError):
    """
    Raised when config.yaml cannot be parsed or has invalid values.
    
    Example:
        raise ConfigError(
            "'download.video_workers' must be a positive integer",
            details={'field': 'download.video_workers', 'value': 0}
        )
    """
    pass


class UserError(ArchiveError):
    """
    Raised for operator mistakes: bad input, unknown IDs or indexes,
    duplicate playlist labels, missing API key.
    
    The current command aborts, but the loaded project stays usable.
    """
    pass


class PlaylistFileError(UserError):
    """
    Raised when a playlist file cannot be loaded.
    
    Attributes:
        path: The offending playlist file.
        line: 1-based line number, or None when the error is file-wide.
    """
    
    def __init__(self, message: str, path=None, line: int | None = None) -> None:
        location = str(path) if line is None else f"{path}:{line}"
        super().__init__(
            f"{message} at {location}" if path is not None else message,
            details={"path": str(path) if path is not None else None, "line": line}
        )
        self.path = path
        self.line = line


class CatalogError(ArchiveError):
    """
    Raised when the video catalog file (videos.json) is unreadable.
    
    Common causes:
        - invalid JSON syntax
        - unexpected structure (missing 'videos' mapping)
        - permission denied when reading/writing
    """
    pass


class YouTubeApiError(ArchiveError):
    """
    Raised when the YouTube Data API cannot be reached or rejects a request.
    
    This error propagates through the fetch batch: no state is persisted for
    a batch in which any playlist fetch failed.
    
    Attributes:
        status_code: HTTP status code, or None for network failures.
        is_auth_error: True for 401/403 (bad or exhausted API key).
    """
    
    def __init__(
        self,
        message: str,
        details: dict | None = None,
        status_code: int | None = None
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code
        self.is_auth_error = status_code in (401, 403)


class DownloadError(ArchiveError):
    """
    Raised when yt-dlp fails to produce media or caption files for a video.
    
    This is a NON-CRITICAL error: the failing video keeps file=None and is
    retried on the next pull.
    """
    pass


class InvariantViolation(RuntimeError):
    """
    Raised when a data-model invariant would be broken, e.g. adding a
    video ID that is already in the catalog or inserting a video twice into
    one playlist. Indicates a bug, never bad input.
    """
    pass
