"""
Logging configuration for tube-archive.

This module sets up the logging system with multiple outputs:
    - Console: Real-time messages with tqdm-compatible, colored formatting
    - log_full_<ts>.log: Complete log of all events (DEBUG and above)
    - log_errors_<ts>.log: Only ERROR and CRITICAL level messages
    - failures_<ts>.log: Videos whose thumbnail, download or import failed

Everything printed to the screen is also saved to file, then filtered into
the specialized files.

Log File Locations:
    All log files are created in <project>/logs/, one set per command run.

Usage:
    from tube_archive.core.logger import setup_logging, get_logger
    
    setup_logging(project_dir)       # Call once at startup
    logger = get_logger(__name__)    # Get logger for each module
    
    logger.info("Fetching playlists")
    log_item_failure(logger, video_id, label, "download", "yt-dlp error")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


LOGS_DIRNAME = "logs"

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    DIM = "\033[2m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that colors console output by level.
    
    INFO messages are printed bare (they are the normal command output);
    other levels get a colored level prefix.
    """
    
    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }
    
    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return record.getMessage()
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        return f"{color}{record.levelname}{Colors.RESET}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to the console without breaking progress bars.
    
    Uses tqdm.write(), which prints above any active bar and is safe to call
    from worker threads.
    """
    
    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self.stream = stream
    
    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            # sys.stderr may be swapped after setup
            tqdm.write(msg, file=self.stream if self.stream is not None else sys.stderr)
        except Exception:
            self.handleError(record)


class FailedItemHandler(logging.Handler):
    """
    Handler that collects per-video failures into a report file.
    
    Only records carrying a 'failed_video_id' extra field are written, in a
    simple format the operator can work through later:
    
        [download] Video Title
        https://www.youtube.com/watch?v=xxxxxxxxxxx
        yt-dlp error: Video unavailable
    
    Attributes:
        report_path: Path to the failures report.
        report_file: Open file handle, set by open().
    """
    
    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None
    
    def open(self) -> None:
        """Open the report file for writing (overwrites existing content)."""
        self.report_file = open(self.report_path, "w", encoding="utf-8")
    
    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "failed_video_id"):
            return
        
        if self.report_file is None:
            return
        
        try:
            video_id = getattr(record, "failed_video_id")
            label = getattr(record, "failed_video_label", video_id)
            operation = getattr(record, "failed_operation", "unknown")
            reason = getattr(record, "failed_reason", "")
            
            # Handlers are invoked under the handler lock, so worker threads
            # cannot interleave entries.
            self.report_file.write(f"[{operation}] {label}\n")
            self.report_file.write(f"https://www.youtube.com/watch?v={video_id}\n")
            self.report_file.write(f"{reason}\n\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)
    
    def close(self) -> None:
        """Close the report file handle. Safe to call multiple times."""
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """Filter that only allows ERROR and CRITICAL level records."""
    
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(project_dir: Path | None, verbose: bool = False) -> None:
    """
    Configure the logging system for one command run.
    
    Args:
        project_dir: Archive folder; log files go to project_dir/logs.
                     If None, only the console handler is installed.
        verbose: Show DEBUG messages on the console.
    
    Thread Safety:
        NOT thread-safe. Call once from the main thread before any worker
        pool is started.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()
    
    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)
    
    # Third-party chatter stays in the files only
    for noisy in ("urllib3", "requests", "httpx", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    
    if project_dir is None:
        return
    
    logs_dir = project_dir / LOGS_DIRNAME
    logs_dir.mkdir(parents=True, exist_ok=True)
    
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    
    full_handler = logging.FileHandler(
        logs_dir / f"log_full_{timestamp}.log", mode="w", encoding="utf-8"
    )
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)
    
    error_handler = logging.FileHandler(
        logs_dir / f"log_errors_{timestamp}.log", mode="w", encoding="utf-8"
    )
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)
    
    failures_handler = FailedItemHandler(logs_dir / f"failures_{timestamp}.log")
    failures_handler.open()
    root_logger.addHandler(failures_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.
    
    Args:
        name: The logger name, typically __name__ of the calling module.
    
    Note:
        Loggers obtained before setup_logging() is called have no handlers
        of their own; records propagate to whatever the root logger has.
    """
    return logging.getLogger(name)


def log_item_failure(
    logger: logging.Logger,
    video_id: str,
    label: str,
    operation: str,
    error_message: str,
    level: int = logging.ERROR
) -> None:
    """
    Log a soft per-video failure.
    
    The record carries extra fields that FailedItemHandler writes to the
    failures report; the batch it belongs to keeps going.
    
    Args:
        logger: The logger to use for the message.
        video_id: ID of the affected video.
        label: Video title for display.
        operation: Short operation name ("thumbnail", "download", "import").
        error_message: Why the operation failed.
        level: Log level, ERROR by default.
    
    Example:
        log_item_failure(
            logger, "dQw4w9WgXcQ", "Some Title",
            operation="thumbnail",
            error_message="HTTP 404",
            level=logging.WARNING
        )
    """
    logger.log(
        level,
        f"Failed to {operation} \"{label}\" ({video_id}): {error_message}",
        extra={
            "failed_video_id": video_id,
            "failed_video_label": label,
            "failed_operation": operation,
            "failed_reason": error_message,
        }
    )


def shutdown_logging() -> None:
    """
    Flush and close every root handler.
    
    Called from the CLI's finally block.
    """
    root_logger = logging.getLogger()
    
    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except OSError:
            pass
        root_logger.removeHandler(handler)
