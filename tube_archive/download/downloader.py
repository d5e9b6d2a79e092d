"""
Media and caption download with yt-dlp.

`pull` downloads the media file (plus every available caption track) of
each video that has no file yet; `pull captions` downloads only captions
for videos that have none. Each video is downloaded into its own temporary
folder, recognized there by its "[<id>].ext" file name and copied into the
archive by VideoFileManager.

Retry:
    A failed plain download is retried once with cookies read from the
    configured browser (download.cookies_from_browser), which gets past
    age gates and members-only checks. Set it to null to disable.

Failures are per video: the video keeps file=None (or captions=None), the
failure is written to the failures log, and the batch continues. The
caller saves the catalog once after the batch.

Usage:
    downloader = Downloader(project.files, project.config.download)
    stats = downloader.pull_missing(project.catalog.missing())
    project.save()
"""

import shutil
import tempfile
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from yt_dlp import YoutubeDL

from tube_archive.archive.models import Video
from tube_archive.core.config import DownloadConfig
from tube_archive.core.exceptions import DownloadError
from tube_archive.core.file_manager import VideoFileManager, index_source_directory
from tube_archive.core.logger import get_logger, log_item_failure
from tube_archive.core.progress import BatchProgressBar


logger = get_logger(__name__)

OUTPUT_TEMPLATE = "%(title)s [%(id)s].%(ext)s"


class YtDlpSilentLogger:
    """
    Logger handed to yt-dlp so it does not print over the progress bar.
    
    Debug and info output is dropped, warnings go to our debug log, and the
    last error is kept for the failure report.
    """
    
    def __init__(self) -> None:
        self.last_error: str | None = None
    
    def debug(self, msg: str) -> None:
        pass
    
    def info(self, msg: str) -> None:
        pass
    
    def warning(self, msg: str) -> None:
        logger.debug(f"yt-dlp: {msg}")
    
    def error(self, msg: str) -> None:
        self.last_error = msg


@dataclass
class DownloadStats:
    """
    Statistics from a pull batch.
    
    Attributes:
        total: Videos in the batch.
        downloaded: Videos that got their files.
        failed: Videos left unchanged for a later retry.
    """
    
    total: int = 0
    downloaded: int = 0
    failed: int = 0


class Downloader:
    """
    Downloads media and captions into the archive.
    
    Attributes:
        files: The project's VideoFileManager.
        config: Worker count and yt-dlp settings.
    
    Thread Safety:
        pull_video() and pull_captions() only modify the video passed to
        them and use a private temp folder, so different videos can be
        pulled concurrently.
    """
    
    def __init__(
        self,
        files: VideoFileManager,
        config: DownloadConfig | None = None,
        ydl_factory: Callable[[dict[str, Any]], Any] = YoutubeDL
    ) -> None:
        self.files = files
        self.config = config or DownloadConfig()
        self._ydl_factory = ydl_factory
    
    # =========================================================================
    # Batches
    # =========================================================================
    
    def pull_missing(self, videos: list[Video], show_progress: bool = True) -> DownloadStats:
        """Download media (and captions) for every video without a file."""
        pending = [video for video in videos if video.file is None]
        return self._run_batch(pending, self.pull_video, "Pulling", show_progress)
    
    def pull_missing_captions(self, videos: list[Video], show_progress: bool = True) -> DownloadStats:
        """Download captions for every video without any."""
        pending = [video for video in videos if not video.captions]
        return self._run_batch(pending, self.pull_captions, "Captions", show_progress)
    
    def _run_batch(
        self,
        videos: list[Video],
        task: Callable[[Video], bool],
        description: str,
        show_progress: bool
    ) -> DownloadStats:
        stats = DownloadStats(total=len(videos))
        
        if not videos:
            logger.info("Nothing to download")
            return stats
        
        workers = self.config.video_workers
        logger.info(f"Downloading {len(videos)} video(s) with {workers} workers")
        
        progress = BatchProgressBar(total=len(videos), description=description) if show_progress else None
        if progress is not None:
            progress.start()
        
        try:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                future_to_video = {executor.submit(task, video): video for video in videos}
                
                for future in as_completed(future_to_video):
                    video = future_to_video[future]
                    try:
                        success = future.result()
                    except Exception as e:
                        log_item_failure(logger, video.id, video.label, "download", f"Unexpected error: {e}")
                        success = False
                    
                    if success:
                        stats.downloaded += 1
                    else:
                        stats.failed += 1
                    if progress is not None:
                        progress.update(success=success)
        finally:
            if progress is not None:
                progress.stop()
        
        logger.info(
            f"Download complete: {stats.downloaded}/{stats.total} successful, "
            f"{stats.failed} failed"
        )
        return stats
    
    # =========================================================================
    # Single video
    # =========================================================================
    
    def pull_video(self, video: Video) -> bool:
        """
        Download one video's media file and captions.
        
        Returns:
            True if the media file was imported.
        """
        logger.info(f"Downloading \"{video.label}\"")
        temp_dir = Path(tempfile.mkdtemp(prefix=f"tube_archive_{video.id}_"))
        
        try:
            self._download_with_retry(video, temp_dir, captions_only=False)
            
            source = index_source_directory(temp_dir).get(video.id)
            if source is None or source.video_file is None:
                raise DownloadError(f"Cannot find video file for \"{video.id}\"")
            
            self.files.import_video_file(video, source.video_file)
            for caption_file in source.caption_files:
                self.files.import_captions_file(video, caption_file)
            
            logger.info(f"Finished \"{video.label}\"")
            return True
        
        except DownloadError as e:
            log_item_failure(logger, video.id, video.label, "download", str(e))
            return False
        finally:
            self._cleanup_temp_dir(temp_dir)
    
    def pull_captions(self, video: Video) -> bool:
        """
        Download only the captions of one video.
        
        Returns:
            True if at least one caption file was imported.
        """
        temp_dir = Path(tempfile.mkdtemp(prefix=f"tube_archive_{video.id}_"))
        
        try:
            self._download(video, temp_dir, captions_only=True, use_cookies=False)
            
            source = index_source_directory(temp_dir).get(video.id)
            if source is None or not source.caption_files:
                raise DownloadError(f"Cannot find caption files for \"{video.label}\"")
            
            logger.info(f"Found caption files for \"{video.label}\"")
            for caption_file in source.caption_files:
                self.files.import_captions_file(video, caption_file)
            return True
        
        except DownloadError as e:
            log_item_failure(logger, video.id, video.label, "download captions", str(e))
            return False
        finally:
            self._cleanup_temp_dir(temp_dir)
    
    def _download_with_retry(self, video: Video, output_path: Path, captions_only: bool) -> None:
        try:
            self._download(video, output_path, captions_only=captions_only, use_cookies=False)
        except DownloadError as first:
            if self.config.cookies_from_browser is None:
                raise
            logger.debug(
                f"Retrying \"{video.label}\" with {self.config.cookies_from_browser} cookies "
                f"after: {first}"
            )
            self._clear_dir(output_path)
            self._download(video, output_path, captions_only=captions_only, use_cookies=True)
    
    def _download(self, video: Video, output_path: Path, captions_only: bool, use_cookies: bool) -> None:
        """
        Run yt-dlp once.
        
        Raises:
            DownloadError: With yt-dlp's error message.
        """
        yt_logger = YtDlpSilentLogger()
        options = self._get_yt_dlp_options(output_path, yt_logger, captions_only, use_cookies)
        
        try:
            with self._ydl_factory(options) as ydl:
                info = ydl.extract_info(video.url, download=True)
        except Exception as e:
            error_msg = str(e)
            if yt_logger.last_error and yt_logger.last_error not in error_msg:
                error_msg = f"{error_msg} | {yt_logger.last_error}"
            raise DownloadError(f"yt-dlp error: {error_msg}") from e
        
        if info is None:
            raise DownloadError(f"yt-dlp returned no info: {yt_logger.last_error or 'unknown error'}")
    
    def _get_yt_dlp_options(
        self,
        output_path: Path,
        yt_logger: YtDlpSilentLogger,
        captions_only: bool,
        use_cookies: bool
    ) -> dict[str, Any]:
        """Build the yt-dlp options dictionary."""
        options: dict[str, Any] = {
            "paths": {"home": str(output_path)},
            "outtmpl": OUTPUT_TEMPLATE,
            
            # We handle our own logging
            "quiet": True,
            "no_warnings": True,
            "noprogress": True,
            "logger": yt_logger,
            
            # Every caption track, as WebVTT
            "writesubtitles": True,
            "subtitleslangs": [".*"],
            "subtitlesformat": "vtt",
            
            "retries": 3,
            "fragment_retries": 3,
        }
        
        if captions_only:
            options["skip_download"] = True
        elif self.config.format is not None:
            options["format"] = self.config.format
        
        if use_cookies and self.config.cookies_from_browser is not None:
            options["cookiesfrombrowser"] = (self.config.cookies_from_browser,)
        
        return options
    
    def _clear_dir(self, path: Path) -> None:
        for item in path.iterdir():
            if item.is_dir():
                shutil.rmtree(item, ignore_errors=True)
            else:
                item.unlink(missing_ok=True)
    
    def _cleanup_temp_dir(self, temp_dir: Path) -> None:
        try:
            if temp_dir.exists():
                shutil.rmtree(temp_dir)
        except OSError as e:
            logger.debug(f"Failed to clean up temp directory {temp_dir}: {e}")
