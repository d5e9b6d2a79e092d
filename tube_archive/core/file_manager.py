"""
File management for tube-archive.

Media and caption files live flat in the project's videos/ folder, one set
per video, named after the video so they are recognizable outside the
tool and can be matched back by ID:

Architecture:
    project/
    ├── videos.json
    ├── Music.ini
    ├── Talks.ini
    ├── logs/
    └── videos/
        ├── Some Title [dQw4w9WgXcQ].mp4
        ├── Some Title [dQw4w9WgXcQ].en.vtt
        └── Another Title [9bZkp7q19f0].webm

File Naming:
    "{label} [{id}]{ext}", sanitized with yt-dlp's rules. The same
    "[{id}].ext" suffix is how files in a yt-dlp download folder or a
    legacy archive are recognized by index_source_directory().

Video records store paths relative to videos/.

Usage:
    from tube_archive.core.file_manager import VideoFileManager, index_source_directory
    
    files = VideoFileManager(project_dir / "videos")
    files.import_video_file(video, Path("/tmp/dl/x [id].mp4"))
    
    for video_id, source in index_source_directory(legacy_dir).items():
        ...
"""

import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from tube_archive.archive.models import Video
from tube_archive.core.logger import get_logger
from tube_archive.utils import sanitize_filename
from tube_archive.utils.captions import get_captions_ext


logger = get_logger(__name__)

VIDEOS_DIRNAME = "videos"

# "anything [<id>].ext" or "anything [<id>].lang.ext"
_ID_PATTERN = re.compile(r"\[([\w-]+)\](?:\.[A-Za-z0-9-]+)+$")

INFO_SUFFIX = ".info.json"
CAPTIONS_SUFFIX = ".vtt"


@dataclass
class SourceFiles:
    """
    Files found for one video ID in a source folder.
    
    Attributes:
        video_file: The media file, if any.
        info_file: yt-dlp's .info.json metadata file, if any.
        caption_files: WebVTT caption files, in name order.
    """
    video_file: Path | None = None
    info_file: Path | None = None
    caption_files: list[Path] = field(default_factory=list)


def index_source_directory(path: Path) -> dict[str, SourceFiles]:
    """
    Recursively index a folder of yt-dlp style file names by video ID.
    
    Files whose names do not end in "[<id>].<ext>" are ignored.
    
    Returns:
        Video ID -> SourceFiles, in sorted file name order.
    """
    files: dict[str, SourceFiles] = {}
    
    for file in sorted(path.rglob("*")):
        if not file.is_file():
            continue
        match = _ID_PATTERN.search(file.name)
        if match is None:
            continue
        
        entry = files.setdefault(match.group(1), SourceFiles())
        if file.name.endswith(INFO_SUFFIX):
            entry.info_file = file
        elif file.name.endswith(CAPTIONS_SUFFIX):
            entry.caption_files.append(file)
        else:
            entry.video_file = file
    
    return files


class VideoFileManager:
    """
    Manages the media and caption files of the archive.
    
    All import methods copy the source file (the source is never moved) and
    record the new relative path on the Video; saving the catalog is up to
    the caller.
    
    Attributes:
        path: The videos/ folder. Created on construction.
    """
    
    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.mkdir(parents=True, exist_ok=True)
    
    def filename_for(self, video: Video, ext: str) -> str:
        """
        Canonical file name for one of a video's files.
        
        Example:
            filename_for(video, ".en.vtt")  # "Some Title [dQw4w9WgXcQ].en.vtt"
        """
        return sanitize_filename(f"{video.label} [{video.id}]{ext}")
    
    def resolve(self, relative: str) -> Path:
        return self.path / relative
    
    def import_video_file(self, video: Video, source: Path) -> Path:
        """Copy a media file in and set video.file."""
        target = self.path / self.filename_for(video, source.suffix)
        shutil.copyfile(source, target)
        video.file = target.relative_to(self.path).as_posix()
        return target
    
    def _add_captions(self, video: Video, target: Path) -> None:
        relative = target.relative_to(self.path).as_posix()
        if video.captions is None:
            video.captions = []
        if relative not in video.captions:
            video.captions.append(relative)
    
    def import_captions_file(self, video: Video, source: Path) -> Path:
        """
        Copy a caption file in and add it to video.captions.
        
        The compound extension (e.g. ".en.vtt") is kept.
        """
        target = self.path / self.filename_for(video, get_captions_ext(source.name))
        shutil.copyfile(source, target)
        self._add_captions(video, target)
        return target
    
    def import_captions_raw(self, video: Video, language: str, content: str) -> Path:
        """Write WebVTT text as the video's captions for language."""
        target = self.path / self.filename_for(video, f".{language}.vtt")
        target.write_text(content, encoding="utf-8")
        self._add_captions(video, target)
        return target
    
    def delete_file(self, relative: str) -> None:
        """Delete one file of the archive; a file already gone is not an error."""
        target = self.resolve(relative)
        if target.exists():
            target.unlink()
        else:
            logger.warning(f"File \"{relative}\" was already missing")
    
    def wipe_video_files(self, video: Video) -> None:
        """Delete a video's media and caption files and clear the references."""
        if video.file:
            self.delete_file(video.file)
            video.file = None
        
        if video.captions:
            for caption in video.captions:
                self.delete_file(caption)
            video.captions = None
    
    def wipe_all(self) -> None:
        """Delete the whole videos/ folder and recreate it empty."""
        shutil.rmtree(self.path, ignore_errors=True)
        self.path.mkdir(parents=True, exist_ok=True)
