"""
Project context: one archive folder and its loaded state.

Every command works on an explicit Project instead of process-wide state,
which also lets tests open several projects side by side.

Layout:
    <path>/videos.json        catalog
    <path>/<label>.ini        one file per playlist
    <path>/videos/            media and caption files
    <path>/config.yaml        optional configuration
    <path>/token.txt          optional API key

The catalog, the playlists and the file manager are loaded on first use.

Usage:
    project = Project(Path("~/Archive").expanduser())
    playlist = project.playlists.get_by_index(1)
    ...
    project.save()
"""

from pathlib import Path

from tube_archive.archive.catalog import Catalog
from tube_archive.archive.codec import load_catalog, save_catalog
from tube_archive.archive.models import Video
from tube_archive.archive.playlists import PlaylistRegistry
from tube_archive.core.config import Config, load_config, resolve_api_key
from tube_archive.core.exceptions import UserError
from tube_archive.core.file_manager import VIDEOS_DIRNAME, VideoFileManager
from tube_archive.core.logger import get_logger


logger = get_logger(__name__)

CATALOG_FILENAME = "videos.json"


class Project:
    """
    A loaded archive folder.
    
    Attributes:
        path: The project folder.
        config: Project configuration (config.yaml or defaults).
    """
    
    def __init__(self, path: Path, config: Config | None = None) -> None:
        if not path.is_dir():
            raise UserError(f"Project folder \"{path}\" does not exist", details={"path": str(path)})
        
        self.path = path
        self.config = config if config is not None else load_config(path)
        self._catalog: Catalog | None = None
        self._playlists: PlaylistRegistry | None = None
        self._files: VideoFileManager | None = None
    
    @property
    def catalog_path(self) -> Path:
        return self.path / CATALOG_FILENAME
    
    @property
    def catalog(self) -> Catalog:
        if self._catalog is None:
            logger.debug("Loading video registry...")
            catalog = load_catalog(self.catalog_path)
            if catalog is None:
                logger.warning("Missing video index, creating...")
                catalog = Catalog()
                save_catalog(catalog, self.catalog_path)
            self._catalog = catalog
        return self._catalog
    
    @property
    def playlists(self) -> PlaylistRegistry:
        if self._playlists is None:
            logger.debug("Loading playlist registry...")
            self._playlists = PlaylistRegistry.load(self.path, self.catalog)
        return self._playlists
    
    @property
    def files(self) -> VideoFileManager:
        if self._files is None:
            self._files = VideoFileManager(self.path / VIDEOS_DIRNAME)
        return self._files
    
    @property
    def api_key(self) -> str:
        """
        Raises:
            UserError: If no API key is configured.
        """
        return resolve_api_key(self.path, self.config)
    
    def reload(self) -> None:
        """Forget loaded state; the next access re-reads every file."""
        self._catalog = None
        self._playlists = None
        self._files = None
    
    def save_catalog(self) -> None:
        save_catalog(self.catalog, self.catalog_path)
    
    def save(self) -> None:
        """
        Rewrite videos.json and every playlist file from memory.
        
        Output for unchanged state is byte-identical, so this also
        normalizes hand-edited files.
        """
        self.save_catalog()
        self.playlists.save()
    
    def orphans(self) -> list[Video]:
        """Catalog videos that are in no playlist."""
        return self.playlists.orphans(self.catalog)
    
    def delete_video(self, video: Video) -> None:
        """
        Delete a video: its files, its playlist memberships, then the
        catalog record.
        """
        self.files.wipe_video_files(video)
        for playlist in self.playlists.playlists_containing(video):
            self.playlists.remove_video(playlist, video)
        self.catalog.delete(video.id)
    
    def delete_orphans(self) -> list[Video]:
        """
        Delete every orphan video and its files.
        
        Returns:
            The deleted videos.
        """
        orphans = self.orphans()
        for video in orphans:
            logger.info(f"Deleting \"{video.label}\"")
            self.delete_video(video)
        return orphans
