"""
Playlist store.

PlaylistRegistry owns every Playlist of a project together with the
MembershipIndex derived from them. All membership changes go through the
registry so the index and the label annotations are updated in the same
step as the video list:

    registry.append_video(playlist, video)
    registry.insert_video(playlist, video, 0)
    registry.remove_video(playlist, video)      # False when not a member

There is no move primitive; moving a video is remove_video() followed by
insert_video() at the new position.

Each playlist is persisted as <label>.ini in the project folder (see
tube_archive.archive.codec for the format).
"""

from pathlib import Path

from tube_archive.archive.catalog import Catalog
from tube_archive.archive.codec import PLAYLIST_SUFFIX, format_playlist, parse_playlist
from tube_archive.archive.labels import shift_for_insert, shift_for_remove
from tube_archive.archive.membership import MembershipIndex
from tube_archive.archive.models import Playlist, Video, new_playlist_id
from tube_archive.core.exceptions import InvariantViolation, PlaylistFileError, UserError
from tube_archive.core.logger import get_logger


logger = get_logger(__name__)

_FORBIDDEN_LABEL_CHARS = set('/\\:*?"<>|\0')


def validate_label(label: str) -> str:
    """
    Check a playlist label can be used as a file name.
    
    Returns:
        The label with surrounding whitespace removed.
    
    Raises:
        UserError: If the label is empty, starts with a dot, or contains a
                   character that is not allowed in file names.
    """
    label = label.strip()
    if not label:
        raise UserError("Playlist label must not be empty")
    if label.startswith("."):
        raise UserError(f"Playlist label \"{label}\" must not start with a dot")
    bad = sorted(_FORBIDDEN_LABEL_CHARS.intersection(label))
    if bad:
        raise UserError(
            f"Playlist label \"{label}\" contains invalid characters: {' '.join(bad)}",
            details={"label": label}
        )
    return label


class PlaylistRegistry:
    """
    Every playlist of a project, in display order.
    
    Attributes:
        path: Folder holding the playlist files.
        playlists: Playlists in display order (1-based indexes in the CLI).
        membership: Video ID -> playlist IDs index, built on first use.
    """
    
    def __init__(
        self,
        path: Path,
        playlists: list[Playlist] | None = None,
        original_files: list[Path] | None = None
    ) -> None:
        self.path = path
        self.playlists: list[Playlist] = list(playlists or [])
        self.membership = MembershipIndex(lambda: self.playlists)
        # Files found at load or written by the last save; stale ones are
        # removed by the next save
        self._tracked_files: list[Path] = list(original_files or [])
    
    # =========================================================================
    # Lookup
    # =========================================================================
    
    def get(self, playlist_id: str) -> Playlist | None:
        for playlist in self.playlists:
            if playlist.id == playlist_id:
                return playlist
        return None
    
    def get_by_label(self, label: str) -> Playlist | None:
        for playlist in self.playlists:
            if playlist.label == label:
                return playlist
        return None
    
    def get_by_index(self, index: int) -> Playlist:
        """
        Look up a playlist by its 1-based display index.
        
        Raises:
            UserError: If no playlist has that index.
        """
        if index < 1 or index > len(self.playlists):
            raise UserError(
                f"No playlist with index {index}",
                details={"index": index, "count": len(self.playlists)}
            )
        return self.playlists[index - 1]
    
    def __iter__(self):
        return iter(self.playlists)
    
    def __len__(self) -> int:
        return len(self.playlists)
    
    # =========================================================================
    # Playlist lifecycle
    # =========================================================================
    
    def add_playlist(
        self,
        label: str,
        source_id: str | None = None,
        playlist_id: str | None = None
    ) -> Playlist:
        """
        Create an empty playlist.
        
        Raises:
            UserError: If the label is invalid or already used.
        """
        label = validate_label(label)
        if self.get_by_label(label) is not None:
            raise UserError(f"Duplicate playlist label \"{label}\"", details={"label": label})
        
        playlist = Playlist(id=playlist_id or new_playlist_id(), label=label, source_id=source_id)
        self.playlists.append(playlist)
        return playlist
    
    def rename_playlist(self, playlist: Playlist, label: str) -> None:
        """
        Change a playlist's label. The old file is removed on the next save.
        
        Raises:
            UserError: If the new label is invalid or already used.
        """
        label = validate_label(label)
        other = self.get_by_label(label)
        if other is not None and other is not playlist:
            raise UserError(f"Duplicate playlist label \"{label}\"", details={"label": label})
        playlist.label = label
    
    def delete_playlist(self, playlist: Playlist) -> None:
        """
        Remove every video from a playlist, then drop the playlist.
        
        The videos themselves stay in the catalog (possibly as orphans).
        """
        if not any(p is playlist for p in self.playlists):
            raise InvariantViolation(f"Playlist {playlist.id} is not registered")
        
        for video in list(playlist.videos):
            self.remove_video(playlist, video)
        self.playlists.remove(playlist)
    
    # =========================================================================
    # Membership
    # =========================================================================
    
    def insert_video(self, playlist: Playlist, video: Video, position: int) -> None:
        """
        Insert a video before the one currently at position.
        
        Labels at or after position move forward with the videos they
        annotate.
        
        Raises:
            InvariantViolation: If the video is already in the playlist.
            UserError: If position is outside 0..len(videos).
        """
        if video.id in playlist:
            raise InvariantViolation(
                f"Video {video.id} is already in playlist \"{playlist.label}\""
            )
        if position < 0 or position > len(playlist.videos):
            raise UserError(
                f"Position {position} is out of range for playlist \"{playlist.label}\"",
                details={"position": position, "size": len(playlist.videos)}
            )
        
        playlist.videos.insert(position, video)
        playlist.labels = shift_for_insert(playlist.labels, position)
        self.membership.add(video.id, playlist.id)
    
    def append_video(self, playlist: Playlist, video: Video) -> None:
        self.insert_video(playlist, video, len(playlist.videos))
    
    def remove_video(self, playlist: Playlist, video: Video) -> bool:
        """
        Remove a video from a playlist.
        
        Returns:
            False if the video was not a member (nothing changes).
        """
        index = playlist.index_of(video.id)
        if index == -1:
            return False
        
        del playlist.videos[index]
        playlist.labels = shift_for_remove(playlist.labels, index)
        self.membership.discard(video.id, playlist.id)
        return True
    
    def playlists_containing(self, video: Video) -> list[Playlist]:
        """Playlists that contain video, in display order."""
        ids = self.membership.playlist_ids(video.id)
        return [playlist for playlist in self.playlists if playlist.id in ids]
    
    def is_orphan(self, video: Video) -> bool:
        return self.membership.is_orphan(video.id)
    
    def orphans(self, catalog: Catalog) -> list[Video]:
        """Catalog videos that belong to no playlist."""
        return [video for video in catalog if self.is_orphan(video)]
    
    def invalidate(self) -> None:
        self.membership.invalidate()
    
    # =========================================================================
    # Persistence
    # =========================================================================
    
    def playlist_path(self, playlist: Playlist) -> Path:
        return self.path / f"{playlist.label}{PLAYLIST_SUFFIX}"
    
    def save(self) -> None:
        """
        Rewrite every playlist file and delete files of playlists that were
        renamed or deleted since the last load/save.
        """
        stale = set(self._tracked_files)
        written: list[Path] = []
        
        for playlist in self.playlists:
            path = self.playlist_path(playlist)
            path.write_text(format_playlist(playlist), encoding="utf-8")
            stale.discard(path)
            written.append(path)
        
        for path in sorted(stale):
            if not path.exists():
                continue
            
            # A case-insensitive filesystem maps "Music.ini" and "music.ini" to one file
            same = next((w for w in written if path.samefile(w)), None)
            if same is not None:
                if path.name != same.name and path.name.casefold() == same.name.casefold():
                    path.rename(same)
                continue
            
            logger.info(f"Deleting \"{path}\"...")
            path.unlink()
        
        self._tracked_files = written
    
    @classmethod
    def load(cls, path: Path, catalog: Catalog) -> "PlaylistRegistry":
        """
        Load every <label>.ini in path, in file name order.
        
        Raises:
            PlaylistFileError: If a file references an unknown video.
            UserError: If a file name is not a valid playlist label.
        """
        playlists: list[Playlist] = []
        files: list[Path] = []
        
        for file in sorted(path.glob(f"*{PLAYLIST_SUFFIX}")):
            if not file.is_file():
                continue
            
            try:
                content = file.read_text(encoding="utf-8")
            except OSError as e:
                raise PlaylistFileError(f"Cannot read playlist file: {e}", file) from e
            
            playlist = parse_playlist(content, file.stem, catalog, file)
            if any(p.id == playlist.id for p in playlists):
                raise PlaylistFileError(f"Duplicate playlist id \"{playlist.id}\"", file)
            playlists.append(playlist)
            files.append(file)
            logger.debug(f"Loaded playlist \"{playlist.label}\" ({playlist.size} videos)")
        
        return cls(path, playlists, files)
