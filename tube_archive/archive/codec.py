"""
Persistence formats for the catalog and the playlists.

Catalog (videos.json):
    {
        "version": 1,
        "videos": {
            "<video id>": {"id": ..., "label": ..., ...},
            ...
        }
    }
    Written wholesale with sorted IDs, a fixed key order and 4-space
    indentation, so saving an unchanged catalog produces identical bytes.
    Catalogs written by older versions stored "videos" as a list of
    records; both shapes load.

Playlist file (<label>.ini), meant to be edited by hand:
    id = 3f2a9c0d1b7e4a55
    url = PLxxxxxxxxxxxxxxxx

    > New
    dQw4w9WgXcQ Some Title
    9bZkp7q19f0 Another Title

    > Older stuff
    > (second annotation line)
    kJQP7kiw5Fk Third Title

    Lines are trimmed and blank lines are only separators. `>` lines are
    label annotations attached before the next video line. Anything after
    the first space of a video line is a display hint that is ignored on
    load and regenerated on save.
"""

import json
from pathlib import Path

from tube_archive.archive.catalog import Catalog
from tube_archive.archive.labels import merge_label
from tube_archive.archive.models import VIDEO_FIELDS, Playlist, Video, new_playlist_id
from tube_archive.core.exceptions import CatalogError, PlaylistFileError


CATALOG_VERSION = 1
PLAYLIST_SUFFIX = ".ini"

_ID_PREFIX = "id = "
_URL_PREFIX = "url = "
_LABEL_PREFIX = ">"


# =============================================================================
# Catalog
# =============================================================================

def dump_catalog(catalog: Catalog) -> str:
    """Serialize a catalog to its byte-stable JSON text."""
    videos = {}
    for video in sorted(catalog, key=lambda v: v.id):
        record = video.to_dict()
        videos[video.id] = {key: record[key] for key in VIDEO_FIELDS}
    
    document = {"version": CATALOG_VERSION, "videos": videos}
    return json.dumps(document, indent=4, ensure_ascii=False) + "\n"


def parse_catalog(content: str, source: str = "videos.json") -> Catalog:
    """
    Parse catalog JSON text.
    
    Raises:
        CatalogError: On invalid JSON, unexpected structure, or duplicate IDs.
    """
    try:
        document = json.loads(content)
    except json.JSONDecodeError as e:
        raise CatalogError(
            f"Invalid JSON in {source}: {e}",
            details={"file_path": source, "original_error": str(e)}
        ) from e
    
    if not isinstance(document, dict):
        raise CatalogError(
            f"{source} must contain a JSON object",
            details={"file_path": source}
        )
    
    raw_videos = document.get("videos", {})
    if isinstance(raw_videos, dict):
        records = list(raw_videos.values())
    elif isinstance(raw_videos, list):
        records = raw_videos
    else:
        raise CatalogError(
            f"'videos' in {source} must be an object or a list",
            details={"file_path": source}
        )
    
    catalog = Catalog()
    for record in records:
        try:
            video = Video.from_dict(record)
        except (KeyError, TypeError, AttributeError) as e:
            raise CatalogError(
                f"Malformed video record in {source}: {record!r}",
                details={"file_path": source, "original_error": str(e)}
            ) from e
        
        if video.id in catalog:
            raise CatalogError(
                f"Duplicate video {video.id} in {source}",
                details={"file_path": source, "video_id": video.id}
            )
        catalog.add(video)
    
    return catalog


def load_catalog(path: Path) -> Catalog | None:
    """
    Load videos.json.
    
    Returns:
        The catalog, or None when the file does not exist.
    
    Raises:
        CatalogError: If the file cannot be read or parsed.
    """
    if not path.exists():
        return None
    
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(
            f"Failed to read {path}: {e}",
            details={"file_path": str(path), "original_error": str(e)}
        ) from e
    
    return parse_catalog(content, str(path))


def save_catalog(catalog: Catalog, path: Path) -> None:
    """
    Rewrite videos.json from the in-memory catalog.
    
    Raises:
        CatalogError: If the file cannot be written.
    """
    try:
        path.write_text(dump_catalog(catalog), encoding="utf-8")
    except OSError as e:
        raise CatalogError(
            f"Failed to write {path}: {e}",
            details={"file_path": str(path), "original_error": str(e)}
        ) from e


# =============================================================================
# Playlists
# =============================================================================

def _display_label(text: str) -> str:
    return " ".join(text.split())


def format_playlist(playlist: Playlist) -> str:
    """
    Render a playlist file.
    
    Each label block is separated from the preceding video line by a blank
    line. Labels keyed at or past the end of the list are written last.
    """
    lines = [f"{_ID_PREFIX}{playlist.id}"]
    if playlist.source_id is not None:
        lines.append(f"{_URL_PREFIX}{playlist.source_id}")
    lines.append("")
    
    def write_label(text: str) -> None:
        if lines[-1] != "":
            lines.append("")
        for line in text.split("\n"):
            lines.append(f"{_LABEL_PREFIX} {line}".rstrip())
    
    for index, video in enumerate(playlist.videos):
        if index in playlist.labels:
            write_label(playlist.labels[index])
        lines.append(f"{video.id} {_display_label(video.label)}".rstrip())
    
    for position in sorted(p for p in playlist.labels if p >= len(playlist.videos)):
        write_label(playlist.labels[position])
    
    return "\n".join(lines) + "\n"


def parse_playlist(
    content: str,
    label: str,
    catalog: Catalog,
    path: Path | str | None = None
) -> Playlist:
    """
    Parse a playlist file.
    
    Args:
        content: File text.
        label: Playlist label (the file name without suffix).
        catalog: Catalog the video lines are resolved against.
        path: File path, used in error messages.
    
    Returns:
        The playlist. A random ID is assigned when the file has no
        `id = ` line; it is written back on the next save.
    
    Raises:
        PlaylistFileError: If a video line references an ID that is not in
                           the catalog, or the same video appears twice.
    """
    playlist_id: str | None = None
    source_id: str | None = None
    videos: list[Video] = []
    seen: set[str] = set()
    labels: dict[int, str] = {}
    
    for line_number, raw_line in enumerate(content.split("\n"), start=1):
        line = raw_line.strip()
        if not line:
            continue
        
        if line.startswith(_URL_PREFIX):
            source_id = line[len(_URL_PREFIX):].strip() or None
            continue
        
        if line.startswith(_ID_PREFIX):
            playlist_id = line[len(_ID_PREFIX):].strip() or None
            continue
        
        if line.startswith(_LABEL_PREFIX):
            merge_label(labels, len(videos), line.lstrip(_LABEL_PREFIX).strip())
            continue
        
        video_id = line.split(" ", 1)[0]
        video = catalog.get(video_id)
        if video is None:
            raise PlaylistFileError(
                f"Reference to missing video \"{video_id}\"", path, line_number
            )
        if video_id in seen:
            raise PlaylistFileError(
                f"Duplicate reference to video \"{video_id}\"", path, line_number
            )
        
        seen.add(video_id)
        videos.append(video)
    
    return Playlist(
        id=playlist_id or new_playlist_id(),
        label=label,
        source_id=source_id,
        videos=videos,
        labels=labels,
    )
