"""
Command-line interface for tube-archive.

This module implements the CLI using Click, providing all commands
for curating a local archive of YouTube playlists.
rich-click is used for the output colors.

Commands:
    tube-archive status                              Playlists, orphans, missing media
    tube-archive playlist add <url> [--label L]      Track a YouTube playlist
    tube-archive playlist add-local <label>          Create a local-only playlist
    tube-archive playlist set-url <index> <url>      Change a playlist's source
    tube-archive playlist rename <index> <label>     Rename a playlist
    tube-archive playlist delete <index>             Delete a playlist
    tube-archive playlist insert <index> <video-id>  Add a video to a playlist
    tube-archive playlist remove <index> <video-id>  Remove a video from a playlist
    tube-archive view <index>                        List a playlist's videos
    tube-archive orphans [delete]                    List or delete orphan videos
    tube-archive missing                             List videos without media
    tube-archive fetch                               Merge remote playlists
    tube-archive pull [captions]                     Download media or captions
    tube-archive legacy pull <path>                  Import earlier downloads
    tube-archive legacy fetch <index> <path>         Import earlier downloads into a playlist
    tube-archive wipe videos                         Delete every media file
    tube-archive video show|add|update|fetch|delete  Edit one catalog record
    tube-archive video captions import|delete        Edit one video's captions
    tube-archive flush                               Rewrite every archive file
    tube-archive srt2vtt <source> [<destination>]    Convert SubRip to WebVTT
    tube-archive serve                               Start the read-only web API

Options:
    --project <path>     Archive folder (default: current directory)
    --verbose            Show debug messages

Usage:
    # Track a playlist and download it
    tube-archive --project ~/Archive playlist add "https://www.youtube.com/playlist?list=..."
    tube-archive --project ~/Archive fetch
    tube-archive --project ~/Archive pull

    # Hand-curate
    tube-archive playlist add-local "Favourites"
    tube-archive playlist insert 2 dQw4w9WgXcQ --first

Exit Codes:
    0    Success
    1    User or configuration error
    2    Catalog error (videos.json unreadable)
    3    YouTube API error
    4    Other tube-archive error
    130  Interrupted
"""

import functools
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import rich_click as click
import uvicorn

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100
click.rich_click.COMMAND_GROUPS = {
    "tube-archive": [
        {
            "name": "Archive",
            "commands": ["status", "view", "orphans", "missing", "flush"],
        },
        {
            "name": "Sync",
            "commands": ["fetch", "pull", "legacy"],
        },
        {
            "name": "Editing",
            "commands": ["playlist", "video", "wipe"],
        },
        {
            "name": "Tools",
            "commands": ["srt2vtt", "serve"],
        },
    ],
}

from tube_archive import __version__
from tube_archive.archive.models import Playlist, Video
from tube_archive.archive.reconcile import fetch_playlists
from tube_archive.core import (
    ArchiveError,
    CatalogError,
    ConfigError,
    UserError,
    YouTubeApiError,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from tube_archive.download import Downloader, legacy_fetch, legacy_pull
from tube_archive.project import Project
from tube_archive.server import create_app
from tube_archive.utils import extract_playlist_id, normalize_timestamp, validate_video_id
from tube_archive.utils.captions import convert_srt_to_vtt, get_captions_language
from tube_archive.youtube import YouTubeClient
from tube_archive.youtube.thumbnails import attach_thumbnail

logger = get_logger(__name__)


# =============================================================================
# Command runner
# =============================================================================

def _run(options: dict, handler: Callable[..., None], *args: Any, needs_project: bool = True, **kwargs: Any) -> None:
    """
    Run one command with logging set up and errors mapped to exit codes.

    Args:
        options: Global options from the click context.
        handler: Command body. Receives the Project first unless
                 needs_project is False.

    Raises:
        SystemExit: On errors (with the documented exit code).
    """
    project_path: Path = options["project"]

    try:
        setup_logging(
            project_path if needs_project and project_path.is_dir() else None,
            verbose=options["verbose"]
        )

        if needs_project:
            project = Project(project_path)
            handler(project, *args, **kwargs)
        else:
            handler(*args, **kwargs)

    except (UserError, ConfigError) as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.debug(f"User error: {e}")
        sys.exit(1)

    except CatalogError as e:
        click.echo(f"Catalog error: {e.message}", err=True)
        logger.error(f"Catalog error: {e.message}", exc_info=True)
        sys.exit(2)

    except YouTubeApiError as e:
        click.echo(f"YouTube API error: {e.message}", err=True)
        if e.is_auth_error:
            click.echo("Check your API key (config.yaml, YOUTUBE_API_KEY or token.txt)", err=True)
        logger.error(f"YouTube API error: {e.message}", exc_info=True)
        sys.exit(3)

    except ArchiveError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(4)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)

    except (click.ClickException, click.Abort):
        raise

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        shutdown_logging()


def with_project(func: Callable[..., None]) -> Callable[..., None]:
    """
    Decorator for commands that work on the project folder.

    The decorated function receives the loaded Project as first argument
    followed by the command's own parameters.
    """
    @functools.wraps(func)
    def wrapper(options: dict, *args: Any, **kwargs: Any) -> None:
        _run(options, func, *args, **kwargs)

    return click.pass_obj(wrapper)


def _confirm(message: str, yes: bool) -> bool:
    if yes or click.confirm(message, default=False):
        return True
    click.echo("Aborted")
    return False


def _get_video(project: Project, video_id: str) -> Video:
    video = project.catalog.get(video_id)
    if video is None:
        raise UserError(f"Unknown video \"{video_id}\"", details={"video_id": video_id})
    return video


# =============================================================================
# Output
# =============================================================================

def _print_status(project: Project) -> None:
    playlists = project.playlists

    if len(playlists) == 0:
        click.echo("No playlists")
    for index, playlist in enumerate(playlists, start=1):
        click.echo(f"{index}. {playlist.label} ({playlist.size} videos)")
        if playlist.url:
            click.echo(f"   {playlist.url}")

    click.echo()
    click.echo(f"Videos:   {len(project.catalog)}")
    click.echo(f"Orphans:  {len(project.orphans())}")
    click.echo(f"Missing:  {len(project.catalog.missing())}")


def _print_video_line(number: int, video: Video) -> None:
    marker = " (Missing)" if video.is_missing else ""
    click.echo(f"{number:>4}. {video.label} [{video.id}]{marker}")


def _print_playlist(playlist: Playlist) -> None:
    click.echo(playlist.label)
    if playlist.url:
        click.echo(playlist.url)

    for position in range(len(playlist.videos) + 1):
        text = playlist.labels.get(position)
        if text is not None:
            click.echo()
            for line in text.split("\n"):
                click.echo(f"      > {line}".rstrip())
        if position < len(playlist.videos):
            _print_video_line(position + 1, playlist.videos[position])


def _print_video(project: Project, video: Video) -> None:
    click.echo(f"ID:           {video.id}")
    click.echo(f"Label:        {video.label}")
    click.echo(f"URL:          {video.url}")
    click.echo(f"Channel:      {video.channel_name or '-'} ({video.channel_url or 'no channel'})")
    click.echo(f"Published:    {video.published_at or '-'}")
    click.echo(f"File:         {video.file or '(Missing)'}")
    click.echo(f"Captions:     {', '.join(video.captions) if video.captions else '-'}")
    click.echo(f"Thumbnail:    {'yes' if video.thumbnail else 'no'}")

    playlists = project.playlists.playlists_containing(video)
    labels = ", ".join(playlist.label for playlist in playlists)
    click.echo(f"Playlists:    {labels or '(orphan)'}")

    if video.description:
        click.echo()
        click.echo(video.description)


# =============================================================================
# Main group
# =============================================================================

@click.group(invoke_without_command=True)
@click.option(
    "--project", "project_path",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    envvar="TUBE_ARCHIVE_PROJECT",
    show_default=True,
    metavar="<path>",
    help="Archive folder"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show debug messages"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(ctx: click.Context, project_path: Path, verbose: bool, version: bool) -> None:
    """
    tube-archive: Keep a local archive of YouTube playlists.

    Playlists are plain text files next to a videos.json catalog; remote
    playlists are merged in without touching local edits.

    \b
    BASIC USAGE:
        tube-archive playlist add "https://www.youtube.com/playlist?list=..."
        tube-archive fetch                   # Merge remote playlists
        tube-archive pull                    # Download missing media
        tube-archive status
    """
    if version:
        click.echo(f"tube-archive {__version__}")
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)

    ctx.ensure_object(dict)
    ctx.obj["project"] = project_path.expanduser().resolve()
    ctx.obj["verbose"] = verbose


@cli.command()
@with_project
def status(project: Project) -> None:
    """Show playlists, orphan count and missing media count."""
    _print_status(project)


@cli.command()
@click.argument("index", type=int)
@with_project
def view(project: Project, index: int) -> None:
    """List the videos of playlist INDEX."""
    _print_playlist(project.playlists.get_by_index(index))


@cli.command()
@with_project
def missing(project: Project) -> None:
    """List videos whose media has not been downloaded."""
    videos = project.catalog.missing()
    for number, video in enumerate(videos, start=1):
        _print_video_line(number, video)
    click.echo(f"{len(videos)} missing video(s)")


@cli.command()
@with_project
def flush(project: Project) -> None:
    """Rewrite videos.json and every playlist file in normalized form."""
    project.save()
    logger.info("Archive files rewritten")


# =============================================================================
# Playlists
# =============================================================================

@cli.group()
def playlist() -> None:
    """Create, rename and edit playlists."""


@playlist.command("add")
@click.argument("url_or_id")
@click.option("--label", default=None, help="Playlist label (default: \"Playlist N\")")
@with_project
def playlist_add(project: Project, url_or_id: str, label: Optional[str]) -> None:
    """Track the YouTube playlist URL_OR_ID."""
    source_id = extract_playlist_id(url_or_id)
    registry = project.playlists

    existing = next((p for p in registry if p.source_id == source_id), None)
    if existing is not None:
        raise UserError(
            f"Playlist {source_id} is already tracked as \"{existing.label}\"",
            details={"source_id": source_id}
        )

    if label is None:
        label = f"Playlist {len(registry) + 1}"

    added = registry.add_playlist(label, source_id=source_id)
    registry.save()
    logger.info(f"Added playlist \"{added.label}\" ({source_id}), run fetch to download its videos")


@playlist.command("add-local")
@click.argument("label")
@with_project
def playlist_add_local(project: Project, label: str) -> None:
    """Create a playlist LABEL with no remote source."""
    added = project.playlists.add_playlist(label)
    project.playlists.save()
    logger.info(f"Added local playlist \"{added.label}\"")


@playlist.command("set-url")
@click.argument("index", type=int)
@click.argument("url_or_id")
@with_project
def playlist_set_url(project: Project, index: int, url_or_id: str) -> None:
    """Set the remote source of playlist INDEX."""
    target = project.playlists.get_by_index(index)
    target.source_id = extract_playlist_id(url_or_id)
    project.playlists.save()
    logger.info(f"\"{target.label}\" now follows {target.url}")


@playlist.command("rename")
@click.argument("index", type=int)
@click.argument("label")
@with_project
def playlist_rename(project: Project, index: int, label: str) -> None:
    """Rename playlist INDEX to LABEL."""
    target = project.playlists.get_by_index(index)
    old_label = target.label
    project.playlists.rename_playlist(target, label)
    project.playlists.save()
    logger.info(f"Renamed \"{old_label}\" to \"{target.label}\"")


@playlist.command("delete")
@click.argument("index", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@with_project
def playlist_delete(project: Project, index: int, yes: bool) -> None:
    """Delete playlist INDEX. Its videos stay in the catalog."""
    target = project.playlists.get_by_index(index)
    if not _confirm(f"Delete playlist \"{target.label}\" ({target.size} videos)?", yes):
        return

    project.playlists.delete_playlist(target)
    project.playlists.save()
    logger.info(f"Deleted playlist \"{target.label}\"")

    orphans = project.orphans()
    if orphans:
        logger.info(f"{len(orphans)} orphan video(s), see `tube-archive orphans`")


@playlist.command("insert")
@click.argument("index", type=int)
@click.argument("video_id")
@click.option("--at", "at", type=int, default=None, help="1-based position")
@click.option("--first", is_flag=True, help="Insert at the top")
@click.option("--after", "after", default=None, metavar="<video-id>", help="Insert after this video")
@with_project
def playlist_insert(
    project: Project,
    index: int,
    video_id: str,
    at: Optional[int],
    first: bool,
    after: Optional[str]
) -> None:
    """Add catalog video VIDEO_ID to playlist INDEX (appended by default)."""
    if sum([at is not None, first, after is not None]) > 1:
        raise click.UsageError("Only one of --at, --first and --after can be used")

    target = project.playlists.get_by_index(index)
    video = _get_video(project, video_id)
    if video.id in target:
        raise UserError(f"\"{video.label}\" is already in \"{target.label}\"")

    if first:
        position = 0
    elif after is not None:
        reference = target.index_of(after)
        if reference == -1:
            raise UserError(f"Video \"{after}\" is not in \"{target.label}\"")
        position = reference + 1
    elif at is not None:
        position = at - 1
    else:
        position = len(target.videos)

    project.playlists.insert_video(target, video, position)
    project.playlists.save()
    logger.info(f"Inserted \"{video.label}\" at {position + 1} in \"{target.label}\"")


@playlist.command("remove")
@click.argument("index", type=int)
@click.argument("video_id")
@with_project
def playlist_remove(project: Project, index: int, video_id: str) -> None:
    """Remove VIDEO_ID from playlist INDEX."""
    target = project.playlists.get_by_index(index)
    video = _get_video(project, video_id)
    if not project.playlists.remove_video(target, video):
        raise UserError(f"\"{video.label}\" is not in \"{target.label}\"")

    project.playlists.save()
    logger.info(f"Removed \"{video.label}\" from \"{target.label}\"")
    if project.playlists.is_orphan(video):
        logger.info(f"\"{video.label}\" is now an orphan")


# =============================================================================
# Orphans
# =============================================================================

def _list_orphans(project: Project) -> None:
    orphans = project.orphans()
    for number, video in enumerate(orphans, start=1):
        _print_video_line(number, video)
    click.echo(f"{len(orphans)} orphan video(s)")


@cli.group(invoke_without_command=True)
@click.pass_context
def orphans(ctx: click.Context) -> None:
    """List videos that are in no playlist."""
    if ctx.invoked_subcommand is None:
        _run(ctx.obj, _list_orphans)


@orphans.command("delete")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@with_project
def orphans_delete(project: Project, yes: bool) -> None:
    """Delete every orphan video and its files."""
    count = len(project.orphans())
    if count == 0:
        logger.info("No orphan videos")
        return
    if not _confirm(f"Delete {count} orphan video(s) and their files?", yes):
        return

    deleted = project.delete_orphans()
    project.save_catalog()
    logger.info(f"Deleted {len(deleted)} orphan video(s)")


# =============================================================================
# Sync
# =============================================================================

@cli.command()
@with_project
def fetch(project: Project) -> None:
    """Merge every playlist that has a source with its YouTube playlist."""
    client = YouTubeClient(project.api_key)
    fetch_playlists(
        project.catalog,
        project.playlists,
        client,
        playlist_workers=project.config.download.playlist_workers,
        video_workers=project.config.download.video_workers,
    )
    project.save()
    _print_status(project)


def _pull_media(project: Project) -> None:
    downloader = Downloader(project.files, project.config.download)
    try:
        downloader.pull_missing(list(project.catalog))
    finally:
        project.save_catalog()


@cli.group(invoke_without_command=True)
@click.pass_context
def pull(ctx: click.Context) -> None:
    """Download missing media and captions with yt-dlp."""
    if ctx.invoked_subcommand is None:
        _run(ctx.obj, _pull_media)


@pull.command("captions")
@with_project
def pull_captions(project: Project) -> None:
    """Download captions for videos that have none."""
    downloader = Downloader(project.files, project.config.download)
    try:
        downloader.pull_missing_captions(list(project.catalog))
    finally:
        project.save_catalog()


@cli.group()
def legacy() -> None:
    """Import media from a folder of earlier yt-dlp downloads."""


@legacy.command("pull")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@with_project
def legacy_pull_command(project: Project, path: Path) -> None:
    """Copy media and captions from PATH for videos missing them."""
    try:
        legacy_pull(project.catalog, project.files, path, project.config.download.video_workers)
    finally:
        project.save_catalog()


@legacy.command("fetch")
@click.argument("index", type=int)
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@with_project
def legacy_fetch_command(project: Project, index: int, path: Path) -> None:
    """Import every video in PATH and append it to playlist INDEX."""
    target = project.playlists.get_by_index(index)
    legacy_fetch(
        project.catalog,
        project.playlists,
        target,
        project.files,
        path,
        project.config.download.video_workers,
    )
    project.save()


@cli.group()
def wipe() -> None:
    """Delete downloaded files."""


@wipe.command("videos")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@with_project
def wipe_videos(project: Project, yes: bool) -> None:
    """Delete every media and caption file of the archive."""
    if not _confirm("Delete all downloaded media and captions?", yes):
        return

    project.files.wipe_all()
    for video in project.catalog:
        video.file = None
        video.captions = None
    project.save_catalog()
    logger.info("All media files deleted")


# =============================================================================
# Videos
# =============================================================================

def video_properties(func: Callable[..., None]) -> Callable[..., None]:
    """Options shared by `video add` and `video update`."""
    options = [
        click.option("--label", default=None, help="Title"),
        click.option("--description", default=None, help="Description"),
        click.option("--published-at", default=None, help="Publication date (any common format)"),
        click.option("--channel", default=None, help="Channel ID"),
        click.option("--channel-name", default=None, help="Channel display name"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _apply_properties(video: Video, properties: dict[str, Optional[str]]) -> None:
    if properties["published_at"] is not None:
        video.published_at = normalize_timestamp(properties["published_at"])
    for field in ("label", "description", "channel", "channel_name"):
        value = properties[field]
        if value is not None:
            setattr(video, field, value)
    if not video.label.strip():
        raise UserError("Video label must not be empty")


@cli.group()
def video() -> None:
    """Show and edit catalog videos."""


@video.command("show")
@click.argument("video_id")
@with_project
def video_show(project: Project, video_id: str) -> None:
    """Show the catalog record of VIDEO_ID."""
    _print_video(project, _get_video(project, video_id))


@video.command("add")
@click.argument("video_id")
@video_properties
@with_project
def video_add(project: Project, video_id: str, **properties: Optional[str]) -> None:
    """Add VIDEO_ID to the catalog by hand (label defaults to the ID)."""
    validate_video_id(video_id)
    if video_id in project.catalog:
        raise UserError(f"Video \"{video_id}\" already exists")

    new_video = Video(id=video_id, label=video_id)
    _apply_properties(new_video, properties)
    project.catalog.add(new_video)
    project.save_catalog()
    logger.info(f"Added \"{new_video.label}\", it is an orphan until inserted in a playlist")


@video.command("update")
@click.argument("video_id")
@video_properties
@with_project
def video_update(project: Project, video_id: str, **properties: Optional[str]) -> None:
    """Change the metadata of VIDEO_ID."""
    target = _get_video(project, video_id)
    _apply_properties(target, properties)
    project.save_catalog()
    logger.info(f"Updated \"{target.label}\"")


@video.command("fetch")
@click.argument("video_id")
@with_project
def video_fetch(project: Project, video_id: str) -> None:
    """Refresh the metadata and thumbnail of VIDEO_ID from YouTube."""
    client = YouTubeClient(project.api_key)
    remote = client.video(video_id)
    if remote is None:
        raise UserError(f"Video \"{video_id}\" not found on YouTube")

    target = project.catalog.get(video_id)
    if target is None:
        target = remote.to_video()
        project.catalog.add(target)
        logger.info(f"Added \"{target.label}\"")
    else:
        remote.apply_to(target)
        logger.info(f"Refreshed \"{target.label}\"")

    attach_thumbnail(target, remote)
    project.save_catalog()


@video.command("delete")
@click.argument("video_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@with_project
def video_delete(project: Project, video_id: str, yes: bool) -> None:
    """Delete VIDEO_ID, its files and its playlist entries."""
    target = _get_video(project, video_id)
    if not _confirm(f"Delete \"{target.label}\" and its files?", yes):
        return

    project.delete_video(target)
    project.save()
    logger.info(f"Deleted \"{target.label}\"")


@video.group("captions")
def video_captions() -> None:
    """Import or delete caption files of a video."""


@video_captions.command("import")
@click.argument("video_id")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--language", default=None, help="Language code (default: from the file name)")
@with_project
def video_captions_import(project: Project, video_id: str, file: Path, language: Optional[str]) -> None:
    """Import caption FILE (.vtt or .srt) for VIDEO_ID."""
    target = _get_video(project, video_id)
    suffix = file.suffix.lower()
    if suffix not in (".vtt", ".srt"):
        raise UserError(f"Unsupported caption format \"{file.name}\", expected .vtt or .srt")

    if suffix == ".vtt" and language is None:
        imported = project.files.import_captions_file(target, file)
    else:
        language = language or get_captions_language(file.name)
        if not language:
            raise UserError(f"Cannot tell the language of \"{file.name}\", use --language")
        content = file.read_text(encoding="utf-8")
        if suffix == ".srt":
            content = convert_srt_to_vtt(content)
        imported = project.files.import_captions_raw(target, language, content)

    project.save_catalog()
    logger.info(f"Imported \"{imported.name}\"")


@video_captions.command("delete")
@click.argument("video_id")
@click.argument("suffix")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@with_project
def video_captions_delete(project: Project, video_id: str, suffix: str, yes: bool) -> None:
    """Delete the caption file of VIDEO_ID ending with SUFFIX (e.g. .en.vtt)."""
    target = _get_video(project, video_id)
    matches = [caption for caption in target.captions or [] if caption.endswith(suffix)]
    if not matches:
        raise UserError(f"\"{target.label}\" has no captions ending with \"{suffix}\"")
    if not _confirm(f"Delete {', '.join(matches)}?", yes):
        return

    for caption in matches:
        project.files.delete_file(caption)
        target.captions.remove(caption)
    if not target.captions:
        target.captions = None

    project.save_catalog()
    logger.info(f"Deleted {len(matches)} caption file(s)")


# =============================================================================
# Tools
# =============================================================================

def _srt2vtt(source: Path, destination: Optional[Path]) -> None:
    target = destination or source.with_suffix(".vtt")
    try:
        content = source.read_text(encoding="utf-8")
        target.write_text(convert_srt_to_vtt(content), encoding="utf-8")
    except OSError as e:
        raise UserError(f"Cannot convert \"{source}\": {e}") from e
    logger.info(f"Wrote \"{target}\"")


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("destination", type=click.Path(dir_okay=False, path_type=Path), required=False)
@click.pass_obj
def srt2vtt(options: dict, source: Path, destination: Optional[Path]) -> None:
    """Convert a SubRip SOURCE file to WebVTT (default: same name, .vtt)."""
    _run(options, _srt2vtt, source, destination, needs_project=False)


@cli.command()
@click.option("--host", default=None, help="Bind address (default: from config.yaml)")
@click.option("--port", type=int, default=None, help="Port (default: from config.yaml)")
@with_project
def serve(project: Project, host: Optional[str], port: Optional[int]) -> None:
    """Start the read-only web API."""
    host = host or project.config.server.host
    port = port or project.config.server.port

    app = create_app(project)
    logger.info(f"Serving {project.path} on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_config=None)


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `tube-archive` from the command
    line. It invokes the Click CLI group.
    """
    cli(prog_name="tube-archive")


if __name__ == "__main__":
    main()
