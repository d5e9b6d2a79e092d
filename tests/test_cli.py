"""CLI smoke tests"""

import json

import pytest
from click.testing import CliRunner

from tube_archive import __version__
from tube_archive.archive.codec import save_catalog
from tube_archive.cli import cli
from tube_archive.core.exceptions import YouTubeApiError


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def archive(project_dir, catalog):
    """Project folder with the sample catalog and no playlists"""
    save_catalog(catalog, project_dir / "videos.json")
    return project_dir


@pytest.fixture
def invoke(runner, archive):
    def run(*args, input=None):
        return runner.invoke(cli, ["--project", str(archive), *args], input=input)
    return run


def read_catalog(archive):
    return json.loads((archive / "videos.json").read_text(encoding="utf-8"))["videos"]


class TestBasics:

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_project_folder(self, runner, tmp_path):
        result = runner.invoke(cli, ["--project", str(tmp_path / "nope"), "status"])
        assert result.exit_code == 1

    def test_status(self, invoke):
        result = invoke("status")
        assert result.exit_code == 0
        assert "No playlists" in result.output
        assert "Orphans:  5" in result.output
        assert "Missing:  5" in result.output

    def test_broken_catalog_exit_code(self, invoke, archive):
        (archive / "videos.json").write_text("{", encoding="utf-8")
        assert invoke("status").exit_code == 2

    def test_flush(self, invoke, archive):
        assert invoke("playlist", "add-local", "Local").exit_code == 0
        before = (archive / "Local.ini").read_bytes()
        assert invoke("flush").exit_code == 0
        assert (archive / "Local.ini").read_bytes() == before


class TestPlaylistCommands:

    def test_add_from_url(self, invoke, archive):
        result = invoke("playlist", "add", "https://www.youtube.com/playlist?list=PLabc")
        assert result.exit_code == 0
        assert "url = PLabc" in (archive / "Playlist 1.ini").read_text(encoding="utf-8")

        # Same source twice is rejected
        assert invoke("playlist", "add", "PLabc", "--label", "Other").exit_code == 1

    def test_duplicate_label(self, invoke):
        assert invoke("playlist", "add-local", "Local").exit_code == 0
        assert invoke("playlist", "add-local", "Local").exit_code == 1

    def test_insert_view_remove(self, invoke):
        invoke("playlist", "add-local", "Local")
        assert invoke("playlist", "insert", "1", "vidA").exit_code == 0
        assert invoke("playlist", "insert", "1", "vidB", "--first").exit_code == 0
        assert invoke("playlist", "insert", "1", "vidC", "--after", "vidB").exit_code == 0

        result = invoke("view", "1")
        assert result.exit_code == 0
        lines = [line.strip() for line in result.output.splitlines() if line.strip()]
        assert lines[0] == "Local"
        assert lines[1:4] == [
            "1. Video B [vidB] (Missing)",
            "2. Video C [vidC] (Missing)",
            "3. Video A [vidA] (Missing)",
        ]

        assert invoke("playlist", "remove", "1", "vidC").exit_code == 0
        assert invoke("playlist", "remove", "1", "vidC").exit_code == 1

    def test_insert_errors(self, invoke):
        invoke("playlist", "add-local", "Local")
        assert invoke("playlist", "insert", "1", "unknown").exit_code == 1
        assert invoke("playlist", "insert", "2", "vidA").exit_code == 1
        assert invoke("playlist", "insert", "1", "vidA", "--first", "--at", "1").exit_code == 2
        invoke("playlist", "insert", "1", "vidA")
        assert invoke("playlist", "insert", "1", "vidA").exit_code == 1

    def test_rename_and_delete(self, invoke, archive):
        invoke("playlist", "add-local", "Local")
        assert invoke("playlist", "rename", "1", "Renamed").exit_code == 0
        assert not (archive / "Local.ini").exists()
        assert (archive / "Renamed.ini").exists()

        result = invoke("playlist", "delete", "1", input="n\n")
        assert result.exit_code == 0
        assert (archive / "Renamed.ini").exists()

        assert invoke("playlist", "delete", "1", "--yes").exit_code == 0
        assert not (archive / "Renamed.ini").exists()


class TestOrphanCommands:

    def test_list_and_delete(self, invoke, archive):
        invoke("playlist", "add-local", "Local")
        invoke("playlist", "insert", "1", "vidA")

        result = invoke("orphans")
        assert result.exit_code == 0
        assert "4 orphan video(s)" in result.output

        assert invoke("orphans", "delete", "--yes").exit_code == 0
        assert list(read_catalog(archive)) == ["vidA"]


class TestVideoCommands:

    def test_add_and_update(self, invoke, archive):
        result = invoke("video", "add", "newvid", "--label", "Manual", "--published-at", "2020-05-01")
        assert result.exit_code == 0
        record = read_catalog(archive)["newvid"]
        assert record["label"] == "Manual"
        assert record["publishedAt"] == "2020-05-01T00:00:00.000Z"

        assert invoke("video", "add", "newvid").exit_code == 1
        assert invoke("video", "update", "newvid", "--published-at", "someday").exit_code == 1
        assert invoke("video", "update", "newvid", "--channel-name", "Me").exit_code == 0
        assert read_catalog(archive)["newvid"]["channelName"] == "Me"

    def test_add_rejects_ids_that_cannot_be_stored(self, invoke, archive):
        assert invoke("video", "add", "my clip").exit_code == 1
        assert invoke("video", "add", "").exit_code == 1
        assert "my clip" not in read_catalog(archive)
        assert invoke("status").exit_code == 0

    def test_show(self, invoke):
        result = invoke("video", "show", "vidA")
        assert result.exit_code == 0
        assert "Video A" in result.output
        assert "(orphan)" in result.output
        assert invoke("video", "show", "nope").exit_code == 1

    def test_captions_import_and_delete(self, invoke, archive, tmp_path):
        srt = tmp_path / "talk.de.srt"
        srt.write_text("1\n00:00:01,000 --> 00:00:02,000\nHallo\n", encoding="utf-8")

        assert invoke("video", "captions", "import", "vidA", str(srt)).exit_code == 0
        captions = archive / "videos" / "Video A [vidA].de.vtt"
        assert captions.read_text(encoding="utf-8").startswith("WEBVTT")
        assert read_catalog(archive)["vidA"]["captions"] == ["Video A [vidA].de.vtt"]

        assert invoke("video", "captions", "delete", "vidA", ".de.vtt", "--yes").exit_code == 0
        assert not captions.exists()
        assert read_catalog(archive)["vidA"]["captions"] is None

    def test_delete(self, invoke, archive):
        invoke("playlist", "add-local", "Local")
        invoke("playlist", "insert", "1", "vidA")
        assert invoke("video", "delete", "vidA", "--yes").exit_code == 0
        assert "vidA" not in read_catalog(archive)
        assert "vidA" not in (archive / "Local.ini").read_text(encoding="utf-8")


class TestFetchCommand:

    @pytest.fixture(autouse=True)
    def api_key(self, archive):
        (archive / "token.txt").write_text("KEY", encoding="utf-8")

    def test_fetch(self, invoke, archive, monkeypatch, make_remote, make_client):
        fake = make_client(playlists={
            "PLabc": [make_remote("vidA", thumbnails={}), make_remote("fresh", title="Fresh", thumbnails={})],
        })
        monkeypatch.setattr("tube_archive.cli.YouTubeClient", lambda api_key: fake)
        invoke("playlist", "add", "PLabc", "--label", "Music")

        result = invoke("fetch")

        assert result.exit_code == 0, result.output
        assert "1. Music (2 videos)" in result.output
        assert read_catalog(archive)["fresh"]["label"] == "Fresh"
        content = (archive / "Music.ini").read_text(encoding="utf-8")
        assert content.index("vidA") < content.index("fresh")

    def test_fetch_failure_saves_nothing(self, invoke, archive, monkeypatch, make_remote, make_client):
        fake = make_client(playlists={
            "PLabc": [make_remote("fresh", thumbnails={})],
            "PLbad": YouTubeApiError("forbidden", status_code=403),
        })
        monkeypatch.setattr("tube_archive.cli.YouTubeClient", lambda api_key: fake)
        invoke("playlist", "add", "PLabc", "--label", "Music")
        invoke("playlist", "add", "PLbad", "--label", "Bad")
        before = (archive / "videos.json").read_bytes()

        result = invoke("fetch")

        assert result.exit_code == 3
        assert (archive / "videos.json").read_bytes() == before
        assert "fresh" not in (archive / "Music.ini").read_text(encoding="utf-8")

    def test_missing_api_key(self, invoke, archive, monkeypatch):
        monkeypatch.setenv("YOUTUBE_API_KEY", "")
        (archive / "token.txt").unlink()
        invoke("playlist", "add", "PLabc")
        assert invoke("fetch").exit_code == 1


class TestTools:

    def test_srt2vtt(self, runner, tmp_path):
        source = tmp_path / "talk.srt"
        source.write_text("1\n00:00:01,000 --> 00:00:02,000\nHi\n", encoding="utf-8")

        result = runner.invoke(cli, ["srt2vtt", str(source)])

        assert result.exit_code == 0
        assert (tmp_path / "talk.vtt").read_text(encoding="utf-8").startswith("WEBVTT\n\n00:00:01.000")

    def test_wipe_videos(self, invoke, archive, tmp_path):
        srt = tmp_path / "talk.en.srt"
        srt.write_text("1\n00:00:01,000 --> 00:00:02,000\nHi\n", encoding="utf-8")
        invoke("video", "captions", "import", "vidA", str(srt))

        assert invoke("wipe", "videos", "--yes").exit_code == 0
        assert list((archive / "videos").iterdir()) == []
        assert read_catalog(archive)["vidA"]["captions"] is None
