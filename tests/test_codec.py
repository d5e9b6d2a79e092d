"""Tests for videos.json and playlist file formats"""

import json

import pytest

from tube_archive.archive.catalog import Catalog
from tube_archive.archive.codec import (
    dump_catalog,
    format_playlist,
    load_catalog,
    parse_catalog,
    parse_playlist,
    save_catalog,
)
from tube_archive.archive.labels import shift_for_remove
from tube_archive.archive.models import Playlist, Video
from tube_archive.core.exceptions import CatalogError, PlaylistFileError


class TestCatalogFormat:
    """Test videos.json"""

    def test_round_trip(self, catalog):
        catalog.get("vidA").file = "Video A [vidA].mp4"
        catalog.get("vidA").captions = ["Video A [vidA].en.vtt"]
        restored = parse_catalog(dump_catalog(catalog))
        assert sorted(v.id for v in restored) == sorted(v.id for v in catalog)
        assert restored.get("vidA") == catalog.get("vidA")

    def test_dump_is_byte_stable(self, catalog):
        first = dump_catalog(catalog)
        assert dump_catalog(parse_catalog(first)) == first

    def test_dump_sorts_ids_and_keeps_unicode(self):
        catalog = Catalog([Video(id="b", label="Éclair"), Video(id="a", label="Ångström")])
        content = dump_catalog(catalog)
        assert content.index('"a"') < content.index('"b"')
        assert "Éclair" in content
        assert content.endswith("}\n")

    def test_legacy_list_layout(self):
        content = json.dumps({
            "videos": [
                {"id": "abc", "label": "Title", "channel": "Name", "channelId": "UC1"},
            ]
        })
        video = parse_catalog(content).get("abc")
        assert video.channel == "UC1"
        assert video.channel_name == "Name"

    @pytest.mark.parametrize("content", [
        "{not json",
        "[]",
        json.dumps({"videos": 5}),
        json.dumps({"videos": [{"label": "no id"}]}),
        json.dumps({"videos": [{"id": "a", "label": "x"}, {"id": "a", "label": "y"}]}),
    ])
    def test_invalid_catalogs(self, content):
        with pytest.raises(CatalogError):
            parse_catalog(content)

    def test_load_missing_file(self, tmp_path):
        assert load_catalog(tmp_path / "videos.json") is None

    def test_save_then_load(self, tmp_path, catalog):
        path = tmp_path / "videos.json"
        save_catalog(catalog, path)
        assert len(load_catalog(path)) == len(catalog)


class TestPlaylistFormat:
    """Test <label>.ini"""

    def test_format(self, catalog):
        playlist = Playlist(
            id="p1",
            label="Music",
            source_id="PLmusic",
            videos=[catalog.get("vidA"), catalog.get("vidB"), catalog.get("vidC")],
            labels={0: "New", 2: "Older\nstuff", 3: "End"},
        )
        assert format_playlist(playlist) == (
            "id = p1\n"
            "url = PLmusic\n"
            "\n"
            "> New\n"
            "vidA Video A\n"
            "vidB Video B\n"
            "\n"
            "> Older\n"
            "> stuff\n"
            "vidC Video C\n"
            "\n"
            "> End\n"
        )

    def test_local_playlist_has_no_url_line(self, catalog):
        playlist = Playlist(id="p1", label="Local", videos=[catalog.get("vidA")])
        assert format_playlist(playlist) == "id = p1\n\nvidA Video A\n"

    def test_round_trip_is_byte_stable(self, catalog):
        # Removing vidB makes the "Solo" and "Band" blocks collide
        merged = shift_for_remove({1: "Solo", 2: "Band"}, 1)
        playlist = Playlist(
            id="p1",
            label="Music",
            source_id="PLmusic",
            videos=[catalog.get("vidA"), catalog.get("vidC"), catalog.get("vidD")],
            labels={0: "Intro\nPart one", **merged, 3: "Trailing"},
        )
        assert playlist.labels == {0: "Intro\nPart one", 1: "Solo\nBand", 3: "Trailing"}
        content = format_playlist(playlist)
        parsed = parse_playlist(content, "Music", catalog)
        assert parsed == playlist
        assert format_playlist(parsed) == content

    def test_parse_hand_edited_file(self, catalog):
        content = (
            "  url = PLx  \n"
            "\n"
            "vidB   whatever the title was\n"
            ">   Band  \n"
            "\n"
            "\n"
            "vidA\n"
        )
        playlist = parse_playlist(content, "Edited", catalog)
        assert playlist.source_id == "PLx"
        assert [v.id for v in playlist.videos] == ["vidB", "vidA"]
        assert playlist.labels == {1: "Band"}
        assert playlist.id

    def test_unknown_video_reports_file_and_line(self, catalog, tmp_path):
        path = tmp_path / "Music.ini"
        with pytest.raises(PlaylistFileError) as excinfo:
            parse_playlist("id = p1\n\nvidA\nnope\n", "Music", catalog, path)
        assert excinfo.value.line == 4
        assert f"{path}:4" in str(excinfo.value)

    def test_duplicate_video_is_rejected(self, catalog):
        with pytest.raises(PlaylistFileError):
            parse_playlist("vidA\nvidB\nvidA\n", "Music", catalog)

    def test_consecutive_label_lines_are_joined_once(self, catalog):
        playlist = parse_playlist("> a\n> b\nvidA\n", "Music", catalog)
        assert playlist.labels == {0: "a\nb"}

    def test_label_lines_strip_every_marker(self, catalog):
        playlist = parse_playlist(">> Band\nvidA\n>>>   Tail  \n", "Music", catalog)
        assert playlist.labels == {0: "Band", 1: "Tail"}
