"""Tests for fetch-merge of remote playlists"""

import pytest

from tube_archive.archive.reconcile import fetch_playlists, merge_remote_items
from tube_archive.core.exceptions import YouTubeApiError


def ids(playlist):
    return [video.id for video in playlist.videos]


@pytest.fixture
def music(registry, catalog):
    """Playlist "Music" holding A, B"""
    playlist = registry.add_playlist("Music", source_id="PLmusic")
    registry.append_video(playlist, catalog.get("vidA"))
    registry.append_video(playlist, catalog.get("vidB"))
    return playlist


class TestMergeRemoteItems:
    """Test the per-playlist merge"""

    def test_new_video_after_members_is_appended(self, catalog, registry, music, make_remote):
        remote = [make_remote("vidA"), make_remote("vidB"), make_remote("vidC")]
        result = merge_remote_items(catalog, registry, music, remote)
        assert ids(music) == ["vidA", "vidB", "vidC"]
        assert [video.id for video in result.added] == ["vidC"]
        assert result.created == []

    def test_new_video_goes_after_closest_preceding_member(self, catalog, registry, music, make_remote):
        remote = [make_remote("vidA"), make_remote("vidC"), make_remote("vidB")]
        merge_remote_items(catalog, registry, music, remote)
        assert ids(music) == ["vidA", "vidC", "vidB"]

    def test_local_order_is_never_changed(self, catalog, registry, music, make_remote):
        remote = [make_remote("vidB"), make_remote("vidA")]
        result = merge_remote_items(catalog, registry, music, remote)
        assert ids(music) == ["vidA", "vidB"]
        assert result.added == []

    def test_merge_is_idempotent(self, catalog, registry, music, make_remote):
        remote = [make_remote("vidX"), make_remote("vidA"), make_remote("vidY"), make_remote("vidB")]
        merge_remote_items(catalog, registry, music, remote)
        first_ids = ids(music)
        first_labels = dict(music.labels)
        catalog_size = len(catalog)

        result = merge_remote_items(catalog, registry, music, remote)
        assert ids(music) == first_ids
        assert music.labels == first_labels
        assert len(catalog) == catalog_size
        assert result.added == []
        assert result.created == []

    def test_unknown_videos_are_created_once(self, catalog, registry, music, make_remote):
        other = registry.add_playlist("Other", source_id="PLother")
        merge_remote_items(catalog, registry, music, [make_remote("vidX", title="Fresh")])
        result = merge_remote_items(catalog, registry, other, [make_remote("vidX", title="Fresh")])

        assert catalog.get("vidX").label == "Fresh"
        assert catalog.get("vidX").channel == "UCremote"
        assert result.created == []
        assert catalog.get("vidX") is other.videos[0]
        assert catalog.get("vidX") is music.videos[-1]

    def test_unavailable_items_are_skipped(self, catalog, registry, music, make_remote):
        remote = [make_remote("vidA"), make_remote("private1", available=False), make_remote("vidC")]
        result = merge_remote_items(catalog, registry, music, remote)
        assert "private1" not in catalog
        assert result.skipped == ["private1"]
        assert ids(music) == ["vidA", "vidC", "vidB"]

    def test_no_duplicate_membership(self, catalog, registry, music, make_remote):
        remote = [make_remote("vidC"), make_remote("vidC"), make_remote("vidA")]
        merge_remote_items(catalog, registry, music, remote)
        assert ids(music).count("vidC") == 1


class TestInsertionWithoutAnchor:
    """A new video with no member before it in remote order"""

    def test_no_labels_appends(self, catalog, registry, music, make_remote):
        merge_remote_items(catalog, registry, music, [make_remote("vidD"), make_remote("vidA")])
        assert ids(music) == ["vidA", "vidB", "vidD"]
        assert music.labels == {}

    def test_trailing_new_band_moves_with_appended_video(self, catalog, registry, music, make_remote):
        music.labels = {2: "New"}
        merge_remote_items(catalog, registry, music, [make_remote("vidD"), make_remote("vidA"), make_remote("vidB")])
        assert ids(music) == ["vidA", "vidB", "vidD"]
        assert music.labels == {3: "New"}

    def test_inserted_at_end_of_new_band(self, catalog, registry, music, make_remote):
        music.labels = {0: "New", 1: "Older"}
        merge_remote_items(catalog, registry, music, [make_remote("vidD")])
        assert ids(music) == ["vidA", "vidD", "vidB"]
        assert music.labels == {0: "New", 2: "Older"}

    def test_new_band_created_when_missing(self, catalog, registry, music, make_remote):
        music.labels = {0: "Favourites"}
        merge_remote_items(catalog, registry, music, [make_remote("vidD"), make_remote("vidE")])
        # vidE anchors on vidD, so only vidD starts the band
        assert ids(music) == ["vidA", "vidB", "vidD", "vidE"]
        assert music.labels == {0: "Favourites", 2: "New"}

    def test_new_band_starts_before_trailing_label(self, catalog, registry, music, make_remote):
        music.labels = {0: "Favourites", 2: "End"}
        merge_remote_items(catalog, registry, music, [make_remote("vidD")])
        assert ids(music) == ["vidA", "vidB", "vidD"]
        assert music.labels == {0: "Favourites", 2: "New", 3: "End"}


class TestFetchPlaylists:
    """Test the concurrent batch"""

    def test_fetch_merges_every_sourced_playlist(
        self, catalog, registry, music, make_remote, make_client, thumbnail_fetcher, thumbnail_uri
    ):
        local = registry.add_playlist("Local")
        other = registry.add_playlist("Other", source_id="PLother")
        client = make_client(playlists={
            "PLmusic": [make_remote("vidA"), make_remote("vidB"), make_remote("vidN")],
            "PLother": [make_remote("vidN"), make_remote("vidC")],
        })

        results = fetch_playlists(catalog, registry, client, thumbnail_fetcher=thumbnail_fetcher)

        assert sorted(client.requested) == ["PLmusic", "PLother"]
        assert len(results) == 2
        assert ids(music) == ["vidA", "vidB", "vidN"]
        assert ids(other) == ["vidN", "vidC"]
        assert local.videos == []
        # vidN is created once, so its thumbnail is fetched once
        assert thumbnail_fetcher.calls == ["https://i.ytimg.com/vidN.jpg"]
        assert catalog.get("vidN").thumbnail == thumbnail_uri

    def test_thumbnail_failure_keeps_video(self, catalog, registry, music, make_remote, make_client):
        client = make_client(playlists={"PLmusic": [make_remote("vidN")]})
        fetch_playlists(catalog, registry, client, thumbnail_fetcher=lambda url: None)
        assert catalog.get("vidN").thumbnail is None
        assert "vidN" in music

    def test_transport_error_propagates(self, catalog, registry, music, make_remote, make_client, thumbnail_fetcher):
        registry.add_playlist("Broken", source_id="PLbroken")
        client = make_client(playlists={
            "PLmusic": [make_remote("vidA")],
            "PLbroken": YouTubeApiError("quota exceeded", status_code=403),
        })
        with pytest.raises(YouTubeApiError):
            fetch_playlists(catalog, registry, client, thumbnail_fetcher=thumbnail_fetcher)

    def test_nothing_to_fetch(self, catalog, registry, make_client, thumbnail_fetcher):
        registry.add_playlist("Local")
        assert fetch_playlists(catalog, registry, make_client(), thumbnail_fetcher=thumbnail_fetcher) == []
