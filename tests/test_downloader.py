"""Tests for yt-dlp downloads (with a fake YoutubeDL)"""

import pytest

from tube_archive.archive.models import Video
from tube_archive.core.config import DownloadConfig
from tube_archive.core.file_manager import VideoFileManager
from tube_archive.download.downloader import Downloader


@pytest.fixture
def files(project_dir):
    return VideoFileManager(project_dir / "videos")


@pytest.fixture
def downloader(files, fake_ydl):
    return Downloader(files, DownloadConfig(video_workers=2), ydl_factory=fake_ydl)


class TestDownloader:

    def test_pull_video(self, downloader, files):
        video = Video(id="abc", label="Title")
        assert downloader.pull_video(video) is True
        assert video.file == "Title [abc].mp4"
        assert video.captions == ["Title [abc].en.vtt"]
        assert files.resolve(video.file).exists()

    def test_options(self, downloader, fake_ydl):
        downloader.pull_video(Video(id="abc", label="Title"))
        url, options = fake_ydl.calls[0]
        assert url == "https://www.youtube.com/watch?v=abc"
        assert options["writesubtitles"] is True
        assert options["subtitleslangs"] == [".*"]
        assert "skip_download" not in options
        assert "cookiesfrombrowser" not in options

    def test_retry_with_browser_cookies(self, downloader, fake_ydl):
        video = Video(id="abc", label="Title")
        fake_ydl.cookie_only.add(video.url)

        assert downloader.pull_video(video) is True
        assert len(fake_ydl.calls) == 2
        assert fake_ydl.calls[1][1]["cookiesfrombrowser"] == ("chrome",)

    def test_no_retry_without_browser(self, files, fake_ydl):
        downloader = Downloader(files, DownloadConfig(cookies_from_browser=None), ydl_factory=fake_ydl)
        video = Video(id="abc", label="Title")
        fake_ydl.cookie_only.add(video.url)

        assert downloader.pull_video(video) is False
        assert video.file is None
        assert len(fake_ydl.calls) == 1

    def test_pull_captions_only(self, downloader, fake_ydl):
        video = Video(id="abc", label="Title")
        assert downloader.pull_captions(video) is True
        assert video.file is None
        assert video.captions == ["Title [abc].en.vtt"]
        assert fake_ydl.calls[0][1]["skip_download"] is True

    def test_batch_continues_after_failure(self, downloader, fake_ydl):
        good = Video(id="good", label="Good")
        bad = Video(id="bad", label="Bad")
        done = Video(id="done", label="Done", file="Done [done].mp4")
        fake_ydl.failing.add(bad.url)

        stats = downloader.pull_missing([good, bad, done], show_progress=False)

        assert stats.total == 2
        assert stats.downloaded == 1
        assert stats.failed == 1
        assert good.file == "Good [good].mp4"
        assert bad.file is None

    def test_pull_missing_captions_skips_videos_with_captions(self, downloader, fake_ydl):
        has = Video(id="has", label="Has", captions=["Has [has].en.vtt"])
        lacks = Video(id="lacks", label="Lacks")

        stats = downloader.pull_missing_captions([has, lacks], show_progress=False)

        assert stats.total == 1
        assert [call[0] for call in fake_ydl.calls] == [lacks.url]
