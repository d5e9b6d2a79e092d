"""Tests for configuration loading"""

import pytest

from tube_archive.core.config import (
    API_KEY_ENV_VAR,
    Config,
    DownloadConfig,
    load_config,
    resolve_api_key,
)
from tube_archive.core.exceptions import ConfigError, UserError


class TestLoadConfig:

    def test_missing_file_gives_defaults(self, project_dir):
        config = load_config(project_dir)
        assert config == Config()
        assert config.download.playlist_workers == 4
        assert config.download.video_workers == 10
        assert config.download.cookies_from_browser == "chrome"
        assert config.server.port == 8080

    def test_empty_file_gives_defaults(self, project_dir):
        (project_dir / "config.yaml").write_text("", encoding="utf-8")
        assert load_config(project_dir) == Config()

    def test_values(self, project_dir):
        (project_dir / "config.yaml").write_text(
            "youtube:\n"
            "  api_key: ' abc '\n"
            "download:\n"
            "  video_workers: 3\n"
            "  cookies_from_browser: null\n"
            "  format: 'bestvideo+bestaudio'\n"
            "server:\n"
            "  port: 9000\n",
            encoding="utf-8"
        )
        config = load_config(project_dir)
        assert config.youtube.api_key == "abc"
        assert config.download == DownloadConfig(
            playlist_workers=4, video_workers=3, cookies_from_browser=None, format="bestvideo+bestaudio"
        )
        assert config.server.host == "127.0.0.1"
        assert config.server.port == 9000

    @pytest.mark.parametrize("content", [
        "download: [1, 2]\n",
        "download:\n  video_workers: 0\n",
        "download:\n  video_workers: true\n",
        "server:\n  port: 70000\n",
        "youtube:\n  api_key: ''\n",
        "- just\n- a list\n",
        "key: [unclosed\n",
    ])
    def test_invalid(self, project_dir, content):
        (project_dir / "config.yaml").write_text(content, encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(project_dir)


class TestResolveApiKey:

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        # setenv first so the value loaded from .env is undone on teardown
        monkeypatch.setenv(API_KEY_ENV_VAR, "")
        monkeypatch.delenv(API_KEY_ENV_VAR)

    def test_config_wins(self, project_dir, monkeypatch):
        (project_dir / "config.yaml").write_text("youtube:\n  api_key: fromconfig\n", encoding="utf-8")
        monkeypatch.setenv(API_KEY_ENV_VAR, "fromenv")
        assert resolve_api_key(project_dir, load_config(project_dir)) == "fromconfig"

    def test_environment(self, project_dir, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV_VAR, "fromenv")
        (project_dir / "token.txt").write_text("fromtoken", encoding="utf-8")
        assert resolve_api_key(project_dir, Config()) == "fromenv"

    def test_dotenv_file(self, project_dir):
        (project_dir / ".env").write_text(f"{API_KEY_ENV_VAR}=fromdotenv\n", encoding="utf-8")
        assert resolve_api_key(project_dir, Config()) == "fromdotenv"

    def test_token_file(self, project_dir):
        (project_dir / "token.txt").write_text("  fromtoken\n", encoding="utf-8")
        assert resolve_api_key(project_dir, Config()) == "fromtoken"

    def test_missing_key(self, project_dir):
        with pytest.raises(UserError):
            resolve_api_key(project_dir, Config())
