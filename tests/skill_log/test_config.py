"""Tests for configuration management."""

from pathlib import Path

import pytest

from skill_log.config import Settings


@pytest.fixture
def clean_env(monkeypatch):
    """Remove settings-related environment variables."""
    for name in ("DATA_ROOT", "DATABASE_URL", "DRAFT_FILENAME", "LOG_LEVEL", "MEMO_TITLE"):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Tests for application settings."""

    def test_settings_defaults(self, clean_env):
        """Test settings with default values."""
        settings = Settings()
        expected_root = str(Path("~/Documents/skill_log").expanduser().resolve())
        assert settings.data_root == expected_root
        assert settings.database_url == f"sqlite:///{expected_root}/skill_log.db"
        assert settings.export_filename == "skillData.json"
        assert settings.memo_title == "ChatMemo"

    def test_settings_from_env(self, clean_env, monkeypatch, tmp_path):
        """Test loading settings from environment variables."""
        monkeypatch.setenv("DATA_ROOT", str(tmp_path))
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings()
        assert settings.data_root == str(tmp_path.resolve())
        assert settings.database_url == f"sqlite:///{tmp_path.resolve()}/skill_log.db"
        assert settings.log_level == "DEBUG"

    def test_explicit_database_url_wins(self, clean_env, monkeypatch):
        """Test that an explicit DATABASE_URL is not overwritten."""
        monkeypatch.setenv("DATABASE_URL", "sqlite:///./test.db")
        settings = Settings()
        assert settings.database_url == "sqlite:///./test.db"

    def test_draft_path_under_data_root(self, clean_env, tmp_path):
        """Test the draft file lives in the data root."""
        settings = Settings(data_root=str(tmp_path), draft_filename="draft.json")
        assert settings.draft_path == tmp_path.resolve() / "draft.json"
