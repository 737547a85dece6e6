"""Tests for config.py -- defaults, env var overrides."""

from pathlib import Path

import pytest

from media_prettify.config import PrettifyConfig
from media_prettify.errors import ConfigError

# Env vars that pydantic-settings reads -- must be cleaned for default tests
_CONFIG_ENV_VARS = [
    "USE_EXTERNAL_INFO", "PRETTIFY_FILENAMES", "IGNORE_LEADING_ARTICLE",
    "LOG_LEVEL", "LOG_DIR", "LOG_ROTATION", "LOG_RETENTION", "CACHE_DB",
    "TMDB_API_KEY", "TMDB_LANGUAGE", "LOOKUP_WORKERS",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Remove prettifier env vars so defaults tests see actual defaults."""
    for var in _CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class TestDefaults:
    def test_default_values(self):
        config = PrettifyConfig(_env_file=None)
        assert config.use_external_info is True
        assert config.prettify_filenames is True
        assert config.ignore_leading_article is False
        assert config.log_level == "INFO"
        assert config.tmdb_api_key == ""
        assert config.tmdb_language == "en-US"
        assert config.lookup_workers == 2

    def test_default_paths(self):
        config = PrettifyConfig(_env_file=None)
        cache_home = Path.home() / ".cache" / "media-prettify"
        assert config.log_dir is None
        assert config.log_rotation == "10 MB"
        assert config.log_retention == "30 days"
        assert config.cache_db == cache_home / "metadata.db"


class TestEnvOverrides:
    def test_flags_from_env(self, monkeypatch):
        monkeypatch.setenv("USE_EXTERNAL_INFO", "false")
        monkeypatch.setenv("IGNORE_LEADING_ARTICLE", "true")
        config = PrettifyConfig(_env_file=None)
        assert config.use_external_info is False
        assert config.ignore_leading_article is True

    def test_paths_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CACHE_DB", str(tmp_path / "cache.db"))
        config = PrettifyConfig(_env_file=None)
        assert config.cache_db == tmp_path / "cache.db"

    def test_int_from_env(self, monkeypatch):
        monkeypatch.setenv("LOOKUP_WORKERS", "4")
        assert PrettifyConfig(_env_file=None).lookup_workers == 4

    def test_kwargs_win_over_env(self, monkeypatch):
        monkeypatch.setenv("PRETTIFY_FILENAMES", "false")
        config = PrettifyConfig(_env_file=None, prettify_filenames=True)
        assert config.prettify_filenames is True

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("TMDB_API_KEY=abc123\nTMDB_LANGUAGE=de-DE\n")
        config = PrettifyConfig(_env_file=env_file)
        assert config.tmdb_api_key == "abc123"
        assert config.tmdb_language == "de-DE"


class TestRequireApiKey:
    def test_missing_key_raises(self):
        config = PrettifyConfig(_env_file=None)
        with pytest.raises(ConfigError, match="TMDB_API_KEY"):
            config.require_tmdb_api_key()

    def test_key_returned(self, monkeypatch):
        monkeypatch.setenv("TMDB_API_KEY", "secret")
        assert PrettifyConfig(_env_file=None).require_tmdb_api_key() == "secret"
