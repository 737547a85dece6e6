"""Tests for loguru-based logging setup."""

import sys
from unittest.mock import MagicMock, patch

import pytest
from loguru import logger

from media_prettify.config import PrettifyConfig
from media_prettify.prettify import prettify


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ["LOG_DIR", "LOG_LEVEL", "LOG_ROTATION", "LOG_RETENTION", "CACHE_DB"]:
        monkeypatch.delenv(var, raising=False)


class TestSetupLogging:
    def setup_method(self):
        logger.remove()

    def teardown_method(self):
        logger.remove()

    def test_setup_creates_log_dir(self, tmp_path):
        log_dir = tmp_path / "logs"
        config = PrettifyConfig(_env_file=None, log_dir=log_dir)
        config.setup_logging()
        assert log_dir.exists()

    def test_setup_adds_file_sink(self, tmp_path):
        log_dir = tmp_path / "logs"
        config = PrettifyConfig(_env_file=None, log_dir=log_dir)
        config.setup_logging()
        logger.bind(stage="test").info("hello from test")
        content = (log_dir / "media-prettify.log").read_text()
        assert "hello from test" in content

    def test_stage_context_in_output(self, tmp_path):
        log_dir = tmp_path / "logs"
        config = PrettifyConfig(_env_file=None, log_dir=log_dir)
        config.setup_logging()
        prettify("Show.Name.S01E02.720p.HDTV.x264.mkv")
        content = (log_dir / "media-prettify.log").read_text()
        assert "classify" in content
        assert "Show Name - 102" in content

    def test_default_stage_empty(self, tmp_path):
        log_dir = tmp_path / "logs"
        config = PrettifyConfig(_env_file=None, log_dir=log_dir)
        config.setup_logging()
        logger.info("no stage bound")
        content = (log_dir / "media-prettify.log").read_text()
        assert "no stage bound" in content

    def test_rotation_and_retention_from_config(self, tmp_path):
        mock_logger = MagicMock()
        config = PrettifyConfig(
            _env_file=None, log_dir=tmp_path, log_rotation="1 MB", log_retention="7 days",
        )
        with patch("media_prettify.config.logger", mock_logger):
            config.setup_logging()
        file_kwargs = mock_logger.add.call_args_list[1].kwargs
        assert file_kwargs["rotation"] == "1 MB"
        assert file_kwargs["retention"] == "7 days"


class TestStderrOnly:
    def teardown_method(self):
        logger.remove()

    def test_no_file_sink_without_log_dir(self):
        mock_logger = MagicMock()
        config = PrettifyConfig(_env_file=None)
        with patch("media_prettify.config.logger", mock_logger):
            config.setup_logging()
        mock_logger.remove.assert_called_once_with()
        assert mock_logger.add.call_count == 1
        assert mock_logger.add.call_args.args[0] is sys.stderr

    def test_level_applies_to_stderr(self):
        mock_logger = MagicMock()
        config = PrettifyConfig(_env_file=None, log_level="debug")
        with patch("media_prettify.config.logger", mock_logger):
            config.setup_logging()
        assert mock_logger.add.call_args.kwargs["level"] == "DEBUG"
