"""Prettifier configuration via pydantic-settings (.env + env vars)."""

import sys
from pathlib import Path

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError

_CACHE_HOME = Path.home() / ".cache" / "media-prettify"


class PrettifyConfig(BaseSettings):
    """All configuration with layered resolution:
    .env file < environment variables < constructor kwargs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # -- Behavior --
    use_external_info: bool = True
    prettify_filenames: bool = True
    ignore_leading_article: bool = False

    # -- Logging --
    log_level: str = "INFO"
    log_dir: Path | None = None  # no log file unless set
    log_rotation: str = "10 MB"
    log_retention: str = "30 days"

    # -- Metadata lookup --
    cache_db: Path = _CACHE_HOME / "metadata.db"
    tmdb_api_key: str = ""
    tmdb_language: str = "en-US"
    lookup_workers: int = 2

    def require_tmdb_api_key(self) -> str:
        """Return the TMDb API key, raising ConfigError if it is unset."""
        if not self.tmdb_api_key:
            raise ConfigError("TMDB_API_KEY is not set; metadata lookup needs one")
        return self.tmdb_api_key

    def setup_logging(self) -> None:
        """Send loguru output to stderr and, if log_dir is set, to a log file.

        stderr gets log_level and above, the file sink DEBUG and above.
        """
        logger.remove()

        log_format = (
            "{time:YYYY-MM-DD HH:mm:ss} | {level:<7} | "
            "{extra[stage]:<8} | {message}"
        )

        def _with_stage(record):
            record["extra"].setdefault("stage", "-")
            return True

        logger.add(
            sys.stderr,
            format=log_format,
            level=self.log_level.upper(),
            filter=_with_stage,
        )

        if self.log_dir is None:
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(self.log_dir / "media-prettify.log"),
            format=log_format,
            level="DEBUG",
            rotation=self.log_rotation,
            retention=self.log_retention,
            filter=_with_stage,
        )
