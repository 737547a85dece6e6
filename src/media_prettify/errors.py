"""Exception hierarchy for media name prettifying."""


class PrettifyError(Exception):
    """Base exception for all media-prettify errors."""


class ConfigError(PrettifyError):
    """Invalid or missing configuration."""


class PatternError(PrettifyError):
    """A built-in pattern failed to compile.

    Raised once at import time. Never a per-call error.
    """

    def __init__(self, name: str, pattern: str, reason: str) -> None:
        super().__init__(f"Pattern {name} failed to compile: {reason}")
        self.name = name
        self.pattern = pattern
        self.reason = reason


class CacheError(PrettifyError):
    """The metadata store cannot serve a request."""
