"""Tests for the exception hierarchy."""

import pytest

from media_prettify.errors import CacheError, ConfigError, PatternError, PrettifyError
from media_prettify.patterns import _compile


class TestHierarchy:
    @pytest.mark.parametrize("exc_class", [ConfigError, CacheError, PatternError])
    def test_subclasses_base(self, exc_class):
        assert issubclass(exc_class, PrettifyError)

    def test_catch_as_base(self):
        with pytest.raises(PrettifyError):
            raise CacheError("closed")


class TestPatternError:
    def test_attributes(self):
        err = PatternError("NAME", "(x", "missing )")
        assert err.name == "NAME"
        assert err.pattern == "(x"
        assert err.reason == "missing )"
        assert str(err) == "Pattern NAME failed to compile: missing )"

    def test_bad_pattern_raises(self):
        with pytest.raises(PatternError) as exc_info:
            _compile("BAD", "(unclosed")
        assert exc_info.value.name == "BAD"
        assert exc_info.value.pattern == "(unclosed"

    def test_good_pattern_compiles(self):
        assert _compile("GOOD", r"\d+").search("abc 123") is not None
