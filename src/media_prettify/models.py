"""Core enums, constants, and type definitions for media name prettifying.

Enums:
    ShapeCategory -- File name shape, in classification priority order.

Dataclasses:
    LookupIntent     -- What the external metadata cache could refine.
    EnrichmentResult -- Cached external metadata for one file.
    ParsedName       -- Result of classification and rewrite, pre-enrichment.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

# What identifies a file to the metadata cache: usually its path
FileRef = str | Path


class ShapeCategory(StrEnum):
    """File name shapes. Declaration order is the classification order."""

    SCENE_EPISODE_LOW_SEASON_MULTI = "scene_episode_low_season_multi"
    SCENE_EPISODE_HIGH_SEASON_MULTI = "scene_episode_high_season_multi"
    SCENE_EPISODE_LOW_SEASON = "scene_episode_low_season"
    SCENE_EPISODE_HIGH_SEASON = "scene_episode_high_season"
    DATE_BASED_EPISODE = "date_based_episode"
    YEAR_DOTTED_MOVIE = "year_dotted_movie"
    YEAR_BRACKETED_MOVIE = "year_bracketed_movie"
    YEAR_PAREN_MOVIE = "year_paren_movie"
    ANIME_HASH_TAGGED = "anime_hash_tagged"
    ANIME_BRACKET_NO_HASH = "anime_bracket_no_hash"
    MARKER_ONLY_MOVIE = "marker_only_movie"
    UNCLASSIFIED = "unclassified"


# Jaro-Winkler similarity a cached title must strictly exceed to be used
SIMILARITY_THRESHOLD: float = 0.91

# Words kept lowercase by the title caser unless they start the string
MINOR_WORDS: frozenset[str] = frozenset(
    {
        "a",
        "an",
        "and",
        "in",
        "it",
        "for",
        "of",
        "on",
        "the",
        "to",
        "vs",
    }
)

VIDEO_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".avi",
        ".m2ts",
        ".m4v",
        ".mkv",
        ".mov",
        ".mp4",
        ".mpg",
        ".ogm",
        ".ts",
        ".webm",
        ".wmv",
    }
)


@dataclass
class LookupIntent:
    """Flags set by the shape classifier for the fuzzy enricher.

    search_key is only filled when the cache must be queried with something
    other than the display title (anime numbering with a synthetic S01E marker).
    """

    is_episode_lookup: bool = False
    is_series_lookup: bool = False
    is_movie_lookup: bool = False
    is_movie_without_year: bool = False
    search_key: str = ""

    @property
    def needs_lookup(self) -> bool:
        return self.is_series_lookup or self.is_movie_lookup


@dataclass(frozen=True)
class EnrichmentResult:
    """Metadata cached by the external lookup for one file."""

    title: str
    year: str | None = None
    episode_name: str | None = None


@dataclass
class ParsedName:
    """A file name after classification, rewrite, and casing.

    title has no edition attached and has not been enriched.
    """

    title: str
    category: ShapeCategory = ShapeCategory.UNCLASSIFIED
    intent: LookupIntent = field(default_factory=LookupIntent)
    edition: str | None = None
