"""Shape classification and per-shape rewrite of media file names.

SHAPE_RULES is an ordered list of (category, predicate, rewrite) rules. The
first rule whose predicate matches wins, so a name matching two shapes always
resolves to the earlier one: a multi-episode "S01E01E02" is never treated as a
single "S01E01", and a scene episode with an air year is never a movie.

Edition extraction and end metadata stripping run in a per-shape order: the
year movie strips end metadata before looking for an edition, the low season
episode extracts the edition before rewriting its marker, the other episode
shapes extract it right after.
"""

from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from .casing import (
    collapse_whitespace,
    normalize_punctuation,
    title_case_if_lower,
    title_case_parts,
)
from .edition import extract_edition
from .models import LookupIntent, ShapeCategory
from .patterns import (
    AIR_DATE,
    AIR_DATE_MARKER,
    ANIME_BRACKET,
    ANIME_BRACKET_TAIL,
    ANIME_EPISODE,
    ANIME_HASH,
    ANIME_HASH_TAIL,
    HIGH_SEASON,
    HIGH_SEASON_MARKER,
    HIGH_SEASON_MULTI,
    HIGH_SEASON_MULTI_MARKER,
    LOW_SEASON,
    LOW_SEASON_MARKER,
    LOW_SEASON_MULTI,
    LOW_SEASON_MULTI_MARKER,
    YEAR_BRACKETED,
    YEAR_BRACKETED_REWRITE,
    YEAR_DOTTED,
    YEAR_DOTTED_REWRITE,
    YEAR_PAREN,
    MarkerPatterns,
)
from .sanitize import has_end_metadata, strip_end_metadata

log = logger.bind(stage="classify")


@dataclass
class ShapeRewrite:
    """Output of one shape rewrite: working title, lookup flags, edition."""

    title: str
    intent: LookupIntent
    edition: str | None = None


Rewrite = Callable[[str, bool], ShapeRewrite]


@dataclass(frozen=True)
class ShapeRule:
    category: ShapeCategory
    matches: Callable[[str], bool]
    rewrite: Rewrite


def _searches(pattern) -> Callable[[str], bool]:
    return lambda name: pattern.search(name) is not None


# ---------------------------------------------------------------------------
# Rewrites
# ---------------------------------------------------------------------------


def _episode_rewrite(marker: MarkerPatterns, edition_first: bool = False) -> Rewrite:
    """Build the rewrite for a season/episode or air date marker.

    "Show.Name.S01E02.720p" becomes "Show Name - 102", "S11E01E02" becomes
    "1101-02" and "2013.03.18" becomes "2013/03/18". The marker is first
    rewritten only where end metadata directly follows it. A second probe
    rewrites a marker followed by any separator; when the probe changes
    nothing the name carries no episode title and the cached episode name
    may be appended later.
    """

    def rewrite(name: str, use_external_info: bool) -> ShapeRewrite:
        intent = LookupIntent(is_series_lookup=True)
        edition = None

        if edition_first:
            name, edition = extract_edition(name)

        name = marker.with_ends.sub(marker.code, name)
        name = marker.with_ends_case_sensitive.sub(marker.code, name)

        if not edition_first:
            name, edition = extract_edition(name)

        probed = marker.probe.sub(marker.code + " - ", name)
        if use_external_info and probed == name:
            intent.is_episode_lookup = True

        name = strip_end_metadata(probed)
        name = title_case_parts(normalize_punctuation(name))
        return ShapeRewrite(name, intent, edition)

    return rewrite


def _rewrite_year_dotted(name: str, use_external_info: bool) -> ShapeRewrite:
    # "Some.Movie.2013.BluRay" -> "Some Movie (2013)"
    name = YEAR_DOTTED_REWRITE.sub(r" (\1\2)", name, count=1)
    name = strip_end_metadata(name)
    name, edition = extract_edition(name)
    name = title_case_if_lower(normalize_punctuation(name))
    return ShapeRewrite(name, LookupIntent(is_movie_lookup=True), edition)


def _rewrite_year_bracketed(name: str, use_external_info: bool) -> ShapeRewrite:
    # "Movie [2013] x264" -> "Movie (2013)", everything after the year is dropped
    name = YEAR_BRACKETED_REWRITE.sub(r" (\1\2)", name, count=1)
    name = strip_end_metadata(name)
    name = title_case_if_lower(normalize_punctuation(name))
    return ShapeRewrite(name, LookupIntent(is_movie_lookup=True))


def _rewrite_year_paren(name: str, use_external_info: bool) -> ShapeRewrite:
    name = strip_end_metadata(name)
    name = title_case_if_lower(normalize_punctuation(name))
    return ShapeRewrite(name, LookupIntent(is_movie_lookup=True))


def _anime_rewrite(tail) -> Rewrite:
    """Build the rewrite for fansub names.

    Underscores become spaces, periods are kept. A bare two-digit episode
    number at the end gets a synthetic "S01E" search key so the cache can
    look the episode up like a scene release.
    """

    def rewrite(name: str, use_external_info: bool) -> ShapeRewrite:
        intent = LookupIntent(is_series_lookup=True)
        name = tail.sub("", name.replace("_", " ")).rstrip()

        episode = ANIME_EPISODE.search(name)
        if use_external_info and episode:
            intent.is_episode_lookup = True
            head = name[: episode.start()].strip(" -._")
            intent.search_key = f"{head}S01E{episode.group(1)}"
            log.debug(f"Anime search key: {intent.search_key!r}")

        name = title_case_if_lower(collapse_whitespace(name))
        return ShapeRewrite(name, intent)

    return rewrite


def _rewrite_marker_only(name: str, use_external_info: bool) -> ShapeRewrite:
    # Release tokens but no year: probably a movie, looked up by title alone
    intent = LookupIntent(is_movie_lookup=True, is_movie_without_year=True)
    name = strip_end_metadata(name)
    name, edition = extract_edition(name)
    name = title_case_if_lower(normalize_punctuation(name))
    return ShapeRewrite(name, intent, edition)


def _rewrite_unclassified(name: str, use_external_info: bool) -> ShapeRewrite:
    return ShapeRewrite(name, LookupIntent())


# ---------------------------------------------------------------------------
# Rule order
# ---------------------------------------------------------------------------

SHAPE_RULES: list[ShapeRule] = [
    ShapeRule(
        ShapeCategory.SCENE_EPISODE_LOW_SEASON_MULTI,
        _searches(LOW_SEASON_MULTI),
        _episode_rewrite(LOW_SEASON_MULTI_MARKER),
    ),
    ShapeRule(
        ShapeCategory.SCENE_EPISODE_HIGH_SEASON_MULTI,
        _searches(HIGH_SEASON_MULTI),
        _episode_rewrite(HIGH_SEASON_MULTI_MARKER),
    ),
    ShapeRule(
        ShapeCategory.SCENE_EPISODE_LOW_SEASON,
        _searches(LOW_SEASON),
        _episode_rewrite(LOW_SEASON_MARKER, edition_first=True),
    ),
    ShapeRule(
        ShapeCategory.SCENE_EPISODE_HIGH_SEASON,
        _searches(HIGH_SEASON),
        _episode_rewrite(HIGH_SEASON_MARKER),
    ),
    ShapeRule(
        ShapeCategory.DATE_BASED_EPISODE,
        _searches(AIR_DATE),
        _episode_rewrite(AIR_DATE_MARKER),
    ),
    ShapeRule(
        ShapeCategory.YEAR_DOTTED_MOVIE,
        _searches(YEAR_DOTTED),
        _rewrite_year_dotted,
    ),
    ShapeRule(
        ShapeCategory.YEAR_BRACKETED_MOVIE,
        _searches(YEAR_BRACKETED),
        _rewrite_year_bracketed,
    ),
    ShapeRule(
        ShapeCategory.YEAR_PAREN_MOVIE,
        _searches(YEAR_PAREN),
        _rewrite_year_paren,
    ),
    ShapeRule(
        ShapeCategory.ANIME_HASH_TAGGED,
        _searches(ANIME_HASH),
        _anime_rewrite(ANIME_HASH_TAIL),
    ),
    ShapeRule(
        ShapeCategory.ANIME_BRACKET_NO_HASH,
        _searches(ANIME_BRACKET),
        _anime_rewrite(ANIME_BRACKET_TAIL),
    ),
    ShapeRule(
        ShapeCategory.MARKER_ONLY_MOVIE,
        has_end_metadata,
        _rewrite_marker_only,
    ),
    ShapeRule(
        ShapeCategory.UNCLASSIFIED,
        lambda name: True,
        _rewrite_unclassified,
    ),
]


def match_rule(name: str) -> ShapeRule:
    """Return the first rule in SHAPE_RULES whose predicate matches name."""
    for rule in SHAPE_RULES:
        if rule.matches(name):
            return rule
    # Unreachable: the last rule matches everything
    return SHAPE_RULES[-1]


def classify(name: str) -> ShapeCategory:
    """Return the shape category of an extension- and group-stripped name."""
    return match_rule(name).category


def rewrite(name: str, use_external_info: bool = True) -> tuple[ShapeCategory, ShapeRewrite]:
    """Classify name and run the matching rewrite.

    use_external_info gates the episode lookup flags (and the anime search
    key), which only matter when a metadata cache will be consulted.
    """
    rule = match_rule(name)
    log.debug(f"classify: {name!r} -> {rule.category}")
    return rule.category, rule.rewrite(name, use_external_info)
