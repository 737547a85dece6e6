"""Regular expressions used by the classifier and its helpers.

Everything is compiled once at import. A pattern that fails to compile raises
PatternError, which is a fatal configuration error rather than a per-call one.

Token sets:
    FILE_END_TOKENS                -- Case-insensitive technical tokens
                                      (resolution, source, codec). The token
                                      and everything after it is dropped.
    FILE_END_TOKENS_CASE_SENSITIVE -- Common English words (PROPER, LIMITED,
                                      WEB) only trusted in release casing and
                                      only between separators.
    EDITION_TOKENS                 -- Edition keywords moved to the end of the
                                      prettified name.
"""

import re
from typing import NamedTuple

from loguru import logger

from .errors import PatternError

log = logger.bind(stage="patterns")

# A separator inside a scene name: whitespace or a period
SEP = r"[\s\.]"

FILE_END_TOKENS: tuple[str, ...] = (
    "AC3",
    "REPACK",
    "480p",
    "720p",
    "m-720p",
    "900p",
    "1080p",
    "2160p",
    "WEB-DL",
    "HDTV",
    "DSR",
    "PDTV",
    "WS",
    "HQ",
    "DVDRip",
    "TVRiP",
    "BDRip",
    "BRRip",
    "WEBRip",
    "BluRay",
    "Blu-ray",
    "SUBBED",
    "x264",
    rf"Dual{SEP}Audio",
    "HSBS",
    "H-SBS",
    "RERiP",
    "DIRFIX",
    "READNFO",
    "60FPS",
)

FILE_END_TOKENS_CASE_SENSITIVE: tuple[str, ...] = (
    "PROPER",
    "iNTERNAL",
    "LIMITED",
    "LiMiTED",
    "FESTiVAL",
    "NORDIC",
    "REAL",
    "SUBBED",
    "RETAIL",
    "EXTENDED",
    "NEWEDIT",
    "WEB",
)

EDITION_TOKENS: tuple[str, ...] = (
    rf"Special{SEP}Edition",
    "Unrated",
    rf"Final{SEP}Cut",
    "Remastered",
    rf"Extended{SEP}Cut",
    rf"IMAX{SEP}Edition",
    "Uncensored",
    rf"Director'?s{SEP}Cut",
    "Uncut",
)

# Alternations, each branch consuming the token and the rest of the string
FILE_ENDS = "|".join(f"{SEP}{token}.*" for token in FILE_END_TOKENS)
FILE_ENDS_CASE_SENSITIVE = "|".join(
    f"{SEP}{token}{SEP}.*" for token in FILE_END_TOKENS_CASE_SENSITIVE
)

# Not preceded by "(" nor followed by ")" so a reattached edition is skipped
EDITIONS = r"(?<!\()(" + "|".join(EDITION_TOKENS) + r")(?!\))"


def _compile(name: str, pattern: str, flags: int = 0) -> re.Pattern[str]:
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        log.critical(f"Cannot compile {name}: {e}")
        raise PatternError(name, pattern, str(e)) from e


class MarkerPatterns(NamedTuple):
    """The three substitutions run for one season/episode or date marker.

    with_ends / with_ends_case_sensitive rewrite the marker and drop the
    end metadata directly after it. probe rewrites a marker followed by a
    separator, which only happens when an episode title follows the marker.
    """

    with_ends: re.Pattern[str]
    with_ends_case_sensitive: re.Pattern[str]
    probe: re.Pattern[str]
    code: str


def _marker_patterns(name: str, marker: str, code: str) -> MarkerPatterns:
    return MarkerPatterns(
        with_ends=_compile(
            f"{name}.with_ends", f"{SEP}{marker}({FILE_ENDS})", re.IGNORECASE,
        ),
        with_ends_case_sensitive=_compile(
            f"{name}.with_ends_case_sensitive",
            f"{SEP}{marker}({FILE_ENDS_CASE_SENSITIVE})",
        ),
        probe=_compile(f"{name}.probe", f"{SEP}{marker}{SEP}", re.IGNORECASE),
        code=code,
    )


# -- Extension and group tag --
GROUP_PREFIX = _compile("GROUP_PREFIX", r"^\[[^\]]{0,20}\][^\w]*(\w.*?)\s*$")
GROUP_ONLY = _compile("GROUP_ONLY", r"^\[([^\[\]]+)\]\s*$")

# -- End metadata and editions --
END_METADATA = _compile("END_METADATA", FILE_ENDS, re.IGNORECASE)
END_METADATA_CASE_SENSITIVE = _compile(
    "END_METADATA_CASE_SENSITIVE", FILE_ENDS_CASE_SENSITIVE,
)
END_METADATA_PRESENT = _compile("END_METADATA_PRESENT", FILE_ENDS)
EDITION = _compile("EDITION", EDITIONS, re.IGNORECASE)
DASHED_EDITION = _compile("DASHED_EDITION", " - " + EDITIONS, re.IGNORECASE)

# -- Shape predicates, searched anywhere in the name --
# Multi-episode separator: "E", "-E", "-" or nothing ("S01E0102"). A bare
# "-" must be followed by exactly two digits, so "S01E05-720p" stays single
_MULTI_SEP = r"(?:-?[eE]|-(?=\d\d(?![\dpP])))?"
LOW_SEASON_MULTI = _compile(
    "LOW_SEASON_MULTI", rf"[sS]0\d[eE]\d\d{_MULTI_SEP}\d\d",
)
HIGH_SEASON_MULTI = _compile(
    "HIGH_SEASON_MULTI", rf"[sS][1-9]\d[eE]\d\d{_MULTI_SEP}\d\d",
)
LOW_SEASON = _compile("LOW_SEASON", r"[sS]0\d[eE]\d\d")
HIGH_SEASON = _compile("HIGH_SEASON", r"[sS][1-9]\d[eE]\d\d")
AIR_DATE = _compile(
    "AIR_DATE", rf"{SEP}(19|20)\d\d{SEP}[0-1]\d{SEP}[0-3]\d{SEP}",
)
YEAR_DOTTED = _compile("YEAR_DOTTED", rf"{SEP}(19|20)\d\d{SEP}")
YEAR_BRACKETED = _compile("YEAR_BRACKETED", r"\[(19|20)\d\d\]")
YEAR_PAREN = _compile("YEAR_PAREN", r"\((19|20)\d\d\)")
ANIME_HASH = _compile("ANIME_HASH", r"\[[0-9a-zA-Z]{8}\]$")
ANIME_BRACKET = _compile(
    "ANIME_BRACKET", r"\[BD\]|\[720p\]|\[1080p\]|\[480p\]|\[Blu-Ray|\[h264",
)

# -- Structural rewrites --
LOW_SEASON_MULTI_MARKER = _marker_patterns(
    "LOW_SEASON_MULTI_MARKER",
    rf"S0(\d)E(\d)(\d){_MULTI_SEP}(\d)(\d)",
    r" - \1\2\3-\4\5",
)
HIGH_SEASON_MULTI_MARKER = _marker_patterns(
    "HIGH_SEASON_MULTI_MARKER",
    rf"S([1-9]\d)E(\d)(\d){_MULTI_SEP}(\d)(\d)",
    r" - \1\2\3-\4\5",
)
LOW_SEASON_MARKER = _marker_patterns(
    "LOW_SEASON_MARKER", r"S0(\d)E(\d)(\d)", r" - \1\2\3",
)
HIGH_SEASON_MARKER = _marker_patterns(
    "HIGH_SEASON_MARKER", r"S([1-9]\d)E(\d)(\d)", r" - \1\2\3",
)
AIR_DATE_MARKER = _marker_patterns(
    "AIR_DATE_MARKER",
    rf"(19|20)(\d\d){SEP}([0-1]\d){SEP}([0-3]\d)",
    r" - \1\2/\3/\4",
)
YEAR_DOTTED_REWRITE = _compile("YEAR_DOTTED_REWRITE", rf"{SEP}(19|20)(\d\d)")
YEAR_BRACKETED_REWRITE = _compile(
    "YEAR_BRACKETED_REWRITE", r"\[(19|20)(\d\d)\].*", re.IGNORECASE,
)
ANIME_HASH_TAIL = _compile(
    "ANIME_HASH_TAIL",
    r"\s\(1280x720.*|\s\(1920x1080.*|\s\(720x400.*|\[720p.*|\[1080p.*|"
    r"\[480p.*|\s\(BD.*|\s\[Blu-Ray.*|\s\[DVD.*|\.DVD.*|\[[0-9a-zA-Z]{8}\]$|"
    r"\[h264.*|R1DVD.*|\[BD.*",
    re.IGNORECASE,
)
ANIME_BRACKET_TAIL = _compile(
    "ANIME_BRACKET_TAIL",
    r"\[BD\].*|\[720p.*|\[1080p.*|\[480p.*|\[Blu-Ray.*|\[h264.*",
    re.IGNORECASE,
)
ANIME_EPISODE = _compile("ANIME_EPISODE", r"[\s\._](\d\d)$")

# -- Enrichment anchors --
SHOW_CODE = _compile("SHOW_CODE", r" - \d\d\d", re.IGNORECASE)
MOVIE_YEAR = _compile("MOVIE_YEAR", r"\s\(\d{4}\)")

# -- Normalization --
WHITESPACE = _compile("WHITESPACE", r"\s+")
REPEATED_WHITESPACE = _compile("REPEATED_WHITESPACE", r"\s{2,}")
SORT_SEPARATORS = _compile("SORT_SEPARATORS", r"[._]")
LEADING_ARTICLE = _compile("LEADING_ARTICLE", r"^(?:[Aa]|[Tt]he)[ .]")
