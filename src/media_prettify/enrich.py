"""Fuzzy enrichment of prettified names from cached external metadata.

The Jaro-Winkler similarity gate makes sure a show or movie name is only
replaced when the cached title is nearly the same string as the one derived
from the file name. The replacement brings proper casing and punctuation
("Marvel's Agents of S.H.I.E.L.D.") without trusting a wrong lookup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger
from rapidfuzz.distance import JaroWinkler

from .models import SIMILARITY_THRESHOLD, EnrichmentResult, FileRef, LookupIntent
from .patterns import MOVIE_YEAR, SHOW_CODE

if TYPE_CHECKING:
    from .cache import MetadataCache

log = logger.bind(stage="enrich")


def similarity(a: str, b: str) -> float:
    """Jaro-Winkler similarity in [0, 1], case-sensitive."""
    return JaroWinkler.similarity(a, b)


def enrich(
    title: str,
    intent: LookupIntent,
    file_identity: FileRef | None,
    cache: MetadataCache | None,
) -> str:
    """Refine title with the cached metadata for file_identity.

    On a cache miss, asks the cache to populate the entry (using the
    intent's search key when there is one) and returns title unchanged; the
    result shows up on a later call. Never raises for missing data.
    """
    if cache is None or file_identity is None or not intent.needs_lookup:
        return title

    info = cache.get(file_identity)
    if info is None:
        cache.request(file_identity, intent.search_key or title)
        log.debug(f"Cache miss for {file_identity}, lookup requested")
        return title

    if intent.is_series_lookup:
        return _enrich_series(title, intent, info)
    return _enrich_movie(title, intent, info)


def _enrich_series(title: str, intent: LookupIntent, info: EnrichmentResult) -> str:
    code = SHOW_CODE.search(title)
    if not info.title or code is None:
        return title

    show_title = title[: code.start()]
    score = similarity(show_title, info.title)
    log.trace(f"The similarity between {info.title!r} and {show_title!r} is {score}")
    if score <= SIMILARITY_THRESHOLD:
        return title

    enriched = info.title + title[code.start():]
    if intent.is_episode_lookup and info.episode_name:
        enriched += f" - {info.episode_name}"
    return enriched


def _enrich_movie(title: str, intent: LookupIntent, info: EnrichmentResult) -> str:
    if not info.title or not info.year:
        return title

    if intent.is_movie_without_year:
        movie_title = title
    else:
        year = MOVIE_YEAR.search(title)
        if year is None:
            log.debug(f"No year marker in {title!r}, skipping enrichment")
            return title
        movie_title = title[: year.start()]

    score = similarity(movie_title, info.title)
    log.trace(f"The similarity between {info.title!r} and {movie_title!r} is {score}")
    if score <= SIMILARITY_THRESHOLD:
        return title
    return f"{info.title} ({info.year})"
