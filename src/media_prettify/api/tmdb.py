"""TMDb client used to populate the metadata store.

lookup() takes the search key the prettifier hands to the cache (a working
title such as "Show Name - 102", "Some Movie (2013)" or an anime key like
"Anime TitleS01E05") and resolves it to a title, year, and episode name.
"""

import re
from functools import partial

import httpx
from loguru import logger

from ..models import EnrichmentResult

API_BASE = "https://api.themoviedb.org/3"

log = logger.bind(stage="tmdb")

# "Anime TitleS01E05", "Show S02E10"
_SCENE_KEY = re.compile(
    r"^(?P<show>.*?)\s*S(?P<season>\d{1,2})E(?P<episode>\d{2,3})", re.IGNORECASE,
)
# "Show Name - 102", "Show Name - 1101-02 - Episode Title"
_CODE_KEY = re.compile(r"^(?P<show>.*?) - (?P<code>\d{3,4})(?:-\d\d)?(?: - .*)?$")
# "Show Name - 2013/03/18"
_DATE_KEY = re.compile(r"^(?P<show>.*?) - (?:19|20)\d\d/[0-1]\d/[0-3]\d")
# "Some Movie (2013)"
_MOVIE_KEY = re.compile(r"^(?P<title>.*?)\s*\((?P<year>(?:19|20)\d\d)\)")


def lookup(search_key: str, api_key: str, language: str = "en-US") -> EnrichmentResult | None:
    """Resolve a prettifier search key against TMDb.

    Returns None when nothing matches or the API is unreachable.
    """
    log.debug(f"lookup: search_key={search_key!r}")

    m = _SCENE_KEY.match(search_key)
    if m:
        return _lookup_show(
            m.group("show"), api_key, language,
            int(m.group("season")), int(m.group("episode")),
        )

    m = _CODE_KEY.match(search_key)
    if m:
        code = m.group("code")
        return _lookup_show(
            m.group("show"), api_key, language, int(code[:-2]), int(code[-2:]),
        )

    m = _DATE_KEY.match(search_key)
    if m:
        return _lookup_show(m.group("show"), api_key, language)

    m = _MOVIE_KEY.match(search_key)
    if m:
        return _lookup_movie(m.group("title"), api_key, language, m.group("year"))

    return _lookup_movie(search_key.strip(), api_key, language)


def make_fetcher(api_key: str, language: str = "en-US"):
    """Return a one-argument fetcher for MetadataStore."""
    return partial(lookup, api_key=api_key, language=language)


def _get(path: str, api_key: str, language: str, **params) -> dict | None:
    try:
        resp = httpx.get(
            f"{API_BASE}{path}",
            params={"api_key": api_key, "language": language, **params},
            timeout=30.0,
        )
        resp.raise_for_status()
    except httpx.HTTPError as e:
        log.warning(f"TMDb API error on {path}: {e}")
        return None
    return resp.json()


def _lookup_show(
    show: str,
    api_key: str,
    language: str,
    season: int | None = None,
    episode: int | None = None,
) -> EnrichmentResult | None:
    data = _get("/search/tv", api_key, language, query=show)
    results = (data or {}).get("results") or []
    if not results:
        log.debug(f"No TV results for {show!r}")
        return None

    best = results[0]
    first_air_date = best.get("first_air_date") or ""
    episode_name = None
    if season is not None and episode is not None and best.get("id") is not None:
        details = _get(
            f"/tv/{best['id']}/season/{season}/episode/{episode}", api_key, language,
        )
        episode_name = (details or {}).get("name") or None

    return EnrichmentResult(
        title=best.get("name", ""),
        year=first_air_date[:4] or None,
        episode_name=episode_name,
    )


def _lookup_movie(
    title: str,
    api_key: str,
    language: str,
    year: str | None = None,
) -> EnrichmentResult | None:
    params = {"query": title}
    if year:
        params["year"] = year
    data = _get("/search/movie", api_key, language, **params)
    results = (data or {}).get("results") or []
    if not results:
        log.debug(f"No movie results for {title!r}")
        return None

    best = results[0]
    release_date = best.get("release_date") or ""
    return EnrichmentResult(
        title=best.get("title", ""),
        year=release_date[:4] or None,
    )
