"""Turn raw media file names into presentable titles.

Pipeline: strip extension -> strip group tag -> classify and rewrite (edition
extraction, end metadata, punctuation, casing per shape) -> collapse spaces
-> fuzzy enrichment from the metadata cache -> reattach edition -> trim.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from .casing import collapse_whitespace
from .classify import rewrite
from .edition import reattach_edition
from .enrich import enrich
from .models import FileRef, ParsedName
from .sanitize import strip_extension, strip_group_prefix

if TYPE_CHECKING:
    from .cache import MetadataCache

log = logger.bind(stage="prettify")


def parse_name(raw_name: str, use_external_info: bool = True) -> ParsedName:
    """Classify and rewrite raw_name, stopping short of enrichment.

    The returned title has no edition attached; the edition, lookup flags,
    and search key are returned alongside it.
    """
    if raw_name is None:
        raise TypeError("raw_name must be a string, not None")

    name = strip_group_prefix(strip_extension(raw_name))
    category, shaped = rewrite(name, use_external_info)
    return ParsedName(
        title=collapse_whitespace(shaped.title).strip(),
        category=category,
        intent=shaped.intent,
        edition=shaped.edition,
    )


def prettify(
    raw_name: str,
    file_identity: FileRef | None = None,
    cache: MetadataCache | None = None,
    use_external_info: bool = True,
) -> str:
    """Return the prettified title for raw_name.

    "Show.Name.S01E02.720p.HDTV.x264.mkv" -> "Show Name - 102"
    "some.movie.2013.BluRay.x264.mkv" -> "Some Movie (2013)"

    With a cache and file_identity, the title may be corrected from cached
    external metadata; a cache miss requests a lookup for next time.
    use_external_info=False skips the cache entirely.
    """
    parsed = parse_name(raw_name, use_external_info)

    title = parsed.title
    if use_external_info:
        title = enrich(title, parsed.intent, file_identity, cache)

    result = reattach_edition(title, parsed.edition)
    log.debug(f"prettify: {raw_name!r} -> {result!r} ({parsed.category})")
    return result
