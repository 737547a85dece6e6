"""File name cleanup: extension, release group tag, and end metadata."""

from loguru import logger

from .patterns import (
    END_METADATA,
    END_METADATA_CASE_SENSITIVE,
    END_METADATA_PRESENT,
    GROUP_ONLY,
    GROUP_PREFIX,
)

log = logger.bind(stage="sanitize")


def strip_extension(name: str) -> str:
    """Return name without its final ".ext" suffix.

    A dot inside a directory component ("v1.2/Movie") is not an extension.
    """
    if not name or name.isspace():
        return name

    point = name.rfind(".")
    separator = max(name.rfind("/"), name.rfind("\\"))
    if point == -1 or point < separator:
        return name
    return name[:point]


def strip_group_prefix(name: str) -> str:
    """Remove a leading "[Group]" release tag.

    The tag may hold at most 20 characters and must be followed by a word
    character somewhere. A name that is nothing but one bracketed token is
    unwrapped instead.
    """
    if not name.startswith("["):
        return name

    match = GROUP_PREFIX.search(name)
    if match:
        log.debug(f"strip_group_prefix: {name!r} -> {match.group(1)!r}")
        return match.group(1)

    if name.endswith("]"):
        match = GROUP_ONLY.search(name)
        if match:
            return match.group(1)

    return name


def strip_end_metadata(title: str) -> str:
    """Cut quality, source, codec, and release markers off the end of title.

    The case-sensitive words go first, then the case-insensitive tokens.
    """
    stripped = END_METADATA_CASE_SENSITIVE.sub("", title)
    stripped = END_METADATA.sub("", stripped)
    if stripped != title:
        log.debug(f"strip_end_metadata: {title!r} -> {stripped!r}")
    return stripped


def has_end_metadata(title: str) -> bool:
    """True if a technical end token appears anywhere, matched case-sensitively."""
    return END_METADATA_PRESENT.search(title) is not None
