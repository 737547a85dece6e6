"""Edition markers (Director's Cut, Unrated, ...) moved to the end of a title."""

from loguru import logger

from .patterns import DASHED_EDITION, EDITION

log = logger.bind(stage="edition")


def extract_edition(title: str) -> tuple[str, str | None]:
    """Remove edition keywords from title.

    Returns (title, edition). edition is the first keyword found, with
    periods as spaces, each word capitalized, wrapped in parentheses, or
    None when the title carries no edition. Every occurrence is removed,
    including a " - " separator in front of it.
    """
    match = EDITION.search(title)
    if match is None:
        return title, None

    words = match.group(1).replace(".", " ").split()
    edition = "(" + " ".join(word.capitalize() for word in words) + ")"

    title = DASHED_EDITION.sub("", title)
    title = EDITION.sub("", title)
    log.debug(f"extract_edition: found {edition} -> {title!r}")
    return title, edition


def reattach_edition(title: str, edition: str | None) -> str:
    """Trim title and append edition, dropping a dangling " -" first."""
    title = title.strip()
    if not edition:
        return title

    if title.endswith(" -"):
        title = title[:-2]
    return f"{title} {edition}"
