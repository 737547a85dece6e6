"""Sort keys for media listings."""

from .patterns import LEADING_ARTICLE, REPEATED_WHITESPACE, SORT_SEPARATORS
from .sanitize import strip_extension, strip_group_prefix


def normalize_for_sorting(name: str, prettify: bool, ignore_article: bool) -> str:
    """Return the key name sorts by.

    prettify drops the extension and a leading "[Group]" tag (so fansub
    releases sort by show) and turns periods and underscores into spaces.
    ignore_article drops a leading "A " or "The " and collapses repeated
    whitespace. Either step can run alone; together they run in that order.
    """
    if prettify:
        name = strip_group_prefix(strip_extension(name))
        name = SORT_SEPARATORS.sub(" ", name)

    if ignore_article:
        name = LEADING_ARTICLE.sub("", name)
        name = REPEATED_WHITESPACE.sub(" ", name)

    return name
