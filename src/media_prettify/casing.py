"""Punctuation normalization and title casing for prettified names."""

from .models import MINOR_WORDS
from .patterns import WHITESPACE


def periods_to_spaces(value: str) -> str:
    return value.replace(".", " ")


def collapse_whitespace(value: str) -> str:
    """Replace every run of whitespace with a single space."""
    return WHITESPACE.sub(" ", value)


def normalize_punctuation(value: str) -> str:
    """Turn periods into spaces, then collapse whitespace.

    Only safe once the structural rewrites have consumed the periods that
    separate season, date, and year numbers.
    """
    return collapse_whitespace(periods_to_spaces(value))


def title_case(value: str) -> str:
    """Capitalize each word of a lowercase string.

    The first word is always capitalized; later words in MINOR_WORDS stay
    lowercase. Whitespace is trimmed and collapsed. Blank values are
    returned unchanged.
    """
    if not value or value.isspace():
        return value

    words = value.split()
    converted = [_capitalize_first(words[0])]
    for word in words[1:]:
        converted.append(word if word in MINOR_WORDS else _capitalize_first(word))
    return " ".join(converted)


def title_case_if_lower(value: str) -> str:
    """Title-case value only if it has no capital letters at all."""
    if value == value.lower():
        return title_case(value)
    return value


def title_case_parts(value: str) -> str:
    """Title-case each " - " segment separately, if value is all lowercase.

    Used for episode names where the show title and the episode title are
    separate segments, so each gets a capitalized first word.
    """
    if value != value.lower():
        return value

    parts = value.split(" - ")
    while parts and not parts[-1]:
        parts.pop()
    return " - ".join(title_case(part) for part in parts)


def _capitalize_first(word: str) -> str:
    # Unlike str.capitalize(), leaves the rest of the word alone
    return word[:1].upper() + word[1:]
