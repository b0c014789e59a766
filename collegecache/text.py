"""Text normalization for values scraped from the dashboard.

The dashboard returns a mix of ALL-CAPS and inconsistently spaced text,
e.g. ``"DR. B.R. AMBEDKAR INSTITUTE OF   TECHNOLOGY , SOMEWHERE,"``.
``normalize`` rebuilds a readable display form from it:

    >>> normalize("  DR. B.R. AMBEDKAR INSTITUTE OF   TECHNOLOGY , SOMEWHERE,  ")
    'Dr. B.R. Ambedkar Institute of Technology, Somewhere'

Every function here is pure and total over strings.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

# Connector words kept lower-case unless they open or close the text.
SMALL_WORDS = frozenset(
    {
        "an",
        "and",
        "as",
        "at",
        "by",
        "for",
        "in",
        "of",
        "on",
        "or",
        "the",
        "to",
        "with",
    }
)

_LINE_BREAKS = re.compile(r"[\r\n]+")
_SPACE_BEFORE_COMMA = re.compile(r"\s+,")
_MISSING_SPACE_AFTER_COMMA = re.compile(r",(?=[\w(])")
_TOKEN_START = re.compile(r"(^|\s)(\S)")
_WORD_START = re.compile(r"^([^\w]*)([a-z])")
_AFTER_PERIOD = re.compile(r"\.([a-z])")


def _is_all_caps(text: str) -> bool:
    return text == text.upper()


def _upcase_token_starts(text: str) -> str:
    return _TOKEN_START.sub(lambda m: m.group(1) + m.group(2).upper(), text)


def _capitalize_word(word: str) -> str:
    return _WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), word)


def titleize(text: str) -> str:
    """Title-case ``text``.

    Collapses whitespace runs to single spaces, trims both ends, capitalizes
    the first letter of every word and lower-cases connector words in the
    middle of the text.
    """
    words = text.split()
    last = len(words) - 1
    titled = []
    for index, word in enumerate(words):
        bare = word.rstrip(",;:").lower()
        if 0 < index < last and bare in SMALL_WORDS:
            titled.append(word.lower())
        else:
            titled.append(_capitalize_word(word))
    return " ".join(titled)


def normalize(raw: str | None) -> str | None:
    """Convert a raw scraped string into its display form.

    Returns ``None`` unchanged.
    """
    if raw is None:
        return None

    # Upper-case input carries no casing information; rebuild it.
    text = _rebuild(raw.lower() if _is_all_caps(raw) else raw)
    # Mixed-case input can come out all caps, e.g. "IIT (b.h.u.)". Such a
    # result would be lower-cased on the next pass, so do that now.
    if _is_all_caps(text):
        text = _rebuild(text.lower())
    return text


def _rebuild(text: str) -> str:
    text = _LINE_BREAKS.sub(" ", text)
    text = _SPACE_BEFORE_COMMA.sub(",", text)
    text = _MISSING_SPACE_AFTER_COMMA.sub(", ", text)
    text = _upcase_token_starts(text)
    text = titleize(text)
    # Initials such as "B.r." -> "B.R."
    text = _AFTER_PERIOD.sub(lambda m: "." + m.group(1).upper(), text)
    # "A,," would lose one comma per pass; drop the whole run.
    return text.rstrip(",")


def normalize_all(
    values: Iterable[str | None], placeholder: str | None = None
) -> list[str]:
    """Normalize ``values``, dropping blanks, the placeholder and repeats.

    Order of first appearance is preserved. The placeholder is matched
    case-insensitively against the normalized value.

    >>> normalize_all(["ANNA UNIVERSITY", "Anna University", "NONE"], "None")
    ['Anna University']
    """
    sentinel = placeholder.lower() if placeholder is not None else None
    seen: dict[str, None] = {}
    for value in values:
        normalized = normalize(value)
        if not normalized:
            continue
        if sentinel is not None and normalized.lower() == sentinel:
            continue
        seen.setdefault(normalized, None)
    return list(seen)
