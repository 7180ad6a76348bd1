"""Text normalization shared by indexing and querying.

Stored index text and search queries go through :func:`normalize` so both
sides of a match use the same canonical alphabet.
"""

from __future__ import annotations

import re

from audiocat.errors import QueryBuildError

_DISALLOWED = re.compile(r"[^a-zA-Z0-9, ]")
_WHITESPACE_RUN = re.compile(r"\s{2,}")
_TOKEN_SPLIT = re.compile(r"[\s,]+")


def normalize(text: str) -> str:
    """Convert *text* into its canonical search-safe form.

    Examples:
        >>> normalize("I think it's borked!?!?!?!?")
        'I think its borked'
        >>> normalize("I love star-wars!  ")
        'I love star wars'
        >>> normalize("This\\nis\\na\\nsingle\\nline\\n")
        'This is a single line'
    """
    # it's -> its, not "it s"
    text = text.replace("'", "")
    text = _DISALLOWED.sub(" ", text)
    text = _WHITESPACE_RUN.sub(" ", text)
    return text.strip()


def match_tokens(text: str) -> list[str]:
    """Split normalized *text* into FTS tokens (commas act as separators)."""
    return [token for token in _TOKEN_SPLIT.split(normalize(text)) if token]


def to_match_query(text: str, *, prefix: bool = False) -> str:
    """Build an FTS5 MATCH expression from free text.

    Each token is double-quoted so it is always a string literal to FTS5,
    never an operator. With *prefix*, the last token matches as a prefix,
    which suits autocomplete on partially typed words.

    Raises:
        QueryBuildError: If no searchable token remains after normalization.
    """
    tokens = match_tokens(text)
    if not tokens:
        msg = f"Search text {text!r} has no searchable characters"
        raise QueryBuildError(msg)

    terms = [f'"{token}"' for token in tokens]
    if prefix:
        terms[-1] += "*"
    return " ".join(terms)
