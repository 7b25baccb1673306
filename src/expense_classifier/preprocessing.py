"""Text normalisation for expense descriptions.

Descriptions are short, user-typed strings ("Lunch at McDonald's",
"uber to airport"). Normalisation is deliberately simple and regex based:

- lowercase, keep only ``[a-z0-9]`` and whitespace
- drop a short list of function words
- conservative suffix stripping (one suffix at most)

The keyword matcher uses the cleaned text without stopword removal or
stemming, see :func:`keyword_tokens`.
"""

from __future__ import annotations

import re
from typing import Optional

_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")

STOP_WORDS: frozenset[str] = frozenset({
    "a", "an", "the", "and", "or", "of", "to", "in", "on", "at", "for",
    "with", "by", "from", "via", "paid", "pay", "is", "was", "my", "our",
    "this", "that", "it", "as",
})

# Tried in order; the first one that leaves a stem of MIN_STEM_LENGTH wins.
SUFFIXES: tuple[str, ...] = ("ing", "ed", "ly", "es", "s", "ment", "tion")

MIN_STEM_LENGTH = 3


def clean_text(text: Optional[str]) -> str:
    """Lowercase and strip everything except ASCII letters, digits and spaces."""
    if not text:
        return ""
    cleaned = _NON_ALNUM_RE.sub(" ", text.lower())
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def stem(token: str) -> str:
    """Strip at most one common English suffix from ``token``.

    Only tokens longer than three characters are touched, and a suffix is
    removed only if at least three characters remain.

    Examples::

        >>> stem("tickets")
        'ticket'
        >>> stem("bus")
        'bus'
    """
    if len(token) <= MIN_STEM_LENGTH:
        return token
    for suffix in SUFFIXES:
        if token.endswith(suffix) and len(token) - len(suffix) >= MIN_STEM_LENGTH:
            return token[: -len(suffix)]
    return token


def tokenize(text: Optional[str]) -> list[str]:
    """Normalise a description into the token sequence used for scoring."""
    return [
        stem(token)
        for token in clean_text(text).split()
        if token and token not in STOP_WORDS
    ]


def keyword_tokens(text: Optional[str]) -> list[str]:
    """Split cleaned text into raw words for keyword matching."""
    return clean_text(text).split()
