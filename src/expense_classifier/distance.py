"""Edit distance used by the fuzzy keyword matcher."""

from __future__ import annotations


def levenshtein(a: str, b: str) -> int:
    """Return the Levenshtein distance between ``a`` and ``b``.

    Insertions, deletions and substitutions all cost 1. Uses two rolling
    rows sized by the shorter string.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, 1):
        current = [i] + [0] * len(b)
        for j, char_b in enumerate(b, 1):
            cost = 0 if char_a == char_b else 1
            current[j] = min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            )
        previous = current
    return previous[-1]
