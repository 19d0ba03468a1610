"""Similarity scoring between column headers."""

from functools import lru_cache

from .distance import edit_distance

# Fixed score when one header contains the other, e.g. "Date" / "Created Date"
SUBSTRING_SCORE = 0.8


def normalize(text: str) -> str:
    """Lower-case and trim a header for comparison."""
    return (text or "").lower().strip()


@lru_cache(maxsize=10_000)
def similarity(a: str, b: str) -> float:
    """
    Score how alike two headers are, in [0, 1].

    - Equal after normalization -> 1.0
    - One contains the other -> SUBSTRING_SCORE, regardless of length
    - Otherwise the edit distance relative to the longer string
    """
    s1 = normalize(a)
    s2 = normalize(b)

    if s1 == s2:
        return 1.0
    if s1 in s2 or s2 in s1:
        return SUBSTRING_SCORE

    longest = max(len(s1), len(s2))
    if longest == 0:
        return 1.0
    return (longest - edit_distance(s1, s2)) / longest
