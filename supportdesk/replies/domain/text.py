"""
Text normalization and keyword extraction.

Every scorer in the reply engine tokenizes the same way: lowercase, split on
runs of non-word characters, drop short tokens.
"""

import re
from typing import Iterable, List, Set

STOP_WORDS = frozenset([
    "the", "and", "or", "but", "for", "with", "about", "from", "to", "in",
    "on", "at", "by", "an", "a", "is", "are", "was", "were", "be", "been",
    "being", "have", "has", "had", "do", "does", "did", "will", "would",
    "shall", "should", "may", "might", "must", "can", "could",
])

MIN_TOKEN_LENGTH = 3

_NON_WORD_RE = re.compile(r"\W+")


def tokenize(text: str) -> List[str]:
    """Lowercase tokens in order, with empty fragments removed."""
    return [token for token in _NON_WORD_RE.split(text.lower()) if token]


def filter_keywords(tokens: Iterable[str]) -> List[str]:
    return [t for t in tokens if len(t) >= MIN_TOKEN_LENGTH and t not in STOP_WORDS]


def keyword_stream(text: str) -> List[str]:
    """
    Keywords of ``text`` in order of appearance, repeats preserved.

    Query scoring counts a keyword once per occurrence in the query.
    """
    return filter_keywords(tokenize(text))


def extract_keywords(text: str) -> Set[str]:
    """Set of lowercase, stop-word-free keywords longer than two characters."""
    return set(keyword_stream(text))


def extract_phrases(text: str, n: int = 2) -> List[str]:
    """
    Sliding ``n``-word windows over ``text``.

    Words shorter than three characters are skipped; stop words are kept.
    """
    words = [t for t in tokenize(text) if len(t) >= MIN_TOKEN_LENGTH]
    return [" ".join(words[i:i + n]) for i in range(len(words) - n + 1)]


def count_occurrences(haystack: str, needle: str) -> int:
    """Case-insensitive, non-overlapping substring count (no word boundaries)."""
    if not needle:
        return 0
    return haystack.lower().count(needle.lower())
