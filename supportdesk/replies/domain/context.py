"""
Context Deduplicator
====================

Picks at most one supplemental snippet that adds information the primary
answer does not already carry.
"""

from typing import Sequence

from supportdesk.replies.domain.entities import Document
from supportdesk.replies.domain.faq import extract_faq_pairs, is_faq_structured
from supportdesk.replies.domain.text import keyword_stream

MAX_CANDIDATE_SIMILARITY = 0.7
MAX_SNIPPET_SIMILARITY = 0.5
SHORT_TEXT_LENGTH = 200
TRUNCATE_LENGTH = 150


def text_similarity(text1: str, text2: str) -> float:
    """Shared filtered words over the longer word list; 0 if either is empty."""
    words1 = keyword_stream(text1)
    words2 = keyword_stream(text2)
    if not words1 or not words2:
        return 0.0
    vocabulary = set(words2)
    common = [w for w in words1 if w in vocabulary]
    return len(common) / max(len(words1), len(words2))


def extract_relevant_snippet(text: str, primary_text: str) -> str:
    if len(text) < SHORT_TEXT_LENGTH:
        return text

    if is_faq_structured(text):
        for pair in extract_faq_pairs(text):
            if text_similarity(pair.answer, primary_text) < MAX_SNIPPET_SIMILARITY:
                return f"{pair.question}\n{pair.answer}"

    return text[:TRUNCATE_LENGTH] + "..."


def pick_supplement(candidates: Sequence[Document], primary_text: str) -> str:
    """
    Snippet from the first candidate that is not a near-duplicate of
    ``primary_text``, or "" when none qualifies.

    The first candidate is skipped when it already contains the primary text.
    """
    if len(candidates) <= 1:
        return ""

    start = 1 if primary_text in candidates[0].content else 0
    for document in candidates[start:]:
        if text_similarity(document.content, primary_text) > MAX_CANDIDATE_SIMILARITY:
            continue
        return extract_relevant_snippet(document.content, primary_text)
    return ""
