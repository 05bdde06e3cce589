"""
Document Scorer
===============

Bag-of-substrings relevance scoring of company knowledge against a query.

Scores are not normalized by document length, so long documents collect
frequency bonuses more easily than short ones. Tuning should start here.
"""

import re
from typing import Iterable, List, Optional, Sequence

from supportdesk.replies.domain.entities import Document, ScoredDocument
from supportdesk.replies.domain.text import count_occurrences, tokenize

TOP_DOCUMENTS = 5

NAME_MATCH_BONUS = 2.0
REPEAT_BONUS_CAP = 3
PARTIAL_MATCH_BONUS = 0.5
PARTIAL_MATCH_MIN_LENGTH = 4
HELP_NAME_MARKERS = ("faq", "help")
HELP_NAME_BONUS = 1.5
FALLBACK_MIN_WORD_LENGTH = 4

_NON_WORD_RE = re.compile(r"\W+")


def score_document(document: Document, keywords: Iterable[str]) -> float:
    """
    Relevance of one document to the query keywords.

    Per keyword: +1 when present anywhere, +2 more when present in the name,
    plus one point per extra occurrence (at most 3), and +0.5 once for a
    partial word match on keywords longer than three characters.
    """
    name = document.name.lower()
    haystack = f"{document.name} {document.description or ''} {document.content}".lower()
    haystack_words = [w for w in _NON_WORD_RE.split(haystack) if len(w) >= PARTIAL_MATCH_MIN_LENGTH]

    score = 0.0
    for keyword in keywords:
        if keyword in haystack:
            match_score = 1.0
            if keyword in name:
                match_score += NAME_MATCH_BONUS
            occurrences = count_occurrences(haystack, keyword)
            if occurrences > 1:
                match_score += min(occurrences - 1, REPEAT_BONUS_CAP)
            score += match_score

        if len(keyword) >= PARTIAL_MATCH_MIN_LENGTH:
            if any(keyword in word or word in keyword for word in haystack_words):
                score += PARTIAL_MATCH_BONUS

    if any(marker in name for marker in HELP_NAME_MARKERS):
        score += HELP_NAME_BONUS

    return score


def score_documents(
    documents: Sequence[Document],
    keywords: Sequence[str],
    limit: int = TOP_DOCUMENTS
) -> List[ScoredDocument]:
    """
    Rank documents by ``score_document``, highest first.

    The sort is stable so equal scores keep corpus order.
    """
    scored = [ScoredDocument(document=doc, score=score_document(doc, keywords)) for doc in documents]
    scored.sort(key=lambda item: item.score, reverse=True)
    return scored[:limit]


def score_term_presence(text: str, terms: Iterable[str], repeat_cap: int = 2) -> float:
    """
    Score ``text`` against a fixed term list.

    +1 per present term and one point per extra occurrence (at most
    ``repeat_cap``). Whitespace inside a term matches any whitespace run.
    """
    text_lower = text.lower()
    score = 0.0
    for term in terms:
        if term not in text_lower:
            continue
        pattern = r"\s+".join(re.escape(part) for part in term.split())
        occurrences = len(re.findall(pattern, text_lower))
        score += 1
        if occurrences > 1:
            score += min(occurrences - 1, repeat_cap)
    return score


def score_content_relevance(content: str, keywords: Iterable[str]) -> float:
    """
    Score free text against query keywords.

    Keywords in the first 100 characters get +0.5; repeats add 0.3 each,
    counting at most three.
    """
    content_lower = content.lower()
    lead = content_lower[:100]
    score = 0.0
    for keyword in keywords:
        if keyword not in content_lower:
            continue
        score += 1
        if keyword in lead:
            score += 0.5
        occurrences = count_occurrences(content_lower, keyword)
        if occurrences > 1:
            score += min(occurrences - 1, 3) * 0.3
    return score


def rank_by_terms(documents: Sequence[Document], terms: Sequence[str]) -> List[Document]:
    """Stable descending sort of documents by term presence in their content."""
    return sorted(documents, key=lambda doc: score_term_presence(doc.content, terms), reverse=True)


def rank_by_relevance(documents: Sequence[Document], keywords: Sequence[str]) -> List[Document]:
    """Stable descending sort of documents by keyword relevance of their content."""
    return sorted(documents, key=lambda doc: score_content_relevance(doc.content, keywords), reverse=True)


def count_keyword_hits(document: Document, words: Iterable[str]) -> int:
    """Number of ``words`` found anywhere in the document's name, description or content."""
    haystack = f"{document.name} {document.description or ''} {document.content}".lower()
    return sum(1 for word in words if word in haystack)


def find_fallback_document(documents: Sequence[Document], text: str) -> Optional[Document]:
    """
    Coarse best match used when reply assembly cannot run.

    Stop words are not removed; only words of four or more characters count.
    The first document with the most hits wins, and None means nothing matched.
    """
    words = [w for w in tokenize(text) if len(w) >= FALLBACK_MIN_WORD_LENGTH]
    best, best_hits = None, 0
    for document in documents:
        hits = count_keyword_hits(document, words)
        if hits > best_hits:
            best, best_hits = document, hits
    return best
