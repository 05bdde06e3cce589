"""
FAQ-Pair Extractor
==================

Parses ``Q:``/``A:`` structured content into question/answer pairs and scores
them against a query.

The parser is a single pass over the marker positions with three states:

    OUTSIDE  --Q:-->  QUESTION  --A:-->  ANSWER  --Q:-->  QUESTION ...

``Q:`` while in QUESTION abandons the pending question (it never got an
answer). ``A:`` while OUTSIDE belongs to preamble text and is ignored; ``A:``
while in ANSWER is literal answer text. Pairs with an empty side are dropped.
"""

import re
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from supportdesk.replies.domain.entities import Document, FAQPair, Query
from supportdesk.replies.domain.scoring import score_term_presence
from supportdesk.replies.domain.text import extract_phrases, keyword_stream

QUESTION_MARKER = "Q:"
ANSWER_MARKER = "A:"

KEYWORD_COVERAGE_WEIGHT = 2.0
PHRASE_MATCH_WEIGHT = 1.5

THRESHOLD_FLOOR = 1.5
THRESHOLD_CAP = 3.0
THRESHOLD_PER_KEYWORD = 0.4

PASSWORD_RESET_TERMS = ("reset", "forgot", "change")

_MARKER_RE = re.compile(r"Q:|A:")


class _ScanState(Enum):
    OUTSIDE = "outside"
    QUESTION = "question"
    ANSWER = "answer"


def is_faq_structured(content: str) -> bool:
    return QUESTION_MARKER in content and ANSWER_MARKER in content


def _make_pair(question: str, answer: str, source: Optional[str]) -> Optional[FAQPair]:
    question, answer = question.strip(), answer.strip()
    if not question or not answer:
        return None
    return FAQPair(question=question, answer=answer, source=source)


def extract_faq_pairs(content: str, source: Optional[str] = None) -> List[FAQPair]:
    """Extract every well-formed question/answer pair from ``content``."""
    if not is_faq_structured(content):
        return []

    pairs: List[FAQPair] = []
    state = _ScanState.OUTSIDE
    question = ""
    segment_start = 0

    for marker in _MARKER_RE.finditer(content):
        token = marker.group()
        if token == QUESTION_MARKER:
            if state is _ScanState.ANSWER:
                pair = _make_pair(question, content[segment_start:marker.start()], source)
                if pair:
                    pairs.append(pair)
            state = _ScanState.QUESTION
            segment_start = marker.end()
        elif state is _ScanState.QUESTION:
            question = content[segment_start:marker.start()]
            state = _ScanState.ANSWER
            segment_start = marker.end()

    if state is _ScanState.ANSWER:
        pair = _make_pair(question, content[segment_start:], source)
        if pair:
            pairs.append(pair)

    return pairs


def score_faq_pair(question: str, keywords: Sequence[str], query_phrases: Sequence[str]) -> float:
    """
    Score a question against the query.

    Shared keywords count once per query occurrence, keyword coverage is
    weighted x2, and each shared two-word phrase adds 1.5.
    """
    question_words = set(keyword_stream(question))
    common = [k for k in keywords if k in question_words]
    score = float(len(common))
    if keywords:
        score += len(common) / len(keywords) * KEYWORD_COVERAGE_WEIGHT
    question_phrases = set(extract_phrases(question, 2))
    shared_phrases = [p for p in query_phrases if p in question_phrases]
    score += len(shared_phrases) * PHRASE_MATCH_WEIGHT
    return score


def find_best_faq_pair(documents: Iterable[Document], query: Query) -> Optional[FAQPair]:
    """Best-scoring pair across the whole candidate pool, or None."""
    keywords = query.keywords
    query_phrases = extract_phrases(query.text_lower, 2)

    best: Optional[FAQPair] = None
    best_score = 0.0
    for document in documents:
        for pair in extract_faq_pairs(document.content, source=document.name):
            score = score_faq_pair(pair.question, keywords, query_phrases)
            if score > best_score:
                best = FAQPair(question=pair.question, answer=pair.answer, score=score, source=pair.source)
                best_score = score
    return best


def faq_match_threshold(keyword_count: int) -> float:
    """Minimum FAQ score to answer directly; grows with the query, within [1.5, 3]."""
    return max(THRESHOLD_FLOOR, min(keyword_count * THRESHOLD_PER_KEYWORD, THRESHOLD_CAP))


def extract_relevant_pair(content: str, keywords: Sequence[str]) -> Optional[FAQPair]:
    """First pair whose question mentions any query keyword."""
    for pair in extract_faq_pairs(content):
        if score_term_presence(pair.question, keywords) > 0:
            return pair
    return None


def mentions_password_reset(text: str) -> bool:
    text_lower = text.lower()
    return "password" in text_lower and any(term in text_lower for term in PASSWORD_RESET_TERMS)


def extract_password_reset_pair(content: str) -> Optional[FAQPair]:
    """First pair asking how to reset, recover or change a password."""
    for pair in extract_faq_pairs(content):
        if mentions_password_reset(pair.question):
            return pair
    return None


def extract_best_qa_pair(content: str, keywords: Sequence[str]) -> Optional[FAQPair]:
    """
    Best pair by keyword hits, 1.5 per hit in the question and 0.5 in the
    answer. Pairs scoring below 1 are not worth quoting.
    """
    best: Optional[FAQPair] = None
    best_score = 0.0
    for pair in extract_faq_pairs(content):
        question, answer = pair.question.lower(), pair.answer.lower()
        score = 0.0
        for keyword in keywords:
            if keyword in question:
                score += 1.5
            if keyword in answer:
                score += 0.5
        if score > best_score:
            best = FAQPair(question=pair.question, answer=pair.answer, score=score)
            best_score = score
    return best if best_score >= 1 else None
