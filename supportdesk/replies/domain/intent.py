"""
Query Classifier
================

Buckets a query into a support topic by phrase presence, and describes how
each topic filters and ranks the candidate pool.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Sequence, Tuple

from supportdesk.replies.domain.entities import Document, IntentCategory
from supportdesk.replies.domain.faq import mentions_password_reset

PHRASE_PRESENCE_SCORE = 2

# Order is the tie-break priority.
INTENT_PHRASES: Dict[IntentCategory, Tuple[str, ...]] = {
    IntentCategory.SUBSCRIPTION: (
        "subscription", "plan", "pricing", "payment", "free trial",
        "upgrade", "downgrade", "cancel",
    ),
    IntentCategory.TECHNICAL: (
        "error", "bug", "issue", "problem", "not working", "broken", "fix", "help",
    ),
    IntentCategory.ACCOUNT: (
        "account", "login", "password", "email", "sign in", "sign up", "register",
    ),
    IntentCategory.REFUND: (
        "refund", "money back", "cancel", "return",
    ),
    IntentCategory.FEATURE: (
        "feature", "how to", "can i", "functionality", "option",
    ),
}

PASSWORD_RESET_RANK_TERMS = (
    "password reset", "reset password", "forgot password", "change password",
)


@dataclass(frozen=True)
class IntentScore:
    category: IntentCategory
    score: int


@dataclass(frozen=True)
class IntentClassification:
    """Per-category scores plus the password-reset sub-case of account."""
    scores: Tuple[IntentScore, ...]
    password_reset: bool = False

    @property
    def primary(self) -> IntentCategory:
        best = IntentCategory.NONE
        best_score = 0
        for item in self.scores:
            if item.score > best_score:
                best, best_score = item.category, item.score
        return best

    def score_for(self, category: IntentCategory) -> int:
        for item in self.scores:
            if item.category is category:
                return item.score
        return 0


def classify_intent(text_lower: str) -> IntentClassification:
    """
    Score every category by phrase presence (+2 if any phrase matches).

    "cancel" is both a subscription and a refund phrase; subscription wins
    the tie by priority order.
    """
    scores = tuple(
        IntentScore(
            category=category,
            score=PHRASE_PRESENCE_SCORE if any(p in text_lower for p in phrases) else 0,
        )
        for category, phrases in INTENT_PHRASES.items()
    )
    classification = IntentClassification(scores=scores)
    if classification.primary is IntentCategory.ACCOUNT and mentions_password_reset(text_lower):
        return IntentClassification(scores=scores, password_reset=True)
    return classification


@dataclass(frozen=True)
class BranchProfile:
    """
    How a topic narrows and ranks the candidate pool.

    ``dedupe_on_excerpt`` chooses what the supplement is compared against:
    the quoted excerpt, or the whole primary document.
    """
    content_terms: Tuple[str, ...]
    name_terms: Tuple[str, ...]
    rank_terms: Tuple[str, ...]
    dedupe_on_excerpt: bool = True

    def matches(self, document: Document) -> bool:
        content = document.content.lower()
        name = document.name.lower()
        return (
            any(term in content for term in self.content_terms)
            or any(term in name for term in self.name_terms)
        )

    def select(self, documents: Sequence[Document]) -> list:
        return [doc for doc in documents if self.matches(doc)]


BRANCH_PROFILES: Dict[IntentCategory, BranchProfile] = {
    IntentCategory.SUBSCRIPTION: BranchProfile(
        content_terms=("subscription", "plan", "pricing"),
        name_terms=("subscription", "plan", "pricing"),
        rank_terms=INTENT_PHRASES[IntentCategory.SUBSCRIPTION],
        dedupe_on_excerpt=False,
    ),
    IntentCategory.TECHNICAL: BranchProfile(
        content_terms=("troubleshoot", "fix", "error", "issue", "problem"),
        name_terms=("troubleshoot", "guide", "help"),
        rank_terms=INTENT_PHRASES[IntentCategory.TECHNICAL],
        dedupe_on_excerpt=False,
    ),
    IntentCategory.ACCOUNT: BranchProfile(
        content_terms=("account", "login"),
        name_terms=("account", "user"),
        rank_terms=INTENT_PHRASES[IntentCategory.ACCOUNT],
    ),
    IntentCategory.REFUND: BranchProfile(
        content_terms=("refund", "money back", "cancel"),
        name_terms=("refund", "payment"),
        rank_terms=INTENT_PHRASES[IntentCategory.REFUND],
    ),
    IntentCategory.FEATURE: BranchProfile(
        content_terms=("feature", "functionality", "capability"),
        name_terms=("feature", "guide"),
        rank_terms=INTENT_PHRASES[IntentCategory.FEATURE],
    ),
}


def select_password_reset_documents(documents: Sequence[Document]) -> list:
    return [doc for doc in documents if mentions_password_reset(doc.content)]


class QueryStyle(str, Enum):
    QUESTION = "question"
    COMPLAINT = "complaint"
    REQUEST = "request"
    STATEMENT = "statement"


_QUESTION_CUES = ("?", "how", "what", "why", "when", "where", "can you", "could you")
_COMPLAINT_CUES = (
    "not working", "problem", "issue", "doesn't work", "broken",
    "disappointed", "unhappy", "frustrated",
)
_REQUEST_CUES = ("please", "need", "want", "looking for", "help me")


def detect_query_style(text_lower: str) -> QueryStyle:
    """Rough phrasing style of a query, checked question > complaint > request."""
    if any(cue in text_lower for cue in _QUESTION_CUES):
        return QueryStyle.QUESTION
    if any(cue in text_lower for cue in _COMPLAINT_CUES):
        return QueryStyle.COMPLAINT
    if any(cue in text_lower for cue in _REQUEST_CUES):
        return QueryStyle.REQUEST
    return QueryStyle.STATEMENT
