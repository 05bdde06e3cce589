"""
Replies Domain Layer
====================

Domain layer for the reply-relevance engine.

Contains:
- Entities: Document, Query, FAQPair, Reply and the category enums
- Scorers: keyword extraction, document scoring, FAQ pair scoring
- Composition: intent classification, deduplication, reply templates

This layer is framework-agnostic and contains pure business logic.
"""

from supportdesk.replies.domain.entities import (
    Document,
    DocumentType,
    FAQPair,
    IntentCategory,
    Query,
    Reply,
    ReplyBranch,
    ReplyPromptBuilder,
    ScoredDocument,
)
from supportdesk.replies.domain.pipeline import assemble_reply, compose_acknowledgement
from supportdesk.replies.domain.scoring import score_documents

__all__ = [
    "Document",
    "DocumentType",
    "FAQPair",
    "IntentCategory",
    "Query",
    "Reply",
    "ReplyBranch",
    "ReplyPromptBuilder",
    "ScoredDocument",
    "assemble_reply",
    "compose_acknowledgement",
    "score_documents",
]
