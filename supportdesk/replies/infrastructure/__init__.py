"""
Replies Infrastructure Layer
============================

Infrastructure implementations for the replies module.

Contains:
- Models: SQLAlchemy ORM models
- Repositories: Data access implementations
- External: External service adapters (LLM, Vector Store)
"""

from supportdesk.replies.infrastructure.models import CompanyDataModel, ReplyRecordModel
from supportdesk.replies.infrastructure.repositories import (
    InMemoryDocumentStore,
    SQLAlchemyDocumentStore,
    SQLAlchemyReplyRecorder,
)
from supportdesk.replies.infrastructure.external import (
    CorpusIndexer,
    GenerativeBackendAdapter,
    VectorIndexAdapter,
)

__all__ = [
    "CompanyDataModel",
    "ReplyRecordModel",
    "InMemoryDocumentStore",
    "SQLAlchemyDocumentStore",
    "SQLAlchemyReplyRecorder",
    "CorpusIndexer",
    "GenerativeBackendAdapter",
    "VectorIndexAdapter",
]
