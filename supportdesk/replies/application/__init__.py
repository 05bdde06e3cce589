"""
Replies Application Layer
=========================

Application layer for the replies module.

Contains:
- Services: Reply orchestration and collaborator interfaces
- DTOs: Data transfer objects for API serialization
"""

from supportdesk.replies.application.dto import (
    GenerateReplyRequest,
    GenerateReplyResponse,
)
from supportdesk.replies.application.services import (
    IDocumentStore,
    IGenerativeBackend,
    IReplyRecorder,
    IVectorIndex,
    ReplyResult,
    ReplyService,
    ReplySource,
)

__all__ = [
    # DTOs
    "GenerateReplyRequest",
    "GenerateReplyResponse",
    # Services
    "ReplyService",
    "ReplyResult",
    "ReplySource",
    # Collaborator Interfaces
    "IDocumentStore",
    "IGenerativeBackend",
    "IReplyRecorder",
    "IVectorIndex",
]
