"""
Replies Application Services
============================

Application services for support reply generation.

Orchestrates the optional generative backend, the knowledge base, and the
deterministic reply pipeline.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from supportdesk.core import (
    ExternalServiceException,
    RepositoryException,
)
from supportdesk.replies.domain import (
    Document,
    Query,
    Reply,
    ReplyPromptBuilder,
    assemble_reply,
    compose_acknowledgement,
    score_documents,
)
from supportdesk.replies.domain.intent import detect_query_style
from supportdesk.shared.infrastructure.logging import get_logger, log_latency

logger = get_logger(__name__)


# ========== Collaborator Interfaces ==========

class IDocumentStore(ABC):
    """Interface for reading company knowledge."""

    @abstractmethod
    async def list_all(self) -> List[Document]:
        """Return every document in the knowledge base."""


class IGenerativeBackend(ABC):
    """
    Interface for an optional generative model.

    Lifecycle (connect/close) belongs to whoever constructs the backend.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Resolve the model and get ready to serve prompts."""

    @abstractmethod
    async def close(self) -> None:
        """Release client resources."""

    @abstractmethod
    async def try_generate(
        self,
        prompt: str,
        temperature: float,
        max_tokens: int
    ) -> Optional[str]:
        """Generate an answer, or None when the backend has nothing to offer."""


class IVectorIndex(ABC):
    """Interface for semantic candidate retrieval."""

    @abstractmethod
    async def similarity_search(self, query: str, k: int) -> List[Document]:
        """Return the ``k`` documents nearest to ``query``."""


class IReplyRecorder(ABC):
    """Interface for storing generated replies against their ticket."""

    @abstractmethod
    async def record(self, ticket_id: str, reply: "ReplyResult") -> None:
        """Store a reply for a ticket."""


# ========== Results ==========

class ReplySource:
    """Where the reply content came from."""
    GENERATIVE = "generative"
    VECTOR = "vector"
    KEYWORD = "keyword"
    NONE = "none"


@dataclass
class ReplyResult:
    """Outcome of one reply request."""
    reply_text: str
    branch: str
    source: str
    latency_ms: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# ========== Application Services ==========

class ReplyService:
    """
    Service for producing a support reply to a ticket.

    Tries the generative backend first when one is injected, then falls
    back to the keyword pipeline over the knowledge base. Only
    InvalidQueryException escapes; every backend failure degrades.
    """

    def __init__(
        self,
        document_store: IDocumentStore,
        generative_backend: Optional[IGenerativeBackend] = None,
        vector_index: Optional[IVectorIndex] = None,
        recorder: Optional[IReplyRecorder] = None,
        backend_timeout: float = 30.0,
        candidate_limit: int = 5,
        temperature: float = 0.7,
        max_tokens: int = 2048
    ):
        self._documents = document_store
        self._backend = generative_backend
        self._vector_index = vector_index
        self._recorder = recorder
        self._timeout = backend_timeout
        self._candidate_limit = candidate_limit
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def generate_reply(
        self,
        title: Optional[str],
        description: Optional[str],
        customer_name: Optional[str] = None,
        ticket_id: Optional[str] = None,
        ticket_status: str = "Open",
        ticket_priority: str = "Medium"
    ) -> ReplyResult:
        """
        Generate a reply for a ticket.

        Args:
            title: Ticket title
            description: Ticket description
            customer_name: Name used in the salutation
            ticket_id: Optional ticket ID; the reply is recorded when given
            ticket_status: Advisory only
            ticket_priority: Advisory only

        Returns:
            ReplyResult with reply text, branch and source

        Raises:
            InvalidQueryException: If title and description are both blank
        """
        start_time = time.perf_counter()

        query = Query(
            title=title or "",
            description=description or "",
            customer_name=customer_name or "",
            ticket_id=ticket_id,
            ticket_status=ticket_status,
            ticket_priority=ticket_priority,
        )

        logger.info(
            "Generating reply",
            extra={
                "ticket_id": ticket_id,
                "query_style": detect_query_style(query.text_lower).value,
                "keyword_count": len(query.keywords),
            }
        )

        result = await self._generate(query)
        if result is None:
            result = await self._assemble(query)

        result.latency_ms = int((time.perf_counter() - start_time) * 1000)

        if ticket_id and self._recorder is not None:
            await self._record(ticket_id, result)

        logger.info(
            "Reply generated",
            extra={
                "ticket_id": ticket_id,
                "branch": result.branch,
                "source": result.source,
                "latency_ms": result.latency_ms,
            }
        )
        return result

    async def _generate(self, query: Query) -> Optional[ReplyResult]:
        if self._backend is None:
            return None

        prompt = ReplyPromptBuilder.build_prompt(query)
        try:
            text = await asyncio.wait_for(
                self._backend.try_generate(prompt, self._temperature, self._max_tokens),
                timeout=self._timeout,
            )
        except (ExternalServiceException, asyncio.TimeoutError) as e:
            logger.warning(
                "Generative backend unavailable, using keyword pipeline",
                extra={"ticket_id": query.ticket_id, "error": str(e) or type(e).__name__}
            )
            return None

        if not text or not text.strip():
            return None

        return ReplyResult(
            reply_text=text.strip(),
            branch="generative",
            source=ReplySource.GENERATIVE,
        )

    async def _assemble(self, query: Query) -> ReplyResult:
        try:
            corpus = await self._documents.list_all()
        except RepositoryException as e:
            logger.error(
                "Knowledge base unavailable, sending acknowledgement",
                extra={"ticket_id": query.ticket_id, "error": e.message}
            )
            return _to_result(compose_acknowledgement(query), ReplySource.NONE)

        candidates, source = await self._candidates(query, corpus)

        try:
            with log_latency(logger, "reply_assembly", candidates=len(candidates), source=source):
                reply = assemble_reply(query, candidates)
        except Exception:
            logger.exception(
                "Reply assembly failed, sending acknowledgement",
                extra={"ticket_id": query.ticket_id}
            )
            return _to_result(compose_acknowledgement(query, corpus), source)

        logger.debug(
            "Reply assembled",
            extra={
                "branch": reply.branch.value,
                "intent": reply.intent.value,
                "faq_score": round(reply.faq_score, 3),
                "faq_threshold": reply.faq_threshold,
                "has_supplement": reply.has_supplement,
            }
        )
        return _to_result(reply, source)

    async def _candidates(self, query: Query, corpus: List[Document]) -> tuple:
        if self._vector_index is not None and corpus:
            try:
                found = await asyncio.wait_for(
                    self._vector_index.similarity_search(query.search_text, self._candidate_limit),
                    timeout=self._timeout,
                )
                if found:
                    return found, ReplySource.VECTOR
            except (ExternalServiceException, asyncio.TimeoutError) as e:
                logger.warning(
                    "Vector search failed, using keyword scoring",
                    extra={"ticket_id": query.ticket_id, "error": str(e) or type(e).__name__}
                )

        scored = score_documents(corpus, query.keywords, limit=self._candidate_limit)
        return [item.document for item in scored], ReplySource.KEYWORD

    async def _record(self, ticket_id: str, result: ReplyResult) -> None:
        try:
            await self._recorder.record(ticket_id, result)
        except RepositoryException as e:
            logger.error(
                "Failed to record reply",
                extra={"ticket_id": ticket_id, "error": e.message}
            )


def _to_result(reply: Reply, source: str) -> ReplyResult:
    return ReplyResult(reply_text=reply.text, branch=reply.branch.value, source=source)
