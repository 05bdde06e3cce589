"""
Replies External Service Adapters
=================================

Adapters for external services (LLM, Vector Store) used by the replies module.

Implements the interfaces defined in the application layer using concrete
external service implementations.
"""

from typing import List, Optional

from supportdesk.infrastructure.llm import ILLMClient
from supportdesk.infrastructure.vectorstore import MilvusVectorStore
from supportdesk.replies.application import IDocumentStore, IGenerativeBackend, IVectorIndex
from supportdesk.replies.domain import Document, ReplyPromptBuilder
from supportdesk.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class GenerativeBackendAdapter(IGenerativeBackend):
    """
    Adapter that wraps the infrastructure LLM client.

    Implements the application layer IGenerativeBackend interface.
    """

    def __init__(self, client: ILLMClient):
        self._client = client

    async def connect(self) -> None:
        await self._client.connect()

    async def close(self) -> None:
        await self._client.close()

    async def try_generate(
        self,
        prompt: str,
        temperature: float,
        max_tokens: int
    ) -> Optional[str]:
        """Single user-turn completion; None when the model returns nothing."""
        response = await self._client.chat_completion(
            messages=ReplyPromptBuilder.build_messages(prompt),
            temperature=temperature,
            max_tokens=max_tokens,
            operation="reply_generation"
        )
        return response.content or None


class VectorIndexAdapter(IVectorIndex):
    """
    Adapter that wraps the infrastructure vector store.

    Implements the application layer IVectorIndex interface.
    """

    def __init__(self, store: MilvusVectorStore):
        self._store = store

    async def similarity_search(self, query: str, k: int) -> List[Document]:
        return await self._store.similarity_search(query, k)


class CorpusIndexer:
    """Rebuilds the vector index from the knowledge base."""

    def __init__(self, document_store: IDocumentStore, vector_store: MilvusVectorStore):
        self._documents = document_store
        self._vector_store = vector_store

    async def rebuild(self) -> dict:
        """
        Re-embed every document and replace the index contents.

        Returns:
            Indexing statistics
        """
        documents = await self._documents.list_all()
        await self._vector_store.initialize()
        indexed = await self._vector_store.rebuild(documents)

        logger.info("Corpus indexed", extra={"documents_indexed": indexed})

        return {
            "status": "success",
            "documents_indexed": indexed,
            "embedding_dimension": self._vector_store.dimension,
        }
