"""
Vector Store Infrastructure
============================

Milvus vector store implementation for company knowledge retrieval.

This module provides a clean interface for vector operations following
the Repository pattern.
"""

import asyncio
from typing import List, Optional, Sequence

from pymilvus import MilvusClient, MilvusException

from supportdesk.config import settings
from supportdesk.core import VectorStoreException
from supportdesk.infrastructure.llm import IEmbedder
from supportdesk.replies.domain import Document
from supportdesk.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

OUTPUT_FIELDS = ["document_id", "name", "description", "type", "text"]


class MilvusVectorStore:
    """
    Milvus (or Zilliz Cloud, or Milvus Lite) store of company documents.

    One entity per document, embedded from its name, description and
    content. The collection is dropped and rebuilt as a whole; there are no
    incremental updates.
    """

    def __init__(
        self,
        embedder: IEmbedder,
        collection_name: Optional[str] = None,
        uri: Optional[str] = None,
        token: Optional[str] = None
    ):
        self._embedder = embedder
        self._collection_name = collection_name or settings.milvus_collection_name
        self._uri = uri or settings.milvus_uri
        self._token = token if token is not None else settings.milvus_token
        self._client: Optional[MilvusClient] = None

    @property
    def dimension(self) -> int:
        return self._embedder.dimension

    async def initialize(self) -> None:
        """Connect and create the collection if it does not exist."""
        if self._client is not None:
            return

        if not self._uri:
            raise VectorStoreException("MILVUS_URI not configured")

        try:
            self._client = await asyncio.to_thread(MilvusClient, uri=self._uri, token=self._token)
            if not await asyncio.to_thread(self._client.has_collection, self._collection_name):
                await asyncio.to_thread(self._create_collection)
        except MilvusException as e:
            self._client = None
            raise VectorStoreException(f"Failed to initialize Milvus: {str(e)}")

        logger.info(
            "Vector store initialized",
            extra={"collection": self._collection_name, "dimension": self.dimension}
        )

    def _create_collection(self) -> None:
        self._client.create_collection(
            collection_name=self._collection_name,
            dimension=self.dimension,
            metric_type="COSINE",
        )

    def _require_client(self) -> MilvusClient:
        if self._client is None:
            raise VectorStoreException("Vector store not initialized")
        return self._client

    async def rebuild(self, documents: Sequence[Document]) -> int:
        """
        Replace the collection contents with ``documents``.

        Returns:
            Number of documents indexed

        Raises:
            VectorStoreException: If Milvus rejects the operation
        """
        client = self._require_client()

        data = []
        for index, document in enumerate(documents):
            text = f"{document.name}\n{document.description or ''}\n{document.content}"
            data.append({
                "id": index,
                "vector": await self._embedder.embed(text),
                "document_id": document.id,
                "name": document.name,
                "description": document.description or "",
                "type": document.type,
                "text": document.content,
            })

        try:
            await asyncio.to_thread(client.drop_collection, self._collection_name)
            await asyncio.to_thread(self._create_collection)
            if data:
                await asyncio.to_thread(
                    client.insert, collection_name=self._collection_name, data=data
                )
        except MilvusException as e:
            raise VectorStoreException(f"Failed to rebuild index: {str(e)}")

        logger.info(
            "Vector index rebuilt",
            extra={"collection": self._collection_name, "documents": len(data)}
        )
        return len(data)

    async def similarity_search(self, query: str, k: int = 5) -> List[Document]:
        """
        Documents nearest to ``query``, closest first.

        Raises:
            VectorStoreException: If the search fails
        """
        client = self._require_client()
        query_vector = await self._embedder.embed(query)

        try:
            results = await asyncio.to_thread(
                client.search,
                collection_name=self._collection_name,
                data=[query_vector],
                limit=k,
                output_fields=OUTPUT_FIELDS
            )
        except MilvusException as e:
            raise VectorStoreException(f"Search failed: {str(e)}")

        documents = []
        if results and len(results) > 0:
            for hit in results[0]:
                entity = hit["entity"]
                documents.append(Document(
                    id=entity.get("document_id", str(hit.get("id"))),
                    name=entity.get("name", ""),
                    content=entity.get("text", ""),
                    description=entity.get("description") or None,
                    type=entity.get("type") or "documentation",
                ))
        return documents

    async def get_document_count(self) -> int:
        """Get number of documents in the collection."""
        client = self._require_client()
        try:
            stats = await asyncio.to_thread(client.get_collection_stats, self._collection_name)
        except MilvusException as e:
            raise VectorStoreException(f"Count failed: {str(e)}")
        return int(stats.get("row_count", 0))

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
