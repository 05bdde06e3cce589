"""
LLM Client Infrastructure
==========================

Wrapper for a local Ollama model server, reached through its
OpenAI-compatible API, plus the embedders used by the vector index.

This module abstracts the LLM client implementation following the
Dependency Inversion Principle - the application layer depends on abstractions,
not concrete implementations.
"""

import hashlib
import math
import time
from abc import ABC, abstractmethod
from collections import Counter
from typing import List, Optional

from openai import AsyncOpenAI, OpenAIError

from supportdesk.config import settings
from supportdesk.core import LLMException
from supportdesk.replies.domain.text import keyword_stream
from supportdesk.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class EmbeddingResult:
    """Result of an embedding generation."""

    def __init__(self, embedding: List[float], model: str):
        self.embedding = embedding
        self.model = model
        self.dimension = len(embedding)


class ChatCompletionResult:
    """Result of a chat completion."""

    def __init__(
        self,
        content: str,
        model: str,
        prompt_tokens: int,
        completion_tokens: int,
        latency_ms: int
    ):
        self.content = content
        self.model = model
        self.prompt_tokens = prompt_tokens
        self.completion_tokens = completion_tokens
        self.total_tokens = prompt_tokens + completion_tokens
        self.latency_ms = latency_ms


class ILLMClient(ABC):
    """
    Interface for LLM client operations.

    Following Interface Segregation Principle - only methods
    actually needed by the application are defined.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Resolve the model to use."""

    @abstractmethod
    async def close(self) -> None:
        """Release client resources."""

    @abstractmethod
    async def generate_embedding(self, text: str) -> EmbeddingResult:
        """Generate embedding for text."""

    @abstractmethod
    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.7,
        max_tokens: int = 2048,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        """Generate chat completion."""


class OllamaChatClient(ILLMClient):
    """
    Ollama client over the OpenAI-compatible endpoint.

    Prefers the fine-tuned support model and falls back to a base llama2
    model when the fine-tuned one has not been created.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        preferred_model: Optional[str] = None,
        fallback_model: Optional[str] = None,
        embedding_model: Optional[str] = None
    ):
        self._client = AsyncOpenAI(
            base_url=base_url or settings.llm_base_url,
            api_key=api_key or settings.llm_api_key,
        )
        self._preferred_model = preferred_model or settings.llm_model
        self._fallback_model = fallback_model or settings.llm_fallback_model
        self._embedding_model = embedding_model or settings.embedding_model
        self._model: Optional[str] = None

    @property
    def model(self) -> Optional[str]:
        """Model resolved by connect(), or None before it."""
        return self._model

    async def connect(self) -> None:
        """
        List the models on the server and pick one.

        Raises:
            LLMException: If the server is unreachable or has no usable model
        """
        try:
            names = [model.id async for model in self._client.models.list()]
        except OpenAIError as e:
            raise LLMException(f"Could not list models: {str(e)}")

        self._model = self._select_model(names)
        if self._model is None:
            raise LLMException(
                "No usable model found",
                details={"preferred": self._preferred_model, "fallback": self._fallback_model}
            )

        logger.info(
            "LLM client connected",
            extra={"model": self._model, "fine_tuned": self._model.startswith(self._preferred_model)}
        )

    def _select_model(self, names: List[str]) -> Optional[str]:
        for name in names:
            if name.startswith(self._preferred_model):
                return name
        for name in names:
            if name.startswith(self._fallback_model):
                return name
        return None

    async def close(self) -> None:
        await self._client.close()

    async def generate_embedding(self, text: str) -> EmbeddingResult:
        """
        Generate embedding for text using the server's embedding model.

        Args:
            text: Text to embed

        Returns:
            EmbeddingResult with embedding vector

        Raises:
            LLMException: If embedding generation fails
        """
        try:
            response = await self._client.embeddings.create(
                model=self._embedding_model,
                input=text
            )
        except OpenAIError as e:
            raise LLMException(f"Embedding generation failed: {str(e)}")

        if not response.data:
            raise LLMException("Embedding response was empty", {"model": self._embedding_model})

        return EmbeddingResult(
            embedding=response.data[0].embedding,
            model=self._embedding_model
        )

    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.7,
        max_tokens: int = 2048,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        """
        Generate chat completion with the resolved model.

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            operation: Operation name for logging

        Returns:
            ChatCompletionResult with generated text

        Raises:
            LLMException: If not connected or the completion fails
        """
        if self._model is None:
            raise LLMException("Client not connected")

        start_time = time.perf_counter()

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except OpenAIError as e:
            raise LLMException(f"Chat completion failed: {str(e)}")

        if not response.choices:
            raise LLMException("Chat completion returned no choices", {"model": self._model})

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        content = response.choices[0].message.content or ""
        usage = response.usage

        logger.info(
            "Chat completion finished",
            extra={"operation": operation, "model": self._model, "latency_ms": latency_ms}
        )

        return ChatCompletionResult(
            content=content,
            model=self._model,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
            latency_ms=latency_ms
        )


class MockLLMClient(ILLMClient):
    """
    Mock LLM client for testing.

    Returns predictable responses without calling external APIs.
    """

    def __init__(self, content: str = "This is a mock LLM response for testing purposes."):
        self._content = content
        self.connected = False

    async def connect(self) -> None:
        self.connected = True

    async def close(self) -> None:
        self.connected = False

    async def generate_embedding(self, text: str) -> EmbeddingResult:
        """Return mock embedding (zero vector)."""
        return EmbeddingResult(
            embedding=[0.0] * settings.embedding_dimension,
            model="mock-embedding"
        )

    async def chat_completion(
        self,
        messages: List[dict],
        temperature: float = 0.7,
        max_tokens: int = 2048,
        operation: str = "chat_completion"
    ) -> ChatCompletionResult:
        return ChatCompletionResult(
            content=self._content,
            model="mock-model",
            prompt_tokens=100,
            completion_tokens=len(self._content.split()),
            latency_ms=100
        )


# ========== Embedders ==========

class IEmbedder(ABC):
    """Turns text into a fixed-length vector."""

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Length of every vector produced."""

    @abstractmethod
    async def embed(self, text: str) -> List[float]:
        """Embed one text."""


class LLMEmbedder(IEmbedder):
    """Embeds through the model server."""

    def __init__(self, client: ILLMClient, dimension: Optional[int] = None):
        self._client = client
        self._dimension = dimension or settings.embedding_dimension

    @property
    def dimension(self) -> int:
        return self._dimension

    async def embed(self, text: str) -> List[float]:
        result = await self._client.generate_embedding(text)
        if result.dimension != self._dimension:
            raise LLMException(
                "Embedding dimension mismatch",
                details={"expected": self._dimension, "actual": result.dimension}
            )
        return result.embedding


class BagOfWordsEmbedder(IEmbedder):
    """
    Local embedder that needs no model server.

    Each filtered word adds its term frequency to a bucket chosen by a stable
    hash of the word; the vector is L2-normalized. Texts sharing vocabulary
    get a high cosine similarity.
    """

    def __init__(self, dimension: Optional[int] = None):
        self._dimension = dimension or settings.embedding_dimension

    @property
    def dimension(self) -> int:
        return self._dimension

    def _bucket(self, word: str) -> int:
        digest = hashlib.md5(word.encode("utf-8")).digest()
        return int.from_bytes(digest[:8], "big") % self._dimension

    def embed_sync(self, text: str) -> List[float]:
        words = keyword_stream(text)
        vector = [0.0] * self._dimension
        if not words:
            return vector

        for word, count in Counter(words).items():
            vector[self._bucket(word)] += count / len(words)

        norm = math.sqrt(sum(value * value for value in vector))
        return [value / norm for value in vector]

    async def embed(self, text: str) -> List[float]:
        return self.embed_sync(text)


def create_llm_client() -> ILLMClient:
    """Build the configured chat client (not yet connected)."""
    if settings.mock_llm:
        return MockLLMClient()
    return OllamaChatClient()


def create_embedder(client: Optional[ILLMClient] = None) -> IEmbedder:
    """Build the configured embedder."""
    if settings.use_bag_of_words_embeddings or client is None:
        return BagOfWordsEmbedder()
    return LLMEmbedder(client)
