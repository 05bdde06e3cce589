"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="support-reply-service", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)

    # ========== Database ==========
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/support",
        description="PostgreSQL connection URL (async)"
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)

    # ========== Generative Backend (Ollama, OpenAI-compatible) ==========
    generative_backend_enabled: bool = Field(
        default=True,
        description="Try the generative backend before the keyword pipeline"
    )
    mock_llm: bool = Field(
        default=False,
        description="Use mock LLM responses for testing (no API calls)"
    )
    llm_base_url: str = Field(
        default="http://localhost:11434/v1",
        description="OpenAI-compatible endpoint of the local model server"
    )
    llm_api_key: str = Field(
        default="ollama",
        description="API key sent to the model server (Ollama ignores it)"
    )
    llm_model: str = Field(
        default="ticket-support-assistant",
        description="Preferred (fine-tuned) model name"
    )
    llm_fallback_model: str = Field(
        default="llama2",
        description="Base model name prefix used when the preferred model is missing"
    )
    llm_temperature: float = Field(
        default=0.7,
        description="Default temperature for LLM",
        ge=0.0,
        le=2.0
    )
    llm_max_tokens: int = Field(
        default=2048,
        description="Default max tokens for LLM generation",
        ge=1,
        le=8000
    )
    backend_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for generative backend and vector index calls",
        gt=0,
        le=300
    )

    # ========== Vector Search (Milvus) ==========
    vector_search_enabled: bool = Field(
        default=False,
        description="Rank candidates with the vector index instead of keyword scoring"
    )
    milvus_uri: str = Field(
        default="",
        description="Milvus / Zilliz Cloud URI, or a local file path for Milvus Lite"
    )
    milvus_token: str = Field(
        default="",
        description="Milvus / Zilliz Cloud API token"
    )
    milvus_collection_name: str = Field(
        default="company_data",
        description="Milvus collection name"
    )
    embedding_model: str = Field(
        default="llama2",
        description="Embedding model served by the model server"
    )
    use_bag_of_words_embeddings: bool = Field(
        default=False,
        description="Embed with the local bag-of-words embedder instead of the model server"
    )
    embedding_dimension: int = Field(
        default=1024,
        description="Embedding vector dimension",
        ge=16
    )
    top_k_results: int = Field(
        default=5,
        description="Number of candidate documents kept for reply assembly",
        ge=1,
        le=20
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
