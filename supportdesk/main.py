"""
Support Reply Service - Main Application
========================================

Answers customer support tickets from company knowledge.

Modules:
- Replies: FAQ matching, topic routing and reply composition, with an
  optional generative model in front

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities, scorers and reply composition
- Infrastructure: Database, LLM, vector store
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

# Configuration and Core
from supportdesk.config import settings
from supportdesk.core import LLMException, VectorStoreException

# Infrastructure
from supportdesk.infrastructure.database import (
    close_database, create_tables, get_session_maker, init_database
)
from supportdesk.infrastructure.llm import create_embedder, create_llm_client
from supportdesk.infrastructure.vectorstore import MilvusVectorStore

# Replies Module
from supportdesk.replies.application import ReplyService
from supportdesk.replies.infrastructure import (
    GenerativeBackendAdapter,
    SQLAlchemyDocumentStore,
    SQLAlchemyReplyRecorder,
    VectorIndexAdapter,
)
from supportdesk.replies.interfaces import replies_router

# Shared
from supportdesk.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    global_exception_handler,
)
from supportdesk.shared.infrastructure.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Initialize database and create tables
    3. Connect the generative backend (optional)
    4. Initialize the vector index (optional)
    5. Wire the reply service

    SHUTDOWN:
    1. Close the generative backend
    2. Close the vector store
    3. Close database connections
    """
    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting Support Reply Service", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    logger.info("Initializing database")
    init_database()
    try:
        await create_tables()
    except (SQLAlchemyError, OSError) as e:
        # Keyword replies degrade to acknowledgements until the database is back
        logger.warning("Database not available - running in degraded mode", extra={"error": str(e)})

    session_maker = get_session_maker()

    llm_client = None
    backend = None
    if settings.generative_backend_enabled:
        logger.info("Connecting generative backend")
        llm_client = create_llm_client()
        backend = GenerativeBackendAdapter(llm_client)
        try:
            await backend.connect()
        except LLMException as e:
            logger.warning("Generative backend not available", extra={"error": e.message})
            await backend.close()
            llm_client = None
            backend = None

    vector_store = None
    vector_index = None
    if settings.vector_search_enabled:
        logger.info("Initializing Milvus vector store")
        vector_store = MilvusVectorStore(create_embedder(llm_client))
        try:
            await vector_store.initialize()
            vector_index = VectorIndexAdapter(vector_store)
        except VectorStoreException as e:
            logger.warning("Vector store not available", extra={"error": e.message})
            vector_store = None

    app.state.generative_backend = backend
    app.state.vector_store = vector_store
    app.state.reply_service = ReplyService(
        document_store=SQLAlchemyDocumentStore(session_maker),
        generative_backend=backend,
        vector_index=vector_index,
        recorder=SQLAlchemyReplyRecorder(session_maker),
        backend_timeout=settings.backend_timeout_seconds,
        candidate_limit=settings.top_k_results,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
    )

    logger.info("Support Reply Service started successfully")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down Support Reply Service")

    if backend:
        await backend.close()

    if vector_store:
        await vector_store.close()

    await close_database()

    logger.info("Support Reply Service shutdown complete")


app = FastAPI(
    title="Support Reply API",
    description="""
    ## Support Reply Service

    Drafts replies to customer support tickets from company knowledge.

    **Endpoints:**
    - `POST /replies/generate` - Generate a reply for a ticket

    **Reply strategy:**
    1. Generative model (Ollama), when configured and reachable
    2. Best matching FAQ question/answer pair
    3. Topic routing: subscription, technical, account, refund, feature
    4. Most relevant document in the knowledge base
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# === CORS Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIDMiddleware)
app.add_exception_handler(Exception, global_exception_handler)

# === Include Module Routers ===
app.include_router(replies_router)


# === Health Check Endpoint ===

@app.get("/health", tags=["Health"], responses={
    200: {
        "description": "Service is healthy",
        "content": {
            "application/json": {
                "example": {
                    "status": "healthy",
                    "version": "1.0.0",
                    "environment": "development",
                    "checks": {
                        "reply_service": "available",
                        "generative_backend": "not_configured",
                        "vector_store": "not_configured"
                    }
                }
            }
        }
    }
})
async def health_check(request: Request):
    """
    Health check endpoint for load balancers and orchestrators.

    The service stays healthy without the optional backends; keyword
    replies need only the reply service.
    """
    state = request.app.state
    checks = {
        "reply_service": "available" if getattr(state, "reply_service", None) else "not_initialized",
        "generative_backend": "available" if getattr(state, "generative_backend", None) else "not_configured",
        "vector_store": "not_configured",
    }

    vector_store = getattr(state, "vector_store", None)
    if vector_store is not None:
        try:
            count = await vector_store.get_document_count()
            checks["vector_store"] = f"available ({count} documents)"
        except VectorStoreException as e:
            checks["vector_store"] = f"error: {e.message}"

    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "checks": checks
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "architecture": "Clean Architecture / Modular Monolith",
        "docs": "/docs",
        "health": "/health",
        "modules": {
            "replies": {
                "prefix": "/replies",
                "endpoints": [
                    "POST /replies/generate - Generate a reply for a ticket"
                ]
            }
        }
    }


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "supportdesk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level="info"
    )
