"""
Replies Controllers (API Routes)
================================

FastAPI routes for reply generation.

Controllers delegate to application services.
"""

import time

from fastapi import APIRouter, Depends, HTTPException, Request, status

from supportdesk.core import InvalidQueryException
from supportdesk.replies.application import (
    GenerateReplyRequest,
    GenerateReplyResponse,
    ReplyService,
)
from supportdesk.shared.infrastructure.logging import get_context_logger

router = APIRouter(prefix="/replies", tags=["Replies"])


# ========== Example payloads for Swagger ==========

GENERATE_REQUEST_EXAMPLE = {
    "ticket_id": "TICKET-001",
    "title": "Refund question",
    "description": "How long does it take to get a refund?",
    "customer_name": "Alex"
}

GENERATE_RESPONSE_EXAMPLE = {
    "ticket_id": "TICKET-001",
    "reply_text": "Dear Alex,\n\nThank you for contacting our support team regarding \"Refund question\". "
                  "I'm happy to help with your question.\n\nRefunds are processed within 5 business days."
                  "\n\nIf you need any further clarification or have additional questions, please don't "
                  "hesitate to ask.\n\nBest regards,\nSupport Team",
    "branch": "faq",
    "source": "keyword",
    "processing_time_ms": 12
}


# ========== Dependencies ==========

def get_reply_service(request: Request) -> ReplyService:
    """Get the reply service from app state."""
    service = getattr(request.app.state, "reply_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Reply service not initialized"
        )
    return service


# ========== Route Handlers ==========

@router.post(
    "/generate",
    response_model=GenerateReplyResponse,
    summary="Generate a support reply",
    description="""
    Generate a reply to a support ticket from company knowledge.

    The endpoint:
    1. Asks the generative backend, when one is configured and reachable
    2. Otherwise answers from the best matching FAQ pair
    3. Otherwise answers by topic (subscription, technical, account, refund, feature)
    4. Otherwise quotes the most relevant document

    `query` is accepted as an alias for `description`.
    """,
    responses={
        200: {
            "description": "Reply generated",
            "content": {"application/json": {"example": GENERATE_RESPONSE_EXAMPLE}}
        },
        400: {"description": "Neither title nor description given"},
        503: {"description": "Reply service not initialized"}
    }
)
async def generate_reply(
    request: Request,
    payload: GenerateReplyRequest,
    service: ReplyService = Depends(get_reply_service)
):
    start_time = time.perf_counter()
    correlation_id = getattr(request.state, "correlation_id", None)
    logger = get_context_logger(__name__, correlation_id)

    try:
        result = await service.generate_reply(
            title=payload.title,
            description=payload.description,
            customer_name=payload.customer_name,
            ticket_id=payload.ticket_id,
            ticket_status=payload.ticket_status,
            ticket_priority=payload.ticket_priority,
        )
    except InvalidQueryException as e:
        logger.info("Rejected reply request", extra={"reason": e.message})
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return GenerateReplyResponse(
        ticket_id=payload.ticket_id,
        reply_text=result.reply_text,
        branch=result.branch,
        source=result.source,
        processing_time_ms=int((time.perf_counter() - start_time) * 1000)
    )


# Export router for inclusion in main app
replies_router = router
