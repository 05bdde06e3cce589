"""
Replies Application DTOs
========================

Data Transfer Objects for the replies API layer.

Pydantic models for request/response validation.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator


ReplySourceStr = Literal["generative", "vector", "keyword", "none"]

MAX_DESCRIPTION_LENGTH = 10000


# ========== Request DTOs ==========

class GenerateReplyRequest(BaseModel):
    """
    Request model for reply generation.

    ``query`` is accepted in place of ``description`` for older callers.
    Blank title and description are rejected by the service, not here.
    """
    ticket_id: Optional[str] = Field(None, description="External ticket ID")
    title: Optional[str] = Field(None, description="Ticket title")
    description: Optional[str] = Field(None, description="Ticket description")
    query: Optional[str] = Field(None, description="Alias for description")
    customer_name: Optional[str] = Field(None, description="Name used in the salutation")
    ticket_status: str = Field(default="Open", description="Ticket status (advisory)")
    ticket_priority: str = Field(default="Medium", description="Ticket priority (advisory)")

    @model_validator(mode="after")
    def apply_query_alias(self) -> "GenerateReplyRequest":
        """Copy ``query`` into ``description`` and cap its length."""
        if not self.description and self.query:
            self.description = self.query
        if self.description is not None and len(self.description) > MAX_DESCRIPTION_LENGTH:
            raise ValueError(
                f"Description too long (max {MAX_DESCRIPTION_LENGTH} characters)"
            )
        return self


# ========== Response DTOs ==========

class GenerateReplyResponse(BaseModel):
    """Response model for reply generation."""
    ticket_id: Optional[str]
    reply_text: str
    branch: str
    source: ReplySourceStr
    processing_time_ms: int
