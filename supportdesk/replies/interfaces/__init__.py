"""
Replies Interfaces Layer
========================

Interface adapters (controllers) for the replies module.

Contains:
- Controllers: FastAPI route handlers
"""

from supportdesk.replies.interfaces.controllers import replies_router

__all__ = ["replies_router"]
