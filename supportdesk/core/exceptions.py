"""
Core Exceptions
================

Custom exceptions for the support reply service.

Only InvalidQueryException is meant to reach callers of the reply engine.
Backend and repository failures are caught at the application boundary and
degrade to a best-effort reply.
"""

from typing import Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class RepositoryException(ApplicationException):
    """Base exception for repository/data access errors."""


class ValidationException(ApplicationException):
    """Exception for validation errors."""


class InvalidQueryException(ValidationException):
    """Raised when a reply is requested without a title or a description."""

    def __init__(self, message: str = "Ticket title or description is required", details: Optional[dict] = None):
        super().__init__(message, details)


class ExternalServiceException(ApplicationException):
    """Base exception for external service failures."""

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.service_name = service_name
        super().__init__(f"{service_name}: {message}", details)


class BackendUnavailableException(ExternalServiceException):
    """
    An optional backend (generative model or vector index) failed,
    timed out, or is not configured.

    Always recovered locally by falling back to keyword scoring.
    """


class LLMException(BackendUnavailableException):
    """Exception for generative backend failures."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("LLM Service", message, details)


class VectorStoreException(BackendUnavailableException):
    """Exception for vector store failures."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("Vector Store", message, details)
