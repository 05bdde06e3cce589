"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from supportdesk.core.exceptions import (
    ApplicationException,
    RepositoryException,
    ValidationException,
    InvalidQueryException,
    ExternalServiceException,
    BackendUnavailableException,
    LLMException,
    VectorStoreException,
)

__all__ = [
    "ApplicationException",
    "RepositoryException",
    "ValidationException",
    "InvalidQueryException",
    "ExternalServiceException",
    "BackendUnavailableException",
    "LLMException",
    "VectorStoreException",
]
