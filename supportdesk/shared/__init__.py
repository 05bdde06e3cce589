"""
Shared Kernel Module
====================

Shared infrastructure used by every bounded context (currently: Replies).

Architecture Pattern: Modular Monolith
- Each module (replies) is a bounded context
- Shared kernel contains only generic infrastructure

DO NOT add reply scoring or composition logic to the shared kernel.
"""

__version__ = "1.0.0"
