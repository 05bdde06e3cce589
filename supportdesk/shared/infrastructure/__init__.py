"""
Infrastructure Layer
=====================

Low-level technical concerns shared across modules:
- Logging setup
- Request tracing helpers
"""
