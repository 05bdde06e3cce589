"""
Shared API
==========

Middleware and exception handlers shared by every module's routes.
"""
