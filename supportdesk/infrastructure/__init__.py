"""
Infrastructure
==============

Shared adapters to external systems: database, LLM server, vector store.
"""
