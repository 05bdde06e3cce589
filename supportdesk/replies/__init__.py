"""
Replies Module
==============

Bounded Context for support reply generation.

Responsibilities:
- Answer tickets from company knowledge (FAQs, documentation, policies)
- Prefer a generative model when one is available
- Degrade to a holding reply when the knowledge base is unreachable
"""

__version__ = "1.0.0"
