"""
Support Reply Service
=====================

Drafts replies to customer support tickets from company knowledge.
"""

__version__ = "1.0.0"
