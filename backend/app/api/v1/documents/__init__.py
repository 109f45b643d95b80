"""
Documents module - document records and share links.

This module handles:
- Document metadata and the public portal
- Share links gated by password, email and terms acceptance
- Access statistics
"""
from app.api.v1.documents.documents import router as documents_router

__all__ = [
    "documents_router",
]
