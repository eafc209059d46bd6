# src/rjilat/services/__init__.py
"""Business logic services for the rjilat application."""

from .blob_store import BlobStore, LocalBlobStore, StoredBlob, get_blob_store
from .moderation import ModerationService

__all__ = [
    "BlobStore",
    "LocalBlobStore",
    "StoredBlob",
    "get_blob_store",
    "ModerationService",
]
