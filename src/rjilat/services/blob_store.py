"""Blob storage for uploaded post images.

The rest of the application only sees the `BlobStore` protocol: bytes go
in, an opaque URL and storage key come out. `LocalBlobStore` keeps files
under a directory and serves them below a configured base URL.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol
from uuid import uuid4

from rjilat.core.errors import StorageError
from rjilat.core.settings import settings

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


@dataclass(frozen=True)
class StoredBlob:
    """Location of a stored blob."""

    url: str
    storage_key: str


class BlobStore(Protocol):
    """Interface the core expects from an image store."""

    def store(self, data: bytes, folder: str, content_type: str | None = None) -> StoredBlob:
        ...

    def delete(self, storage_key: str) -> None:
        ...


class LocalBlobStore:
    """Filesystem-backed blob store."""

    def __init__(self, root: str | Path, base_url: str) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _path_for(self, storage_key: str) -> Path:
        path = (self.root / storage_key).resolve()
        if self.root.resolve() not in path.parents:
            raise StorageError(f"Storage key escapes blob root: {storage_key}")
        return path

    def store(self, data: bytes, folder: str, content_type: str | None = None) -> StoredBlob:
        """Write `data` below `folder` and return its URL and key."""
        suffix = _EXTENSIONS.get(content_type or "", "")
        storage_key = f"{folder.strip('/')}/{uuid4().hex}{suffix}"
        path = self._path_for(storage_key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as err:
            raise StorageError(f"Failed to store blob: {err}", code="upload_error") from err
        logger.debug("Stored blob %s (%d bytes)", storage_key, len(data))
        return StoredBlob(url=f"{self.base_url}/{storage_key}", storage_key=storage_key)

    def delete(self, storage_key: str) -> None:
        """Remove the blob; deleting a missing key is a no-op."""
        path = self._path_for(storage_key)
        try:
            path.unlink(missing_ok=True)
        except OSError as err:
            raise StorageError(f"Failed to delete blob: {err}", code="delete_error") from err


def get_blob_store() -> BlobStore:
    """Return the configured blob store."""
    return LocalBlobStore(settings.blob_storage_dir, settings.blob_base_url)


def delete_blob_quietly(blob_store: BlobStore, storage_key: str | None) -> None:
    """Delete a blob, logging instead of raising on failure.

    Used after the database side of a deletion is committed, when there is
    nothing left to roll back.
    """
    if not storage_key:
        return
    try:
        blob_store.delete(storage_key)
    except StorageError as err:
        logger.warning("Failed to delete blob %s: %s", storage_key, err.message)
