# mypy: ignore-errors
# tests/services/test_blob_store.py
"""Tests for the filesystem blob store."""

import pytest

from rjilat.core.errors import StorageError
from rjilat.services.blob_store import LocalBlobStore, delete_blob_quietly


def test_store_and_delete(tmp_path) -> None:
    store = LocalBlobStore(tmp_path, "/uploads/")
    blob = store.store(b"image-bytes", "rjilat/posts", "image/png")

    assert blob.storage_key.startswith("rjilat/posts/")
    assert blob.storage_key.endswith(".png")
    assert blob.url == f"/uploads/{blob.storage_key}"
    assert (tmp_path / blob.storage_key).read_bytes() == b"image-bytes"

    store.delete(blob.storage_key)
    assert not (tmp_path / blob.storage_key).exists()
    store.delete(blob.storage_key)


def test_keys_cannot_escape_root(tmp_path) -> None:
    store = LocalBlobStore(tmp_path / "blobs", "/uploads")
    with pytest.raises(StorageError):
        store.delete("../outside.png")


def test_delete_blob_quietly_logs_failures(tmp_path, caplog) -> None:
    store = LocalBlobStore(tmp_path, "/uploads")
    delete_blob_quietly(store, None)
    delete_blob_quietly(store, "../../etc/passwd")
    assert "Failed to delete blob" in caplog.text
