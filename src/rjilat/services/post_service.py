"""Service-level helpers for publishing posts."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from rjilat.core.errors import StorageError, ValidationError
from rjilat.core.settings import settings
from rjilat.db.transaction import transaction
from rjilat.models.post import TITLE_MAX_LENGTH
from rjilat.repositories import PostRepository
from rjilat.schemas.post import PostSummary
from rjilat.services.blob_store import BlobStore, delete_blob_quietly
from rjilat.services.feed import summarize_posts

logger = logging.getLogger(__name__)


def validate_title(title: str | None) -> str:
    """Return the trimmed title or raise ``ValidationError``."""
    text = (title or "").strip()
    if not text:
        raise ValidationError("Title is required", code="title_required")
    if len(text) > TITLE_MAX_LENGTH:
        raise ValidationError(
            f"Title must be less than {TITLE_MAX_LENGTH} characters",
            code="title_too_long",
        )
    return text


def validate_image(data: bytes, content_type: str | None) -> None:
    """Check the upload's declared type and size."""
    if not data:
        raise ValidationError("Image is required", code="image_required")
    if content_type not in settings.allowed_image_types:
        raise ValidationError(
            "Invalid file type. Please upload JPEG, PNG, GIF, or WebP images only",
            code="invalid_image_type",
        )
    if len(data) > settings.max_upload_bytes:
        raise ValidationError(
            f"File size too large. Maximum size is {settings.max_upload_bytes // (1024 * 1024)}MB",
            code="image_too_large",
        )


def create_post(
    db: Session,
    blob_store: BlobStore,
    *,
    author_id: int,
    title: str,
    image: bytes,
    content_type: str | None,
) -> PostSummary:
    """Store the image and persist a new active post.

    Raises:
        ValidationError: If the title or image is invalid.
        StorageError: If the blob store or the database fails. A blob that
            was stored before a database failure is removed again.
    """
    clean_title = validate_title(title)
    validate_image(image, content_type)

    blob = blob_store.store(image, settings.blob_folder, content_type)
    try:
        with transaction(db, "create_post"):
            post = PostRepository(db).create(
                title=clean_title,
                image_url=blob.url,
                image_storage_key=blob.storage_key,
                author_id=author_id,
            )
    except StorageError:
        delete_blob_quietly(blob_store, blob.storage_key)
        raise

    db.refresh(post)
    logger.info("Post %s created by user %s", post.id, author_id)
    return summarize_posts(db, [post], author_id)[0]
