"""Upvote toggling on posts."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rjilat.core.errors import ForbiddenError, NotFoundError, StorageError
from rjilat.db.transaction import transaction
from rjilat.repositories import PostRepository, UserRepository
from rjilat.schemas.post import UpvoteResult

logger = logging.getLogger(__name__)


def toggle_upvote(db: Session, post_id: int, caller_id: int) -> UpvoteResult:
    """Flip the caller's upvote on a post.

    The set mutation is a single DELETE, falling back to an INSERT when
    nothing was removed. Calling twice restores the original state.

    Raises:
        NotFoundError: If the post or the caller does not exist.
        ForbiddenError: If the caller authored the post.
        StorageError: If the insert failed and no upvote row is present.
    """
    repo = PostRepository(db)
    with transaction(db, "toggle_upvote"):
        post = repo.get_by_id(post_id)
        if post is None:
            raise NotFoundError("Post not found", code="post_not_found")
        if post.author_id == caller_id:
            raise ForbiddenError("Cannot upvote your own post", code="self_upvote")
        if UserRepository(db).get_by_id(caller_id) is None:
            raise NotFoundError("User not found", code="user_not_found")

        if repo.remove_upvote(post_id, caller_id):
            upvoted = False
        else:
            try:
                with db.begin_nested():
                    repo.add_upvote(post_id, caller_id)
            except IntegrityError as err:
                # Only a concurrent toggle that inserted the same row is benign.
                if not repo.has_upvote(post_id, caller_id):
                    raise StorageError(
                        "Upvote could not be recorded", code="upvote_failed"
                    ) from err
                logger.debug("Upvote on post %s by %s already present", post_id, caller_id)
            upvoted = True
        count = repo.upvote_count(post_id)

    return UpvoteResult(upvoted=upvoted, count=count)
