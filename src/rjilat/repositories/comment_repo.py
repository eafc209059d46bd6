"""Data access helpers for working with comments."""
from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from rjilat.models import Comment, ContentStatus

__all__ = ["CommentRepository"]


class CommentRepository:
    """Thin wrapper around database access for comment entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, comment_id: int) -> Comment | None:
        """Return a comment by identifier."""
        return self.session.get(Comment, comment_id)

    def exists(self, comment_id: int) -> bool:
        """Return True if the comment row is still present."""
        return self.session.scalar(
            select(Comment.id).where(Comment.id == comment_id)
        ) is not None

    def list_for_post(self, post_id: int) -> list[Comment]:
        """Return every comment of the post ordered by creation time."""
        return list(
            self.session.scalars(
                select(Comment)
                .where(Comment.post_id == post_id)
                .order_by(Comment.created_at, Comment.id)
            )
        )

    def child_ids(self, comment_id: int) -> list[int]:
        """Return ids of the direct replies to a comment."""
        return list(
            self.session.scalars(
                select(Comment.id)
                .where(Comment.parent_comment_id == comment_id)
                .order_by(Comment.created_at, Comment.id)
            )
        )

    def ids_by_author(self, author_id: int) -> list[int]:
        """Return ids of every comment written by `author_id`."""
        return list(
            self.session.scalars(
                select(Comment.id)
                .where(Comment.author_id == author_id)
                .order_by(Comment.id)
            )
        )

    def create(
        self,
        *,
        content: str,
        author_id: int,
        post_id: int,
        parent_comment_id: int | None,
    ) -> Comment:
        """Insert a new comment and return the persisted ORM instance."""
        comment = Comment(
            content=content,
            author_id=author_id,
            post_id=post_id,
            parent_comment_id=parent_comment_id,
            status=ContentStatus.ACTIVE,
        )
        self.session.add(comment)
        self.session.flush()
        return comment

    def set_status(self, comment: Comment, status: ContentStatus) -> Comment:
        """Write the moderation status of a comment."""
        comment.status = status
        self.session.flush()
        return comment

    def delete_by_id(self, comment_id: int) -> int:
        """Delete a single comment row; return 1 if it existed, else 0."""
        result = self.session.execute(delete(Comment).where(Comment.id == comment_id))
        return result.rowcount or 0
