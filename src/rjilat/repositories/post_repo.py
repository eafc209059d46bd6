"""Data access helpers for working with posts."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, func, insert, select
from sqlalchemy.orm import Session

from rjilat.models import Comment, ContentStatus, Post, PostUpvote

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: int) -> Post | None:
        """Return a post by identifier."""
        return self.session.get(Post, post_id)

    def create(
        self,
        *,
        title: str,
        image_url: str,
        image_storage_key: str,
        author_id: int,
    ) -> Post:
        """Insert a new post and return the persisted ORM instance."""
        post = Post(
            title=title,
            image_url=image_url,
            image_storage_key=image_storage_key,
            author_id=author_id,
            status=ContentStatus.ACTIVE,
        )
        self.session.add(post)
        self.session.flush()
        return post

    def set_status(self, post: Post, status: ContentStatus) -> Post:
        """Write the moderation status of a post."""
        post.status = status
        self.session.flush()
        return post

    def ids_by_author(self, author_id: int) -> list[int]:
        """Return identifiers of every post written by `author_id`."""
        return list(
            self.session.scalars(select(Post.id).where(Post.author_id == author_id))
        )

    # Upvote set primitives. Each mutation is a single statement so two
    # concurrent toggles never overwrite each other's view of the set.

    def remove_upvote(self, post_id: int, user_id: int) -> bool:
        """Delete the (post, user) upvote row; return True if one existed."""
        result = self.session.execute(
            delete(PostUpvote).where(
                PostUpvote.post_id == post_id,
                PostUpvote.user_id == user_id,
            )
        )
        return bool(result.rowcount)

    def add_upvote(self, post_id: int, user_id: int) -> None:
        """Insert the (post, user) upvote row."""
        self.session.execute(insert(PostUpvote).values(post_id=post_id, user_id=user_id))

    def has_upvote(self, post_id: int, user_id: int) -> bool:
        """Return True if the user currently upvotes the post."""
        return self.session.scalar(
            select(PostUpvote.post_id).where(
                PostUpvote.post_id == post_id,
                PostUpvote.user_id == user_id,
            )
        ) is not None

    def upvote_count(self, post_id: int) -> int:
        """Return the cardinality of the post's upvote set."""
        return self.session.scalar(
            select(func.count()).select_from(PostUpvote).where(PostUpvote.post_id == post_id)
        ) or 0

    def upvoter_ids(self, post_id: int) -> set[int]:
        """Return the ids of users who upvoted the post."""
        return set(
            self.session.scalars(select(PostUpvote.user_id).where(PostUpvote.post_id == post_id))
        )

    def upvoted_post_ids(self, user_id: int, post_ids: Iterable[int]) -> set[int]:
        """Return which of `post_ids` the user has upvoted."""
        ids = list(post_ids)
        if not ids:
            return set()
        return set(
            self.session.scalars(
                select(PostUpvote.post_id).where(
                    PostUpvote.user_id == user_id,
                    PostUpvote.post_id.in_(ids),
                )
            )
        )

    def upvote_counts(self, post_ids: Iterable[int]) -> dict[int, int]:
        """Return upvote counts keyed by post id."""
        ids = list(post_ids)
        if not ids:
            return {}
        rows = self.session.execute(
            select(PostUpvote.post_id, func.count())
            .where(PostUpvote.post_id.in_(ids))
            .group_by(PostUpvote.post_id)
        )
        return {post_id: count for post_id, count in rows}

    def remove_upvotes_by_user(self, user_id: int) -> int:
        """Remove every upvote the user cast; return the number removed."""
        result = self.session.execute(delete(PostUpvote).where(PostUpvote.user_id == user_id))
        return result.rowcount or 0

    # Root comment set. Only comments without a parent belong to it.

    def root_comment_ids(self, post_id: int) -> list[int]:
        """Return ids of the post's root comments in creation order."""
        return list(
            self.session.scalars(
                select(Comment.id)
                .where(Comment.post_id == post_id, Comment.parent_comment_id.is_(None))
                .order_by(Comment.created_at, Comment.id)
            )
        )

    def root_comment_counts(self, post_ids: Iterable[int]) -> dict[int, int]:
        """Return root comment counts keyed by post id."""
        ids = list(post_ids)
        if not ids:
            return {}
        rows = self.session.execute(
            select(Comment.post_id, func.count())
            .where(Comment.post_id.in_(ids), Comment.parent_comment_id.is_(None))
            .group_by(Comment.post_id)
        )
        return {post_id: count for post_id, count in rows}

    def delete_with_comments(self, post_id: int) -> int:
        """Remove all comments of the post, its upvotes and the post row.

        Every depth level of the comment forest is matched by `post_id`, so
        one statement covers whole trees. Returns the number of comments
        removed. Deleting an already-gone post is a no-op.
        """
        removed = self.session.execute(delete(Comment).where(Comment.post_id == post_id))
        self.session.execute(delete(PostUpvote).where(PostUpvote.post_id == post_id))
        self.session.execute(delete(Post).where(Post.id == post_id))
        return removed.rowcount or 0
