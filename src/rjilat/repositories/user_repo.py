"""Data access helpers for users and follow edges."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, func, insert, or_, select
from sqlalchemy.orm import Session

from rjilat.models import Comment, Post, User, UserFollow, UserRole

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around database access for users and the follow graph."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, user_id: int) -> User | None:
        """Return a user by primary key."""
        return self.session.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        """Return a user by unique username."""
        return self.session.scalar(select(User).where(User.username == username))

    def create(self, *, username: str, password_hash: str, role: UserRole) -> User:
        """Insert a new user and return the persisted ORM instance."""
        user = User(username=username, password_hash=password_hash, role=role)
        self.session.add(user)
        self.session.flush()
        return user

    def delete(self, user_id: int) -> int:
        """Delete the user row; return 1 if it existed, else 0."""
        result = self.session.execute(delete(User).where(User.id == user_id))
        return result.rowcount or 0

    # Follow edges. One row carries both the follower and following side.

    def remove_follow(self, follower_id: int, followee_id: int) -> bool:
        """Delete the follow edge; return True if one existed."""
        result = self.session.execute(
            delete(UserFollow).where(
                UserFollow.follower_id == follower_id,
                UserFollow.followee_id == followee_id,
            )
        )
        return bool(result.rowcount)

    def add_follow(self, follower_id: int, followee_id: int) -> None:
        """Insert a follow edge."""
        self.session.execute(
            insert(UserFollow).values(follower_id=follower_id, followee_id=followee_id)
        )

    def is_following(self, follower_id: int, followee_id: int) -> bool:
        """Return True if `follower_id` follows `followee_id`."""
        return self.session.scalar(
            select(UserFollow.follower_id).where(
                UserFollow.follower_id == follower_id,
                UserFollow.followee_id == followee_id,
            )
        ) is not None

    def follower_ids(self, user_id: int) -> set[int]:
        """Return ids of users following `user_id`."""
        return set(
            self.session.scalars(
                select(UserFollow.follower_id).where(UserFollow.followee_id == user_id)
            )
        )

    def following_ids(self, user_id: int) -> set[int]:
        """Return ids of users `user_id` follows."""
        return set(
            self.session.scalars(
                select(UserFollow.followee_id).where(UserFollow.follower_id == user_id)
            )
        )

    def follower_count(self, user_id: int) -> int:
        """Return the size of the user's followers set."""
        return self.session.scalar(
            select(func.count()).select_from(UserFollow).where(UserFollow.followee_id == user_id)
        ) or 0

    def following_count(self, user_id: int) -> int:
        """Return the size of the user's following set."""
        return self.session.scalar(
            select(func.count()).select_from(UserFollow).where(UserFollow.follower_id == user_id)
        ) or 0

    def follower_counts(self, user_ids: Iterable[int]) -> dict[int, int]:
        """Return follower counts keyed by user id."""
        return self._grouped_counts(UserFollow.followee_id, user_ids)

    def following_counts(self, user_ids: Iterable[int]) -> dict[int, int]:
        """Return following counts keyed by user id."""
        return self._grouped_counts(UserFollow.follower_id, user_ids)

    def post_counts(self, user_ids: Iterable[int]) -> dict[int, int]:
        """Return authored post counts keyed by user id."""
        return self._grouped_counts(Post.author_id, user_ids)

    def comment_counts(self, user_ids: Iterable[int]) -> dict[int, int]:
        """Return authored comment counts keyed by user id."""
        return self._grouped_counts(Comment.author_id, user_ids)

    def followed_among(self, follower_id: int, user_ids: Iterable[int]) -> set[int]:
        """Return which of `user_ids` are followed by `follower_id`."""
        ids = list(user_ids)
        if not ids:
            return set()
        return set(
            self.session.scalars(
                select(UserFollow.followee_id).where(
                    UserFollow.follower_id == follower_id,
                    UserFollow.followee_id.in_(ids),
                )
            )
        )

    def _grouped_counts(self, column, user_ids: Iterable[int]) -> dict[int, int]:
        ids = list(user_ids)
        if not ids:
            return {}
        rows = self.session.execute(
            select(column, func.count()).where(column.in_(ids)).group_by(column)
        )
        return {user_id: count for user_id, count in rows}

    def prune_edges(self, user_id: int) -> int:
        """Remove every follow edge referencing the user in either direction."""
        result = self.session.execute(
            delete(UserFollow).where(
                or_(UserFollow.follower_id == user_id, UserFollow.followee_id == user_id)
            )
        )
        return result.rowcount or 0
