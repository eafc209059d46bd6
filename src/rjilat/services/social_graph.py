"""Follow graph maintenance and profile lookups."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rjilat.core.errors import ForbiddenError, NotFoundError, StorageError
from rjilat.core.settings import settings
from rjilat.db.transaction import transaction
from rjilat.models import Post, User, UserFollow
from rjilat.repositories import UserRepository
from rjilat.schemas.user import FollowResult, UserProfile, UserPublic, UserSummary

logger = logging.getLogger(__name__)


def toggle_follow(db: Session, follower_id: int, target_id: int) -> FollowResult:
    """Follow `target_id` if not yet following, otherwise unfollow.

    Both sides of the relationship are one edge row, written in a single
    transaction that is rolled back on any failure.

    Raises:
        ForbiddenError: If a user tries to follow itself.
        NotFoundError: If either user does not exist.
        StorageError: If the insert failed and no edge is present.
    """
    if follower_id == target_id:
        raise ForbiddenError("Cannot follow yourself", code="self_follow")

    users = UserRepository(db)
    with transaction(db, "toggle_follow"):
        if users.get_by_id(target_id) is None:
            raise NotFoundError("User not found", code="user_not_found")
        if users.get_by_id(follower_id) is None:
            raise NotFoundError("Current user not found", code="user_not_found")

        if users.remove_follow(follower_id, target_id):
            following = False
        else:
            try:
                with db.begin_nested():
                    users.add_follow(follower_id, target_id)
            except IntegrityError as err:
                if not users.is_following(follower_id, target_id):
                    raise StorageError(
                        "Follow could not be recorded", code="follow_failed"
                    ) from err
                logger.debug("Follow %s -> %s already present", follower_id, target_id)
            following = True
        follower_count = users.follower_count(target_id)

    logger.info(
        "User %s %s user %s",
        follower_id,
        "followed" if following else "unfollowed",
        target_id,
    )
    return FollowResult(following=following, target_follower_count=follower_count)


def get_user_by_username(db: Session, username: str) -> User:
    """Return the user or raise ``NotFoundError``."""
    user = UserRepository(db).get_by_username(username)
    if user is None:
        raise NotFoundError("User not found", code="user_not_found")
    return user


def get_profile(db: Session, username: str, caller_id: int | None = None) -> UserProfile:
    """Return profile data for `username` from the caller's point of view."""
    users = UserRepository(db)
    user = get_user_by_username(db, username)
    posts_count = db.scalar(
        select(func.count()).select_from(Post).where(Post.author_id == user.id)
    ) or 0
    return UserProfile(
        id=user.id,
        username=user.username,
        followers_count=users.follower_count(user.id),
        following_count=users.following_count(user.id),
        posts_count=posts_count,
        is_following=bool(caller_id) and users.is_following(caller_id, user.id),
        created_at=user.created_at,
    )


def list_followers(db: Session, username: str) -> list[UserPublic]:
    """Return the users following `username`, ordered by username."""
    user = get_user_by_username(db, username)
    return sorted(
        (UserPublic.model_validate(u) for u in user.followers),
        key=lambda u: u.username,
    )


def list_following(db: Session, username: str) -> list[UserPublic]:
    """Return the users `username` follows, ordered by username."""
    user = get_user_by_username(db, username)
    return sorted(
        (UserPublic.model_validate(u) for u in user.following),
        key=lambda u: u.username,
    )


def summarize_users(
    db: Session,
    users: Sequence[User],
    caller_id: int | None = None,
) -> list[UserSummary]:
    """Annotate users with graph and post counts in a fixed number of queries."""
    repo = UserRepository(db)
    ids = [user.id for user in users]
    followers = repo.follower_counts(ids)
    following = repo.following_counts(ids)
    posts = repo.post_counts(ids)
    followed = repo.followed_among(caller_id, ids) if caller_id else set()
    return [
        UserSummary(
            id=user.id,
            username=user.username,
            followers_count=followers.get(user.id, 0),
            following_count=following.get(user.id, 0),
            posts_count=posts.get(user.id, 0),
            is_following=user.id in followed,
        )
        for user in users
    ]


def search_users(db: Session, query: str, caller_id: int | None = None) -> list[UserSummary]:
    """Return users whose name contains `query`, case-insensitively.

    Queries shorter than ``settings.search_min_length`` after trimming
    match nothing.
    """
    term = (query or "").strip().lower()
    if len(term) < settings.search_min_length:
        return []
    stmt = (
        select(User)
        .where(func.lower(User.username).contains(term, autoescape=True))
        .order_by(User.username)
        .limit(settings.search_results_limit)
    )
    return summarize_users(db, list(db.scalars(stmt)), caller_id)


def popular_users(db: Session, caller_id: int | None = None) -> list[UserSummary]:
    """Return the most-followed users, excluding the caller."""
    follower_counts = (
        select(UserFollow.followee_id, func.count().label("followers"))
        .group_by(UserFollow.followee_id)
        .subquery()
    )
    stmt = select(User).outerjoin(follower_counts, follower_counts.c.followee_id == User.id)
    if caller_id:
        stmt = stmt.where(User.id != caller_id)
    stmt = stmt.order_by(
        func.coalesce(follower_counts.c.followers, 0).desc(), User.username
    ).limit(settings.popular_users_limit)
    return summarize_users(db, list(db.scalars(stmt)), caller_id)
