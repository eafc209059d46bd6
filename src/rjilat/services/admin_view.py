"""Read-only listings for the moderation console.

Unlike the public feed these include hidden and reported content, and
every call requires an administrator.
"""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from rjilat.core.identity import Caller, require_admin
from rjilat.models import Comment, Post, User
from rjilat.repositories import UserRepository
from rjilat.schemas.admin_view import AdminCommentOut, AdminUserOut, PostRef
from rjilat.schemas.post import PostSummary
from rjilat.schemas.user import UserPublic
from rjilat.services.feed import summarize_posts


def list_all_posts(db: Session, caller: Caller) -> list[PostSummary]:
    """Return every post regardless of status, newest first."""
    require_admin(caller)
    stmt = select(Post).order_by(Post.created_at.desc(), Post.id.desc())
    return summarize_posts(db, list(db.scalars(stmt)), caller.id)


def list_all_comments(db: Session, caller: Caller) -> list[AdminCommentOut]:
    """Return every comment with the post it belongs to, newest first."""
    require_admin(caller)
    stmt = (
        select(Comment, Post.title)
        .join(Post, Post.id == Comment.post_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    return [
        AdminCommentOut(
            id=comment.id,
            content=comment.content,
            author=UserPublic(id=comment.author.id, username=comment.author.username),
            post=PostRef(id=comment.post_id, title=title),
            parent_comment_id=comment.parent_comment_id,
            status=comment.status,
            created_at=comment.created_at,
        )
        for comment, title in db.execute(stmt)
    ]


def list_all_users(db: Session, caller: Caller) -> list[AdminUserOut]:
    """Return every account with follow and content totals, newest first."""
    require_admin(caller)
    users = list(db.scalars(select(User).order_by(User.created_at.desc(), User.id.desc())))
    repo = UserRepository(db)
    ids = [user.id for user in users]
    followers = repo.follower_counts(ids)
    following = repo.following_counts(ids)
    posts = repo.post_counts(ids)
    comments = repo.comment_counts(ids)
    return [
        AdminUserOut(
            id=user.id,
            username=user.username,
            role=user.role,
            followers_count=followers.get(user.id, 0),
            following_count=following.get(user.id, 0),
            posts_count=posts.get(user.id, 0),
            comments_count=comments.get(user.id, 0),
            created_at=user.created_at,
        )
        for user in users
    ]
