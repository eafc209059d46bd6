"""Schemas for the administrator content and account listings."""

from datetime import datetime

from pydantic import BaseModel

from rjilat.models import ContentStatus, UserRole
from rjilat.schemas.user import UserPublic


class PostRef(BaseModel):
    """Post a comment belongs to."""

    id: int
    title: str


class AdminCommentOut(BaseModel):
    """Comment row in the moderation listing."""

    id: int
    content: str
    author: UserPublic
    post: PostRef
    parent_comment_id: int | None
    status: ContentStatus
    created_at: datetime


class AdminUserOut(BaseModel):
    """Account row in the moderation listing, with activity totals."""

    id: int
    username: str
    role: UserRole
    followers_count: int
    following_count: int
    posts_count: int
    comments_count: int
    created_at: datetime
