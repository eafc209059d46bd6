"""Comment-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from rjilat.models import ContentStatus
from rjilat.models.comment import CONTENT_MAX_LENGTH
from rjilat.schemas.user import UserPublic


class CommentCreate(BaseModel):
    """Schema for submitting a comment or a reply."""

    content: str = Field(..., description=f"Comment text (max {CONTENT_MAX_LENGTH} characters)")
    parent_comment_id: int | None = Field(None, description="Comment being replied to")


class CommentNode(BaseModel):
    """Comment with its replies nested in creation order."""

    id: int
    content: str
    author: UserPublic
    post_id: int
    parent_comment_id: int | None
    status: ContentStatus
    created_at: datetime
    replies: list[CommentNode] = Field(default_factory=list)


class CommentThread(BaseModel):
    """Comment forest of a post."""

    post_id: int
    comments: list[CommentNode]
