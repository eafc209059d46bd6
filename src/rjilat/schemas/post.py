"""Post-related Pydantic schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from rjilat.models import ContentStatus
from rjilat.schemas.common import Pagination
from rjilat.schemas.user import UserPublic


class FeedSort(str, Enum):
    """Orderings supported by the global feed."""

    NEWEST = "newest"
    OLDEST = "oldest"
    POPULAR = "popular"


class PostSummary(BaseModel):
    """Post as shown in feeds, annotated with the caller's vote state."""

    id: int
    title: str
    image_url: str
    author: UserPublic
    upvotes_count: int = Field(..., ge=0)
    comments_count: int = Field(..., ge=0, description="Number of root comments")
    has_upvoted: bool = False
    status: ContentStatus
    created_at: datetime


class PostPage(BaseModel):
    """One page of the global feed."""

    posts: list[PostSummary]
    pagination: Pagination


class FollowingFeed(BaseModel):
    """Posts from followed users."""

    posts: list[PostSummary]
    message: str | None = None


class UpvoteResult(BaseModel):
    """Outcome of an upvote toggle."""

    upvoted: bool
    count: int = Field(..., ge=0)
