"""Moderation-related Pydantic schemas."""

from enum import Enum

from pydantic import BaseModel, Field


class BulkActionType(str, Enum):
    """Actions an administrator can apply to a batch of items."""

    DELETE = "delete"
    HIDE = "hide"
    SHOW = "show"


class ModerationTarget(str, Enum):
    """Content types the moderation engine operates on."""

    POST = "post"
    COMMENT = "comment"


class StatusUpdate(BaseModel):
    """Request body for a single status transition.

    Kept as a plain string so unknown values reach the service and are
    rejected there with a domain error.
    """

    status: str = Field(..., description="One of active, hidden, reported")


class VisibilityUpdate(BaseModel):
    """Request body for toggling a post's public visibility."""

    is_public: bool


class StatusResult(BaseModel):
    """Outcome of a status transition."""

    id: int
    target_type: ModerationTarget
    status: str


class BulkActionRequest(BaseModel):
    """Request body for bulk moderation."""

    action: str = Field(..., description="One of delete, hide, show")
    ids: list[int] = Field(default_factory=list, description="Target identifiers")


class BulkActionResult(BaseModel):
    """Outcome of a bulk moderation request."""

    action: BulkActionType
    target_type: ModerationTarget
    requested: int
    affected: int
    comments_removed: int = 0
    message: str


class DeleteResult(BaseModel):
    """Outcome of a cascading deletion."""

    id: int
    target_type: str
    comments_removed: int = 0
    posts_removed: int = 0
    message: str
