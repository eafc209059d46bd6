"""Admin log Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from rjilat.models import AdminAction, TargetType
from rjilat.schemas.common import Pagination


class AdminLogTarget(BaseModel):
    """Entity an admin action applied to."""

    type: TargetType
    id: str | None = None
    username: str | None = None
    title: str | None = None


class AdminLogOut(BaseModel):
    """One admin log entry."""

    id: int
    admin_id: int
    action: AdminAction
    target: AdminLogTarget
    details: str
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdminLogPage(BaseModel):
    """One page of the admin log."""

    logs: list[AdminLogOut]
    pagination: Pagination
