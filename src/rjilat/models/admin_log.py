"""Append-only audit trail of administrator actions."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rjilat.db.session import Base
from rjilat.db.time import utcnow
from rjilat.models.status import enum_column


class AdminAction(str, Enum):
    """Actions recorded in the admin log."""

    DELETE_USER = "delete_user"
    DELETE_POST = "delete_post"
    DELETE_COMMENT = "delete_comment"
    HIDE_POST = "hide_post"
    SHOW_POST = "show_post"
    REPORT_POST = "report_post"
    HIDE_COMMENT = "hide_comment"
    SHOW_COMMENT = "show_comment"
    REPORT_COMMENT = "report_comment"
    BULK_DELETE_POSTS = "bulk_delete_posts"
    BULK_DELETE_COMMENTS = "bulk_delete_comments"
    BULK_HIDE_POSTS = "bulk_hide_posts"
    BULK_SHOW_POSTS = "bulk_show_posts"
    BULK_HIDE_COMMENTS = "bulk_hide_comments"
    BULK_SHOW_COMMENTS = "bulk_show_comments"
    VIEW_ANALYTICS = "view_analytics"
    LOGIN = "login"
    LOGOUT = "logout"


class TargetType(str, Enum):
    """Kind of entity an admin action applies to."""

    USER = "user"
    POST = "post"
    COMMENT = "comment"
    SYSTEM = "system"


class AdminActionLog(Base):
    """One audited administrator action. Rows are never updated."""

    __tablename__ = "admin_action_log"
    __table_args__ = (
        Index("ix_admin_log_admin_created", "admin_id", "created_at"),
        Index("ix_admin_log_action_created", "action", "created_at"),
        Index("ix_admin_log_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Plain integer so the trail survives account removal.
    admin_id: Mapped[int] = mapped_column(Integer, nullable=False)
    action: Mapped[AdminAction] = mapped_column(
        enum_column(AdminAction, "admin_action"),
        nullable=False,
    )
    target_type: Mapped[TargetType] = mapped_column(
        enum_column(TargetType, "admin_target_type"),
        nullable=False,
    )
    target_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    target_username: Mapped[str | None] = mapped_column(String(64), nullable=True)
    target_title: Mapped[str | None] = mapped_column(Text, nullable=True)
    details: Mapped[str] = mapped_column(Text, nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
