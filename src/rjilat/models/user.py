"""SQLAlchemy models for user accounts and the follow graph."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rjilat.db.session import Base
from rjilat.db.time import utcnow
from rjilat.models.status import UserRole, enum_column

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20


class User(Base):
    """Registered account that can post, comment, vote and follow."""

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(
        String(USERNAME_MAX_LENGTH),
        unique=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        enum_column(UserRole, "user_role"),
        nullable=False,
        default=UserRole.USER,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    # Both sides of the graph are projections of the same edge rows.
    followers: Mapped[list[User]] = relationship(
        "User",
        secondary="user_follow",
        primaryjoin="User.id == UserFollow.followee_id",
        secondaryjoin="User.id == UserFollow.follower_id",
        viewonly=True,
    )
    following: Mapped[list[User]] = relationship(
        "User",
        secondary="user_follow",
        primaryjoin="User.id == UserFollow.follower_id",
        secondaryjoin="User.id == UserFollow.followee_id",
        viewonly=True,
    )


class UserFollow(Base):
    """Directed follow edge: `follower_id` follows `followee_id`."""

    __tablename__ = "user_follow"
    __table_args__ = (
        CheckConstraint("follower_id <> followee_id", name="ck_user_follow_not_self"),
        Index("ix_user_follow_followee_id", "followee_id"),
    )

    # Composite primary key prevents duplicate edges.
    follower_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        primary_key=True,
    )
    followee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        primary_key=True,
    )
