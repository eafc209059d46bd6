"""SQLAlchemy models for image posts and their upvotes."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rjilat.db.session import Base
from rjilat.db.time import utcnow
from rjilat.models.status import ContentStatus, enum_column
from rjilat.models.user import User

TITLE_MAX_LENGTH = 100


class Post(Base):
    """Uploaded image with a title, owned by its author.

    Root comments are the post's comments with no parent; they are not
    duplicated in a column on this table.
    """

    __tablename__ = "post"
    __table_args__ = (
        Index("ix_post_author_created", "author_id", "created_at"),
        Index("ix_post_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    image_storage_key: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
    )
    status: Mapped[ContentStatus] = mapped_column(
        enum_column(ContentStatus, "content_status"),
        nullable=False,
        default=ContentStatus.ACTIVE,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    author: Mapped[User] = relationship("User", lazy="joined")


class PostUpvote(Base):
    """Per-user upvote on a post."""

    __tablename__ = "post_upvote"
    __table_args__ = (Index("ix_post_upvote_user_id", "user_id"),)

    # Composite primary key prevents duplicate votes from the same user.
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        primary_key=True,
    )
