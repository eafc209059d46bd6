"""SQLAlchemy model for threaded comments."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rjilat.db.session import Base
from rjilat.db.time import utcnow
from rjilat.models.status import ContentStatus, enum_column
from rjilat.models.user import User

CONTENT_MAX_LENGTH = 1000


class Comment(Base):
    """Comment on a post; replies point at their parent comment.

    Comments form one tree per root comment. `parent_comment_id` always
    references an earlier comment of the same post.
    """

    __tablename__ = "comment"
    __table_args__ = (
        Index("ix_comment_post_created", "post_id", "created_at"),
        Index("ix_comment_parent_created", "parent_comment_id", "created_at"),
        Index("ix_comment_author_created", "author_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
    )
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id"),
        nullable=False,
    )
    # NULL for root comments attached directly to the post.
    parent_comment_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comment.id"),
        nullable=True,
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
