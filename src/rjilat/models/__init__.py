# src/rjilat/models/__init__.py
"""SQLAlchemy models for the rjilat application."""

from .admin_log import AdminAction, AdminActionLog, TargetType
from .comment import Comment
from .post import Post, PostUpvote
from .status import ContentStatus, UserRole
from .user import User, UserFollow

__all__ = [
    "AdminAction", "AdminActionLog", "TargetType",
    "Comment",
    "Post", "PostUpvote",
    "ContentStatus", "UserRole",
    "User", "UserFollow",
]
