"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .admin_log import AdminLogOut, AdminLogPage, AdminLogTarget
from .admin_view import AdminCommentOut, AdminUserOut, PostRef
from .comment import CommentCreate, CommentNode, CommentThread
from .common import Pagination
from .moderation import (
    BulkActionRequest,
    BulkActionResult,
    BulkActionType,
    DeleteResult,
    ModerationTarget,
    StatusResult,
    StatusUpdate,
    VisibilityUpdate,
)
from .post import FeedSort, FollowingFeed, PostPage, PostSummary, UpvoteResult
from .user import (
    FollowResult,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserProfile,
    UserPublic,
    UserSummary,
)

__all__ = [
    "AdminLogOut", "AdminLogPage", "AdminLogTarget",
    "AdminCommentOut", "AdminUserOut", "PostRef",
    "CommentCreate", "CommentNode", "CommentThread",
    "Pagination",
    "BulkActionRequest", "BulkActionResult", "BulkActionType", "DeleteResult",
    "ModerationTarget", "StatusResult", "StatusUpdate", "VisibilityUpdate",
    "FeedSort", "FollowingFeed", "PostPage", "PostSummary", "UpvoteResult",
    "FollowResult", "LoginRequest", "LoginResponse", "RegisterRequest",
    "UserProfile", "UserPublic", "UserSummary",
]
