"""Administrator moderation endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from rjilat.api.v1.dependencies import (
    BlobStoreDep,
    CurrentCallerDep,
    RequestMetaDep,
    SessionDep,
)
from rjilat.core.identity import require_admin
from rjilat.schemas.admin_log import AdminLogPage
from rjilat.schemas.admin_view import AdminCommentOut, AdminUserOut
from rjilat.schemas.comment import CommentThread
from rjilat.schemas.moderation import (
    BulkActionRequest,
    BulkActionResult,
    DeleteResult,
    ModerationTarget,
    StatusResult,
    StatusUpdate,
    VisibilityUpdate,
)
from rjilat.schemas.post import PostSummary
from rjilat.services import admin_view, comment_tree
from rjilat.services.admin_log import list_admin_logs
from rjilat.services.moderation import ModerationService

router = APIRouter(prefix="/admin", tags=["admin"])


def get_moderation_service(db: SessionDep, blob_store: BlobStoreDep) -> ModerationService:
    """Build the moderation service for the current request."""
    return ModerationService(db, blob_store)


ModerationDep = Annotated[ModerationService, Depends(get_moderation_service)]


@router.get("/posts", response_model=list[PostSummary])
async def list_posts(db: SessionDep, caller: CurrentCallerDep) -> list[PostSummary]:
    """List every post, hidden and reported ones included."""
    return admin_view.list_all_posts(db, caller)


@router.get("/comments", response_model=list[AdminCommentOut])
async def list_comments(db: SessionDep, caller: CurrentCallerDep) -> list[AdminCommentOut]:
    """List every comment with the post it belongs to."""
    return admin_view.list_all_comments(db, caller)


@router.get("/users", response_model=list[AdminUserOut])
async def list_users(db: SessionDep, caller: CurrentCallerDep) -> list[AdminUserOut]:
    """List every account with activity totals."""
    return admin_view.list_all_users(db, caller)


@router.delete("/posts/{post_id}", response_model=DeleteResult)
async def delete_post(
    post_id: int,
    caller: CurrentCallerDep,
    meta: RequestMetaDep,
    service: ModerationDep,
) -> DeleteResult:
    """Delete a post and all of its comments."""
    return service.delete_post(caller, post_id, meta)


@router.patch("/posts/{post_id}/status", response_model=StatusResult)
async def update_post_status(
    post_id: int,
    payload: StatusUpdate,
    caller: CurrentCallerDep,
    meta: RequestMetaDep,
    service: ModerationDep,
) -> StatusResult:
    """Set a post's status to active, hidden or reported."""
    return service.set_status(caller, ModerationTarget.POST, post_id, payload.status, meta)


@router.patch("/posts/{post_id}/visibility", response_model=StatusResult)
async def update_post_visibility(
    post_id: int,
    payload: VisibilityUpdate,
    caller: CurrentCallerDep,
    meta: RequestMetaDep,
    service: ModerationDep,
) -> StatusResult:
    """Show or hide a post."""
    return service.set_visibility(caller, post_id, payload.is_public, meta)


@router.get("/posts/{post_id}/comments", response_model=CommentThread)
async def get_all_comments(
    post_id: int,
    db: SessionDep,
    caller: CurrentCallerDep,
) -> CommentThread:
    """Return the full comment forest of a post, hidden comments included."""
    require_admin(caller)
    return CommentThread(
        post_id=post_id,
        comments=comment_tree.build_tree(db, post_id, include_hidden=True),
    )


@router.post("/posts/bulk", response_model=BulkActionResult)
async def bulk_posts(
    payload: BulkActionRequest,
    caller: CurrentCallerDep,
    meta: RequestMetaDep,
    service: ModerationDep,
) -> BulkActionResult:
    """Delete, hide or show several posts at once."""
    return service.bulk_action(caller, payload.action, ModerationTarget.POST, payload.ids, meta)


@router.delete("/comments/{comment_id}", response_model=DeleteResult)
async def delete_comment(
    comment_id: int,
    caller: CurrentCallerDep,
    meta: RequestMetaDep,
    service: ModerationDep,
) -> DeleteResult:
    """Delete a comment and all replies beneath it."""
    return service.delete_comment(caller, comment_id, meta)


@router.patch("/comments/{comment_id}/status", response_model=StatusResult)
async def update_comment_status(
    comment_id: int,
    payload: StatusUpdate,
    caller: CurrentCallerDep,
    meta: RequestMetaDep,
    service: ModerationDep,
) -> StatusResult:
    """Set a comment's status to active, hidden or reported."""
    return service.set_status(caller, ModerationTarget.COMMENT, comment_id, payload.status, meta)


@router.post("/comments/bulk", response_model=BulkActionResult)
async def bulk_comments(
    payload: BulkActionRequest,
    caller: CurrentCallerDep,
    meta: RequestMetaDep,
    service: ModerationDep,
) -> BulkActionResult:
    """Delete, hide or show several comments at once."""
    return service.bulk_action(
        caller, payload.action, ModerationTarget.COMMENT, payload.ids, meta
    )


@router.delete("/users/{user_id}", response_model=DeleteResult)
async def delete_user(
    user_id: int,
    caller: CurrentCallerDep,
    meta: RequestMetaDep,
    service: ModerationDep,
) -> DeleteResult:
    """Delete a user and everything they created."""
    return service.delete_user(caller, user_id, meta)


@router.get("/logs", response_model=AdminLogPage)
async def get_logs(
    db: SessionDep,
    caller: CurrentCallerDep,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    action: str | None = Query(None),
    target_type: str | None = Query(None, alias="targetType"),
    date_range: str = Query("week", alias="dateRange"),
) -> AdminLogPage:
    """List admin log entries, newest first."""
    return list_admin_logs(
        db,
        caller,
        page=page,
        limit=limit,
        action=action,
        target_type=target_type,
        date_range=date_range,
    )
