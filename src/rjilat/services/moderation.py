"""Moderation services: cascading deletes and status transitions.

Every action here requires an administrator caller and appends exactly one
admin log entry in the same transaction as the change it records. Image
blobs are removed only after the database side has committed.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from rjilat.core.errors import ForbiddenError, NotFoundError, ValidationError
from rjilat.core.identity import Caller, RequestMeta, require_admin
from rjilat.db.transaction import transaction
from rjilat.models import AdminAction, ContentStatus, TargetType
from rjilat.repositories import CommentRepository, PostRepository, UserRepository
from rjilat.schemas.moderation import (
    BulkActionResult,
    BulkActionType,
    DeleteResult,
    ModerationTarget,
    StatusResult,
)
from rjilat.services.admin_log import record_admin_action
from rjilat.services.blob_store import BlobStore, delete_blob_quietly
from rjilat.services.comment_tree import delete_comment_subtree

logger = logging.getLogger(__name__)

_STATUS_ACTIONS = {
    (ModerationTarget.POST, ContentStatus.HIDDEN): AdminAction.HIDE_POST,
    (ModerationTarget.POST, ContentStatus.ACTIVE): AdminAction.SHOW_POST,
    (ModerationTarget.POST, ContentStatus.REPORTED): AdminAction.REPORT_POST,
    (ModerationTarget.COMMENT, ContentStatus.HIDDEN): AdminAction.HIDE_COMMENT,
    (ModerationTarget.COMMENT, ContentStatus.ACTIVE): AdminAction.SHOW_COMMENT,
    (ModerationTarget.COMMENT, ContentStatus.REPORTED): AdminAction.REPORT_COMMENT,
}

_BULK_ACTIONS = {
    (BulkActionType.DELETE, ModerationTarget.POST): AdminAction.BULK_DELETE_POSTS,
    (BulkActionType.HIDE, ModerationTarget.POST): AdminAction.BULK_HIDE_POSTS,
    (BulkActionType.SHOW, ModerationTarget.POST): AdminAction.BULK_SHOW_POSTS,
    (BulkActionType.DELETE, ModerationTarget.COMMENT): AdminAction.BULK_DELETE_COMMENTS,
    (BulkActionType.HIDE, ModerationTarget.COMMENT): AdminAction.BULK_HIDE_COMMENTS,
    (BulkActionType.SHOW, ModerationTarget.COMMENT): AdminAction.BULK_SHOW_COMMENTS,
}

_BULK_STATUS = {
    BulkActionType.HIDE: ContentStatus.HIDDEN,
    BulkActionType.SHOW: ContentStatus.ACTIVE,
}


def _parse_target(target_type: str | ModerationTarget) -> ModerationTarget:
    try:
        return ModerationTarget(target_type)
    except ValueError as err:
        raise ValidationError(
            f"Invalid target type '{target_type}'", code="invalid_target_type"
        ) from err


def _parse_bulk_action(action: str | BulkActionType) -> BulkActionType:
    try:
        return BulkActionType(action)
    except ValueError as err:
        raise ValidationError(f"Invalid action '{action}'", code="invalid_action") from err


class ModerationService:
    """Service handling administrator moderation and deletion cascades."""

    def __init__(self, db: Session, blob_store: BlobStore) -> None:
        self.db = db
        self.blob_store = blob_store
        self.posts = PostRepository(db)
        self.comments = CommentRepository(db)
        self.users = UserRepository(db)

    def _purge_post(self, post_id: int) -> tuple[int, str | None] | None:
        """Remove a post and all of its comments; return (comments, blob key)."""
        post = self.posts.get_by_id(post_id)
        if post is None:
            return None
        storage_key = post.image_storage_key
        removed = self.posts.delete_with_comments(post_id)
        return removed, storage_key

    def delete_post(
        self,
        caller: Caller | None,
        post_id: int,
        meta: RequestMeta | None = None,
    ) -> DeleteResult:
        """Delete a post together with every comment at every depth.

        Raises:
            ForbiddenError: If the caller is not an administrator.
            NotFoundError: If the post does not exist.
        """
        admin = require_admin(caller)
        with transaction(self.db, "delete_post"):
            post = self.posts.get_by_id(post_id)
            if post is None:
                raise NotFoundError("Post not found", code="post_not_found")
            title = post.title
            author = post.author.username
            removed, storage_key = self._purge_post(post_id)
            record_admin_action(
                self.db,
                admin_id=admin.id,
                action=AdminAction.DELETE_POST,
                target_type=TargetType.POST,
                target_id=post_id,
                target_username=author,
                target_title=title,
                details=f"Deleted post '{title}' and {removed} comments",
                meta=meta,
            )

        delete_blob_quietly(self.blob_store, storage_key)
        return DeleteResult(
            id=post_id,
            target_type=TargetType.POST.value,
            comments_removed=removed,
            posts_removed=1,
            message="Post and all associated comments deleted successfully",
        )

    def delete_comment(
        self,
        caller: Caller | None,
        comment_id: int,
        meta: RequestMeta | None = None,
    ) -> DeleteResult:
        """Delete a comment and its whole reply subtree.

        Raises:
            ForbiddenError: If the caller is not an administrator.
            NotFoundError: If the comment does not exist.
        """
        admin = require_admin(caller)
        with transaction(self.db, "delete_comment"):
            comment = self.comments.get_by_id(comment_id)
            if comment is None:
                raise NotFoundError("Comment not found", code="comment_not_found")
            author = comment.author.username
            removed = delete_comment_subtree(self.db, comment_id)
            record_admin_action(
                self.db,
                admin_id=admin.id,
                action=AdminAction.DELETE_COMMENT,
                target_type=TargetType.COMMENT,
                target_id=comment_id,
                target_username=author,
                details=f"Deleted comment {comment_id} and {removed - 1} replies",
                meta=meta,
            )

        return DeleteResult(
            id=comment_id,
            target_type=TargetType.COMMENT.value,
            comments_removed=removed,
            message="Comment deleted successfully",
        )

    def set_status(
        self,
        caller: Caller | None,
        target_type: str | ModerationTarget,
        target_id: int,
        status: str | ContentStatus,
        meta: RequestMeta | None = None,
    ) -> StatusResult:
        """Move a post or comment to a new status. No cascade.

        Raises:
            ForbiddenError: If the caller is not an administrator.
            ValidationError: If the status or target type is unknown.
            NotFoundError: If the target does not exist.
        """
        admin = require_admin(caller)
        target = _parse_target(target_type)
        new_status = ContentStatus.parse(status)

        with transaction(self.db, "set_status"):
            if target == ModerationTarget.POST:
                post = self.posts.get_by_id(target_id)
                if post is None:
                    raise NotFoundError("Post not found", code="post_not_found")
                self.posts.set_status(post, new_status)
                title = post.title
            else:
                comment = self.comments.get_by_id(target_id)
                if comment is None:
                    raise NotFoundError("Comment not found", code="comment_not_found")
                self.comments.set_status(comment, new_status)
                title = None
            record_admin_action(
                self.db,
                admin_id=admin.id,
                action=_STATUS_ACTIONS[(target, new_status)],
                target_type=TargetType(target.value),
                target_id=target_id,
                target_title=title,
                details=f"Changed {target.value} {target_id} status to {new_status.value}",
                meta=meta,
            )

        return StatusResult(id=target_id, target_type=target, status=new_status.value)

    def set_visibility(
        self,
        caller: Caller | None,
        post_id: int,
        is_public: bool,
        meta: RequestMeta | None = None,
    ) -> StatusResult:
        """Show (active) or hide a post."""
        status = ContentStatus.ACTIVE if is_public else ContentStatus.HIDDEN
        return self.set_status(caller, ModerationTarget.POST, post_id, status, meta)

    def bulk_action(
        self,
        caller: Caller | None,
        action: str | BulkActionType,
        target_type: str | ModerationTarget,
        target_ids: list[int],
        meta: RequestMeta | None = None,
    ) -> BulkActionResult:
        """Apply one action to a batch of posts or comments.

        Items are processed in order. Ids that no longer exist are skipped,
        which covers a comment already removed as the descendant of an
        earlier target in the same batch. One log entry covers the batch.

        Raises:
            ForbiddenError: If the caller is not an administrator.
            ValidationError: If the action or target type is unknown, or no
                ids were given.
        """
        admin = require_admin(caller)
        bulk = _parse_bulk_action(action)
        target = _parse_target(target_type)
        ids = list(dict.fromkeys(target_ids))
        if not ids:
            raise ValidationError("No target ids given", code="empty_batch")

        affected = 0
        comments_removed = 0
        storage_keys: list[str | None] = []

        with transaction(self.db, f"bulk_{bulk.value}_{target.value}s"):
            for target_id in ids:
                if bulk == BulkActionType.DELETE and target == ModerationTarget.POST:
                    purged = self._purge_post(target_id)
                    if purged is None:
                        continue
                    comments_removed += purged[0]
                    storage_keys.append(purged[1])
                elif bulk == BulkActionType.DELETE:
                    # Existence is rechecked per item; an ancestor earlier in
                    # the batch may already have removed this comment.
                    removed = delete_comment_subtree(self.db, target_id)
                    if not removed:
                        continue
                    comments_removed += removed
                elif target == ModerationTarget.POST:
                    post = self.posts.get_by_id(target_id)
                    if post is None:
                        continue
                    self.posts.set_status(post, _BULK_STATUS[bulk])
                else:
                    comment = self.comments.get_by_id(target_id)
                    if comment is None:
                        continue
                    self.comments.set_status(comment, _BULK_STATUS[bulk])
                affected += 1

            details = f"Bulk {bulk.value} on {len(ids)} {target.value}s"
            if bulk == BulkActionType.DELETE:
                details += f" ({affected} removed, {comments_removed} comments deleted)"
            record_admin_action(
                self.db,
                admin_id=admin.id,
                action=_BULK_ACTIONS[(bulk, target)],
                target_type=TargetType(target.value),
                details=details,
                meta=meta,
            )

        for key in storage_keys:
            delete_blob_quietly(self.blob_store, key)

        return BulkActionResult(
            action=bulk,
            target_type=target,
            requested=len(ids),
            affected=affected,
            comments_removed=comments_removed,
            message=details,
        )

    def delete_user(
        self,
        caller: Caller | None,
        user_id: int,
        meta: RequestMeta | None = None,
    ) -> DeleteResult:
        """Delete a user with their content, votes and follow edges.

        The user's posts go with all their comments; the user's comments on
        other posts go with their reply subtrees.

        Raises:
            ForbiddenError: If the caller is not an administrator or targets
                their own account.
            NotFoundError: If the user does not exist.
        """
        admin = require_admin(caller)
        if admin.id == user_id:
            raise ForbiddenError("Administrators cannot delete themselves", code="self_delete")

        storage_keys: list[str | None] = []
        comments_removed = 0
        with transaction(self.db, "delete_user"):
            user = self.users.get_by_id(user_id)
            if user is None:
                raise NotFoundError("User not found", code="user_not_found")
            username = user.username

            post_ids = self.posts.ids_by_author(user_id)
            for post_id in post_ids:
                purged = self._purge_post(post_id)
                if purged is not None:
                    comments_removed += purged[0]
                    storage_keys.append(purged[1])
            for comment_id in self.comments.ids_by_author(user_id):
                comments_removed += delete_comment_subtree(self.db, comment_id)

            self.posts.remove_upvotes_by_user(user_id)
            edges = self.users.prune_edges(user_id)
            self.users.delete(user_id)
            record_admin_action(
                self.db,
                admin_id=admin.id,
                action=AdminAction.DELETE_USER,
                target_type=TargetType.USER,
                target_id=user_id,
                target_username=username,
                details=(
                    f"Deleted user '{username}' with {len(post_ids)} posts, "
                    f"{comments_removed} comments and {edges} follow edges"
                ),
                meta=meta,
            )

        for key in storage_keys:
            delete_blob_quietly(self.blob_store, key)

        return DeleteResult(
            id=user_id,
            target_type=TargetType.USER.value,
            comments_removed=comments_removed,
            posts_removed=len(post_ids),
            message="User and all associated data deleted successfully",
        )
