"""Comment threads: building reply trees and deleting subtrees.

Comments are stored flat, each pointing at its parent. Trees are built on
read with a two-pass index-then-link walk, and subtree deletion walks the
parent pointers downward one level per query.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Literal

from sqlalchemy.orm import Session

from rjilat.core.errors import NotFoundError, ValidationError
from rjilat.core.settings import settings
from rjilat.db.transaction import transaction
from rjilat.models import Comment, ContentStatus
from rjilat.models.comment import CONTENT_MAX_LENGTH
from rjilat.repositories import CommentRepository, PostRepository
from rjilat.schemas.comment import CommentNode
from rjilat.schemas.user import UserPublic

logger = logging.getLogger(__name__)

OrphanPolicy = Literal["drop", "promote"]

__all__ = [
    "OrphanPolicy",
    "assemble_forest",
    "build_tree",
    "count_replies",
    "create_comment",
    "delete_comment_subtree",
    "to_comment_node",
]


def to_comment_node(comment: Comment) -> CommentNode:
    """Convert a Comment ORM instance to a tree node with no replies."""
    return CommentNode(
        id=comment.id,
        content=comment.content,
        author=UserPublic(id=comment.author.id, username=comment.author.username),
        post_id=comment.post_id,
        parent_comment_id=comment.parent_comment_id,
        status=comment.status,
        created_at=comment.created_at,
        replies=[],
    )


def assemble_forest(
    comments: Iterable[Comment],
    orphan_policy: OrphanPolicy = "drop",
) -> list[CommentNode]:
    """Link flat comments into a forest of root nodes.

    Args:
        comments: Comments of one post, already ordered by creation time.
        orphan_policy: ``drop`` silently excludes a comment whose parent is
            absent (and therefore everything below it); ``promote`` emits it
            as an additional root.

    Returns:
        Root nodes in creation order, each with replies nested in creation
        order.
    """
    ordered = list(comments)
    index: dict[int, CommentNode] = {}
    for comment in ordered:
        index[comment.id] = to_comment_node(comment)

    roots: list[CommentNode] = []
    dropped = 0
    for comment in ordered:
        node = index[comment.id]
        if comment.parent_comment_id is None:
            roots.append(node)
            continue
        parent = index.get(comment.parent_comment_id)
        if parent is not None:
            parent.replies.append(node)
        elif orphan_policy == "promote":
            roots.append(node)
        else:
            dropped += 1

    if dropped:
        logger.debug("Dropped %d comments with unresolved parents", dropped)
    return roots


def build_tree(
    db: Session,
    post_id: int,
    *,
    include_hidden: bool = False,
    orphan_policy: OrphanPolicy | None = None,
) -> list[CommentNode]:
    """Return the comment forest of a post.

    Hidden comments are left out unless `include_hidden` is set; their
    replies then have no visible parent and fall under the orphan policy.

    Raises:
        NotFoundError: If the post does not exist.
    """
    if PostRepository(db).get_by_id(post_id) is None:
        raise NotFoundError("Post not found", code="post_not_found")

    comments = CommentRepository(db).list_for_post(post_id)
    if not include_hidden:
        comments = [c for c in comments if c.status != ContentStatus.HIDDEN]
    return assemble_forest(comments, orphan_policy or settings.orphan_policy)


def _validate_content(content: str | None) -> str:
    text = (content or "").strip()
    if not text:
        raise ValidationError("Comment content is required", code="content_required")
    if len(text) > CONTENT_MAX_LENGTH:
        raise ValidationError(
            f"Comment must be less than {CONTENT_MAX_LENGTH} characters",
            code="content_too_long",
        )
    return text


def create_comment(
    db: Session,
    *,
    post_id: int,
    author_id: int,
    content: str,
    parent_comment_id: int | None = None,
) -> CommentNode:
    """Create a root comment or a reply.

    A root comment joins the post's root comment set; a reply does not.

    Raises:
        ValidationError: If the content is empty or too long.
        NotFoundError: If the post is missing, or the parent comment is
            missing or belongs to a different post.
    """
    text = _validate_content(content)
    comments = CommentRepository(db)

    with transaction(db, "create_comment"):
        if PostRepository(db).get_by_id(post_id) is None:
            raise NotFoundError("Post not found", code="post_not_found")

        if parent_comment_id is not None:
            parent = comments.get_by_id(parent_comment_id)
            # Replies may only attach inside the same post.
            if parent is None or parent.post_id != post_id:
                raise NotFoundError("Parent comment not found", code="parent_not_found")

        comment = comments.create(
            content=text,
            author_id=author_id,
            post_id=post_id,
            parent_comment_id=parent_comment_id,
        )

    db.refresh(comment)
    logger.info(
        "Comment %s created on post %s (parent=%s)",
        comment.id,
        post_id,
        parent_comment_id,
    )
    return to_comment_node(comment)


def _subtree_ids(repo: CommentRepository, comment_id: int) -> list[int]:
    """Return `comment_id` and all transitive replies, descendants first."""
    ordered: list[int] = []
    stack = [comment_id]
    while stack:
        current = stack.pop()
        ordered.append(current)
        stack.extend(repo.child_ids(current))
    # A parent is always discovered before its children, so reversing
    # removes leaves before the rows they point at.
    ordered.reverse()
    return ordered


def delete_comment_subtree(db: Session, comment_id: int) -> int:
    """Delete a comment and every reply below it.

    Runs inside the caller's transaction and does not commit. Deleting an
    id that is already gone removes nothing and returns 0.

    Returns:
        Number of comments removed, including `comment_id` itself.
    """
    repo = CommentRepository(db)
    if not repo.exists(comment_id):
        return 0

    removed = 0
    for target_id in _subtree_ids(repo, comment_id):
        removed += repo.delete_by_id(target_id)
    logger.debug("Deleted subtree of comment %s (%d comments)", comment_id, removed)
    return removed


def count_replies(db: Session, comment_id: int) -> int:
    """Return the number of transitive replies below a comment.

    Raises:
        NotFoundError: If the comment does not exist.
    """
    repo = CommentRepository(db)
    if not repo.exists(comment_id):
        raise NotFoundError("Comment not found", code="comment_not_found")
    return len(_subtree_ids(repo, comment_id)) - 1
