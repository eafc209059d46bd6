"""Post, feed, upvote and comment endpoints for the rjilat API."""

from __future__ import annotations

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from rjilat.api.v1.dependencies import (
    BlobStoreDep,
    CurrentCallerDep,
    OptionalCallerDep,
    SessionDep,
)
from rjilat.core.settings import settings
from rjilat.schemas.comment import CommentCreate, CommentNode, CommentThread
from rjilat.schemas.post import FeedSort, FollowingFeed, PostPage, PostSummary, UpvoteResult
from rjilat.services import comment_tree, feed, post_service, votes

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/", response_model=PostPage)
async def list_posts(
    db: SessionDep,
    caller: OptionalCallerDep,
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(
        settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Posts per page",
    ),
    sort_by: FeedSort = Query(FeedSort.NEWEST, alias="sortBy"),
) -> PostPage:
    """List visible posts with pagination and the caller's upvote state."""
    return feed.list_posts(
        db,
        sort=sort_by,
        page=page,
        page_size=limit,
        caller_id=caller.id if caller else None,
    )


@router.post("/", response_model=PostSummary, status_code=status.HTTP_201_CREATED)
async def create_post(
    db: SessionDep,
    caller: CurrentCallerDep,
    blob_store: BlobStoreDep,
    title: str = Form(...),
    image: UploadFile = File(...),
) -> PostSummary:
    """Upload an image and publish it as a post."""
    # One byte past the cap is enough to reject an oversized upload.
    data = await image.read(settings.max_upload_bytes + 1)
    return post_service.create_post(
        db,
        blob_store,
        author_id=caller.id,
        title=title,
        image=data,
        content_type=image.content_type,
    )


@router.get("/following", response_model=FollowingFeed)
async def following_feed(db: SessionDep, caller: CurrentCallerDep) -> FollowingFeed:
    """List recent posts from users the caller follows."""
    return feed.list_following_feed(db, caller.id)


@router.get("/{post_id}", response_model=PostSummary)
async def get_post(post_id: int, db: SessionDep, caller: OptionalCallerDep) -> PostSummary:
    """Get a specific post by ID, including hidden ones."""
    return feed.get_post(db, post_id, caller.id if caller else None)


@router.post("/{post_id}/upvote", response_model=UpvoteResult)
async def toggle_upvote(post_id: int, db: SessionDep, caller: CurrentCallerDep) -> UpvoteResult:
    """Toggle the caller's upvote on a post."""
    return votes.toggle_upvote(db, post_id, caller.id)


@router.get("/{post_id}/comments", response_model=CommentThread)
async def get_comments(post_id: int, db: SessionDep) -> CommentThread:
    """Return the post's comments as nested threads."""
    return CommentThread(post_id=post_id, comments=comment_tree.build_tree(db, post_id))


@router.post(
    "/{post_id}/comments",
    response_model=CommentNode,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: int,
    payload: CommentCreate,
    db: SessionDep,
    caller: CurrentCallerDep,
) -> CommentNode:
    """Add a root comment or a reply to a post."""
    return comment_tree.create_comment(
        db,
        post_id=post_id,
        author_id=caller.id,
        content=payload.content,
        parent_comment_id=payload.parent_comment_id,
    )
