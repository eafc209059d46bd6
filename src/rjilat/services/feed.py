"""Feed composition: sorted, paginated post listings."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from rjilat.core.errors import NotFoundError, ValidationError
from rjilat.core.settings import settings
from rjilat.models import ContentStatus, Post, PostUpvote
from rjilat.repositories import PostRepository, UserRepository
from rjilat.schemas.common import Pagination
from rjilat.schemas.post import FeedSort, FollowingFeed, PostPage, PostSummary
from rjilat.schemas.user import UserPublic


def summarize_posts(
    db: Session,
    posts: Sequence[Post],
    caller_id: int | None = None,
) -> list[PostSummary]:
    """Annotate posts with counts and the caller's upvote state."""
    repo = PostRepository(db)
    ids = [post.id for post in posts]
    upvotes = repo.upvote_counts(ids)
    comments = repo.root_comment_counts(ids)
    upvoted = repo.upvoted_post_ids(caller_id, ids) if caller_id else set()
    return [
        PostSummary(
            id=post.id,
            title=post.title,
            image_url=post.image_url,
            author=UserPublic(id=post.author.id, username=post.author.username),
            upvotes_count=upvotes.get(post.id, 0),
            comments_count=comments.get(post.id, 0),
            has_upvoted=post.id in upvoted,
            status=post.status,
            created_at=post.created_at,
        )
        for post in posts
    ]


def _ordered(stmt: Select, sort: FeedSort) -> Select:
    if sort == FeedSort.POPULAR:
        upvote_counts = (
            select(PostUpvote.post_id, func.count().label("upvotes"))
            .group_by(PostUpvote.post_id)
            .subquery()
        )
        return stmt.outerjoin(upvote_counts, upvote_counts.c.post_id == Post.id).order_by(
            func.coalesce(upvote_counts.c.upvotes, 0).desc(),
            Post.created_at.desc(),
            Post.id.desc(),
        )
    if sort == FeedSort.OLDEST:
        return stmt.order_by(Post.created_at.asc(), Post.id.asc())
    return stmt.order_by(Post.created_at.desc(), Post.id.desc())


def _parse_sort(sort: str | FeedSort) -> FeedSort:
    try:
        return FeedSort(sort)
    except ValueError as err:
        raise ValidationError(f"Invalid sort '{sort}'", code="invalid_sort") from err


def list_posts(
    db: Session,
    *,
    sort: str | FeedSort = FeedSort.NEWEST,
    page: int = 1,
    page_size: int | None = None,
    caller_id: int | None = None,
) -> PostPage:
    """Return one page of the public feed.

    Hidden posts are excluded; reported posts stay visible. The total is
    counted over the same filter as the page itself.

    Raises:
        ValidationError: On an unknown sort or an out-of-range window.
    """
    order = _parse_sort(sort)
    limit = settings.default_page_size if page_size is None else page_size
    if page < 1:
        raise ValidationError("Page must be at least 1", code="invalid_page")
    if not 1 <= limit <= settings.max_page_size:
        raise ValidationError(
            f"Page size must be between 1 and {settings.max_page_size}",
            code="invalid_page_size",
        )

    visible = Post.status != ContentStatus.HIDDEN
    stmt = _ordered(select(Post).where(visible), order)
    posts = list(db.scalars(stmt.offset((page - 1) * limit).limit(limit)))
    total = db.scalar(select(func.count()).select_from(Post).where(visible)) or 0

    return PostPage(
        posts=summarize_posts(db, posts, caller_id),
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


def list_following_feed(db: Session, caller_id: int) -> FollowingFeed:
    """Return recent posts by users the caller follows, newest first."""
    following = UserRepository(db).following_ids(caller_id)
    if not following:
        return FollowingFeed(
            posts=[],
            message="You are not following anyone yet. Discover users to follow!",
        )

    stmt = (
        select(Post)
        .where(Post.author_id.in_(following), Post.status != ContentStatus.HIDDEN)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .limit(settings.following_feed_limit)
    )
    posts = list(db.scalars(stmt))
    return FollowingFeed(posts=summarize_posts(db, posts, caller_id))


def get_post(db: Session, post_id: int, caller_id: int | None = None) -> PostSummary:
    """Return a single post by id, including hidden ones.

    Raises:
        NotFoundError: If the post does not exist.
    """
    post = PostRepository(db).get_by_id(post_id)
    if post is None:
        raise NotFoundError("Post not found", code="post_not_found")
    return summarize_posts(db, [post], caller_id)[0]


def list_user_posts(
    db: Session,
    author_id: int,
    caller_id: int | None = None,
) -> list[PostSummary]:
    """Return an author's posts, newest first; hidden ones only to the author."""
    stmt = select(Post).where(Post.author_id == author_id)
    if caller_id != author_id:
        stmt = stmt.where(Post.status != ContentStatus.HIDDEN)
    posts = list(db.scalars(stmt.order_by(Post.created_at.desc(), Post.id.desc())))
    return summarize_posts(db, posts, caller_id)
