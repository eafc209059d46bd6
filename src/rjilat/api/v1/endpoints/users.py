"""User, profile and follow endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from rjilat.api.v1.dependencies import CurrentCallerDep, OptionalCallerDep, SessionDep
from rjilat.schemas.post import PostSummary
from rjilat.schemas.user import (
    FollowResult,
    RegisterRequest,
    UserProfile,
    UserPublic,
    UserSummary,
)
from rjilat.services import feed, social_graph
from rjilat.services.user_service import register_user

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: SessionDep) -> UserPublic:
    """Create a new user account."""
    user = register_user(db, payload.username, payload.password)
    return UserPublic.model_validate(user)


@router.get("/search", response_model=list[UserSummary])
async def search_users(
    db: SessionDep,
    caller: OptionalCallerDep,
    q: str = Query("", description="Part of a username"),
) -> list[UserSummary]:
    """Find users by a case-insensitive username fragment."""
    return social_graph.search_users(db, q, caller.id if caller else None)


@router.get("/popular", response_model=list[UserSummary])
async def popular_users(db: SessionDep, caller: OptionalCallerDep) -> list[UserSummary]:
    """Suggest the most-followed users."""
    return social_graph.popular_users(db, caller.id if caller else None)


@router.get("/{username}", response_model=UserProfile)
async def get_profile(
    username: str,
    db: SessionDep,
    caller: OptionalCallerDep,
) -> UserProfile:
    """Return a user's profile with follower counts."""
    return social_graph.get_profile(db, username, caller.id if caller else None)


@router.get("/{username}/posts", response_model=list[PostSummary])
async def get_user_posts(
    username: str,
    db: SessionDep,
    caller: OptionalCallerDep,
) -> list[PostSummary]:
    """Return a user's posts, newest first."""
    user = social_graph.get_user_by_username(db, username)
    return feed.list_user_posts(db, user.id, caller.id if caller else None)


@router.get("/{username}/followers", response_model=list[UserPublic])
async def get_followers(username: str, db: SessionDep) -> list[UserPublic]:
    """Return the users following `username`."""
    return social_graph.list_followers(db, username)


@router.get("/{username}/following", response_model=list[UserPublic])
async def get_following(username: str, db: SessionDep) -> list[UserPublic]:
    """Return the users `username` follows."""
    return social_graph.list_following(db, username)


@router.post("/{username}/follow", response_model=FollowResult)
async def toggle_follow(
    username: str,
    db: SessionDep,
    caller: CurrentCallerDep,
) -> FollowResult:
    """Follow the user, or unfollow if already following."""
    target = social_graph.get_user_by_username(db, username)
    return social_graph.toggle_follow(db, caller.id, target.id)
