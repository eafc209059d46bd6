"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from rjilat.models.user import USERNAME_MAX_LENGTH, USERNAME_MIN_LENGTH

PASSWORD_MIN_LENGTH = 6


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LENGTH,
        max_length=USERNAME_MAX_LENGTH,
        description="Unique handle (3-20 characters)",
    )
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, description="Plain password")


class LoginRequest(BaseModel):
    """Schema for login submissions."""

    username: str
    password: str


class LoginResponse(BaseModel):
    """Response returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user: "UserPublic"


class UserPublic(BaseModel):
    """Public reference to a user embedded in other payloads."""

    id: int
    username: str

    model_config = ConfigDict(from_attributes=True)


class UserProfile(BaseModel):
    """Profile page data for a user."""

    id: int
    username: str
    followers_count: int
    following_count: int
    posts_count: int
    is_following: bool = Field(
        default=False,
        description="True when the caller follows this user",
    )
    created_at: datetime


class UserSummary(BaseModel):
    """User card shown in search results and suggestions."""

    id: int
    username: str
    followers_count: int
    following_count: int
    posts_count: int
    is_following: bool = False


class FollowResult(BaseModel):
    """Outcome of a follow toggle."""

    following: bool
    target_follower_count: int


LoginResponse.model_rebuild()
