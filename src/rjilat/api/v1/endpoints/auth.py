"""Authentication endpoints for the rjilat API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from rjilat.api.v1.dependencies import SessionDep
from rjilat.core.security import create_access_token
from rjilat.schemas.user import LoginRequest, LoginResponse, UserPublic
from rjilat.services.user_service import authenticate

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(credentials: LoginRequest, db: SessionDep) -> LoginResponse:
    """Exchange a username and password for an access token."""
    user = authenticate(db, credentials.username, credentials.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    token = create_access_token(user.id, user.role.value)
    return LoginResponse(access_token=token, user=UserPublic.model_validate(user))
