"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from rjilat.core.identity import Caller, RequestMeta
from rjilat.core.security import decode_access_token
from rjilat.db.session import get_db
from rjilat.models import User, UserRole
from rjilat.services.blob_store import BlobStore, get_blob_store

# HTTP Bearer scheme for JWT authentication; missing credentials are
# handled per endpoint so anonymous reads remain possible.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def _caller_from_token(token: str, db: Session) -> Caller:
    try:
        payload = decode_access_token(token)
        user_id = int(payload["sub"])
        role = UserRole(payload.get("role", UserRole.USER.value))
    except (JWTError, ValueError) as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    # The stored role wins over the claim so demoted admins lose access.
    return Caller(id=user.id, role=user.role if user.role == role else UserRole.USER)


def get_current_caller(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> Caller:
    """Resolve the authenticated caller from the Bearer token.

    Raises:
        HTTPException: 401 if the token is missing, invalid or refers to an
            unknown user.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return _caller_from_token(credentials.credentials, db)


def get_optional_caller(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> Caller | None:
    """Resolve the caller when a token is present, otherwise None."""
    if credentials is None:
        return None
    return _caller_from_token(credentials.credentials, db)


def get_request_meta(request: Request) -> RequestMeta:
    """Extract the client address and user agent for audit entries."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip_address = forwarded.split(",")[0].strip()
    else:
        ip_address = request.headers.get("x-real-ip") or (
            request.client.host if request.client else None
        )
    return RequestMeta(ip_address=ip_address, user_agent=request.headers.get("user-agent"))


def get_blob_store_dep() -> BlobStore:
    """Return the configured blob store."""
    return get_blob_store()


CurrentCallerDep = Annotated[Caller, Depends(get_current_caller)]
OptionalCallerDep = Annotated[Caller | None, Depends(get_optional_caller)]
RequestMetaDep = Annotated[RequestMeta, Depends(get_request_meta)]
BlobStoreDep = Annotated[BlobStore, Depends(get_blob_store_dep)]
