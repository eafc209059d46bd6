"""Password hashing and access-token helpers."""
from __future__ import annotations

from datetime import timedelta
from typing import Any

from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, VerifyMismatchError
from jose import JWTError, jwt

from rjilat.core.settings import settings
from rjilat.db.time import utcnow

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Return an Argon2 hash of the provided password."""
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if `password` matches `password_hash`."""
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError):
        return False


def create_access_token(
    user_id: int,
    role: str = "user",
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT identifying the caller.

    Args:
        user_id: Primary key of the authenticated user.
        role: Caller role claim, ``user`` or ``admin``.
        expires_delta: Optional override of the configured lifetime.

    Returns:
        Encoded JWT string.
    """
    expire = utcnow() + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {"sub": str(user_id), "role": role, "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT, raising ``JWTError`` when invalid."""
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    if payload.get("sub") is None:
        raise JWTError("Token has no subject")
    return payload
