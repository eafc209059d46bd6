"""Account registration and credential checks."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rjilat.core import security
from rjilat.core.errors import ValidationError
from rjilat.db.transaction import transaction
from rjilat.models import User, UserRole
from rjilat.models.user import USERNAME_MAX_LENGTH, USERNAME_MIN_LENGTH
from rjilat.repositories import UserRepository
from rjilat.schemas.user import PASSWORD_MIN_LENGTH

logger = logging.getLogger(__name__)

__all__ = ["authenticate", "register_user"]


def register_user(
    db: Session,
    username: str,
    password: str,
    role: UserRole = UserRole.USER,
) -> User:
    """Create an account with a hashed password.

    Raises:
        ValidationError: If the username or password breaks the length
            rules, or the username is taken.
    """
    name = (username or "").strip()
    if not USERNAME_MIN_LENGTH <= len(name) <= USERNAME_MAX_LENGTH:
        raise ValidationError(
            f"Username must be {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} characters long",
            code="invalid_username",
        )
    if len(password or "") < PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters long",
            code="invalid_password",
        )

    users = UserRepository(db)
    with transaction(db, "register_user"):
        if users.get_by_username(name) is not None:
            raise ValidationError("Username already exists", code="username_taken")
        try:
            user = users.create(
                username=name,
                password_hash=security.hash_password(password),
                role=role,
            )
        except IntegrityError as err:
            # Lost a race with a concurrent registration of the same name.
            raise ValidationError("Username already exists", code="username_taken") from err

    logger.info("Registered %s account %s", role.value, name)
    return user


def authenticate(db: Session, username: str, password: str) -> User | None:
    """Return the user if the credentials match, otherwise None."""
    user = UserRepository(db).get_by_username((username or "").strip())
    if user is None or not security.verify_password(password, user.password_hash):
        return None
    return user
