# mypy: ignore-errors
# tests/services/test_user_service.py
"""Tests for registration, authentication and tokens."""

from datetime import timedelta

import pytest
from jose import JWTError

from rjilat.core.errors import ValidationError
from rjilat.core.security import create_access_token, decode_access_token, verify_password
from rjilat.models import UserRole
from rjilat.repositories import UserRepository
from rjilat.services.user_service import authenticate, register_user


def test_register_hashes_password(db_session) -> None:
    user = register_user(db_session, "  dana  ", "hunter22")
    assert user.username == "dana"
    assert user.role == UserRole.USER
    assert user.password_hash != "hunter22"
    assert verify_password("hunter22", user.password_hash)


@pytest.mark.parametrize(
    ("username", "password", "code"),
    [
        ("ab", "secret123", "invalid_username"),
        ("a" * 21, "secret123", "invalid_username"),
        ("valid", "12345", "invalid_password"),
    ],
)
def test_register_validation(db_session, username, password, code) -> None:
    with pytest.raises(ValidationError) as exc_info:
        register_user(db_session, username, password)
    assert exc_info.value.code == code


def test_register_duplicate_username(db_session, test_user) -> None:
    with pytest.raises(ValidationError) as exc_info:
        register_user(db_session, "alice", "another1")
    assert exc_info.value.code == "username_taken"


def test_register_race_on_username(db_session, test_user, monkeypatch) -> None:
    """A unique-constraint clash from a concurrent signup is a taken username."""
    monkeypatch.setattr(UserRepository, "get_by_username", lambda self, name: None)

    with pytest.raises(ValidationError) as exc_info:
        register_user(db_session, "alice", "another1")
    assert exc_info.value.code == "username_taken"

    monkeypatch.undo()
    assert UserRepository(db_session).get_by_username("alice").id == test_user.id


def test_authenticate(db_session, test_user) -> None:
    assert authenticate(db_session, "alice", "secret123").id == test_user.id
    assert authenticate(db_session, "alice", "wrong-pass") is None
    assert authenticate(db_session, "nobody", "secret123") is None


def test_access_token_round_trip() -> None:
    token = create_access_token(7, "admin")
    payload = decode_access_token(token)
    assert payload["sub"] == "7"
    assert payload["role"] == "admin"


def test_expired_access_token() -> None:
    token = create_access_token(7, expires_delta=timedelta(minutes=-5))
    with pytest.raises(JWTError):
        decode_access_token(token)
