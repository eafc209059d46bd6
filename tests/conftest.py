# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from rjilat.api.v1.dependencies import get_blob_store_dep
from rjilat.core.errors import StorageError
from rjilat.core.identity import Caller
from rjilat.core.security import create_access_token
from rjilat.db.session import Base
from rjilat.db.session import get_db as app_get_session
from rjilat.main import app as fastapi_app
from rjilat.models import User, UserRole
from rjilat.schemas.comment import CommentNode
from rjilat.schemas.post import PostSummary
from rjilat.services import comment_tree, post_service
from rjilat.services.blob_store import StoredBlob
from rjilat.services.user_service import register_user

TEST_DB_URL = "sqlite://"

# Smallest valid PNG header; the blob store never inspects the bytes.
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class FakeBlobStore:
    """In-memory blob store recording every call."""

    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_store = False
        self._keys = count(1)

    def store(self, data: bytes, folder: str, content_type: str | None = None) -> StoredBlob:
        if self.fail_store:
            raise StorageError("Blob store unavailable", code="upload_error")
        storage_key = f"{folder}/{next(self._keys)}.img"
        self.blobs[storage_key] = data
        return StoredBlob(url=f"https://blobs.test/{storage_key}", storage_key=storage_key)

    def delete(self, storage_key: str) -> None:
        self.blobs.pop(storage_key, None)
        self.deleted.append(storage_key)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def blob_store() -> FakeBlobStore:
    """Provide an in-memory blob store."""
    return FakeBlobStore()


@pytest.fixture()
def app(db_session: Session, blob_store: FakeBlobStore) -> Iterator[FastAPI]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    fastapi_app.dependency_overrides[app_get_session] = _get_session_override
    fastapi_app.dependency_overrides[get_blob_store_dep] = lambda: blob_store
    try:
        yield fastapi_app
    finally:
        fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory registering users with a default password."""

    def _make_user(
        username: str,
        password: str = "secret123",
        role: UserRole = UserRole.USER,
    ) -> User:
        return register_user(db_session, username, password, role)

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return the primary test user."""
    return make_user("alice")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second user."""
    return make_user("bob")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    """Create and return an administrator."""
    return make_user("root_admin", role=UserRole.ADMIN)


@pytest.fixture()
def admin_caller(admin_user: User) -> Caller:
    return Caller(id=admin_user.id, role=UserRole.ADMIN)


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    token = create_access_token(test_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    token = create_access_token(other_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_token(admin_user: User) -> dict[str, str]:
    """Return authorization headers for the administrator."""
    token = create_access_token(admin_user.id, UserRole.ADMIN.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_post(db_session: Session, blob_store: FakeBlobStore) -> Callable[..., PostSummary]:
    """Return a factory publishing posts through the post service."""

    def _make_post(author: User, title: str = "Sunset") -> PostSummary:
        return post_service.create_post(
            db_session,
            blob_store,
            author_id=author.id,
            title=title,
            image=PNG_BYTES,
            content_type="image/png",
        )

    return _make_post


@pytest.fixture()
def make_comment(db_session: Session) -> Callable[..., CommentNode]:
    """Return a factory creating comments and replies."""

    def _make_comment(
        author: User,
        post_id: int,
        content: str = "Nice shot",
        parent: CommentNode | None = None,
    ) -> CommentNode:
        return comment_tree.create_comment(
            db_session,
            post_id=post_id,
            author_id=author.id,
            content=content,
            parent_comment_id=parent.id if parent else None,
        )

    return _make_comment


@pytest.fixture()
def test_post(make_post: Callable[..., PostSummary], test_user: User) -> PostSummary:
    """Create a baseline post owned by the primary user."""
    return make_post(test_user)
