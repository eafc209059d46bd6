# mypy: ignore-errors
# tests/services/test_votes.py
"""Tests for upvote toggling."""

import pytest
from sqlalchemy.exc import IntegrityError

from rjilat.core.errors import ForbiddenError, NotFoundError, StorageError
from rjilat.repositories import PostRepository
from rjilat.services.votes import toggle_upvote


def test_toggle_upvote_twice_restores_state(db_session, test_post, other_user) -> None:
    """Upvoting then un-upvoting leaves the set as it started."""
    repo = PostRepository(db_session)
    assert repo.upvoter_ids(test_post.id) == set()

    first = toggle_upvote(db_session, test_post.id, other_user.id)
    assert first.upvoted is True
    assert first.count == 1
    assert repo.upvoter_ids(test_post.id) == {other_user.id}

    second = toggle_upvote(db_session, test_post.id, other_user.id)
    assert second.upvoted is False
    assert second.count == 0
    assert repo.upvoter_ids(test_post.id) == set()


def test_upvotes_from_several_users(db_session, test_post, make_user) -> None:
    voters = [make_user(f"voter{i}") for i in range(3)]
    for voter in voters:
        toggle_upvote(db_session, test_post.id, voter.id)

    assert PostRepository(db_session).upvote_count(test_post.id) == 3


def test_self_upvote_is_forbidden(db_session, test_post, test_user) -> None:
    """Authors can never upvote their own post."""
    for _ in range(2):
        with pytest.raises(ForbiddenError) as exc_info:
            toggle_upvote(db_session, test_post.id, test_user.id)
        assert exc_info.value.code == "self_upvote"
    assert PostRepository(db_session).upvote_count(test_post.id) == 0


def test_upvote_missing_post(db_session, other_user) -> None:
    with pytest.raises(NotFoundError):
        toggle_upvote(db_session, 4242, other_user.id)


def test_upvote_by_unknown_user_is_rejected(db_session, test_post) -> None:
    """A caller id with no user row never produces a phantom upvote."""
    with pytest.raises(NotFoundError) as exc_info:
        toggle_upvote(db_session, test_post.id, 9999)

    assert exc_info.value.code == "user_not_found"
    assert PostRepository(db_session).upvote_count(test_post.id) == 0


def test_rejected_upvote_insert_is_not_reported_as_success(
    db_session, test_post, other_user, monkeypatch
) -> None:
    """A constraint failure that leaves no row surfaces as a storage error."""

    def _reject(self, post_id, user_id):
        raise IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))

    monkeypatch.setattr(PostRepository, "add_upvote", _reject)

    with pytest.raises(StorageError):
        toggle_upvote(db_session, test_post.id, other_user.id)

    monkeypatch.undo()
    repo = PostRepository(db_session)
    assert repo.upvoter_ids(test_post.id) == set()
    assert repo.has_upvote(test_post.id, other_user.id) is False
