# mypy: ignore-errors
# tests/services/test_social_graph.py
"""Tests for the follow graph and profiles."""

import pytest
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from rjilat.core.errors import ForbiddenError, NotFoundError, StorageError
from rjilat.repositories import UserRepository
from rjilat.services import social_graph
from rjilat.services.moderation import ModerationService


def _assert_consistent(db_session, *users) -> None:
    repo = UserRepository(db_session)
    for a in users:
        for b in users:
            if a.id == b.id:
                continue
            assert (a.id in repo.follower_ids(b.id)) == (b.id in repo.following_ids(a.id))


def test_toggle_follow_updates_both_sides(db_session, test_user, other_user) -> None:
    """Following adds the edge to both sets; toggling again removes it."""
    repo = UserRepository(db_session)

    result = social_graph.toggle_follow(db_session, test_user.id, other_user.id)
    assert result.following is True
    assert result.target_follower_count == 1
    assert repo.following_ids(test_user.id) == {other_user.id}
    assert repo.follower_ids(other_user.id) == {test_user.id}

    result = social_graph.toggle_follow(db_session, test_user.id, other_user.id)
    assert result.following is False
    assert result.target_follower_count == 0
    assert repo.following_ids(test_user.id) == set()
    assert repo.follower_ids(other_user.id) == set()
    _assert_consistent(db_session, test_user, other_user)


def test_self_follow_is_forbidden(db_session, test_user) -> None:
    with pytest.raises(ForbiddenError):
        social_graph.toggle_follow(db_session, test_user.id, test_user.id)


def test_follow_unknown_user(db_session, test_user) -> None:
    with pytest.raises(NotFoundError):
        social_graph.toggle_follow(db_session, test_user.id, 999)


def test_follow_failure_leaves_graph_unchanged(
    db_session, test_user, other_user, monkeypatch
) -> None:
    """An injected storage failure rolls back the whole toggle."""

    def _boom(self, follower_id, followee_id):
        raise SQLAlchemyError("disk on fire")

    monkeypatch.setattr(UserRepository, "add_follow", _boom)

    with pytest.raises(StorageError):
        social_graph.toggle_follow(db_session, test_user.id, other_user.id)

    repo = UserRepository(db_session)
    assert repo.following_ids(test_user.id) == set()
    assert repo.follower_ids(other_user.id) == set()
    _assert_consistent(db_session, test_user, other_user)


def test_unfollow_failure_leaves_edge_in_place(
    db_session, test_user, other_user, monkeypatch
) -> None:
    social_graph.toggle_follow(db_session, test_user.id, other_user.id)

    def _boom(self, follower_id, followee_id):
        raise SQLAlchemyError("connection reset")

    monkeypatch.setattr(UserRepository, "remove_follow", _boom)

    with pytest.raises(StorageError):
        social_graph.toggle_follow(db_session, test_user.id, other_user.id)

    monkeypatch.undo()
    repo = UserRepository(db_session)
    assert repo.following_ids(test_user.id) == {other_user.id}
    assert repo.follower_ids(other_user.id) == {test_user.id}


def test_rejected_follow_insert_is_not_reported_as_success(
    db_session, test_user, other_user, monkeypatch
) -> None:
    """A constraint failure that leaves no edge surfaces as a storage error."""

    def _reject(self, follower_id, followee_id):
        raise IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))

    monkeypatch.setattr(UserRepository, "add_follow", _reject)

    with pytest.raises(StorageError):
        social_graph.toggle_follow(db_session, test_user.id, other_user.id)

    monkeypatch.undo()
    repo = UserRepository(db_session)
    assert repo.is_following(test_user.id, other_user.id) is False
    assert repo.follower_count(other_user.id) == 0


def test_profile_and_listings(db_session, test_user, other_user, make_user, make_post) -> None:
    carol = make_user("carol")
    social_graph.toggle_follow(db_session, test_user.id, other_user.id)
    social_graph.toggle_follow(db_session, carol.id, other_user.id)
    social_graph.toggle_follow(db_session, other_user.id, test_user.id)
    make_post(other_user)

    profile = social_graph.get_profile(db_session, "bob", caller_id=test_user.id)
    assert profile.followers_count == 2
    assert profile.following_count == 1
    assert profile.posts_count == 1
    assert profile.is_following is True

    anonymous = social_graph.get_profile(db_session, "bob")
    assert anonymous.is_following is False

    followers = social_graph.list_followers(db_session, "bob")
    assert [u.username for u in followers] == ["alice", "carol"]
    following = social_graph.list_following(db_session, "bob")
    assert [u.username for u in following] == ["alice"]


def test_profile_unknown_user(db_session) -> None:
    with pytest.raises(NotFoundError):
        social_graph.get_profile(db_session, "ghost")


def test_deleted_user_disappears_from_following(
    db_session, blob_store, test_user, other_user, admin_caller
) -> None:
    """Deleting a followed user removes it from the follower's following set."""
    follower_id, target_id = test_user.id, other_user.id
    social_graph.toggle_follow(db_session, follower_id, target_id)
    social_graph.toggle_follow(db_session, target_id, follower_id)

    ModerationService(db_session, blob_store).delete_user(admin_caller, target_id)

    repo = UserRepository(db_session)
    assert target_id not in repo.following_ids(follower_id)
    assert repo.follower_ids(follower_id) == set()
    assert repo.get_by_id(target_id) is None


def test_search_users_matches_fragment_case_insensitively(
    db_session, test_user, other_user, make_user, make_post
) -> None:
    malik = make_user("Malik")
    make_post(test_user)
    social_graph.toggle_follow(db_session, other_user.id, test_user.id)

    results = social_graph.search_users(db_session, "  AL ", caller_id=other_user.id)
    assert {u.username for u in results} == {"alice", "Malik"}

    alice = next(u for u in results if u.id == test_user.id)
    assert alice.followers_count == 1
    assert alice.posts_count == 1
    assert alice.is_following is True
    assert next(u for u in results if u.id == malik.id).is_following is False


def test_search_users_short_or_wildcard_queries(db_session, test_user, other_user) -> None:
    """Too-short queries return nothing and LIKE wildcards are literal."""
    assert social_graph.search_users(db_session, "a") == []
    assert social_graph.search_users(db_session, "   ") == []
    assert social_graph.search_users(db_session, "%%") == []
    assert social_graph.search_users(db_session, "_o_") == []


def test_search_users_respects_limit(db_session, make_user, monkeypatch) -> None:
    for name in ("sam_one", "sam_two", "sam_three"):
        make_user(name)
    monkeypatch.setattr(social_graph.settings, "search_results_limit", 2)

    assert len(social_graph.search_users(db_session, "sam")) == 2


def test_popular_users_order_and_caller_exclusion(
    db_session, test_user, other_user, make_user
) -> None:
    """Most-followed first; the caller never appears in its own suggestions."""
    carol = make_user("carol")
    social_graph.toggle_follow(db_session, other_user.id, test_user.id)
    social_graph.toggle_follow(db_session, carol.id, test_user.id)
    social_graph.toggle_follow(db_session, carol.id, other_user.id)

    everyone = social_graph.popular_users(db_session)
    assert [u.username for u in everyone] == ["alice", "bob", "carol"]
    assert [u.followers_count for u in everyone] == [2, 1, 0]

    for_carol = social_graph.popular_users(db_session, caller_id=carol.id)
    assert [u.username for u in for_carol] == ["alice", "bob"]
    assert all(u.is_following for u in for_carol)


def test_popular_users_limit(db_session, make_user, monkeypatch) -> None:
    for name in ("dora", "eve", "finn"):
        make_user(name)
    monkeypatch.setattr(social_graph.settings, "popular_users_limit", 2)

    assert len(social_graph.popular_users(db_session)) == 2
