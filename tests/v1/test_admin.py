# mypy: ignore-errors
# tests/v1/test_admin.py
"""Tests for the administrator endpoints."""

import pytest
from fastapi import status


@pytest.fixture()
def thread(test_post, test_user, other_user, make_comment):
    """A root comment with one reply on the baseline post."""
    root = make_comment(other_user, test_post.id, "root")
    reply = make_comment(test_user, test_post.id, "reply", parent=root)
    return root, reply


def test_admin_routes_reject_regular_users(client, test_post, auth_token) -> None:
    response = client.delete(f"/api/v1/admin/posts/{test_post.id}", headers=auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["code"] == "admin_required"

    response = client.get("/api/v1/admin/logs")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_delete_post(client, test_post, thread, admin_token, blob_store) -> None:
    """Deleting a post removes its comments and image."""
    response = client.delete(
        f"/api/v1/admin/posts/{test_post.id}",
        headers={**admin_token, "X-Forwarded-For": "203.0.113.9, 10.0.0.1"},
    )
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["comments_removed"] == 2
    assert body["posts_removed"] == 1
    assert len(blob_store.deleted) == 1

    assert client.get(f"/api/v1/posts/{test_post.id}").status_code == status.HTTP_404_NOT_FOUND

    logs = client.get("/api/v1/admin/logs", headers=admin_token).json()
    assert logs["pagination"]["total"] == 1
    entry = logs["logs"][0]
    assert entry["action"] == "delete_post"
    assert entry["target"]["type"] == "post"
    assert entry["ip_address"] == "203.0.113.9"


def test_delete_missing_post(client, admin_token) -> None:
    response = client.delete("/api/v1/admin/posts/8080", headers=admin_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_post_status_and_visibility(client, test_post, admin_token) -> None:
    """Hidden posts leave the public feed but remain readable by id."""
    response = client.patch(
        f"/api/v1/admin/posts/{test_post.id}/status",
        json={"status": "hidden"},
        headers=admin_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"id": test_post.id, "target_type": "post", "status": "hidden"}
    assert client.get("/api/v1/posts/").json()["posts"] == []

    response = client.patch(
        f"/api/v1/admin/posts/{test_post.id}/visibility",
        json={"is_public": True},
        headers=admin_token,
    )
    assert response.json()["status"] == "active"
    assert len(client.get("/api/v1/posts/").json()["posts"]) == 1


def test_invalid_status(client, test_post, admin_token) -> None:
    response = client.patch(
        f"/api/v1/admin/posts/{test_post.id}/status",
        json={"status": "banished"},
        headers=admin_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "invalid_status"


def test_comment_moderation(client, test_post, thread, admin_token) -> None:
    """Hidden comments drop out of the public thread but not the admin view."""
    root, reply = thread
    response = client.patch(
        f"/api/v1/admin/comments/{root.id}/status",
        json={"status": "hidden"},
        headers=admin_token,
    )
    assert response.status_code == status.HTTP_200_OK

    public = client.get(f"/api/v1/posts/{test_post.id}/comments").json()
    assert public["comments"] == []
    admin_view = client.get(
        f"/api/v1/admin/posts/{test_post.id}/comments", headers=admin_token
    ).json()
    assert [c["id"] for c in admin_view["comments"]] == [root.id]

    response = client.delete(f"/api/v1/admin/comments/{root.id}", headers=admin_token)
    assert response.json()["comments_removed"] == 2
    admin_view = client.get(
        f"/api/v1/admin/posts/{test_post.id}/comments", headers=admin_token
    ).json()
    assert admin_view["comments"] == []


def test_bulk_posts(client, test_user, make_post, admin_token) -> None:
    posts = [make_post(test_user, f"Post {i}") for i in range(3)]
    response = client.post(
        "/api/v1/admin/posts/bulk",
        json={"action": "delete", "ids": [post.id for post in posts]},
        headers=admin_token,
    )
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["affected"] == 3
    assert body["action"] == "delete"

    logs = client.get("/api/v1/admin/logs?action=bulk_delete_posts", headers=admin_token).json()
    assert len(logs["logs"]) == 1


def test_bulk_comments_validation(client, admin_token) -> None:
    response = client.post(
        "/api/v1/admin/comments/bulk",
        json={"action": "hide", "ids": []},
        headers=admin_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "empty_batch"


def test_delete_user(client, other_user, admin_token, auth_token) -> None:
    """Deleting a user removes them from their followers' lists."""
    client.post("/api/v1/users/bob/follow", headers=auth_token)
    response = client.delete(f"/api/v1/admin/users/{other_user.id}", headers=admin_token)
    assert response.status_code == status.HTTP_200_OK

    assert client.get("/api/v1/users/bob").status_code == status.HTTP_404_NOT_FOUND
    assert client.get("/api/v1/users/alice/following").json() == []


def test_admin_logs_filters(client, test_post, admin_token) -> None:
    client.patch(
        f"/api/v1/admin/posts/{test_post.id}/status",
        json={"status": "reported"},
        headers=admin_token,
    )
    response = client.get(
        "/api/v1/admin/logs?targetType=comment&dateRange=all",
        headers=admin_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["logs"] == []

    response = client.get("/api/v1/admin/logs?dateRange=forever", headers=admin_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_admin_listings(client, test_post, thread, admin_token, auth_token) -> None:
    """Moderators see every post, comment and account."""
    client.patch(
        f"/api/v1/admin/posts/{test_post.id}/status",
        json={"status": "hidden"},
        headers=admin_token,
    )

    posts = client.get("/api/v1/admin/posts", headers=admin_token)
    assert posts.status_code == status.HTTP_200_OK
    assert [(p["id"], p["status"]) for p in posts.json()] == [(test_post.id, "hidden")]

    root, reply = thread
    comments = client.get("/api/v1/admin/comments", headers=admin_token).json()
    assert [c["id"] for c in comments] == [reply.id, root.id]
    assert comments[0]["post"] == {"id": test_post.id, "title": test_post.title}

    users = client.get("/api/v1/admin/users", headers=admin_token).json()
    by_name = {u["username"]: u for u in users}
    assert by_name["alice"]["posts_count"] == 1
    assert by_name["bob"]["comments_count"] == 1
    assert by_name["root_admin"]["role"] == "admin"

    for path in ("posts", "comments", "users"):
        response = client.get(f"/api/v1/admin/{path}", headers=auth_token)
        assert response.status_code == status.HTTP_403_FORBIDDEN
