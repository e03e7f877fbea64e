# mypy: ignore-errors
"""Tests for comment-related endpoints."""

import pytest
from fastapi import status


@pytest.fixture()
def post(post_service, community, doctor):
    return post_service.create_post(
        doctor.id, title="Thread", content="Start here", forum_id=community.id
    )


def test_create_reply(client, post, doctor, other_doctor, auth_headers) -> None:
    root = client.post(
        "/api/v1/comments/",
        json={"post_id": post.id, "content": "Root"},
        headers=auth_headers(doctor),
    )
    assert root.status_code == status.HTTP_201_CREATED

    reply = client.post(
        "/api/v1/comments/",
        json={"post_id": post.id, "content": "Reply", "parent_comment_id": root.json()["id"]},
        headers=auth_headers(other_doctor),
    )
    assert reply.status_code == status.HTTP_201_CREATED
    assert reply.json()["parent_comment_id"] == root.json()["id"]


def test_comment_length_is_validated(client, post, doctor, auth_headers) -> None:
    for content in ("", "x" * 501):
        response = client.post(
            "/api/v1/comments/",
            json={"post_id": post.id, "content": content},
            headers=auth_headers(doctor),
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_edit_comment(client, post, doctor, other_doctor, auth_headers) -> None:
    comment_id = client.post(
        "/api/v1/comments/",
        json={"post_id": post.id, "content": "Draft"},
        headers=auth_headers(doctor),
    ).json()["id"]

    response = client.put(
        f"/api/v1/comments/{comment_id}", json={"content": "Final"}, headers=auth_headers(doctor)
    )
    assert response.json()["content"] == "Final"

    response = client.put(
        f"/api/v1/comments/{comment_id}",
        json={"content": "Mine"},
        headers=auth_headers(other_doctor),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_delete_comment_subtree(client, post, doctor, owner, auth_headers) -> None:
    root_id = client.post(
        "/api/v1/comments/",
        json={"post_id": post.id, "content": "Root"},
        headers=auth_headers(doctor),
    ).json()["id"]
    client.post(
        "/api/v1/comments/",
        json={"post_id": post.id, "content": "Reply", "parent_comment_id": root_id},
        headers=auth_headers(owner),
    )

    response = client.delete(f"/api/v1/comments/{root_id}", headers=auth_headers(owner))
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"deleted_count": 2, "is_moderator_action": True}
    assert client.get(f"/api/v1/posts/{post.id}").json()["comment_count"] == 0
