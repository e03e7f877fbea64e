# mypy: ignore-errors
"""Tests for community-related endpoints."""

from fastapi import status

from colloquium.models import Post
from colloquium.models.post import POST_STATUS_PENDING


def test_create_community(client, owner, auth_headers) -> None:
    """Test creating a new community."""
    response = client.post(
        "/api/v1/communities/",
        json={
            "name": "Neurology Round",
            "description": "Weekly neurology case discussions",
            "requires_approval": True,
        },
        headers=auth_headers(owner),
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["name"] == "Neurology Round"
    assert data["owner_id"] == owner.id
    assert data["member_count"] == 1
    assert data["requires_approval"] is True
    assert data["requires_post_approval"] is False


def test_create_duplicate_community(client, owner, community, auth_headers) -> None:
    """Test creating a community with a name that differs only in case."""
    response = client.post(
        "/api/v1/communities/",
        json={"name": "cardiology forum", "description": "Same name, different case"},
        headers=auth_headers(owner),
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert "already exists" in response.json()["detail"]


def test_create_community_validates_lengths(client, owner, auth_headers) -> None:
    response = client.post(
        "/api/v1/communities/",
        json={"name": "ab", "description": "too short"},
        headers=auth_headers(owner),
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_create_community_requires_auth(client) -> None:
    response = client.post(
        "/api/v1/communities/",
        json={"name": "Anonymous", "description": "Nobody is logged in"},
    )
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}


def test_invalid_token_is_rejected(client) -> None:
    response = client.post(
        "/api/v1/communities/check-name",
        json={"name": "Anything"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_check_name(client, doctor, community, auth_headers) -> None:
    response = client.post(
        "/api/v1/communities/check-name",
        json={"name": "CARDIOLOGY FORUM"},
        headers=auth_headers(doctor),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"exists": True, "existing_name": "Cardiology Forum"}


def test_get_community(client, community, owner) -> None:
    """Test getting a community with its embedded collections."""
    response = client.get(f"/api/v1/communities/{community.id}")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == community.id
    assert data["members"] == [owner.id]
    assert [m["user_id"] for m in data["moderators"]] == [owner.id]
    assert data["pending_requests"] == []
    assert data["bans"] == []


def test_get_nonexistent_community(client) -> None:
    """Test getting a non-existent community."""
    response = client.get("/api/v1/communities/does-not-exist")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_join_and_leave(client, community, doctor, auth_headers) -> None:
    headers = auth_headers(doctor)
    response = client.post(f"/api/v1/communities/{community.id}/join", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "joined"

    response = client.post(f"/api/v1/communities/{community.id}/join", headers=headers)
    assert response.status_code == status.HTTP_409_CONFLICT

    response = client.post(f"/api/v1/communities/{community.id}/leave", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert client.get(f"/api/v1/communities/{community.id}").json()["member_count"] == 1


def test_owner_cannot_leave(client, community, owner, auth_headers) -> None:
    response = client.post(
        f"/api/v1/communities/{community.id}/leave", headers=auth_headers(owner)
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_membership_request_flow(client, moderated_community, owner, doctor, auth_headers) -> None:
    base = f"/api/v1/communities/{moderated_community.id}"
    response = client.post(f"{base}/join", headers=auth_headers(doctor))
    assert response.json() == {"status": "pending", "requires_approval": True}

    response = client.post(f"{base}/members/{doctor.id}/approve", headers=auth_headers(doctor))
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.post(f"{base}/members/{doctor.id}/approve", headers=auth_headers(owner))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["notified"] is True

    response = client.post(f"{base}/members/{doctor.id}/reject", headers=auth_headers(owner))
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert client.get(base).json()["member_count"] == 2


def test_moderator_management(client, community, owner, doctor, auth_headers, community_service) -> None:
    community_service.join_community(doctor.id, community.id)
    url = f"/api/v1/communities/{community.id}/moderators/{doctor.id}"

    response = client.post(url, headers=auth_headers(owner))
    assert response.status_code == status.HTTP_201_CREATED
    response = client.post(url, headers=auth_headers(owner))
    assert response.status_code == status.HTTP_409_CONFLICT

    response = client.delete(url, headers=auth_headers(owner))
    assert response.status_code == status.HTTP_200_OK


def test_ban_and_unban(client, community, owner, doctor, auth_headers) -> None:
    base = f"/api/v1/communities/{community.id}"
    response = client.post(
        f"{base}/bans",
        json={"user_id": doctor.id, "reason": "Sharing identifiable data", "duration": "30d"},
        headers=auth_headers(owner),
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["ban_duration"] == "30d"

    response = client.get(f"{base}/bans/{doctor.id}", headers=auth_headers(owner))
    assert response.json()["is_banned"] is True

    response = client.post(f"{base}/join", headers=auth_headers(doctor))
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.delete(f"{base}/bans/{doctor.id}", headers=auth_headers(owner))
    assert response.json() == {"removed": True}
    response = client.delete(f"{base}/bans/{doctor.id}", headers=auth_headers(owner))
    assert response.json() == {"removed": False}


def test_ban_rejects_unknown_duration(client, community, owner, doctor, auth_headers) -> None:
    response = client.post(
        f"/api/v1/communities/{community.id}/bans",
        json={"user_id": doctor.id, "reason": "Sharing identifiable data", "duration": "2w"},
        headers=auth_headers(owner),
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_transfer_ownership_without_moderators(client, community, owner, auth_headers) -> None:
    response = client.post(
        f"/api/v1/communities/{community.id}/transfer-ownership", headers=auth_headers(owner)
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert "Add moderators first" in response.json()["detail"]


def test_update_settings_publishes_pending_posts(
    client, db_session, moderated_community, owner, doctor, post_service, auth_headers
) -> None:
    post_service.create_post(
        doctor.id, title="Case", content="Details", forum_id=moderated_community.id
    )
    response = client.put(
        f"/api/v1/communities/{moderated_community.id}/settings",
        json={"requires_post_approval": False},
        headers=auth_headers(owner),
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["posts_activated"] == 1
    assert data["community"]["post_count"] == 1
    assert data["community"]["requires_approval"] is True


def test_pending_post_review(
    client, db_session, moderated_community, owner, doctor, post_service, auth_headers
) -> None:
    base = f"/api/v1/communities/{moderated_community.id}"
    keep = post_service.create_post(
        doctor.id, title="Keep", content="Good", forum_id=moderated_community.id
    )
    drop = post_service.create_post(
        doctor.id, title="Drop", content="Bad", forum_id=moderated_community.id
    )

    response = client.get(f"{base}/pending-posts", headers=auth_headers(owner))
    assert response.status_code == status.HTTP_200_OK
    assert {item["post"]["id"] for item in response.json()} == {keep.id, drop.id}

    response = client.post(f"{base}/posts/{keep.id}/validate", headers=auth_headers(owner))
    assert response.json()["status"] == "active"

    response = client.post(
        f"{base}/posts/{drop.id}/reject",
        json={"reason": "Off topic"},
        headers=auth_headers(owner),
    )
    assert response.status_code == status.HTTP_200_OK
    assert db_session.get(Post, drop.id) is None

    response = client.post(f"{base}/posts/{keep.id}/validate", headers=auth_headers(owner))
    assert response.status_code == status.HTTP_409_CONFLICT
    remaining = db_session.query(Post).filter(Post.status == POST_STATUS_PENDING).count()
    assert remaining == 0


def test_delete_community(client, community, owner, admin, auth_headers) -> None:
    url = f"/api/v1/communities/{community.id}"
    body = {"reason": "Violation of platform policy"}

    response = client.request("DELETE", url, json=body, headers=auth_headers(owner))
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.request("DELETE", url, json=body, headers=auth_headers(admin))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["updated_users"] == 1
    assert client.get(url).status_code == status.HTTP_404_NOT_FOUND
