# mypy: ignore-errors
"""Tests for the content report endpoints."""

import pytest
from fastapi import status


@pytest.fixture()
def post(post_service, community, doctor):
    return post_service.create_post(
        doctor.id, title="Miracle cure", content="Buy now", forum_id=community.id
    )


def _file_report(client, headers, target_id, report_type="post"):
    return client.post(
        "/api/v1/reports/",
        json={
            "type": report_type,
            "target_id": target_id,
            "reason": "spam",
            "description": "Advertising a supplement",
        },
        headers=headers,
    )


def test_create_report(client, post, other_doctor, auth_headers) -> None:
    response = _file_report(client, auth_headers(other_doctor), post.id)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["status"] == "pending"
    assert data["urgency"] == "medium"
    assert data["target_name"] == "Miracle cure"
    assert data["reporter_id"] == other_doctor.id


def test_create_report_validates_payload(client, post, other_doctor, auth_headers) -> None:
    response = client.post(
        "/api/v1/reports/",
        json={"type": "post", "target_id": post.id, "reason": "spam", "description": "short"},
        headers=auth_headers(other_doctor),
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_report_missing_content(client, other_doctor, auth_headers) -> None:
    response = _file_report(client, auth_headers(other_doctor), "missing")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_list_reports_requires_system_moderator(
    client, post, other_doctor, admin, auth_headers
) -> None:
    _file_report(client, auth_headers(other_doctor), post.id)

    response = client.get("/api/v1/reports/", headers=auth_headers(other_doctor))
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.get(
        "/api/v1/reports/", params={"status": "pending", "type": "post"}, headers=auth_headers(admin)
    )
    assert response.status_code == status.HTTP_200_OK
    assert len(response.json()) == 1

    response = client.get(
        "/api/v1/reports/", params={"status": "dismissed"}, headers=auth_headers(admin)
    )
    assert response.json() == []


def test_resolve_and_dismiss(client, post, other_doctor, admin, auth_headers) -> None:
    report_id = _file_report(client, auth_headers(other_doctor), post.id).json()["id"]

    response = client.put(
        f"/api/v1/reports/{report_id}/resolve",
        json={"resolution": "Author warned"},
        headers=auth_headers(admin),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "resolved"

    response = client.put(
        f"/api/v1/reports/{report_id}/dismiss",
        json={"reason": "Reopened by mistake"},
        headers=auth_headers(admin),
    )
    assert response.json()["status"] == "dismissed"

    response = client.put(
        "/api/v1/reports/missing/dismiss",
        json={"reason": "Nothing"},
        headers=auth_headers(admin),
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_delete_reported_content(client, post, doctor, other_doctor, admin, auth_headers) -> None:
    report_id = _file_report(client, auth_headers(other_doctor), post.id).json()["id"]

    response = client.delete(f"/api/v1/reports/{report_id}/content", headers=auth_headers(admin))
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["deleted_content"] == "post"
    assert data["report"]["status"] == "resolved"
    assert client.get(f"/api/v1/posts/{post.id}").status_code == status.HTTP_404_NOT_FOUND

    response = client.delete(f"/api/v1/reports/{report_id}/content", headers=auth_headers(admin))
    assert response.status_code == status.HTTP_404_NOT_FOUND
