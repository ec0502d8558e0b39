# tests/v1/test_supervisor_api.py
"""Tests for the supervisor review workflow."""

from fastapi import status

from tests.conftest import auth_headers


def test_review_queue(client, supervisor, make_project) -> None:
    pending = make_project(requires_supervisor_review=True, is_active=False, is_published=False)
    make_project(title="No review")

    response = client.get("/api/v1/supervisor/projects", headers=auth_headers(supervisor))

    assert response.status_code == status.HTTP_200_OK
    assert [p["id"] for p in response.json()] == [pending.id]


def test_approve_project(client, supervisor, admin, make_project) -> None:
    project = make_project(requires_supervisor_review=True, is_active=False, is_published=False)

    blocked = client.patch(
        f"/api/v1/projects/{project.id}", json={"is_published": True}, headers=auth_headers(admin)
    )
    assert blocked.status_code == status.HTTP_409_CONFLICT

    review = client.post(
        f"/api/v1/supervisor/projects/{project.id}/review",
        json={"action": "APPROVE", "comments": "Looks fine"},
        headers=auth_headers(supervisor),
    )
    assert review.status_code == status.HTTP_200_OK
    assert review.json()["supervisor_approval_status"] == "APPROVED"

    published = client.patch(
        f"/api/v1/projects/{project.id}", json={"is_published": True}, headers=auth_headers(admin)
    )
    assert published.status_code == status.HTTP_200_OK


def test_invalid_action(client, supervisor, make_project) -> None:
    project = make_project(requires_supervisor_review=True)
    response = client.post(
        f"/api/v1/supervisor/projects/{project.id}/review",
        json={"action": "MAYBE"},
        headers=auth_headers(supervisor),
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_voter_cannot_review(client, voter, make_project) -> None:
    project = make_project(requires_supervisor_review=True)
    response = client.post(
        f"/api/v1/supervisor/projects/{project.id}/review",
        json={"action": "APPROVE"},
        headers=auth_headers(voter),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
