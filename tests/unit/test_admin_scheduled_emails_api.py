"""
Tests for the admin scheduling API routes.
"""

from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from coursecast.api.deps import get_scheduling_service
from coursecast.api.routes.admin_scheduled_emails import assignments_router, router
from coursecast.components.audit import AuditRecorder
from coursecast.components.scheduling import SchedulingService

BASE = "/api/admin/scheduled-emails"


@pytest.fixture
def service(email_repo, assignment_repo, audit_repo, clock) -> SchedulingService:
    return SchedulingService(
        emails=email_repo,
        assignments=assignment_repo,
        audit=AuditRecorder(audit_repo, clock),
        time_port=clock,
    )


@pytest.fixture
def client(service: SchedulingService) -> TestClient:
    """Test client with the service bound to a temporary database."""
    app = FastAPI()
    app.include_router(router, prefix=BASE)
    app.include_router(assignments_router, prefix="/api/admin/assignments")
    app.dependency_overrides[get_scheduling_service] = lambda: service
    return TestClient(app)


@pytest.fixture
def headers(professor) -> dict[str, str]:
    return {"X-Actor-Id": str(professor.id)}


@pytest.fixture
def payload(make_students, clock) -> dict:
    return {
        "subject": "Quiz on Monday",
        "message": "Chapters 3 and 4.",
        "scheduled_at": (clock.now + timedelta(hours=3)).isoformat(),
        "recipient_ids": [str(s.id) for s in make_students(2)],
    }


def error_codes(response) -> list[str]:
    return [e["code"] for e in response.json()["detail"]["errors"]]


class TestActorHeader:
    def test_missing(self, client) -> None:
        response = client.get(BASE)

        assert response.status_code == 401

    def test_malformed(self, client) -> None:
        response = client.get(BASE, headers={"X-Actor-Id": "not-a-uuid"})

        assert response.status_code == 400


class TestCreate:
    def test_created(self, client, headers, payload, professor) -> None:
        response = client.post(BASE, json=payload, headers=headers)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["subject"] == "Quiz on Monday"
        assert data["created_by"] == str(professor.id)
        assert data["created_by_name"] == "Dr. Ada Byron"
        assert len(data["recipient_ids"]) == 2

    def test_validation_errors(self, client, headers, payload, clock) -> None:
        payload.update(subject=" ", scheduled_at=(clock.now - timedelta(hours=1)).isoformat())

        response = client.post(BASE, json=payload, headers=headers)

        assert response.status_code == 400
        assert error_codes(response) == ["subject_required", "scheduled_time_past"]

    def test_unparseable_body(self, client, headers, payload) -> None:
        payload["recipient_ids"] = ["nope"]

        response = client.post(BASE, json=payload, headers=headers)

        assert response.status_code == 422


class TestReadAndList:
    def test_list_ordered_by_time(self, client, headers, make_scheduled_email, clock) -> None:
        later = make_scheduled_email(subject="Later", scheduled_at=clock.now + timedelta(days=2))
        sooner = make_scheduled_email(subject="Sooner", scheduled_at=clock.now + timedelta(days=1))

        response = client.get(BASE, headers=headers)

        assert [e["id"] for e in response.json()] == [str(sooner.id), str(later.id)]

    def test_get(self, client, headers, make_scheduled_email) -> None:
        e = make_scheduled_email()

        response = client.get(f"{BASE}/{e.id}", headers=headers)

        assert response.status_code == 200
        assert response.json()["id"] == str(e.id)

    def test_get_unknown(self, client, headers) -> None:
        response = client.get(f"{BASE}/{uuid4()}", headers=headers)

        assert response.status_code == 404


class TestPatch:
    def test_update_fields(self, client, headers, make_scheduled_email) -> None:
        e = make_scheduled_email()

        response = client.patch(f"{BASE}/{e.id}", json={"message": "Moved to Tuesday."}, headers=headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Moved to Tuesday."
        assert response.json()["subject"] == "Reminder"

    def test_explicit_nulls_ignored(self, client, headers, make_scheduled_email) -> None:
        e = make_scheduled_email()

        response = client.patch(
            f"{BASE}/{e.id}", json={"subject": "New", "scheduled_at": None}, headers=headers
        )

        assert response.status_code == 200
        assert response.json()["subject"] == "New"

    def test_cancel(self, client, headers, make_scheduled_email) -> None:
        e = make_scheduled_email()

        response = client.patch(f"{BASE}/{e.id}", json={"status": "CANCELLED"}, headers=headers)

        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"

    def test_only_cancel_status_allowed(self, client, headers, make_scheduled_email) -> None:
        e = make_scheduled_email()

        response = client.patch(f"{BASE}/{e.id}", json={"status": "SENT"}, headers=headers)

        assert response.status_code == 422

    def test_sent_row_rejected(self, client, headers, make_scheduled_email) -> None:
        e = make_scheduled_email(status="SENT")

        response = client.patch(f"{BASE}/{e.id}", json={"subject": "x"}, headers=headers)

        assert response.status_code == 400
        assert error_codes(response) == ["not_pending"]

    def test_claimed_row_conflict(self, client, headers, make_scheduled_email, email_repo, clock):
        e = make_scheduled_email()
        email_repo.claim(e.id, clock.now, clock.now - timedelta(minutes=15))

        response = client.patch(f"{BASE}/{e.id}", json={"status": "CANCELLED"}, headers=headers)

        assert response.status_code == 409
        assert error_codes(response) == ["claimed"]

    def test_unknown(self, client, headers) -> None:
        response = client.patch(f"{BASE}/{uuid4()}", json={"subject": "x"}, headers=headers)

        assert response.status_code == 404


class TestDelete:
    def test_delete(self, client, headers, make_scheduled_email, email_repo) -> None:
        e = make_scheduled_email(status="FAILED")

        response = client.delete(f"{BASE}/{e.id}", headers=headers)

        assert response.json() == {"success": True}
        assert email_repo.get_by_id(e.id) is None

    def test_delete_unknown(self, client, headers) -> None:
        response = client.delete(f"{BASE}/{uuid4()}", headers=headers)

        assert response.status_code == 404


class TestScheduleAssignment:
    def test_schedule(self, client, headers, make_assignment, clock) -> None:
        a = make_assignment(scheduled_publish_at=None)
        when = clock.now + timedelta(days=1)

        response = client.post(
            f"/api/admin/assignments/{a.id}/schedule",
            json={"publish_at": when.isoformat(), "notify_on_publish": True},
            headers=headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["published"] is False
        assert data["notify_on_publish"] is True

    def test_already_published(self, client, headers, make_assignment, clock) -> None:
        a = make_assignment(published=True)

        response = client.post(
            f"/api/admin/assignments/{a.id}/schedule",
            json={"publish_at": (clock.now + timedelta(days=1)).isoformat()},
            headers=headers,
        )

        assert response.status_code == 400
        assert error_codes(response) == ["already_published"]

    def test_unknown_assignment(self, client, headers, clock) -> None:
        response = client.post(
            f"/api/admin/assignments/{uuid4()}/schedule",
            json={"publish_at": (clock.now + timedelta(days=1)).isoformat()},
            headers=headers,
        )

        assert response.status_code == 404
