"""
Unit tests for the audit, notifications and publish components.
"""

from __future__ import annotations

from uuid import uuid4

import pytest

from coursecast.components import audit, notifications, publish
from coursecast.components.audit import AuditAction, AuditRecorder, ListAuditInput, RecordAuditInput
from coursecast.components.notifications import CreateNotificationInput
from coursecast.components.publish import PublishComponent, PublishInput

# --- Mock Implementations ---


class MockAuditRepo:
    def __init__(self) -> None:
        self.events = []

    def append(self, event):
        self.events.append(event)
        return event

    def list_recent(self, limit: int = 100):
        return list(reversed(self.events))[:limit]

    def list_by_action(self, action: str, limit: int = 100):
        return [e for e in reversed(self.events) if e.action == action][:limit]


class MockNotificationRepo:
    def __init__(self) -> None:
        self.saved = []

    def save(self, notification):
        self.saved.append(notification)
        return notification


class MockAssignmentWriter:
    def __init__(self) -> None:
        self.published = set()

    def publish_if_unpublished(self, assignment_id, actor_id, now_utc) -> bool:
        if assignment_id in self.published:
            return False
        self.published.add(assignment_id)
        return True


class TestAuditRecorder:
    def test_record(self, clock) -> None:
        repo = MockAuditRepo()
        actor = uuid4()

        event = AuditRecorder(repo, clock).record(
            AuditAction.SCHEDULED_PUBLISH, {"assignmentId": "a1"}, actor_id=actor
        )

        assert event.action == "scheduled_publish"
        assert event.actor_user_id == actor
        assert event.created_at == clock.now
        assert repo.events == [event]

    def test_string_action_must_be_known(self, clock) -> None:
        recorder = AuditRecorder(MockAuditRepo(), clock)

        recorder.record("scheduled_email_sent", {}, actor_id=uuid4())
        with pytest.raises(ValueError):
            recorder.record("dropped_table", {}, actor_id=uuid4())

    def test_run_record_and_list(self, clock) -> None:
        repo = MockAuditRepo()
        actor = uuid4()
        audit.run(RecordAuditInput(AuditAction.ASSIGNMENT_SCHEDULED, actor), repo=repo, time_port=clock)
        audit.run(RecordAuditInput(AuditAction.SCHEDULED_PUBLISH, actor), repo=repo, time_port=clock)

        everything = audit.run(ListAuditInput(), repo=repo, time_port=clock)
        publishes = audit.run(
            ListAuditInput(action=AuditAction.SCHEDULED_PUBLISH), repo=repo, time_port=clock
        )

        assert len(everything.events) == 2
        assert [e.action for e in publishes.events] == ["scheduled_publish"]


class TestNotificationService:
    def test_create(self, clock) -> None:
        repo = MockNotificationRepo()
        actor, assignment_id = uuid4(), uuid4()

        note = notifications.run(
            CreateNotificationInput(
                title="New Assignment: Lab 1",
                message="Published.",
                actor_id=actor,
                assignment_id=assignment_id,
            ),
            repo=repo,
            time_port=clock,
        )

        assert repo.saved == [note]
        assert note.is_global is True
        assert note.created_by == actor
        assert note.assignment_id == assignment_id
        assert note.created_at == clock.now

    def test_unknown_input(self, clock) -> None:
        with pytest.raises(ValueError):
            notifications.run("hello", repo=MockNotificationRepo(), time_port=clock)  # type: ignore[arg-type]


class TestPublishComponent:
    def test_first_call_publishes(self, clock) -> None:
        component = PublishComponent(MockAssignmentWriter(), clock)
        assignment_id = uuid4()

        first = component.publish(assignment_id, uuid4())
        second = component.publish(assignment_id, uuid4())

        assert first.published is True
        assert first.published_at == clock.now
        assert second.published is False
        assert second.published_at is None

    def test_run_entry_point(self, clock) -> None:
        result = publish.run(
            PublishInput(assignment_id=uuid4(), actor_id=uuid4()),
            repo=MockAssignmentWriter(),
            clock=clock,
        )

        assert result.published is True

    def test_unknown_input(self, clock) -> None:
        with pytest.raises(TypeError):
            PublishComponent(MockAssignmentWriter(), clock).run("x")  # type: ignore[arg-type]
