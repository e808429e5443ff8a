import os
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from coursecast.adapters.sqlite.migrator import SQLiteMigrator
from coursecast.adapters.sqlite_db import (
    SQLiteAssignmentRepo,
    SQLiteAuditLogRepo,
    SQLiteNotificationRepo,
    SQLiteScheduledEmailRepo,
    SQLiteUserRepo,
)
from coursecast.core.ports.email import EmailResult
from coursecast.domain.entities import Assignment, ScheduledEmail, User

FIXED_NOW = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


# --- Test doubles shared across suites ---


class MockTimePort:
    """Controllable clock."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def now_utc(self) -> datetime:
        return self.now

    def is_future(self, utc_dt: datetime, grace_seconds: int = 0) -> bool:
        return utc_dt > self.now - timedelta(seconds=grace_seconds)

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class FlakyEmailAdapter:
    """
    Email port that fails for chosen addresses.

    Addresses in `fail_for` get a FAILED result; addresses in `raise_for`
    make send_email raise, as a misbehaving provider client would.
    """

    def __init__(self, fail_for: set[str] | None = None, raise_for: set[str] | None = None):
        self.fail_for = fail_for or set()
        self.raise_for = raise_for or set()
        self.sent: list[tuple[str, str, str]] = []

    def send_email(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str | None = None,
    ) -> EmailResult:
        if recipient in self.raise_for:
            raise ConnectionError(f"connection reset sending to {recipient}")
        if recipient in self.fail_for:
            return EmailResult.failed(recipient, "mailbox unavailable")
        self.sent.append((recipient, subject, body_html))
        return EmailResult.success(recipient, message_id=f"msg-{len(self.sent)}")


@pytest.fixture
def clock() -> MockTimePort:
    return MockTimePort()


@pytest.fixture
def email_adapter() -> FlakyEmailAdapter:
    return FlakyEmailAdapter()


# --- SQLite-backed fixtures ---


@pytest.fixture
def db_path(tmp_path) -> str:
    """Fresh, fully migrated SQLite database."""
    path = os.path.join(str(tmp_path), "coursecast.db")
    SQLiteMigrator(path).run_migrations()
    return path


@pytest.fixture
def user_repo(db_path: str) -> SQLiteUserRepo:
    return SQLiteUserRepo(db_path)


@pytest.fixture
def assignment_repo(db_path: str) -> SQLiteAssignmentRepo:
    return SQLiteAssignmentRepo(db_path)


@pytest.fixture
def email_repo(db_path: str) -> SQLiteScheduledEmailRepo:
    return SQLiteScheduledEmailRepo(db_path)


@pytest.fixture
def notification_repo(db_path: str) -> SQLiteNotificationRepo:
    return SQLiteNotificationRepo(db_path)


@pytest.fixture
def audit_repo(db_path: str) -> SQLiteAuditLogRepo:
    return SQLiteAuditLogRepo(db_path)


@pytest.fixture
def professor(user_repo: SQLiteUserRepo) -> User:
    return user_repo.save(
        User(name="Dr. Ada Byron", email="ada@uni.example", role="PROFESSOR")
    )


@pytest.fixture
def make_students(user_repo: SQLiteUserRepo) -> Callable[[int], list[User]]:
    def make(n: int) -> list[User]:
        return [
            user_repo.save(
                User(name=f"Student {i}", email=f"student{i}-{uuid4().hex[:6]}@uni.example")
            )
            for i in range(n)
        ]

    return make


@pytest.fixture
def make_assignment(
    assignment_repo: SQLiteAssignmentRepo, professor: User, clock: MockTimePort
) -> Callable[..., Assignment]:
    def make(**overrides) -> Assignment:
        fields = {
            "title": "Lab 1: Projectile Motion",
            "created_by": professor.id,
            "scheduled_publish_at": clock.now - timedelta(minutes=1),
            "created_at": clock.now - timedelta(days=1),
        }
        fields.update(overrides)
        return assignment_repo.save(Assignment(**fields))

    return make


@pytest.fixture
def make_scheduled_email(
    email_repo: SQLiteScheduledEmailRepo, professor: User, clock: MockTimePort
) -> Callable[..., ScheduledEmail]:
    def make(**overrides) -> ScheduledEmail:
        fields = {
            "subject": "Reminder",
            "message": "Lab reports are due Friday.",
            "scheduled_at": clock.now - timedelta(minutes=1),
            "created_by": professor.id,
            "created_at": clock.now - timedelta(hours=1),
        }
        fields.update(overrides)
        return email_repo.create(ScheduledEmail(**fields))

    return make
