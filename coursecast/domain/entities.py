from datetime import UTC, datetime
from typing import Any, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---
RoleType = Literal["STUDENT", "TA", "PROFESSOR", "ADMIN"]
ScheduledEmailStatus = Literal["PENDING", "SENT", "FAILED", "CANCELLED"]

TERMINAL_EMAIL_STATUSES: frozenset[str] = frozenset({"SENT", "FAILED", "CANCELLED"})


def utc_now() -> datetime:
    return datetime.now(UTC)


# --- Users ---

class User(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str | None = None
    email: str
    role: RoleType = "STUDENT"
    is_banned: bool = False
    is_deleted: bool = False
    created_at: datetime = Field(default_factory=utc_now)


class Recipient(BaseModel):
    """A deliverable user, as resolved by the recipient directory."""

    id: UUID
    name: str | None = None
    email: str


# --- Assignments ---

class Assignment(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    title: str
    description: str | None = None
    due_date: datetime | None = None
    total_points: float = 100

    published: bool = False
    scheduled_publish_at: datetime | None = None
    notify_on_publish: bool = False
    published_by: UUID | None = None
    published_at: datetime | None = None

    created_by: UUID
    created_by_name: str | None = None
    created_at: datetime = Field(default_factory=utc_now)


# --- Scheduled emails ---

class ScheduledEmail(BaseModel):
    """
    An email queued for delivery at `scheduled_at`.

    State machine: PENDING -> SENT | FAILED | CANCELLED. The three
    terminal states are final.
    """

    id: UUID = Field(default_factory=uuid4)
    status: ScheduledEmailStatus = "PENDING"
    scheduled_at: datetime
    recipient_ids: list[UUID] = Field(default_factory=list)
    subject: str
    message: str
    create_notification: bool = False
    assignment_id: UUID | None = None

    error: str | None = None
    sent_at: datetime | None = None
    cancelled_at: datetime | None = None
    claimed_at: datetime | None = None

    created_by: UUID
    created_by_name: str | None = None
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_EMAIL_STATUSES


# --- Notifications ---

class Notification(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    title: str
    message: str
    is_global: bool = True
    assignment_id: UUID | None = None
    created_by: UUID
    created_at: datetime = Field(default_factory=utc_now)


# --- Audit ---

class AuditEvent(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    actor_user_id: UUID
    action: str
    details: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)
