"""
Scheduling component input/output models.

Staff-side management of scheduled emails and assignment publish times.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from coursecast.domain.entities import Assignment, ScheduledEmail
from coursecast.rules.models import SchedulingRules

# --- Validation Error ---


@dataclass(frozen=True)
class SchedulingError:
    """Scheduling validation error."""

    code: str
    message: str
    field: str | None = None
    item_id: UUID | None = None


# --- Configuration ---


@dataclass(frozen=True)
class SchedulingConfig:
    """Scheduling configuration from rules."""

    max_recipients: int = 200
    publish_grace_seconds: int = 0

    @classmethod
    def from_rules(cls, rules: SchedulingRules) -> SchedulingConfig:
        return cls(
            max_recipients=rules.max_recipients,
            publish_grace_seconds=rules.publish_grace_seconds,
        )


DEFAULT_CONFIG = SchedulingConfig()


# --- Input Models ---


@dataclass(frozen=True)
class ScheduleEmailInput:
    """Input for queueing a new scheduled email."""

    subject: str
    message: str
    scheduled_at: datetime
    recipient_ids: tuple[UUID, ...]
    actor_id: UUID
    create_notification: bool = False
    assignment_id: UUID | None = None


@dataclass(frozen=True)
class UpdateEmailInput:
    """Input for editing a PENDING scheduled email. None means unchanged."""

    email_id: UUID
    actor_id: UUID
    subject: str | None = None
    message: str | None = None
    scheduled_at: datetime | None = None
    recipient_ids: tuple[UUID, ...] | None = None
    create_notification: bool | None = None


@dataclass(frozen=True)
class CancelEmailInput:
    """Input for cancelling a PENDING scheduled email."""

    email_id: UUID
    actor_id: UUID


@dataclass(frozen=True)
class DeleteEmailInput:
    """Input for deleting a scheduled email in any status."""

    email_id: UUID
    actor_id: UUID


@dataclass(frozen=True)
class GetEmailInput:
    """Input for fetching one scheduled email."""

    email_id: UUID


@dataclass(frozen=True)
class ListEmailsInput:
    """Input for listing scheduled emails."""

    pass


@dataclass(frozen=True)
class ScheduleAssignmentInput:
    """Input for setting an assignment's publish time."""

    assignment_id: UUID
    publish_at: datetime
    actor_id: UUID
    notify_on_publish: bool = False


# --- Output Models ---


@dataclass(frozen=True)
class EmailOutput:
    """Output containing a scheduled email or errors."""

    email: ScheduledEmail | None
    errors: list[SchedulingError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class EmailListOutput:
    """Scheduled emails ordered by scheduled time."""

    emails: list[ScheduledEmail]


@dataclass(frozen=True)
class DeleteOutput:
    """Output for delete operation."""

    success: bool
    errors: list[SchedulingError] = field(default_factory=list)


@dataclass(frozen=True)
class AssignmentScheduleOutput:
    """Output containing the scheduled assignment or errors."""

    assignment: Assignment | None
    errors: list[SchedulingError] = field(default_factory=list)
    success: bool = True
