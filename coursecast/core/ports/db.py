"""
Database Adapter Interfaces.

Protocol-based interfaces for repository operations.
Implementations: SQLite (now), Postgres (future).

Concurrency contract: every mutation the workers rely on is a single-row
conditional update whose boolean result says whether *this* call changed
the row. No method spans several rows in one transaction.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from coursecast.domain.entities import (
    Assignment,
    AuditEvent,
    Notification,
    ScheduledEmail,
    User,
)

# -----------------------------------------------------------------------------
# Assignment Repository
# -----------------------------------------------------------------------------


class AssignmentRepoPort(Protocol):
    """
    Repository for assignments.

    Invariants:
    - I1: published never goes back to False through this port
    - I2: scheduled_publish_at is cleared in the same write that publishes
    """

    def get_by_id(self, assignment_id: UUID) -> Assignment | None:
        """Get assignment by ID."""
        ...

    def save(self, assignment: Assignment) -> Assignment:
        """Insert or update an assignment (upsert)."""
        ...

    def publish_if_unpublished(
        self,
        assignment_id: UUID,
        actor_id: UUID,
        now_utc: datetime,
    ) -> bool:
        """
        Atomically publish an assignment if it is still unpublished.

        Returns True only for the call whose write matched the row.
        """
        ...

    def list_due_unblocked(self, now_utc: datetime) -> list[Assignment]:
        """
        List unpublished assignments whose schedule is due and that have no
        PENDING scheduled email linked to them.
        """
        ...

    def set_schedule(
        self,
        assignment_id: UUID,
        publish_at_utc: datetime,
        notify_on_publish: bool,
    ) -> bool:
        """Set the publish schedule on an unpublished assignment."""
        ...


# -----------------------------------------------------------------------------
# ScheduledEmail Repository
# -----------------------------------------------------------------------------


class ScheduledEmailRepoPort(Protocol):
    """
    Repository for scheduled emails.

    State machine: PENDING -> SENT | FAILED | CANCELLED (terminal).
    All transitions are guarded by status = 'PENDING'.
    """

    def get_by_id(self, email_id: UUID) -> ScheduledEmail | None:
        """Get scheduled email by ID."""
        ...

    def create(self, email: ScheduledEmail) -> ScheduledEmail:
        """Insert a new scheduled email."""
        ...

    def list_all(self) -> list[ScheduledEmail]:
        """List all scheduled emails ordered by scheduled_at."""
        ...

    def list_due(self, now_utc: datetime) -> list[ScheduledEmail]:
        """List PENDING emails with scheduled_at <= now."""
        ...

    def claim(self, email_id: UUID, now_utc: datetime, stale_before: datetime) -> bool:
        """
        Claim a PENDING email for dispatch.

        Succeeds if the row is unclaimed or its claim is older than
        stale_before.
        """
        ...

    def mark_sent(self, email_id: UUID, sent_at: datetime, error: str | None) -> bool:
        """Transition PENDING -> SENT."""
        ...

    def mark_failed(self, email_id: UUID, error: str) -> bool:
        """Transition PENDING -> FAILED."""
        ...

    def cancel(self, email_id: UUID, cancelled_at: datetime) -> bool:
        """Transition an unclaimed PENDING email -> CANCELLED."""
        ...

    def update_pending(self, email_id: UUID, changes: dict[str, Any]) -> bool:
        """Update editable fields of an unclaimed PENDING email."""
        ...

    def delete(self, email_id: UUID) -> None:
        """Delete a scheduled email."""
        ...


# -----------------------------------------------------------------------------
# User Repository
# -----------------------------------------------------------------------------


class UserRepoPort(Protocol):
    """Repository for users (read-mostly for this subsystem)."""

    def get_by_id(self, user_id: UUID) -> User | None:
        """Get user by ID."""
        ...

    def save(self, user: User) -> User:
        """Insert or update a user."""
        ...

    def list_by_ids(self, user_ids: list[UUID]) -> list[User]:
        """List users with the given IDs, excluding soft-deleted accounts."""
        ...

    def list_active_by_roles(self, roles: list[str]) -> list[User]:
        """List users in any of the roles who are neither banned nor deleted."""
        ...


# -----------------------------------------------------------------------------
# Notification Repository
# -----------------------------------------------------------------------------


class NotificationRepoPort(Protocol):
    """Repository for in-app notifications (append-only here)."""

    def save(self, notification: Notification) -> Notification:
        """Insert a notification."""
        ...

    def list_recent(self, limit: int = 100) -> list[Notification]:
        """List most recent notifications."""
        ...


# -----------------------------------------------------------------------------
# Audit Log Repository
# -----------------------------------------------------------------------------


class AuditLogRepoPort(Protocol):
    """
    Repository for audit events (append-only).

    Invariants:
    - I3: events are never updated or deleted
    """

    def append(self, event: AuditEvent) -> AuditEvent:
        """Append an audit event."""
        ...

    def list_recent(self, limit: int = 100) -> list[AuditEvent]:
        """List most recent events."""
        ...

    def list_by_action(self, action: str, limit: int = 100) -> list[AuditEvent]:
        """List events with the given action."""
        ...
