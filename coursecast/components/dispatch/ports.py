"""
Dispatch component port definitions.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol
from uuid import UUID

from coursecast.components.scheduler.ports import (
    AuditRecorderPort,
    BulkMailerPort,
    NotifierPort,
    PublisherPort,
)
from coursecast.core.ports.time import TimePort
from coursecast.domain.entities import Assignment, Recipient, ScheduledEmail

__all__ = [
    "AssignmentLookupPort",
    "AuditRecorderPort",
    "BulkMailerPort",
    "DirectoryPort",
    "DueEmailsPort",
    "NotifierPort",
    "PublisherPort",
    "TimePort",
]


class DueEmailsPort(Protocol):
    """Selection and state transitions for scheduled emails."""

    def list_due(self, now_utc: datetime) -> list[ScheduledEmail]:
        ...

    def claim(self, email_id: UUID, now_utc: datetime, stale_before: datetime) -> bool:
        ...

    def mark_sent(self, email_id: UUID, sent_at: datetime, error: str | None) -> bool:
        ...

    def mark_failed(self, email_id: UUID, error: str) -> bool:
        ...


class DirectoryPort(Protocol):
    """Resolves user IDs to deliverable recipients."""

    def resolve(self, user_ids: Iterable[UUID]) -> list[Recipient]:
        ...


class AssignmentLookupPort(Protocol):
    """Reads the linked assignment for the ordering step."""

    def get_by_id(self, assignment_id: UUID) -> Assignment | None:
        ...
