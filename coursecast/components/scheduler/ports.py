"""
Scheduler component port definitions.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol
from uuid import UUID

from coursecast.components.audit.ports import AuditRecorderPort
from coursecast.components.mailer.models import BulkSendResult, HtmlBuilder
from coursecast.components.notifications.ports import NotifierPort
from coursecast.components.publish.models import PublishResult
from coursecast.core.ports.time import TimePort
from coursecast.domain.entities import Assignment, Recipient

__all__ = [
    "AudiencePort",
    "AuditRecorderPort",
    "BulkMailerPort",
    "DueAssignmentsPort",
    "NotifierPort",
    "PublisherPort",
    "TimePort",
]


class DueAssignmentsPort(Protocol):
    """Selection query for the publish pass."""

    def list_due_unblocked(self, now_utc: datetime) -> list[Assignment]:
        """Unpublished, due, and not waiting on a PENDING scheduled email."""
        ...


class PublisherPort(Protocol):
    """The idempotent publish primitive."""

    def publish(self, assignment_id: UUID, actor_id: UUID) -> PublishResult:
        ...


class AudiencePort(Protocol):
    """Active users in the notified roles."""

    def audience(self, roles: Iterable[str]) -> list[Recipient]:
        ...


class BulkMailerPort(Protocol):
    """Bulk email gateway."""

    def send_bulk(
        self,
        recipients: list[Recipient] | tuple[Recipient, ...],
        subject: str,
        message: str,
        sender_name: str | None = None,
        html_builder: HtmlBuilder | None = None,
    ) -> BulkSendResult:
        ...
