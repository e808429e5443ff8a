"""
Audit component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from uuid import UUID

from coursecast.domain.entities import AuditEvent


class AuditAction(str, Enum):
    """Actions recorded in the audit trail."""

    SCHEDULED_PUBLISH = "scheduled_publish"
    SCHEDULED_EMAIL_SENT = "scheduled_email_sent"
    SCHEDULED_EMAIL_CREATED = "scheduled_email_created"
    SCHEDULED_EMAIL_UPDATED = "scheduled_email_updated"
    SCHEDULED_EMAIL_CANCELLED = "scheduled_email_cancelled"
    SCHEDULED_EMAIL_DELETED = "scheduled_email_deleted"
    ASSIGNMENT_SCHEDULED = "assignment_scheduled"


# --- Input Models ---


@dataclass(frozen=True)
class RecordAuditInput:
    """Input for recording an audit event."""

    action: AuditAction
    actor_id: UUID
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ListAuditInput:
    """Input for listing recent audit events."""

    action: AuditAction | None = None
    limit: int = 50


# --- Output Models ---


@dataclass(frozen=True)
class AuditListOutput:
    """Output containing audit events, newest first."""

    events: list[AuditEvent]
