"""
Audit component - append-only trail of scheduling actions.

Invariants:
- I1: Entries are immutable once appended
- I2: Actor identity captured (the creator for automated actions)
- I3: Details are JSON-serializable with camelCase keys
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID, uuid4

from coursecast.domain.entities import AuditEvent

from .models import AuditAction, AuditListOutput, ListAuditInput, RecordAuditInput
from .ports import AuditLogRepoPort, TimePort

logger = logging.getLogger(__name__)


class AuditRecorder:
    """Appends audit events through the repository."""

    def __init__(self, repo: AuditLogRepoPort, time_port: TimePort) -> None:
        self._repo = repo
        self._time = time_port

    def record(
        self,
        action: AuditAction | str,
        details: dict[str, Any],
        actor_id: UUID,
    ) -> AuditEvent:
        event = AuditEvent(
            id=uuid4(),
            actor_user_id=actor_id,
            action=AuditAction(action).value,
            details=details,
            created_at=self._time.now_utc(),
        )
        self._repo.append(event)
        logger.debug("Audit %s by %s", event.action, actor_id)
        return event

    def recent(self, action: AuditAction | None = None, limit: int = 50) -> list[AuditEvent]:
        if action is None:
            return self._repo.list_recent(limit)
        return self._repo.list_by_action(AuditAction(action).value, limit)


# --- Component Entry Points ---


def run_record(
    inp: RecordAuditInput,
    *,
    repo: AuditLogRepoPort,
    time_port: TimePort,
) -> AuditEvent:
    """Record a single audit event."""
    return AuditRecorder(repo, time_port).record(inp.action, inp.details, inp.actor_id)


def run_list(
    inp: ListAuditInput,
    *,
    repo: AuditLogRepoPort,
    time_port: TimePort,
) -> AuditListOutput:
    """List recent audit events, optionally filtered by action."""
    return AuditListOutput(events=AuditRecorder(repo, time_port).recent(inp.action, inp.limit))


def run(
    inp: RecordAuditInput | ListAuditInput,
    *,
    repo: AuditLogRepoPort,
    time_port: TimePort,
) -> AuditEvent | AuditListOutput:
    """
    Main entry point for the audit component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, RecordAuditInput):
        return run_record(inp, repo=repo, time_port=time_port)
    elif isinstance(inp, ListAuditInput):
        return run_list(inp, repo=repo, time_port=time_port)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
