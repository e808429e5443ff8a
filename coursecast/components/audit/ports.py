"""
Audit component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from coursecast.core.ports.db import AuditLogRepoPort
from coursecast.core.ports.time import TimePort

__all__ = ["AuditLogRepoPort", "AuditRecorderPort", "TimePort"]


class AuditRecorderPort(Protocol):
    """What workers need from the audit trail."""

    def record(self, action: object, details: dict, actor_id: object) -> object:
        """Append one audit event."""
        ...
