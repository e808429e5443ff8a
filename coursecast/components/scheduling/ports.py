"""
Scheduling component port definitions.
"""

from __future__ import annotations

from coursecast.components.audit.ports import AuditRecorderPort
from coursecast.core.ports.db import AssignmentRepoPort, ScheduledEmailRepoPort
from coursecast.core.ports.time import TimePort

__all__ = [
    "AssignmentRepoPort",
    "AuditRecorderPort",
    "ScheduledEmailRepoPort",
    "TimePort",
]
