# coursecast ports (Protocol interfaces)
# Abstract interfaces for adapters; no implementations here

from coursecast.core.ports.db import (
    AssignmentRepoPort,
    AuditLogRepoPort,
    NotificationRepoPort,
    ScheduledEmailRepoPort,
    UserRepoPort,
)
from coursecast.core.ports.email import (
    EmailPort,
    EmailResult,
    EmailStatus,
)
from coursecast.core.ports.time import TimePort

__all__ = [
    # Database
    "AssignmentRepoPort",
    "AuditLogRepoPort",
    "NotificationRepoPort",
    "ScheduledEmailRepoPort",
    "UserRepoPort",
    # Email
    "EmailPort",
    "EmailResult",
    "EmailStatus",
    # Time
    "TimePort",
]
