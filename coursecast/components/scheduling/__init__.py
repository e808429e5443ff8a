"""
Scheduling component - staff-side scheduling of emails and publishes.
"""

from ._impl import SchedulingService, as_utc
from .component import (
    run,
    run_cancel_email,
    run_delete_email,
    run_get_email,
    run_list_emails,
    run_schedule_assignment,
    run_schedule_email,
    run_update_email,
)
from .models import (
    AssignmentScheduleOutput,
    CancelEmailInput,
    DeleteEmailInput,
    DeleteOutput,
    EmailListOutput,
    EmailOutput,
    GetEmailInput,
    ListEmailsInput,
    ScheduleAssignmentInput,
    ScheduleEmailInput,
    SchedulingConfig,
    SchedulingError,
    UpdateEmailInput,
)

__all__ = [
    # Entry points
    "run",
    "run_cancel_email",
    "run_delete_email",
    "run_get_email",
    "run_list_emails",
    "run_schedule_assignment",
    "run_schedule_email",
    "run_update_email",
    # Service
    "SchedulingService",
    "SchedulingConfig",
    "as_utc",
    # Models
    "AssignmentScheduleOutput",
    "CancelEmailInput",
    "DeleteEmailInput",
    "DeleteOutput",
    "EmailListOutput",
    "EmailOutput",
    "GetEmailInput",
    "ListEmailsInput",
    "ScheduleAssignmentInput",
    "ScheduleEmailInput",
    "SchedulingError",
    "UpdateEmailInput",
]
