"""
Scheduling component - staff-side scheduling of emails and publishes.

Invariants:
- I1: Scheduled times are in the future when set
- I2: Only PENDING, unclaimed scheduled emails can be edited or cancelled
- I3: Every successful change is audited with the acting staff member
"""

from __future__ import annotations

from ._impl import SchedulingService
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
from .ports import AssignmentRepoPort, AuditRecorderPort, ScheduledEmailRepoPort, TimePort

_UPDATE_FIELDS = ("subject", "message", "scheduled_at", "recipient_ids", "create_notification")


def _create_service(
    emails: ScheduledEmailRepoPort,
    assignments: AssignmentRepoPort,
    audit: AuditRecorderPort,
    time_port: TimePort,
    config: SchedulingConfig | None,
) -> SchedulingService:
    return SchedulingService(
        emails=emails,
        assignments=assignments,
        audit=audit,
        time_port=time_port,
        config=config,
    )


def _email_output(email, errors: list[SchedulingError]) -> EmailOutput:
    return EmailOutput(email=email, errors=errors, success=not errors)


# --- Component Entry Points ---


def run_schedule_email(
    inp: ScheduleEmailInput,
    *,
    service: SchedulingService,
) -> EmailOutput:
    """Queue a new scheduled email."""
    email, errors = service.schedule_email(
        subject=inp.subject,
        message=inp.message,
        scheduled_at=inp.scheduled_at,
        recipient_ids=inp.recipient_ids,
        actor_id=inp.actor_id,
        create_notification=inp.create_notification,
        assignment_id=inp.assignment_id,
    )
    return _email_output(email, errors)


def run_update_email(inp: UpdateEmailInput, *, service: SchedulingService) -> EmailOutput:
    """Edit fields of a PENDING scheduled email."""
    changes = {
        name: getattr(inp, name) for name in _UPDATE_FIELDS if getattr(inp, name) is not None
    }
    email, errors = service.update_email(inp.email_id, changes, inp.actor_id)
    return _email_output(email, errors)


def run_cancel_email(inp: CancelEmailInput, *, service: SchedulingService) -> EmailOutput:
    """Cancel a PENDING scheduled email."""
    email, errors = service.cancel_email(inp.email_id, inp.actor_id)
    return _email_output(email, errors)


def run_delete_email(inp: DeleteEmailInput, *, service: SchedulingService) -> DeleteOutput:
    """Delete a scheduled email."""
    success, errors = service.delete_email(inp.email_id, inp.actor_id)
    return DeleteOutput(success=success, errors=errors)


def run_get_email(inp: GetEmailInput, *, service: SchedulingService) -> EmailOutput:
    """Fetch one scheduled email."""
    email = service.get_email(inp.email_id)
    if email is None:
        return EmailOutput(
            email=None,
            errors=[
                SchedulingError(
                    code="not_found",
                    message="Scheduled email not found",
                    item_id=inp.email_id,
                )
            ],
            success=False,
        )
    return EmailOutput(email=email)


def run_list_emails(inp: ListEmailsInput, *, service: SchedulingService) -> EmailListOutput:
    """List scheduled emails ordered by scheduled time."""
    return EmailListOutput(emails=service.list_emails())


def run_schedule_assignment(
    inp: ScheduleAssignmentInput,
    *,
    service: SchedulingService,
) -> AssignmentScheduleOutput:
    """Set an assignment's publish time."""
    assignment, errors = service.schedule_assignment(
        assignment_id=inp.assignment_id,
        publish_at=inp.publish_at,
        notify_on_publish=inp.notify_on_publish,
        actor_id=inp.actor_id,
    )
    return AssignmentScheduleOutput(assignment=assignment, errors=errors, success=not errors)


def run(
    inp: ScheduleEmailInput
    | UpdateEmailInput
    | CancelEmailInput
    | DeleteEmailInput
    | GetEmailInput
    | ListEmailsInput
    | ScheduleAssignmentInput,
    *,
    emails: ScheduledEmailRepoPort,
    assignments: AssignmentRepoPort,
    audit: AuditRecorderPort,
    time_port: TimePort,
    config: SchedulingConfig | None = None,
) -> EmailOutput | DeleteOutput | EmailListOutput | AssignmentScheduleOutput:
    """
    Main entry point for the scheduling component.

    Dispatches to appropriate handler based on input type.
    """
    service = _create_service(emails, assignments, audit, time_port, config)

    if isinstance(inp, ScheduleEmailInput):
        return run_schedule_email(inp, service=service)
    elif isinstance(inp, UpdateEmailInput):
        return run_update_email(inp, service=service)
    elif isinstance(inp, CancelEmailInput):
        return run_cancel_email(inp, service=service)
    elif isinstance(inp, DeleteEmailInput):
        return run_delete_email(inp, service=service)
    elif isinstance(inp, GetEmailInput):
        return run_get_email(inp, service=service)
    elif isinstance(inp, ListEmailsInput):
        return run_list_emails(inp, service=service)
    elif isinstance(inp, ScheduleAssignmentInput):
        return run_schedule_assignment(inp, service=service)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
