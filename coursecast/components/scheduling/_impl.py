"""
Scheduling service implementation.

Staff-side operations that create and edit the rows the workers consume.
Every mutation of a scheduled email is a conditional update guarded by
status = 'PENDING', so it cannot race a dispatch pass into a terminal
state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from uuid import UUID, uuid4

from coursecast.components.audit.models import AuditAction
from coursecast.domain.entities import Assignment, ScheduledEmail

from .models import DEFAULT_CONFIG, SchedulingConfig, SchedulingError
from .ports import AssignmentRepoPort, AuditRecorderPort, ScheduledEmailRepoPort, TimePort

logger = logging.getLogger(__name__)


def as_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _not_found(item_id: UUID) -> SchedulingError:
    return SchedulingError(
        code="not_found",
        message="Scheduled email not found",
        item_id=item_id,
    )


def _not_pending(email: ScheduledEmail) -> SchedulingError:
    return SchedulingError(
        code="not_pending",
        message=f'Cannot modify a scheduled email with status "{email.status}"',
        item_id=email.id,
    )


def _claimed(email: ScheduledEmail) -> SchedulingError:
    return SchedulingError(
        code="claimed",
        message="Scheduled email is being sent and can no longer be changed",
        item_id=email.id,
    )


class SchedulingService:
    """
    Scheduling service.

    Methods return (result, errors); result is None when errors is
    non-empty.
    """

    def __init__(
        self,
        emails: ScheduledEmailRepoPort,
        assignments: AssignmentRepoPort,
        audit: AuditRecorderPort,
        time_port: TimePort,
        config: SchedulingConfig | None = None,
    ) -> None:
        self._emails = emails
        self._assignments = assignments
        self._audit = audit
        self._time = time_port
        self._config = config or DEFAULT_CONFIG

    # --- Validation ---

    def _check_text(self, value: str | None, name: str) -> list[SchedulingError]:
        if value is None or not value.strip():
            return [
                SchedulingError(
                    code=f"{name}_required",
                    message=f"{name} is required",
                    field=name,
                )
            ]
        return []

    def _check_future(self, when: datetime, name: str) -> list[SchedulingError]:
        if not self._time.is_future(as_utc(when), self._config.publish_grace_seconds):
            return [
                SchedulingError(
                    code="scheduled_time_past",
                    message=f"{name} must be in the future",
                    field=name,
                )
            ]
        return []

    def _check_recipients(self, recipient_ids: Iterable[UUID]) -> list[SchedulingError]:
        ids = list(dict.fromkeys(recipient_ids))
        if not ids:
            return [
                SchedulingError(
                    code="recipients_required",
                    message="recipient_ids must be a non-empty list",
                    field="recipient_ids",
                )
            ]
        if len(ids) > self._config.max_recipients:
            return [
                SchedulingError(
                    code="too_many_recipients",
                    message=f"Too many recipients. Maximum is {self._config.max_recipients}.",
                    field="recipient_ids",
                )
            ]
        return []

    # --- Scheduled emails ---

    def schedule_email(
        self,
        subject: str,
        message: str,
        scheduled_at: datetime,
        recipient_ids: Iterable[UUID],
        actor_id: UUID,
        create_notification: bool = False,
        assignment_id: UUID | None = None,
    ) -> tuple[ScheduledEmail | None, list[SchedulingError]]:
        """
        Queue a new PENDING scheduled email.

        Args:
            subject: Subject line, trimmed
            message: Message body, trimmed
            scheduled_at: When the email becomes due; must be in the future
            recipient_ids: Target users; duplicates are collapsed
            actor_id: Staff member creating the email
            create_notification: Also broadcast an in-app notification
            assignment_id: Assignment to publish once the email is sent

        Returns:
            Tuple of (email, errors). Email is None if errors.
        """
        ids = list(dict.fromkeys(recipient_ids))
        errors = (
            self._check_text(subject, "subject")
            + self._check_text(message, "message")
            + self._check_future(scheduled_at, "scheduled_at")
            + self._check_recipients(ids)
        )
        if assignment_id is not None and self._assignments.get_by_id(assignment_id) is None:
            errors.append(
                SchedulingError(
                    code="assignment_not_found",
                    message="Assignment not found",
                    field="assignment_id",
                    item_id=assignment_id,
                )
            )
        if errors:
            return None, errors

        email = ScheduledEmail(
            id=uuid4(),
            status="PENDING",
            scheduled_at=as_utc(scheduled_at),
            recipient_ids=ids,
            subject=subject.strip(),
            message=message.strip(),
            create_notification=create_notification,
            assignment_id=assignment_id,
            created_by=actor_id,
            created_at=self._time.now_utc(),
        )
        self._emails.create(email)
        self._audit.record(
            AuditAction.SCHEDULED_EMAIL_CREATED,
            {
                "scheduledEmailId": str(email.id),
                "subject": email.subject,
                "scheduledAt": email.scheduled_at.isoformat(),
                "recipientCount": len(ids),
                "createNotification": create_notification,
                "assignmentId": str(assignment_id) if assignment_id else None,
            },
            actor_id=actor_id,
        )
        logger.info("Scheduled email %s for %s", email.id, email.scheduled_at.isoformat())
        return self._emails.get_by_id(email.id) or email, []

    def update_email(
        self,
        email_id: UUID,
        changes: dict,
        actor_id: UUID,
    ) -> tuple[ScheduledEmail | None, list[SchedulingError]]:
        """
        Edit a PENDING scheduled email.

        `changes` may hold subject, message, scheduled_at, recipient_ids
        and create_notification. Only PENDING rows that no dispatcher has
        claimed can be edited.
        """
        existing = self._emails.get_by_id(email_id)
        if existing is None:
            return None, [_not_found(email_id)]
        if existing.status != "PENDING":
            return None, [_not_pending(existing)]

        errors: list[SchedulingError] = []
        clean: dict = {}
        for name in ("subject", "message"):
            if name in changes:
                field_errors = self._check_text(changes[name], name)
                if field_errors:
                    errors += field_errors
                else:
                    clean[name] = changes[name].strip()
        if "scheduled_at" in changes:
            errors += self._check_future(changes["scheduled_at"], "scheduled_at")
            clean["scheduled_at"] = as_utc(changes["scheduled_at"])
        if "recipient_ids" in changes:
            errors += self._check_recipients(changes["recipient_ids"])
            clean["recipient_ids"] = list(dict.fromkeys(changes["recipient_ids"]))
        if "create_notification" in changes:
            clean["create_notification"] = bool(changes["create_notification"])
        if errors:
            return None, errors
        if not clean:
            return None, [
                SchedulingError(code="no_changes", message="No fields to update", item_id=email_id)
            ]

        if not self._emails.update_pending(email_id, clean):
            return None, [self._lost_race(email_id)]

        self._audit.record(
            AuditAction.SCHEDULED_EMAIL_UPDATED,
            {
                "scheduledEmailId": str(email_id),
                "subject": clean.get("subject", existing.subject),
                "fields": sorted(clean),
            },
            actor_id=actor_id,
        )
        return self._emails.get_by_id(email_id), []

    def cancel_email(
        self,
        email_id: UUID,
        actor_id: UUID,
    ) -> tuple[ScheduledEmail | None, list[SchedulingError]]:
        """Move a PENDING, unclaimed email to CANCELLED."""
        existing = self._emails.get_by_id(email_id)
        if existing is None:
            return None, [_not_found(email_id)]
        if existing.status != "PENDING":
            return None, [_not_pending(existing)]

        if not self._emails.cancel(email_id, self._time.now_utc()):
            return None, [self._lost_race(email_id)]

        self._audit.record(
            AuditAction.SCHEDULED_EMAIL_CANCELLED,
            {"scheduledEmailId": str(email_id), "subject": existing.subject},
            actor_id=actor_id,
        )
        logger.info("Cancelled scheduled email %s", email_id)
        return self._emails.get_by_id(email_id), []

    def delete_email(self, email_id: UUID, actor_id: UUID) -> tuple[bool, list[SchedulingError]]:
        """Delete a scheduled email in any status."""
        existing = self._emails.get_by_id(email_id)
        if existing is None:
            return False, [_not_found(email_id)]

        self._emails.delete(email_id)
        self._audit.record(
            AuditAction.SCHEDULED_EMAIL_DELETED,
            {
                "scheduledEmailId": str(email_id),
                "subject": existing.subject,
                "status": existing.status,
            },
            actor_id=actor_id,
        )
        return True, []

    def _lost_race(self, email_id: UUID) -> SchedulingError:
        """Explain why a conditional update matched no row."""
        current = self._emails.get_by_id(email_id)
        if current is None:
            return _not_found(email_id)
        if current.status != "PENDING":
            return _not_pending(current)
        return _claimed(current)

    # --- Queries ---

    def get_email(self, email_id: UUID) -> ScheduledEmail | None:
        return self._emails.get_by_id(email_id)

    def list_emails(self) -> list[ScheduledEmail]:
        return self._emails.list_all()

    # --- Assignments ---

    def schedule_assignment(
        self,
        assignment_id: UUID,
        publish_at: datetime,
        notify_on_publish: bool,
        actor_id: UUID,
    ) -> tuple[Assignment | None, list[SchedulingError]]:
        """Set the publish time of an unpublished assignment."""
        assignment = self._assignments.get_by_id(assignment_id)
        if assignment is None:
            return None, [
                SchedulingError(
                    code="not_found",
                    message="Assignment not found",
                    item_id=assignment_id,
                )
            ]

        errors = self._check_future(publish_at, "publish_at")
        if errors:
            return None, errors

        published = SchedulingError(
            code="already_published",
            message="Assignment is already published",
            item_id=assignment_id,
        )
        if assignment.published:
            return None, [published]

        publish_at = as_utc(publish_at)
        if not self._assignments.set_schedule(assignment_id, publish_at, notify_on_publish):
            return None, [published]

        self._audit.record(
            AuditAction.ASSIGNMENT_SCHEDULED,
            {
                "assignmentId": str(assignment_id),
                "assignmentTitle": assignment.title,
                "scheduledAt": publish_at.isoformat(),
                "notifyOnPublish": notify_on_publish,
            },
            actor_id=actor_id,
        )
        return self._assignments.get_by_id(assignment_id), []
