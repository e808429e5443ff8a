"""
Dispatch component - the Email Dispatch Worker.

Sends every PENDING scheduled email whose time has arrived, moves it to
a terminal state, and publishes a linked assignment afterwards.

Invariants:
- I1: Only PENDING rows are selected and every transition is guarded
  by status = 'PENDING', so terminal rows are never re-processed
- I2: A row is claimed before sending; a worker that loses the claim
  skips it, so overlapping passes make one logical send attempt
- I3: A linked assignment is published only after its email is SENT
- I4: One item's failure never aborts the rest of the batch
"""

from __future__ import annotations

import logging
from datetime import timedelta

from coursecast.components.audit import AuditAction, AuditRecorder
from coursecast.components.mailer import Mailer, build_config
from coursecast.components.notifications import NotificationService
from coursecast.components.publish import PublishComponent
from coursecast.components.recipients import RecipientDirectory
from coursecast.core.ports.db import (
    AssignmentRepoPort,
    AuditLogRepoPort,
    NotificationRepoPort,
    ScheduledEmailRepoPort,
    UserRepoPort,
)
from coursecast.core.ports.email import EmailPort
from coursecast.domain.entities import ScheduledEmail
from coursecast.domain.errors import NoRecipientsError, SelectionError
from coursecast.rules.models import Rules

from .models import DEFAULT_CONFIG, DispatchDueInput, DispatchOutput, DispatchWorkerConfig
from .ports import (
    AssignmentLookupPort,
    AuditRecorderPort,
    BulkMailerPort,
    DirectoryPort,
    DueEmailsPort,
    NotifierPort,
    PublisherPort,
    TimePort,
)

logger = logging.getLogger(__name__)


class EmailDispatchWorker:
    """Batch driver for scheduled email delivery."""

    def __init__(
        self,
        emails: DueEmailsPort,
        assignments: AssignmentLookupPort,
        directory: DirectoryPort,
        mailer: BulkMailerPort,
        notifications: NotifierPort,
        audit: AuditRecorderPort,
        publisher: PublisherPort,
        time_port: TimePort,
        config: DispatchWorkerConfig | None = None,
    ) -> None:
        self._emails = emails
        self._assignments = assignments
        self._directory = directory
        self._mailer = mailer
        self._notifications = notifications
        self._audit = audit
        self._publisher = publisher
        self._time = time_port
        self._config = config or DEFAULT_CONFIG

    def run(self) -> DispatchOutput:
        """
        Run one dispatch pass.

        Raises:
            SelectionError: If the due-email query fails; nothing is
                processed in that case.
        """
        now = self._time.now_utc()
        try:
            due = self._emails.list_due(now)
        except Exception as e:
            raise SelectionError("dispatch", str(e)) from e

        if not due:
            return DispatchOutput(processed_count=0, errors=[])

        logger.info("Dispatch pass: %d scheduled email(s) due", len(due))
        stale_before = now - timedelta(seconds=self._config.claim_ttl_seconds)
        errors: list[str] = []
        processed_count = 0

        for scheduled in due:
            try:
                claimed = self._emails.claim(scheduled.id, self._time.now_utc(), stale_before)
            except Exception as e:
                # Never claimed, so the row stays PENDING for the next pass
                logger.exception("Failed to claim scheduled email %s", scheduled.id)
                errors.append(f'Failed for "{scheduled.subject}": {e}')
                continue
            if not claimed:
                logger.debug("Scheduled email %s claimed by another process", scheduled.id)
                continue

            try:
                if self._process(scheduled, errors):
                    processed_count += 1
            except Exception as e:
                logger.exception("Failed to process scheduled email %s", scheduled.id)
                errors.append(f'Failed for "{scheduled.subject}": {e}')
                self._mark_failed(scheduled, str(e))

        return DispatchOutput(processed_count=processed_count, errors=errors)

    def _process(self, scheduled: ScheduledEmail, errors: list[str]) -> bool:
        """Send one claimed email. Returns True once it is SENT."""
        recipients = self._directory.resolve(scheduled.recipient_ids)
        if not recipients:
            failure = NoRecipientsError(scheduled.subject, scheduled.id)
            self._emails.mark_failed(scheduled.id, failure.error)
            logger.warning("Scheduled email %s has no valid recipients", scheduled.id)
            errors.append(f'No recipients for "{scheduled.subject}"')
            return False

        result = self._mailer.send_bulk(
            recipients,
            subject=scheduled.subject,
            message=scheduled.message,
            sender_name=scheduled.created_by_name or self._config.default_sender_name,
        )

        if scheduled.create_notification:
            self._notifications.create(
                title=scheduled.subject,
                message=scheduled.message,
                actor_id=scheduled.created_by,
                is_global=True,
                assignment_id=scheduled.assignment_id,
            )

        sent_at = self._time.now_utc()
        if not self._emails.mark_sent(scheduled.id, sent_at, result.failure_summary):
            logger.warning("Scheduled email %s left PENDING before it was marked sent", scheduled.id)
            return False
        logger.info(
            "Sent scheduled email %s: %d sent, %d failed",
            scheduled.id,
            result.sent_count,
            result.failed_count,
        )

        # SENT is final; later failures are reported in-band only
        try:
            self._audit.record(
                AuditAction.SCHEDULED_EMAIL_SENT,
                {
                    "scheduledEmailId": str(scheduled.id),
                    "subject": scheduled.subject,
                    "recipientCount": len(recipients),
                    "sentCount": result.sent_count,
                    "failedCount": result.failed_count,
                    "createNotification": scheduled.create_notification,
                },
                actor_id=scheduled.created_by,
            )
        except Exception as e:
            logger.exception("Failed to audit sent email %s", scheduled.id)
            errors.append(f'Audit failed for "{scheduled.subject}": {e}')

        if scheduled.assignment_id is not None:
            try:
                self._publish_linked(scheduled)
            except Exception as e:
                logger.exception("Failed to publish assignment linked to %s", scheduled.id)
                errors.append(f'Publish failed for "{scheduled.subject}": {e}')
        return True

    def _publish_linked(self, scheduled: ScheduledEmail) -> None:
        assignment = self._assignments.get_by_id(scheduled.assignment_id)
        if assignment is None or assignment.published:
            return

        result = self._publisher.publish(assignment.id, assignment.created_by)
        if not result.published:
            logger.debug("Assignment %s already published by another process", assignment.id)
            return

        self._audit.record(
            AuditAction.SCHEDULED_PUBLISH,
            {
                "assignmentId": str(assignment.id),
                "assignmentTitle": assignment.title,
                "scheduledAt": (
                    assignment.scheduled_publish_at.isoformat()
                    if assignment.scheduled_publish_at
                    else None
                ),
                "publishedAt": result.published_at.isoformat() if result.published_at else None,
                "triggeredBy": "scheduled_email",
                "scheduledEmailId": str(scheduled.id),
            },
            actor_id=assignment.created_by,
        )

    def _mark_failed(self, scheduled: ScheduledEmail, error: str) -> None:
        # Conditional on PENDING: a row already SENT keeps its status
        try:
            self._emails.mark_failed(scheduled.id, error)
        except Exception:
            logger.exception("Failed to update status of scheduled email %s", scheduled.id)


# --- Component Entry Points ---


def create_dispatch_worker(
    *,
    emails: ScheduledEmailRepoPort,
    assignments: AssignmentRepoPort,
    users: UserRepoPort,
    notifications: NotificationRepoPort,
    audit: AuditLogRepoPort,
    email: EmailPort,
    time_port: TimePort,
    rules: Rules | None = None,
) -> EmailDispatchWorker:
    """Wire an EmailDispatchWorker from repositories and the email port."""
    rules = rules or Rules()
    directory = RecipientDirectory(users)
    return EmailDispatchWorker(
        emails=emails,
        assignments=assignments,
        directory=directory,
        mailer=Mailer(email=email, directory=directory, config=build_config(rules.email)),
        notifications=NotificationService(notifications, time_port),
        audit=AuditRecorder(audit, time_port),
        publisher=PublishComponent(assignments, time_port),
        time_port=time_port,
        config=DispatchWorkerConfig.from_rules(rules),
    )


def run_dispatch_due(
    inp: DispatchDueInput,
    *,
    emails: ScheduledEmailRepoPort,
    assignments: AssignmentRepoPort,
    users: UserRepoPort,
    notifications: NotificationRepoPort,
    audit: AuditLogRepoPort,
    email: EmailPort,
    time_port: TimePort,
    rules: Rules | None = None,
) -> DispatchOutput:
    """Send all due PENDING scheduled emails."""
    worker = create_dispatch_worker(
        emails=emails,
        assignments=assignments,
        users=users,
        notifications=notifications,
        audit=audit,
        email=email,
        time_port=time_port,
        rules=rules,
    )
    return worker.run()


def run(inp: DispatchDueInput, **ports) -> DispatchOutput:
    """
    Main entry point for the dispatch component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, DispatchDueInput):
        return run_dispatch_due(inp, **ports)
    raise ValueError(f"Unknown input type: {type(inp)}")
