"""
Scheduler component - the Publish Worker.

Publishes every assignment whose scheduled time has arrived, then audits
and optionally announces it.

Invariants:
- I1: Publish happens at most once per assignment (conditional write)
- I2: Assignments with a PENDING linked scheduled email are left for the
  dispatch worker, so the email always goes out first
- I3: A failed audit or announcement never unpublishes the assignment
- I4: One item's failure never aborts the rest of the batch
"""

from __future__ import annotations

import logging
from datetime import datetime

from coursecast.components.audit import AuditAction, AuditRecorder
from coursecast.components.mailer import (
    AssignmentEmailParams,
    Mailer,
    assignment_published_email,
    build_config,
    format_due_date,
)
from coursecast.components.notifications import NotificationService
from coursecast.components.publish import PublishComponent
from coursecast.components.recipients import RecipientDirectory
from coursecast.core.ports.db import (
    AssignmentRepoPort,
    AuditLogRepoPort,
    NotificationRepoPort,
    UserRepoPort,
)
from coursecast.core.ports.email import EmailPort
from coursecast.domain.entities import Assignment, Recipient
from coursecast.domain.errors import SelectionError
from coursecast.rules.models import Rules

from .models import DEFAULT_CONFIG, PublishDueInput, PublishDueOutput, PublishWorkerConfig
from .ports import (
    AudiencePort,
    AuditRecorderPort,
    BulkMailerPort,
    DueAssignmentsPort,
    NotifierPort,
    PublisherPort,
    TimePort,
)

logger = logging.getLogger(__name__)


def publish_announcement(assignment: Assignment, due_str: str) -> str:
    """In-app message text for a newly published assignment."""
    message = f'A new assignment "{assignment.title}" has been published.'
    if assignment.due_date is not None:
        message += f" Due: {due_str}"
    return message


class PublishWorker:
    """Batch driver for scheduled publishing."""

    def __init__(
        self,
        assignments: DueAssignmentsPort,
        publisher: PublisherPort,
        directory: AudiencePort,
        mailer: BulkMailerPort,
        notifications: NotifierPort,
        audit: AuditRecorderPort,
        time_port: TimePort,
        config: PublishWorkerConfig | None = None,
    ) -> None:
        self._assignments = assignments
        self._publisher = publisher
        self._directory = directory
        self._mailer = mailer
        self._notifications = notifications
        self._audit = audit
        self._time = time_port
        self._config = config or DEFAULT_CONFIG

    def run(self) -> PublishDueOutput:
        """
        Run one publish pass.

        Raises:
            SelectionError: If the due-assignment query fails; nothing
                is processed in that case.
        """
        now = self._time.now_utc()
        try:
            due = self._assignments.list_due_unblocked(now)
        except Exception as e:
            raise SelectionError("publish", str(e)) from e

        if not due:
            return PublishDueOutput(published_count=0, errors=[])

        logger.info("Publish pass: %d assignment(s) due", len(due))
        errors: list[str] = []
        published_count = 0

        for assignment in due:
            try:
                result = self._publisher.publish(assignment.id, assignment.created_by)
                if not result.published:
                    logger.debug(
                        "Assignment %s already published by another process",
                        assignment.id,
                    )
                    continue
                published_count += 1

                self._audit.record(
                    AuditAction.SCHEDULED_PUBLISH,
                    {
                        "assignmentId": str(assignment.id),
                        "assignmentTitle": assignment.title,
                        "scheduledAt": _iso(assignment.scheduled_publish_at),
                        "publishedAt": _iso(result.published_at or now),
                    },
                    actor_id=assignment.created_by,
                )

                if assignment.notify_on_publish:
                    try:
                        self._announce(assignment)
                    except Exception as e:
                        logger.exception(
                            "Failed to send notifications for assignment %s", assignment.id
                        )
                        errors.append(f'Notification failed for "{assignment.title}": {e}')
            except Exception as e:
                logger.exception("Failed to publish assignment %s", assignment.id)
                errors.append(f'Publish failed for "{assignment.title}": {e}')

        return PublishDueOutput(published_count=published_count, errors=errors)

    def _announce(self, assignment: Assignment) -> None:
        students = self._directory.audience(self._config.audience_roles)
        if not students:
            return

        due_str = format_due_date(assignment.due_date)
        sender = assignment.created_by_name or self._config.default_sender_name
        params = AssignmentEmailParams(
            title=assignment.title,
            description=assignment.description,
            due_date_str=due_str,
            total_points=assignment.total_points,
        )

        def build(recipient: Recipient) -> str:
            return assignment_published_email(
                student_name=recipient.name or self._config.default_recipient_name,
                assignment=params,
                sender_name=sender,
                site_name=self._config.site_name,
            )

        title = f"New Assignment: {assignment.title}"
        self._mailer.send_bulk(
            students,
            subject=title,
            message="",
            sender_name=sender,
            html_builder=build,
        )
        self._notifications.create(
            title=title,
            message=publish_announcement(assignment, due_str),
            actor_id=assignment.created_by,
            is_global=True,
            assignment_id=assignment.id,
        )


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


# --- Component Entry Points ---


def create_publish_worker(
    *,
    assignments: AssignmentRepoPort,
    users: UserRepoPort,
    notifications: NotificationRepoPort,
    audit: AuditLogRepoPort,
    email: EmailPort,
    time_port: TimePort,
    rules: Rules | None = None,
) -> PublishWorker:
    """Wire a PublishWorker from repositories and the email port."""
    rules = rules or Rules()
    directory = RecipientDirectory(users)
    return PublishWorker(
        assignments=assignments,
        publisher=PublishComponent(assignments, time_port),
        directory=directory,
        mailer=Mailer(email=email, directory=directory, config=build_config(rules.email)),
        notifications=NotificationService(notifications, time_port),
        audit=AuditRecorder(audit, time_port),
        time_port=time_port,
        config=PublishWorkerConfig.from_rules(rules),
    )


def run_publish_due(
    inp: PublishDueInput,
    *,
    assignments: AssignmentRepoPort,
    users: UserRepoPort,
    notifications: NotificationRepoPort,
    audit: AuditLogRepoPort,
    email: EmailPort,
    time_port: TimePort,
    rules: Rules | None = None,
) -> PublishDueOutput:
    """Publish all due, unblocked assignments."""
    worker = create_publish_worker(
        assignments=assignments,
        users=users,
        notifications=notifications,
        audit=audit,
        email=email,
        time_port=time_port,
        rules=rules,
    )
    return worker.run()


def run(inp: PublishDueInput, **ports) -> PublishDueOutput:
    """
    Main entry point for the scheduler component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, PublishDueInput):
        return run_publish_due(inp, **ports)
    raise ValueError(f"Unknown input type: {type(inp)}")
