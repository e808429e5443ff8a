"""
Notifications component - in-app broadcast records.

Notifications are created, never mutated, by the scheduling workers.
"""

from __future__ import annotations

import logging
from uuid import UUID, uuid4

from coursecast.domain.entities import Notification

from .models import CreateNotificationInput
from .ports import NotificationRepoPort, TimePort

logger = logging.getLogger(__name__)


class NotificationService:
    """Creates notification records through the repository."""

    def __init__(self, repo: NotificationRepoPort, time_port: TimePort) -> None:
        self._repo = repo
        self._time = time_port

    def create(
        self,
        title: str,
        message: str,
        actor_id: UUID,
        is_global: bool = True,
        assignment_id: UUID | None = None,
    ) -> Notification:
        notification = Notification(
            id=uuid4(),
            title=title,
            message=message,
            is_global=is_global,
            assignment_id=assignment_id,
            created_by=actor_id,
            created_at=self._time.now_utc(),
        )
        saved = self._repo.save(notification)
        logger.info("Notification created: %s", title)
        return saved


# --- Component Entry Points ---


def run_create(
    inp: CreateNotificationInput,
    *,
    repo: NotificationRepoPort,
    time_port: TimePort,
) -> Notification:
    """Create a notification."""
    return NotificationService(repo, time_port).create(
        title=inp.title,
        message=inp.message,
        actor_id=inp.actor_id,
        is_global=inp.is_global,
        assignment_id=inp.assignment_id,
    )


def run(
    inp: CreateNotificationInput,
    *,
    repo: NotificationRepoPort,
    time_port: TimePort,
) -> Notification:
    """Main entry point for the notifications component."""
    if isinstance(inp, CreateNotificationInput):
        return run_create(inp, repo=repo, time_port=time_port)
    raise ValueError(f"Unknown input type: {type(inp)}")
