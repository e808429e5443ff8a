"""
Error taxonomy for the scheduling workers.

Invocation-level errors (configuration, auth, selection) abort a whole
worker run. Item-level errors are caught by the worker loop, recorded on
the item where it has an error field, and reported in-band.
"""

from __future__ import annotations

from uuid import UUID


class CoursecastError(Exception):
    """Base exception for coursecast errors."""

    pass


class ConfigurationError(CoursecastError):
    """Required configuration (e.g. the cron secret) is missing or invalid."""

    pass


class AuthError(CoursecastError):
    """Caller presented a missing or wrong bearer token."""

    pass


class SelectionError(CoursecastError):
    """The worker's selection query failed; nothing was processed."""

    def __init__(self, worker: str, cause: str) -> None:
        self.worker = worker
        self.cause = cause
        super().__init__(f"{worker} selection failed: {cause}")


class ItemError(CoursecastError):
    """Failure while processing a single batch item."""

    def __init__(self, label: str, error: str, item_id: UUID | None = None) -> None:
        self.label = label
        self.error = error
        self.item_id = item_id
        super().__init__(f'{label}: {error}')


class NoRecipientsError(ItemError):
    """A scheduled email resolved to zero deliverable recipients."""

    MESSAGE = "No valid recipients found"

    def __init__(self, subject: str, item_id: UUID | None = None) -> None:
        super().__init__(label=subject, error=self.MESSAGE, item_id=item_id)

