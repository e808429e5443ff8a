"""Publish component models - frozen dataclass inputs and outputs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class PublishInput:
    """Input for the idempotent publish transition."""

    assignment_id: UUID
    actor_id: UUID


@dataclass(frozen=True)
class PublishResult:
    """
    Outcome of one publish call.

    published is True only for the call that performed the transition.
    """

    published: bool
    published_at: datetime | None = None
