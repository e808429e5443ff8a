"""Publish component ports - protocol interfaces for dependencies."""

from datetime import datetime
from typing import Protocol
from uuid import UUID


class AssignmentWriterPort(Protocol):
    """The conditional write the publish primitive is built on."""

    def publish_if_unpublished(
        self, assignment_id: UUID, actor_id: UUID, now_utc: datetime
    ) -> bool: ...


class ClockPort(Protocol):
    """Clock interface for time operations."""

    def now_utc(self) -> datetime: ...
