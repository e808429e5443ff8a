"""
Notifications component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class CreateNotificationInput:
    """Input for creating an in-app broadcast."""

    title: str
    message: str
    actor_id: UUID
    is_global: bool = True
    assignment_id: UUID | None = None
