"""
Notifications component port definitions.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from coursecast.core.ports.db import NotificationRepoPort
from coursecast.core.ports.time import TimePort

__all__ = ["NotificationRepoPort", "NotifierPort", "TimePort"]


class NotifierPort(Protocol):
    """What workers need to broadcast an in-app notification."""

    def create(
        self,
        title: str,
        message: str,
        actor_id: UUID,
        is_global: bool = True,
        assignment_id: UUID | None = None,
    ) -> object:
        """Create a notification record."""
        ...
