"""
Mailer component port definitions.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from coursecast.core.ports.email import EmailPort, EmailResult
from coursecast.domain.entities import Recipient

__all__ = ["DirectoryPort", "EmailPort", "EmailResult"]


class DirectoryPort(Protocol):
    """Recipient resolution used by send-to-ids."""

    def resolve(self, user_ids: Iterable[UUID]) -> list[Recipient]:
        """Resolve IDs to deliverable recipients."""
        ...
