"""
Recipient directory input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from coursecast.domain.entities import Recipient

# --- Input Models ---


@dataclass(frozen=True)
class ResolveRecipientsInput:
    """Resolve explicit user IDs to deliverable recipients."""

    user_ids: tuple[UUID, ...]


@dataclass(frozen=True)
class AudienceInput:
    """Resolve every active user in the given roles."""

    roles: tuple[str, ...]


# --- Output Models ---


@dataclass(frozen=True)
class RecipientsOutput:
    """Resolved recipients, in stable (email) order."""

    recipients: tuple[Recipient, ...]

    @property
    def is_empty(self) -> bool:
        return not self.recipients
