"""
Recipient directory port definitions.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from coursecast.domain.entities import User


class UserDirectoryPort(Protocol):
    """Read access to user accounts."""

    def list_by_ids(self, user_ids: list[UUID]) -> list[User]:
        """List users with the given IDs, excluding soft-deleted accounts."""
        ...

    def list_active_by_roles(self, roles: list[str]) -> list[User]:
        """List users in the roles who are neither banned nor deleted."""
        ...
