"""
Recipient directory component.

Resolves user IDs to deliverable {id, name, email} records.

Invariants:
- I1: Soft-deleted accounts are never returned
- I2: Audience queries also exclude banned accounts
- I3: Duplicate IDs resolve to a single recipient
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from coursecast.domain.entities import Recipient, User

from .models import AudienceInput, RecipientsOutput, ResolveRecipientsInput
from .ports import UserDirectoryPort


def to_recipient(user: User) -> Recipient:
    return Recipient(id=user.id, name=user.name, email=user.email)


class RecipientDirectory:
    """Thin service over the user store used by the mailer and workers."""

    def __init__(self, users: UserDirectoryPort) -> None:
        self._users = users

    def resolve(self, user_ids: Iterable[UUID]) -> list[Recipient]:
        """Resolve IDs to recipients, dropping unknown and soft-deleted users."""
        unique_ids = list(dict.fromkeys(user_ids))
        if not unique_ids:
            return []
        return [to_recipient(u) for u in self._users.list_by_ids(unique_ids) if not u.is_deleted]

    def audience(self, roles: Iterable[str]) -> list[Recipient]:
        """All active (not banned, not deleted) users in the given roles."""
        return [
            to_recipient(u)
            for u in self._users.list_active_by_roles(list(roles))
            if not (u.is_banned or u.is_deleted)
        ]


# --- Component Entry Points ---


def run_resolve(inp: ResolveRecipientsInput, *, users: UserDirectoryPort) -> RecipientsOutput:
    """Resolve explicit user IDs."""
    return RecipientsOutput(recipients=tuple(RecipientDirectory(users).resolve(inp.user_ids)))


def run_audience(inp: AudienceInput, *, users: UserDirectoryPort) -> RecipientsOutput:
    """Resolve the active audience for a set of roles."""
    return RecipientsOutput(recipients=tuple(RecipientDirectory(users).audience(inp.roles)))


def run(
    inp: ResolveRecipientsInput | AudienceInput,
    *,
    users: UserDirectoryPort,
) -> RecipientsOutput:
    """
    Main entry point for the recipients component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, ResolveRecipientsInput):
        return run_resolve(inp, users=users)
    elif isinstance(inp, AudienceInput):
        return run_audience(inp, users=users)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
