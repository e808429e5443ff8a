"""
Mailer component input/output models.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import UUID

from coursecast.domain.entities import Recipient

# Renders the HTML body for one recipient
HtmlBuilder = Callable[[Recipient], str]


# --- Configuration ---


@dataclass(frozen=True)
class MailerConfig:
    """Mailer configuration from rules."""

    site_name: str = "Coursecast"
    default_recipient_name: str = "Student"
    default_sender_name: str = "Staff"
    # Bound on raw failure reasons kept in a result
    max_error_reasons: int = 20


DEFAULT_CONFIG = MailerConfig()


# --- Input Models ---


@dataclass(frozen=True)
class BulkSendInput:
    """Send one subject/message to already-resolved recipients."""

    recipients: tuple[Recipient, ...]
    subject: str
    message: str
    sender_name: str | None = None
    html_builder: HtmlBuilder | None = None


@dataclass(frozen=True)
class BulkSendToIdsInput:
    """Send one subject/message to user IDs resolved through the directory."""

    recipient_ids: tuple[UUID, ...]
    subject: str
    message: str
    sender_name: str | None = None
    html_builder: HtmlBuilder | None = None


# --- Output Models ---


@dataclass(frozen=True)
class BulkSendResult:
    """
    Aggregate outcome of a bulk send.

    sent_count + failed_count == len(recipients). `errors` holds raw
    provider failure reasons for audit, never for end users.
    """

    recipients: tuple[Recipient, ...]
    sent_count: int
    failed_count: int
    errors: list[str] = field(default_factory=list)

    @property
    def failure_summary(self) -> str | None:
        """'N of M emails failed', or None when everything went out."""
        if self.failed_count == 0:
            return None
        return f"{self.failed_count} of {len(self.recipients)} emails failed"
