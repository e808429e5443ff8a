"""
Email Adapter Interface.

Protocol-based interface for handing a rendered email to a delivery
provider. The provider is an external collaborator; this module only
fixes the contract the mailer component relies on.

Key requirements:
- One call per recipient (the mailer isolates recipients from each other)
- HTML body, optional plain text fallback
- Provider errors are reported as a FAILED result, not raised

Implementations:
1. DevEmailAdapter: logs emails and keeps them in an outbox (dev/test)
2. Provider adapters (SMTP, HTTP APIs) implement the same EmailPort
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Protocol


class EmailStatus(Enum):
    """Email send result status."""

    SENT = "sent"
    QUEUED = "queued"  # Accepted by provider, not delivered yet
    FAILED = "failed"
    SKIPPED = "skipped"  # Dev adapter or dry-run


@dataclass
class EmailResult:
    """Result of an email send attempt."""

    status: EmailStatus
    message_id: str | None = None  # Provider's message ID
    error: str | None = None
    sent_at: datetime | None = None
    recipient: str = ""

    @property
    def ok(self) -> bool:
        """Whether the provider accepted the message."""
        return self.status is not EmailStatus.FAILED

    @classmethod
    def success(cls, recipient: str, message_id: str | None = None) -> EmailResult:
        """Create a successful send result."""
        return cls(
            status=EmailStatus.SENT,
            message_id=message_id,
            recipient=recipient,
            sent_at=datetime.now(UTC),
        )

    @classmethod
    def failed(cls, recipient: str, error: str) -> EmailResult:
        """Create a failed result."""
        return cls(
            status=EmailStatus.FAILED,
            recipient=recipient,
            error=error,
        )


class EmailPort(Protocol):
    """
    Email sending interface.

    Implementations:
    - DevEmailAdapter: Logs to console (dev/test)
    """

    def send_email(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str | None = None,
    ) -> EmailResult:
        """
        Send one email.

        Args:
            recipient: Email address of recipient
            subject: Email subject line
            body_html: HTML body content
            body_text: Plain text body (optional, fallback)

        Returns:
            EmailResult with send outcome

        Notes:
            - Should not raise for provider errors; return failed status instead
        """
        ...

