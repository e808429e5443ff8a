"""
Dev email transport.

Nothing leaves the process: each message is logged and kept in an
in-memory outbox. The result is SKIPPED, which the mailer counts as
accepted, so a dispatch pass against this transport ends SENT.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from coursecast.core.ports.email import EmailResult, EmailStatus

logger = logging.getLogger(__name__)

DEFAULT_FROM = "Coursecast <no-reply@coursecast.local>"

_TAG = re.compile(r"<[^>]+>")


@dataclass(frozen=True)
class OutboxEntry:
    message_id: str
    recipient: str
    subject: str
    body_html: str
    body_text: str
    queued_at: datetime


@dataclass
class DevEmailAdapter:
    """EmailPort that records messages instead of delivering them."""

    outbox: list[OutboxEntry] = field(default_factory=list)
    from_address: str = DEFAULT_FROM
    log_level: int = logging.INFO
    log_body: bool = True
    body_preview_length: int = 100

    def send_email(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str | None = None,
    ) -> EmailResult:
        entry = OutboxEntry(
            message_id=f"dev-{uuid4().hex[:12]}",
            recipient=recipient,
            subject=subject,
            body_html=body_html,
            body_text=body_text or "",
            queued_at=datetime.now(UTC),
        )
        self.outbox.append(entry)

        if self.log_body:
            logger.log(
                self.log_level,
                "Dev email %s from %s to %s: %r | %s",
                entry.message_id,
                self.from_address,
                recipient,
                subject,
                self._preview(entry),
            )
        else:
            logger.log(
                self.log_level,
                "Dev email %s from %s to %s: %r",
                entry.message_id,
                self.from_address,
                recipient,
                subject,
            )

        return EmailResult(
            status=EmailStatus.SKIPPED,
            message_id=entry.message_id,
            recipient=recipient,
            error="Dev mode - email logged, not sent",
        )

    def _preview(self, entry: OutboxEntry) -> str:
        # Plain text wins; otherwise strip tags from the HTML
        text = entry.body_text or _TAG.sub(" ", entry.body_html)
        text = " ".join(text.split())
        if len(text) > self.body_preview_length:
            return text[: self.body_preview_length] + "..."
        return text

    @property
    def last(self) -> OutboxEntry | None:
        return self.outbox[-1] if self.outbox else None


def create_dev_email_adapter(
    from_address: str = DEFAULT_FROM,
    log_level: int = logging.INFO,
    log_body: bool = True,
    body_preview_length: int = 100,
) -> DevEmailAdapter:
    return DevEmailAdapter(
        from_address=from_address,
        log_level=log_level,
        log_body=log_body,
        body_preview_length=body_preview_length,
    )
