"""
Mailer component - the email gateway for bulk sends.

Renders one message per recipient and hands each to the EmailPort on
its own, so one recipient's failure never stops the others. All sends
are settled first, then aggregated.

Invariants:
- I1: sent_count + failed_count == number of recipients
- I2: No retries; a failed recipient stays failed for this cycle
- I3: errors list is bounded by max_error_reasons
"""

from __future__ import annotations

import logging

from coursecast.domain.entities import Recipient
from coursecast.domain.errors import NoRecipientsError
from coursecast.rules.models import EmailRules

from .models import (
    DEFAULT_CONFIG,
    BulkSendInput,
    BulkSendResult,
    BulkSendToIdsInput,
    HtmlBuilder,
    MailerConfig,
)
from .ports import DirectoryPort, EmailPort
from .templates import notification_email

logger = logging.getLogger(__name__)


def build_config(rules: EmailRules | None) -> MailerConfig:
    """Build mailer config from email rules."""
    if rules is None:
        return MailerConfig()
    return MailerConfig(
        site_name=rules.site_name,
        default_recipient_name=rules.default_recipient_name,
        default_sender_name=rules.default_sender_name,
        max_error_reasons=rules.max_error_reasons,
    )


class Mailer:
    """
    Email gateway.

    Uses the EmailPort for transport and, for send-to-ids, a directory
    for recipient resolution.
    """

    def __init__(
        self,
        email: EmailPort,
        directory: DirectoryPort | None = None,
        config: MailerConfig | None = None,
    ) -> None:
        self._email = email
        self._directory = directory
        self._config = config or DEFAULT_CONFIG

    @property
    def config(self) -> MailerConfig:
        return self._config

    def _default_builder(self, message: str, sender_name: str) -> HtmlBuilder:
        def build(recipient: Recipient) -> str:
            return notification_email(
                user_name=recipient.name or self._config.default_recipient_name,
                message=message,
                sender_name=sender_name,
                site_name=self._config.site_name,
            )

        return build

    def send_bulk(
        self,
        recipients: list[Recipient] | tuple[Recipient, ...],
        subject: str,
        message: str,
        sender_name: str | None = None,
        html_builder: HtmlBuilder | None = None,
    ) -> BulkSendResult:
        """
        Send subject/message to every recipient independently.

        Args:
            recipients: Already-resolved recipients
            subject: Subject line shared by all messages
            message: Plain message body rendered into the default template
            sender_name: Name shown in the signature
            html_builder: Optional per-recipient renderer overriding the default

        Returns:
            BulkSendResult with counts and bounded failure reasons
        """
        sender = sender_name or self._config.default_sender_name
        build = html_builder or self._default_builder(message, sender)

        sent_count = 0
        failed_count = 0
        errors: list[str] = []

        for recipient in recipients:
            reason: str | None = None
            try:
                body_html = build(recipient)
                result = self._email.send_email(
                    recipient=recipient.email,
                    subject=subject,
                    body_html=body_html,
                )
                if not result.ok:
                    reason = result.error or "Email send failed"
            except Exception as e:
                # One recipient's transport failure must not stop the rest
                reason = str(e) or type(e).__name__

            if reason is None:
                sent_count += 1
                continue

            failed_count += 1
            logger.warning("Email to %s failed: %s", recipient.email, reason)
            if len(errors) < self._config.max_error_reasons:
                errors.append(reason)

        logger.info(
            "Bulk send '%s': %d sent, %d failed", subject, sent_count, failed_count
        )
        return BulkSendResult(
            recipients=tuple(recipients),
            sent_count=sent_count,
            failed_count=failed_count,
            errors=errors,
        )

    def send_bulk_to_ids(
        self,
        recipient_ids: list | tuple,
        subject: str,
        message: str,
        sender_name: str | None = None,
        html_builder: HtmlBuilder | None = None,
    ) -> BulkSendResult:
        """Resolve IDs through the directory, then send_bulk."""
        if self._directory is None:
            raise ValueError("DirectoryPort is required for send_bulk_to_ids")

        recipients = self._directory.resolve(recipient_ids)
        if not recipients:
            return BulkSendResult(
                recipients=(),
                sent_count=0,
                failed_count=0,
                errors=[NoRecipientsError.MESSAGE],
            )
        return self.send_bulk(recipients, subject, message, sender_name, html_builder)


# --- Component Entry Points ---


def run_send_bulk(
    inp: BulkSendInput,
    *,
    email: EmailPort,
    rules: EmailRules | None = None,
) -> BulkSendResult:
    """Send to already-resolved recipients."""
    mailer = Mailer(email=email, config=build_config(rules))
    return mailer.send_bulk(
        inp.recipients, inp.subject, inp.message, inp.sender_name, inp.html_builder
    )


def run_send_bulk_to_ids(
    inp: BulkSendToIdsInput,
    *,
    email: EmailPort,
    directory: DirectoryPort,
    rules: EmailRules | None = None,
) -> BulkSendResult:
    """Resolve user IDs, then send."""
    mailer = Mailer(email=email, directory=directory, config=build_config(rules))
    return mailer.send_bulk_to_ids(
        inp.recipient_ids, inp.subject, inp.message, inp.sender_name, inp.html_builder
    )


def run(
    inp: BulkSendInput | BulkSendToIdsInput,
    *,
    email: EmailPort,
    directory: DirectoryPort | None = None,
    rules: EmailRules | None = None,
) -> BulkSendResult:
    """
    Main entry point for the mailer component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, BulkSendInput):
        return run_send_bulk(inp, email=email, rules=rules)
    elif isinstance(inp, BulkSendToIdsInput):
        if directory is None:
            raise ValueError("DirectoryPort is required for send-to-ids operations")
        return run_send_bulk_to_ids(inp, email=email, directory=directory, rules=rules)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
