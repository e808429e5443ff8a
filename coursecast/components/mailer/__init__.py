"""
Mailer component - per-recipient isolated bulk email sending.
"""

from .component import (
    Mailer,
    build_config,
    run,
    run_send_bulk,
    run_send_bulk_to_ids,
)
from .models import (
    BulkSendInput,
    BulkSendResult,
    BulkSendToIdsInput,
    HtmlBuilder,
    MailerConfig,
)
from .ports import DirectoryPort, EmailPort
from .templates import (
    AssignmentEmailParams,
    assignment_published_email,
    format_due_date,
    notification_email,
)

__all__ = [
    # Entry points
    "run",
    "run_send_bulk",
    "run_send_bulk_to_ids",
    # Service
    "Mailer",
    "MailerConfig",
    "build_config",
    # Models
    "BulkSendInput",
    "BulkSendResult",
    "BulkSendToIdsInput",
    "HtmlBuilder",
    # Templates
    "AssignmentEmailParams",
    "assignment_published_email",
    "format_due_date",
    "notification_email",
    # Ports
    "DirectoryPort",
    "EmailPort",
]
