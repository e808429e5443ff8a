"""
Recipients component - user ID to deliverable address resolution.
"""

from .component import (
    RecipientDirectory,
    run,
    run_audience,
    run_resolve,
    to_recipient,
)
from .models import AudienceInput, RecipientsOutput, ResolveRecipientsInput
from .ports import UserDirectoryPort

__all__ = [
    # Entry points
    "run",
    "run_audience",
    "run_resolve",
    # Service
    "RecipientDirectory",
    "to_recipient",
    # Models
    "AudienceInput",
    "RecipientsOutput",
    "ResolveRecipientsInput",
    # Ports
    "UserDirectoryPort",
]
