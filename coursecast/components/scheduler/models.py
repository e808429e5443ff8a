"""
Scheduler component input/output models.

The scheduler is the Publish Worker: it publishes assignments whose
scheduled time has arrived.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from coursecast.rules.models import Rules

# --- Configuration ---


@dataclass(frozen=True)
class PublishWorkerConfig:
    """Publish worker configuration from rules."""

    audience_roles: tuple[str, ...] = ("STUDENT",)
    site_name: str = "Coursecast"
    default_sender_name: str = "Staff"
    default_recipient_name: str = "Student"

    @classmethod
    def from_rules(cls, rules: Rules) -> PublishWorkerConfig:
        return cls(
            audience_roles=tuple(rules.scheduling.audience_roles),
            site_name=rules.email.site_name,
            default_sender_name=rules.email.default_sender_name,
            default_recipient_name=rules.email.default_recipient_name,
        )


DEFAULT_CONFIG = PublishWorkerConfig()


# --- Input Models ---


@dataclass(frozen=True)
class PublishDueInput:
    """Input for one publish pass. The worker takes no arguments."""

    pass


# --- Output Models ---


@dataclass(frozen=True)
class PublishDueOutput:
    """Result of one publish pass; errors are reported in-band."""

    published_count: int
    errors: list[str] = field(default_factory=list)
