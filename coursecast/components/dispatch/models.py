"""
Dispatch component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from coursecast.rules.models import Rules


@dataclass(frozen=True)
class DispatchWorkerConfig:
    """Dispatch worker configuration from rules."""

    # Age after which an abandoned claim may be re-taken
    claim_ttl_seconds: int = 900
    default_sender_name: str = "Staff"

    @classmethod
    def from_rules(cls, rules: Rules) -> DispatchWorkerConfig:
        return cls(
            claim_ttl_seconds=rules.scheduling.claim_ttl_seconds,
            default_sender_name=rules.email.default_sender_name,
        )


DEFAULT_CONFIG = DispatchWorkerConfig()


@dataclass(frozen=True)
class DispatchDueInput:
    """Input for one dispatch pass. The worker takes no arguments."""

    pass


@dataclass(frozen=True)
class DispatchOutput:
    """Result of one dispatch pass; errors are reported in-band."""

    processed_count: int
    errors: list[str] = field(default_factory=list)
