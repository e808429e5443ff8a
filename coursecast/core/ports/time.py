"""
Time Port.

All timestamps are timezone-aware UTC. Workers never read the wall clock
directly so that tests can pin "now".
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class TimePort(Protocol):
    """Time source interface."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...

    def is_future(self, utc_dt: datetime, grace_seconds: int = 0) -> bool:
        """
        Check if datetime is in the future (with optional grace period).

        Used when staff schedule an item.
        """
        ...
