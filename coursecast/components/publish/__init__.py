"""Publish component - idempotent assignment publish."""

from coursecast.components.publish.component import PublishComponent, run
from coursecast.components.publish.models import PublishInput, PublishResult
from coursecast.components.publish.ports import AssignmentWriterPort, ClockPort

__all__ = [
    "run",
    "PublishComponent",
    "PublishInput",
    "PublishResult",
    "AssignmentWriterPort",
    "ClockPort",
]
