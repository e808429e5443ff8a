"""
Scheduler component - publishes assignments whose time has arrived.
"""

from .component import (
    PublishWorker,
    create_publish_worker,
    publish_announcement,
    run,
    run_publish_due,
)
from .models import PublishDueInput, PublishDueOutput, PublishWorkerConfig
from .ports import (
    AudiencePort,
    AuditRecorderPort,
    BulkMailerPort,
    DueAssignmentsPort,
    NotifierPort,
    PublisherPort,
    TimePort,
)

__all__ = [
    # Entry points
    "run",
    "run_publish_due",
    "create_publish_worker",
    # Service
    "PublishWorker",
    "PublishWorkerConfig",
    "publish_announcement",
    # Models
    "PublishDueInput",
    "PublishDueOutput",
    # Ports
    "AudiencePort",
    "AuditRecorderPort",
    "BulkMailerPort",
    "DueAssignmentsPort",
    "NotifierPort",
    "PublisherPort",
    "TimePort",
]
