"""
Dispatch component - sends scheduled emails whose time has arrived.
"""

from .component import (
    EmailDispatchWorker,
    create_dispatch_worker,
    run,
    run_dispatch_due,
)
from .models import DispatchDueInput, DispatchOutput, DispatchWorkerConfig
from .ports import AssignmentLookupPort, DirectoryPort, DueEmailsPort

__all__ = [
    # Entry points
    "run",
    "run_dispatch_due",
    "create_dispatch_worker",
    # Service
    "EmailDispatchWorker",
    "DispatchWorkerConfig",
    # Models
    "DispatchDueInput",
    "DispatchOutput",
    # Ports
    "AssignmentLookupPort",
    "DirectoryPort",
    "DueEmailsPort",
]
