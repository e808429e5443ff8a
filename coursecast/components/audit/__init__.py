"""
Audit component - append-only trail of scheduling actions.
"""

from .component import AuditRecorder, run, run_list, run_record
from .models import AuditAction, AuditListOutput, ListAuditInput, RecordAuditInput
from .ports import AuditLogRepoPort, AuditRecorderPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_list",
    "run_record",
    # Service
    "AuditRecorder",
    # Models
    "AuditAction",
    "AuditListOutput",
    "ListAuditInput",
    "RecordAuditInput",
    # Ports
    "AuditLogRepoPort",
    "AuditRecorderPort",
    "TimePort",
]
