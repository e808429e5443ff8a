"""
Notifications component - in-app broadcast records.
"""

from .component import NotificationService, run, run_create
from .models import CreateNotificationInput
from .ports import NotificationRepoPort, NotifierPort, TimePort

__all__ = [
    "run",
    "run_create",
    "NotificationService",
    "CreateNotificationInput",
    "NotificationRepoPort",
    "NotifierPort",
    "TimePort",
]
