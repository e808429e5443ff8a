import logging
import os
import secrets
from functools import lru_cache
from pathlib import Path
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from coursecast.adapters.clock import SystemClock
from coursecast.adapters.dev_email import DevEmailAdapter, create_dev_email_adapter
from coursecast.adapters.sqlite_db import (
    SQLiteAssignmentRepo,
    SQLiteAuditLogRepo,
    SQLiteNotificationRepo,
    SQLiteScheduledEmailRepo,
    SQLiteUserRepo,
)
from coursecast.components.audit import AuditRecorder
from coursecast.components.dispatch import EmailDispatchWorker, create_dispatch_worker
from coursecast.components.scheduler import PublishWorker, create_publish_worker
from coursecast.components.scheduling import SchedulingConfig, SchedulingService
from coursecast.core.ports.time import TimePort
from coursecast.domain.errors import AuthError, ConfigurationError
from coursecast.rules.loader import load_rules
from coursecast.rules.models import Rules

logger = logging.getLogger(__name__)

CRON_SECRET_ENV = "CRON_SECRET"


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = os.environ.get("COURSECAST_DATA_DIR", "./data")
        self.db_path = f"{self.data_dir}/coursecast.db"
        self.rules_path = Path(
            os.environ.get("COURSECAST_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )
        self.email_from = os.environ.get(
            "EMAIL_FROM", "Coursecast <no-reply@coursecast.local>"
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Repos ---
def get_assignment_repo(settings: Settings = Depends(get_settings)) -> SQLiteAssignmentRepo:
    return SQLiteAssignmentRepo(settings.db_path)


def get_scheduled_email_repo(
    settings: Settings = Depends(get_settings),
) -> SQLiteScheduledEmailRepo:
    return SQLiteScheduledEmailRepo(settings.db_path)


def get_user_repo(settings: Settings = Depends(get_settings)) -> SQLiteUserRepo:
    return SQLiteUserRepo(settings.db_path)


def get_notification_repo(settings: Settings = Depends(get_settings)) -> SQLiteNotificationRepo:
    return SQLiteNotificationRepo(settings.db_path)


def get_audit_repo(settings: Settings = Depends(get_settings)) -> SQLiteAuditLogRepo:
    return SQLiteAuditLogRepo(settings.db_path)


# --- Adapters ---
def get_clock() -> TimePort:
    return SystemClock()


@lru_cache
def get_email_adapter(settings: Settings = Depends(get_settings)) -> DevEmailAdapter:
    # No delivery provider is wired in; emails are logged
    return create_dev_email_adapter(from_address=settings.email_from)


# --- Workers ---
def get_publish_worker(
    assignments: SQLiteAssignmentRepo = Depends(get_assignment_repo),
    users: SQLiteUserRepo = Depends(get_user_repo),
    notifications: SQLiteNotificationRepo = Depends(get_notification_repo),
    audit: SQLiteAuditLogRepo = Depends(get_audit_repo),
    email: DevEmailAdapter = Depends(get_email_adapter),
    clock: TimePort = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> PublishWorker:
    return create_publish_worker(
        assignments=assignments,
        users=users,
        notifications=notifications,
        audit=audit,
        email=email,
        time_port=clock,
        rules=rules,
    )


def get_dispatch_worker(
    emails: SQLiteScheduledEmailRepo = Depends(get_scheduled_email_repo),
    assignments: SQLiteAssignmentRepo = Depends(get_assignment_repo),
    users: SQLiteUserRepo = Depends(get_user_repo),
    notifications: SQLiteNotificationRepo = Depends(get_notification_repo),
    audit: SQLiteAuditLogRepo = Depends(get_audit_repo),
    email: DevEmailAdapter = Depends(get_email_adapter),
    clock: TimePort = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> EmailDispatchWorker:
    return create_dispatch_worker(
        emails=emails,
        assignments=assignments,
        users=users,
        notifications=notifications,
        audit=audit,
        email=email,
        time_port=clock,
        rules=rules,
    )


# --- Services ---
def get_scheduling_service(
    emails: SQLiteScheduledEmailRepo = Depends(get_scheduled_email_repo),
    assignments: SQLiteAssignmentRepo = Depends(get_assignment_repo),
    audit: SQLiteAuditLogRepo = Depends(get_audit_repo),
    clock: TimePort = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> SchedulingService:
    return SchedulingService(
        emails=emails,
        assignments=assignments,
        audit=AuditRecorder(audit, clock),
        time_port=clock,
        config=SchedulingConfig.from_rules(rules.scheduling),
    )


# --- Auth ---
def check_cron_secret(authorization: str | None, secret: str | None) -> None:
    """
    Compare an Authorization header against the configured cron secret.

    Raises ConfigurationError when no secret is configured and AuthError
    on a missing or wrong bearer token.
    """
    if not secret:
        raise ConfigurationError(f"{CRON_SECRET_ENV} not configured")
    expected = f"Bearer {secret}"
    if authorization is None or not secrets.compare_digest(
        authorization.encode(), expected.encode()
    ):
        raise AuthError("Unauthorized")


def verify_cron_auth(authorization: str | None = Header(default=None)) -> None:
    # Read per request so the secret can rotate without a restart
    try:
        check_cron_secret(authorization, os.environ.get(CRON_SECRET_ENV))
    except ConfigurationError:
        logger.error("%s environment variable is not configured", CRON_SECRET_ENV)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{CRON_SECRET_ENV} not configured",
        ) from None
    except AuthError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        ) from None


def get_actor_id(x_actor_id: str | None = Header(default=None)) -> UUID:
    """Acting staff member, set by the fronting application."""
    if not x_actor_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Actor-Id header",
        )
    try:
        return UUID(x_actor_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid X-Actor-Id header",
        ) from None
