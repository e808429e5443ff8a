import argparse
import logging
import sys
from pathlib import Path

from coursecast.adapters.clock import SystemClock
from coursecast.adapters.dev_email import create_dev_email_adapter
from coursecast.adapters.sqlite.migrator import SQLiteMigrator
from coursecast.adapters.sqlite_db import (
    SQLiteAssignmentRepo,
    SQLiteAuditLogRepo,
    SQLiteNotificationRepo,
    SQLiteScheduledEmailRepo,
    SQLiteUserRepo,
)
from coursecast.api.deps import Settings
from coursecast.components.dispatch import create_dispatch_worker
from coursecast.components.scheduler import create_publish_worker
from coursecast.domain.errors import ConfigurationError, SelectionError
from coursecast.rules.loader import load_rules
from coursecast.rules.models import Rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")


def get_rules(settings: Settings) -> Rules:
    if not Path(settings.rules_path).exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)
    try:
        return load_rules(Path(settings.rules_path))
    except ConfigurationError as e:
        logger.error("%s", e)
        sys.exit(1)


def handle_migrate(settings: Settings) -> None:
    Path(settings.data_dir).mkdir(parents=True, exist_ok=True)
    applied = SQLiteMigrator(settings.db_path).run_migrations()
    print(f"Applied {len(applied)} migration(s).")


def handle_publish_due(settings: Settings) -> None:
    clock = SystemClock()
    worker = create_publish_worker(
        assignments=SQLiteAssignmentRepo(settings.db_path),
        users=SQLiteUserRepo(settings.db_path),
        notifications=SQLiteNotificationRepo(settings.db_path),
        audit=SQLiteAuditLogRepo(settings.db_path),
        email=create_dev_email_adapter(from_address=settings.email_from),
        time_port=clock,
        rules=get_rules(settings),
    )
    result = worker.run()
    print(f"Published {result.published_count} assignment(s).")
    for error in result.errors:
        print(f"  error: {error}")


def handle_send_due(settings: Settings) -> None:
    clock = SystemClock()
    worker = create_dispatch_worker(
        emails=SQLiteScheduledEmailRepo(settings.db_path),
        assignments=SQLiteAssignmentRepo(settings.db_path),
        users=SQLiteUserRepo(settings.db_path),
        notifications=SQLiteNotificationRepo(settings.db_path),
        audit=SQLiteAuditLogRepo(settings.db_path),
        email=create_dev_email_adapter(from_address=settings.email_from),
        time_port=clock,
        rules=get_rules(settings),
    )
    result = worker.run()
    print(f"Processed {result.processed_count} scheduled email(s).")
    for error in result.errors:
        print(f"  error: {error}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Coursecast CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("migrate", help="Apply pending database migrations")
    subparsers.add_parser("publish_due", help="Publish assignments whose time has arrived")
    subparsers.add_parser("send_due", help="Send scheduled emails whose time has arrived")

    args = parser.parse_args()
    settings = Settings()

    try:
        if args.command == "migrate":
            handle_migrate(settings)
        elif args.command == "publish_due":
            handle_publish_due(settings)
        elif args.command == "send_due":
            handle_send_due(settings)
    except SelectionError as e:
        logger.error("%s", e)
        sys.exit(2)


if __name__ == "__main__":
    main()
