"""
SQLite Database Adapter.

Implements the DB port interfaces using SQLite.
Designed to be Postgres-compatible (uses standard SQL patterns).

Every state transition the workers depend on is one UPDATE with a guard
in its WHERE clause; the affected row count tells the caller whether it
won. Nothing here holds a transaction across rows.
"""

from __future__ import annotations

import json
import sqlite3
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from coursecast.domain.entities import (
    Assignment,
    AuditEvent,
    Notification,
    ScheduledEmail,
    User,
)

# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def to_db_dt(dt: datetime | None) -> str | None:
    """
    Serialize a datetime for storage.

    Always UTC with microsecond precision so that string comparison in SQL
    matches chronological order. Naive datetimes are taken to be UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="microseconds")


def parse_dt(s: str | None) -> datetime | None:
    """Parse ISO datetime string."""
    return datetime.fromisoformat(s) if s else None


def parse_uuid(s: str | None) -> UUID | None:
    """Parse UUID string."""
    return UUID(s) if s else None


# -----------------------------------------------------------------------------
# Base SQLite Repository
# -----------------------------------------------------------------------------


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    # Seconds a writer waits on a locked database before giving up
    busy_timeout: float = 30.0

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        """Open a new connection; callers close it."""
        conn = sqlite3.connect(self.db_path, timeout=self.busy_timeout)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn


# -----------------------------------------------------------------------------
# User Repository
# -----------------------------------------------------------------------------


class SQLiteUserRepo(SQLiteRepoBase):
    """SQLite implementation of UserRepoPort."""

    def get_by_id(self, user_id: UUID) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (str(user_id),)).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def save(self, user: User) -> User:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO users (
                    id, name, email, role, is_banned, is_deleted, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name=excluded.name,
                    email=excluded.email,
                    role=excluded.role,
                    is_banned=excluded.is_banned,
                    is_deleted=excluded.is_deleted
                """,
                (
                    str(user.id),
                    user.name,
                    user.email,
                    user.role,
                    int(user.is_banned),
                    int(user.is_deleted),
                    to_db_dt(user.created_at),
                ),
            )
            conn.commit()
            return user
        finally:
            conn.close()

    def list_by_ids(self, user_ids: list[UUID]) -> list[User]:
        if not user_ids:
            return []
        conn = self._get_conn()
        try:
            placeholders = ", ".join("?" for _ in user_ids)
            rows = conn.execute(
                f"""
                SELECT * FROM users
                WHERE id IN ({placeholders}) AND is_deleted = 0
                ORDER BY email ASC
                """,
                tuple(str(uid) for uid in user_ids),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def list_active_by_roles(self, roles: list[str]) -> list[User]:
        if not roles:
            return []
        conn = self._get_conn()
        try:
            placeholders = ", ".join("?" for _ in roles)
            rows = conn.execute(
                f"""
                SELECT * FROM users
                WHERE role IN ({placeholders}) AND is_banned = 0 AND is_deleted = 0
                ORDER BY email ASC
                """,
                tuple(roles),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> User:
        return User(
            id=UUID(row["id"]),
            name=row["name"],
            email=row["email"],
            role=row["role"],
            is_banned=bool(row["is_banned"]),
            is_deleted=bool(row["is_deleted"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )


# -----------------------------------------------------------------------------
# Assignment Repository
# -----------------------------------------------------------------------------

_ASSIGNMENT_SELECT = """
    SELECT a.*, u.name AS created_by_name
    FROM assignments a
    LEFT JOIN users u ON u.id = a.created_by
"""


class SQLiteAssignmentRepo(SQLiteRepoBase):
    """SQLite implementation of AssignmentRepoPort."""

    def get_by_id(self, assignment_id: UUID) -> Assignment | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                _ASSIGNMENT_SELECT + " WHERE a.id = ?", (str(assignment_id),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def save(self, assignment: Assignment) -> Assignment:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO assignments (
                    id, title, description, due_date, total_points,
                    published, scheduled_publish_at, notify_on_publish,
                    published_by, published_at, created_by, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title=excluded.title,
                    description=excluded.description,
                    due_date=excluded.due_date,
                    total_points=excluded.total_points,
                    published=MAX(assignments.published, excluded.published),
                    scheduled_publish_at=CASE
                        WHEN assignments.published = 1 THEN NULL
                        ELSE excluded.scheduled_publish_at
                    END,
                    notify_on_publish=excluded.notify_on_publish,
                    published_by=COALESCE(assignments.published_by, excluded.published_by),
                    published_at=COALESCE(assignments.published_at, excluded.published_at)
                """,
                (
                    str(assignment.id),
                    assignment.title,
                    assignment.description,
                    to_db_dt(assignment.due_date),
                    assignment.total_points,
                    int(assignment.published),
                    to_db_dt(assignment.scheduled_publish_at),
                    int(assignment.notify_on_publish),
                    str(assignment.published_by) if assignment.published_by else None,
                    to_db_dt(assignment.published_at),
                    str(assignment.created_by),
                    to_db_dt(assignment.created_at),
                ),
            )
            conn.commit()
            return assignment
        finally:
            conn.close()

    def publish_if_unpublished(
        self,
        assignment_id: UUID,
        actor_id: UUID,
        now_utc: datetime,
    ) -> bool:
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                """
                UPDATE assignments
                SET published = 1,
                    published_by = ?,
                    published_at = ?,
                    scheduled_publish_at = NULL
                WHERE id = ? AND published = 0
                """,
                (str(actor_id), to_db_dt(now_utc), str(assignment_id)),
            )
            conn.commit()
            return cursor.rowcount == 1
        finally:
            conn.close()

    def list_due_unblocked(self, now_utc: datetime) -> list[Assignment]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                _ASSIGNMENT_SELECT
                + """
                WHERE a.published = 0
                  AND a.scheduled_publish_at IS NOT NULL
                  AND a.scheduled_publish_at <= ?
                  AND NOT EXISTS (
                      SELECT 1 FROM scheduled_emails se
                      WHERE se.assignment_id = a.id AND se.status = 'PENDING'
                  )
                ORDER BY a.scheduled_publish_at ASC
                """,
                (to_db_dt(now_utc),),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def set_schedule(
        self,
        assignment_id: UUID,
        publish_at_utc: datetime,
        notify_on_publish: bool,
    ) -> bool:
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                """
                UPDATE assignments
                SET scheduled_publish_at = ?, notify_on_publish = ?
                WHERE id = ? AND published = 0
                """,
                (to_db_dt(publish_at_utc), int(notify_on_publish), str(assignment_id)),
            )
            conn.commit()
            return cursor.rowcount == 1
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Assignment:
        return Assignment(
            id=UUID(row["id"]),
            title=row["title"],
            description=row["description"],
            due_date=parse_dt(row["due_date"]),
            total_points=row["total_points"],
            published=bool(row["published"]),
            scheduled_publish_at=parse_dt(row["scheduled_publish_at"]),
            notify_on_publish=bool(row["notify_on_publish"]),
            published_by=parse_uuid(row["published_by"]),
            published_at=parse_dt(row["published_at"]),
            created_by=UUID(row["created_by"]),
            created_by_name=row.get("created_by_name"),
            created_at=datetime.fromisoformat(row["created_at"]),
        )


# -----------------------------------------------------------------------------
# ScheduledEmail Repository
# -----------------------------------------------------------------------------

_EMAIL_SELECT = """
    SELECT se.*, u.name AS created_by_name
    FROM scheduled_emails se
    LEFT JOIN users u ON u.id = se.created_by
"""

# Fields staff may edit while an email is still pending
_EDITABLE_EMAIL_FIELDS = ("subject", "message", "scheduled_at", "recipient_ids", "create_notification")


class SQLiteScheduledEmailRepo(SQLiteRepoBase):
    """SQLite implementation of ScheduledEmailRepoPort."""

    def get_by_id(self, email_id: UUID) -> ScheduledEmail | None:
        conn = self._get_conn()
        try:
            row = conn.execute(_EMAIL_SELECT + " WHERE se.id = ?", (str(email_id),)).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def create(self, email: ScheduledEmail) -> ScheduledEmail:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO scheduled_emails (
                    id, status, scheduled_at, recipient_ids_json, subject, message,
                    create_notification, assignment_id, error, sent_at,
                    cancelled_at, claimed_at, created_by, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(email.id),
                    email.status,
                    to_db_dt(email.scheduled_at),
                    json.dumps([str(r) for r in email.recipient_ids]),
                    email.subject,
                    email.message,
                    int(email.create_notification),
                    str(email.assignment_id) if email.assignment_id else None,
                    email.error,
                    to_db_dt(email.sent_at),
                    to_db_dt(email.cancelled_at),
                    to_db_dt(email.claimed_at),
                    str(email.created_by),
                    to_db_dt(email.created_at),
                ),
            )
            conn.commit()
            return email
        finally:
            conn.close()

    def list_all(self) -> list[ScheduledEmail]:
        conn = self._get_conn()
        try:
            rows = conn.execute(_EMAIL_SELECT + " ORDER BY se.scheduled_at ASC").fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def list_due(self, now_utc: datetime) -> list[ScheduledEmail]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                _EMAIL_SELECT
                + """
                WHERE se.status = 'PENDING' AND se.scheduled_at <= ?
                ORDER BY se.scheduled_at ASC
                """,
                (to_db_dt(now_utc),),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def claim(self, email_id: UUID, now_utc: datetime, stale_before: datetime) -> bool:
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                """
                UPDATE scheduled_emails
                SET claimed_at = ?
                WHERE id = ? AND status = 'PENDING'
                  AND (claimed_at IS NULL OR claimed_at < ?)
                """,
                (to_db_dt(now_utc), str(email_id), to_db_dt(stale_before)),
            )
            conn.commit()
            return cursor.rowcount == 1
        finally:
            conn.close()

    def mark_sent(self, email_id: UUID, sent_at: datetime, error: str | None) -> bool:
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                """
                UPDATE scheduled_emails
                SET status = 'SENT', sent_at = ?, error = ?
                WHERE id = ? AND status = 'PENDING'
                """,
                (to_db_dt(sent_at), error, str(email_id)),
            )
            conn.commit()
            return cursor.rowcount == 1
        finally:
            conn.close()

    def mark_failed(self, email_id: UUID, error: str) -> bool:
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                """
                UPDATE scheduled_emails
                SET status = 'FAILED', error = ?
                WHERE id = ? AND status = 'PENDING'
                """,
                (error, str(email_id)),
            )
            conn.commit()
            return cursor.rowcount == 1
        finally:
            conn.close()

    def cancel(self, email_id: UUID, cancelled_at: datetime) -> bool:
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                """
                UPDATE scheduled_emails
                SET status = 'CANCELLED', cancelled_at = ?
                WHERE id = ? AND status = 'PENDING' AND claimed_at IS NULL
                """,
                (to_db_dt(cancelled_at), str(email_id)),
            )
            conn.commit()
            return cursor.rowcount == 1
        finally:
            conn.close()

    def update_pending(self, email_id: UUID, changes: dict[str, Any]) -> bool:
        unknown = set(changes) - set(_EDITABLE_EMAIL_FIELDS)
        if unknown:
            raise ValueError(f"Fields not editable: {', '.join(sorted(unknown))}")
        if not changes:
            return False

        assignments: list[str] = []
        params: list[Any] = []
        for name, value in changes.items():
            if name == "recipient_ids":
                assignments.append("recipient_ids_json = ?")
                params.append(json.dumps([str(r) for r in value]))
            elif name == "scheduled_at":
                assignments.append("scheduled_at = ?")
                params.append(to_db_dt(value))
            elif name == "create_notification":
                assignments.append("create_notification = ?")
                params.append(int(value))
            else:
                assignments.append(f"{name} = ?")
                params.append(value)

        conn = self._get_conn()
        try:
            cursor = conn.execute(
                f"""
                UPDATE scheduled_emails
                SET {", ".join(assignments)}
                WHERE id = ? AND status = 'PENDING' AND claimed_at IS NULL
                """,
                (*params, str(email_id)),
            )
            conn.commit()
            return cursor.rowcount == 1
        finally:
            conn.close()

    def delete(self, email_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM scheduled_emails WHERE id = ?", (str(email_id),))
            conn.commit()
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> ScheduledEmail:
        return ScheduledEmail(
            id=UUID(row["id"]),
            status=row["status"],
            scheduled_at=datetime.fromisoformat(row["scheduled_at"]),
            recipient_ids=[UUID(r) for r in json.loads(row["recipient_ids_json"])],
            subject=row["subject"],
            message=row["message"],
            create_notification=bool(row["create_notification"]),
            assignment_id=parse_uuid(row["assignment_id"]),
            error=row["error"],
            sent_at=parse_dt(row["sent_at"]),
            cancelled_at=parse_dt(row["cancelled_at"]),
            claimed_at=parse_dt(row["claimed_at"]),
            created_by=UUID(row["created_by"]),
            created_by_name=row.get("created_by_name"),
            created_at=datetime.fromisoformat(row["created_at"]),
        )


# -----------------------------------------------------------------------------
# Notification Repository
# -----------------------------------------------------------------------------


class SQLiteNotificationRepo(SQLiteRepoBase):
    """SQLite implementation of NotificationRepoPort."""

    def save(self, notification: Notification) -> Notification:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO notifications (
                    id, title, message, is_global, assignment_id, created_by, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(notification.id),
                    notification.title,
                    notification.message,
                    int(notification.is_global),
                    str(notification.assignment_id) if notification.assignment_id else None,
                    str(notification.created_by),
                    to_db_dt(notification.created_at),
                ),
            )
            conn.commit()
            return notification
        finally:
            conn.close()

    def list_recent(self, limit: int = 100) -> list[Notification]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM notifications ORDER BY created_at DESC LIMIT ?",
                (limit,),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Notification:
        return Notification(
            id=UUID(row["id"]),
            title=row["title"],
            message=row["message"],
            is_global=bool(row["is_global"]),
            assignment_id=parse_uuid(row["assignment_id"]),
            created_by=UUID(row["created_by"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )


# -----------------------------------------------------------------------------
# Audit Log Repository
# -----------------------------------------------------------------------------


class SQLiteAuditLogRepo(SQLiteRepoBase):
    """SQLite implementation of AuditLogRepoPort."""

    def append(self, event: AuditEvent) -> AuditEvent:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO audit_events (
                    id, actor_user_id, action, details_json, created_at
                ) VALUES (?, ?, ?, ?, ?)
                """,
                (
                    str(event.id),
                    str(event.actor_user_id),
                    event.action,
                    json.dumps(event.details, default=str),
                    to_db_dt(event.created_at),
                ),
            )
            conn.commit()
            return event
        finally:
            conn.close()

    def list_recent(self, limit: int = 100) -> list[AuditEvent]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM audit_events ORDER BY created_at DESC LIMIT ?",
                (limit,),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def list_by_action(self, action: str, limit: int = 100) -> list[AuditEvent]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT * FROM audit_events
                WHERE action = ?
                ORDER BY created_at DESC LIMIT ?
                """,
                (action, limit),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> AuditEvent:
        return AuditEvent(
            id=UUID(row["id"]),
            actor_user_id=UUID(row["actor_user_id"]),
            action=row["action"],
            details=json.loads(row["details_json"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )
