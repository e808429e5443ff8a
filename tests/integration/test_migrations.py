"""
Migration runner tests.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from coursecast.adapters.sqlite.migrator import SQLiteMigrator


def table_names(db_path: str) -> set[str]:
    conn = sqlite3.connect(db_path)
    try:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
        return {r[0] for r in rows}
    finally:
        conn.close()


class TestMigrator:
    def test_creates_schema(self, tmp_path: Path) -> None:
        db_path = str(tmp_path / "test.db")

        applied = SQLiteMigrator(db_path).run_migrations()

        assert applied == ["0001_init.sql"]
        assert {
            "users",
            "assignments",
            "scheduled_emails",
            "notifications",
            "audit_events",
            "_migrations",
        } <= table_names(db_path)

    def test_idempotent(self, tmp_path: Path) -> None:
        db_path = str(tmp_path / "test.db")
        SQLiteMigrator(db_path).run_migrations()

        assert SQLiteMigrator(db_path).run_migrations() == []

    def test_down_section_not_applied(self, tmp_path: Path) -> None:
        migrations = tmp_path / "migrations"
        migrations.mkdir()
        (migrations / "0001_a.sql").write_text(
            "CREATE TABLE a (id INTEGER);\n-- Down\nDROP TABLE a;\n"
        )
        db_path = str(tmp_path / "test.db")

        SQLiteMigrator(db_path, str(migrations)).run_migrations()

        assert "a" in table_names(db_path)

    def test_broken_migration_raises(self, tmp_path: Path) -> None:
        migrations = tmp_path / "migrations"
        migrations.mkdir()
        (migrations / "0001_bad.sql").write_text("CREATE TABLE (;")

        with pytest.raises(RuntimeError, match="0001_bad.sql"):
            SQLiteMigrator(str(tmp_path / "test.db"), str(migrations)).run_migrations()

    def test_status_check_constraint(self, db_path: str) -> None:
        conn = sqlite3.connect(db_path)
        try:
            with pytest.raises(sqlite3.IntegrityError):
                conn.execute(
                    "INSERT INTO scheduled_emails (id, status, scheduled_at, subject, message, "
                    "created_by, created_at) VALUES ('x', 'LOST', 'now', 's', 'm', 'u', 'now')"
                )
        finally:
            conn.close()
