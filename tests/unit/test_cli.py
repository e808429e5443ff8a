"""
CLI tests: migrate, then run each worker once against a temp data dir.
"""

from __future__ import annotations

import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from coursecast.adapters.sqlite_db import SQLiteAssignmentRepo, SQLiteUserRepo
from coursecast.app_shell import cli
from coursecast.domain.entities import Assignment, User


@pytest.fixture
def env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    data_dir = tmp_path / "data"
    rules_path = tmp_path / "rules.yaml"
    rules_path.write_text("scheduling:\n  audience_roles: [STUDENT]\n")
    monkeypatch.setenv("COURSECAST_DATA_DIR", str(data_dir))
    monkeypatch.setenv("COURSECAST_RULES_PATH", str(rules_path))
    return data_dir


def invoke(monkeypatch: pytest.MonkeyPatch, *args: str) -> None:
    monkeypatch.setattr(sys, "argv", ["coursecast", *args])
    cli.main()


class TestCli:
    def test_migrate(self, env, monkeypatch, capsys) -> None:
        invoke(monkeypatch, "migrate")

        assert (env / "coursecast.db").exists()
        assert "Applied 1 migration(s)." in capsys.readouterr().out

    def test_publish_due(self, env, monkeypatch, capsys) -> None:
        invoke(monkeypatch, "migrate")
        db_path = str(env / "coursecast.db")
        author = SQLiteUserRepo(db_path).save(User(email="prof@uni.example", role="PROFESSOR"))
        a = SQLiteAssignmentRepo(db_path).save(
            Assignment(
                title="Lab 1",
                created_by=author.id,
                scheduled_publish_at=datetime.now(UTC) - timedelta(minutes=5),
            )
        )

        invoke(monkeypatch, "publish_due")

        assert "Published 1 assignment(s)." in capsys.readouterr().out
        assert SQLiteAssignmentRepo(db_path).get_by_id(a.id).published is True

    def test_send_due_empty(self, env, monkeypatch, capsys) -> None:
        invoke(monkeypatch, "migrate")

        invoke(monkeypatch, "send_due")

        assert "Processed 0 scheduled email(s)." in capsys.readouterr().out

    def test_selection_failure_exit_code(self, env, monkeypatch) -> None:
        """An unmigrated database fails selection."""
        env.mkdir(parents=True)

        with pytest.raises(SystemExit) as exc_info:
            invoke(monkeypatch, "send_due")

        assert exc_info.value.code == 2

    def test_missing_rules_file(self, env, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("COURSECAST_RULES_PATH", str(tmp_path / "missing.yaml"))
        invoke(monkeypatch, "migrate")

        with pytest.raises(SystemExit) as exc_info:
            invoke(monkeypatch, "publish_due")

        assert exc_info.value.code == 1
