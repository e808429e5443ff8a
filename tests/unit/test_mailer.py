"""
Mailer component unit tests.

Per-recipient isolation, aggregate counts and bounded failure reasons.
"""

from __future__ import annotations

from uuid import UUID, uuid4

import pytest

from coursecast.components.mailer import (
    BulkSendInput,
    BulkSendToIdsInput,
    Mailer,
    MailerConfig,
    run,
)
from coursecast.domain.entities import Recipient
from coursecast.rules.models import EmailRules


def recipients(n: int) -> list[Recipient]:
    return [Recipient(id=uuid4(), name=f"Student {i}", email=f"s{i}@uni.example") for i in range(n)]


class MockDirectory:
    def __init__(self, known: list[Recipient]) -> None:
        self._known = {r.id: r for r in known}

    def resolve(self, user_ids) -> list[Recipient]:
        return [self._known[uid] for uid in dict.fromkeys(user_ids) if uid in self._known]


class TestSendBulk:
    """Bulk send with batch isolation."""

    def test_all_sent(self, email_adapter) -> None:
        """Every recipient gets one message."""
        mailer = Mailer(email=email_adapter)
        result = mailer.send_bulk(recipients(4), "Reminder", "Bring your calculator.")

        assert result.sent_count == 4
        assert result.failed_count == 0
        assert result.errors == []
        assert result.failure_summary is None
        assert len(email_adapter.sent) == 4

    def test_partial_failure_counts(self, email_adapter) -> None:
        """3 of 10 failures still sends to the other 7."""
        batch = recipients(10)
        email_adapter.fail_for = {batch[1].email, batch[4].email, batch[8].email}

        result = Mailer(email=email_adapter).send_bulk(batch, "Reminder", "Hi")

        assert result.sent_count == 7
        assert result.failed_count == 3
        assert result.sent_count + result.failed_count == 10
        assert result.failure_summary == "3 of 10 emails failed"
        assert result.errors == ["mailbox unavailable"] * 3

    def test_raising_transport_is_isolated(self, email_adapter) -> None:
        """An exception for one recipient does not stop the rest."""
        batch = recipients(3)
        email_adapter.raise_for = {batch[0].email}

        result = Mailer(email=email_adapter).send_bulk(batch, "Reminder", "Hi")

        assert result.sent_count == 2
        assert result.failed_count == 1
        assert "connection reset" in result.errors[0]
        assert [to for to, _, _ in email_adapter.sent] == [batch[1].email, batch[2].email]

    def test_errors_bounded(self, email_adapter) -> None:
        """Failure reasons are capped; counts are not."""
        batch = recipients(6)
        email_adapter.fail_for = {r.email for r in batch}
        mailer = Mailer(email=email_adapter, config=MailerConfig(max_error_reasons=2))

        result = mailer.send_bulk(batch, "Reminder", "Hi")

        assert result.failed_count == 6
        assert len(result.errors) == 2

    def test_default_template_uses_names(self, email_adapter) -> None:
        """Default body greets the recipient and signs with the sender."""
        nameless = Recipient(id=uuid4(), name=None, email="anon@uni.example")
        Mailer(email=email_adapter).send_bulk([nameless], "Hello", "Welcome <all>", "Prof. X")

        _, subject, html = email_adapter.sent[0]
        assert subject == "Hello"
        assert "Dear Student," in html
        assert "Prof. X" in html
        assert "Welcome &lt;all&gt;" in html

    def test_custom_html_builder(self, email_adapter) -> None:
        """A builder overrides the default template per recipient."""
        batch = recipients(2)
        Mailer(email=email_adapter).send_bulk(
            batch, "Custom", "", html_builder=lambda r: f"<p>{r.email}</p>"
        )

        assert [html for _, _, html in email_adapter.sent] == [
            f"<p>{batch[0].email}</p>",
            f"<p>{batch[1].email}</p>",
        ]

    def test_builder_failure_counts_as_failed(self, email_adapter) -> None:
        """A template error fails only that recipient."""
        batch = recipients(2)

        def build(r: Recipient) -> str:
            if r is batch[0]:
                raise ValueError("bad template")
            return "<p>ok</p>"

        result = Mailer(email=email_adapter).send_bulk(batch, "S", "", html_builder=build)

        assert result.sent_count == 1
        assert result.errors == ["bad template"]


class TestSendBulkToIds:
    """Resolution through the directory."""

    def test_no_recipients(self, email_adapter) -> None:
        """Nothing resolves: nothing is sent."""
        mailer = Mailer(email=email_adapter, directory=MockDirectory([]))

        result = mailer.send_bulk_to_ids([uuid4()], "S", "M")

        assert result.sent_count == 0
        assert result.errors == ["No valid recipients found"]
        assert email_adapter.sent == []

    def test_resolves_and_sends(self, email_adapter) -> None:
        known = recipients(3)
        mailer = Mailer(email=email_adapter, directory=MockDirectory(known))

        result = mailer.send_bulk_to_ids([known[0].id, known[2].id, uuid4()], "S", "M")

        assert result.sent_count == 2
        assert {r.email for r in result.recipients} == {known[0].email, known[2].email}

    def test_requires_directory(self, email_adapter) -> None:
        with pytest.raises(ValueError):
            Mailer(email=email_adapter).send_bulk_to_ids([uuid4()], "S", "M")


class TestRunDispatcher:
    """Component entry point."""

    def test_run_bulk_send_uses_rules(self, email_adapter) -> None:
        result = run(
            BulkSendInput(recipients=tuple(recipients(1)), subject="S", message="M"),
            email=email_adapter,
            rules=EmailRules(site_name="Physics 101"),
        )

        assert result.sent_count == 1
        assert "Physics 101" in email_adapter.sent[0][2]

    def test_run_to_ids_requires_directory(self, email_adapter) -> None:
        inp = BulkSendToIdsInput(recipient_ids=(UUID(int=1),), subject="S", message="M")
        with pytest.raises(ValueError):
            run(inp, email=email_adapter)

    def test_run_unknown_input(self, email_adapter) -> None:
        with pytest.raises(ValueError):
            run("not an input", email=email_adapter)  # type: ignore[arg-type]
