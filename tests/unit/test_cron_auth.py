"""
Cron secret checks and startup validation.
"""

from __future__ import annotations

import pytest

from coursecast.api.deps import check_cron_secret
from coursecast.app_shell.config import validate_ops_rules
from coursecast.domain.errors import AuthError, ConfigurationError
from coursecast.rules.models import OpsRules, Rules


class TestCheckCronSecret:
    def test_match(self) -> None:
        check_cron_secret("Bearer s3cret", "s3cret")

    def test_missing_secret_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            check_cron_secret("Bearer s3cret", None)

    def test_empty_secret_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            check_cron_secret("Bearer ", "")

    @pytest.mark.parametrize(
        "header",
        [None, "", "s3cret", "Bearer wrong", "bearer s3cret", "Bearer s3cret "],
    )
    def test_mismatch_is_auth_error(self, header: str | None) -> None:
        with pytest.raises(AuthError):
            check_cron_secret(header, "s3cret")


class TestValidateOpsRules:
    def test_missing_env(self) -> None:
        rules = Rules(ops=OpsRules(required_env=["CRON_SECRET", "EMAIL_FROM"]))

        with pytest.raises(ConfigurationError, match="CRON_SECRET, EMAIL_FROM"):
            validate_ops_rules(rules, environ={})

    def test_present_env(self) -> None:
        rules = Rules(ops=OpsRules(required_env=["CRON_SECRET"]))

        validate_ops_rules(rules, environ={"CRON_SECRET": "x"})

    def test_empty_audience_rejected(self) -> None:
        rules = Rules()
        rules.scheduling.audience_roles = []

        with pytest.raises(ConfigurationError, match="audience_roles"):
            validate_ops_rules(rules, environ={})
