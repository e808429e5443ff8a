import logging
import os
from collections.abc import Mapping

from coursecast.domain.errors import ConfigurationError
from coursecast.rules.models import Rules

logger = logging.getLogger(__name__)


def validate_ops_rules(rules: Rules, environ: Mapping[str, str] | None = None) -> None:
    """
    Validate operational requirements before startup.

    Raises ConfigurationError listing every missing required env var.
    """
    env = os.environ if environ is None else environ

    missing = [name for name in rules.ops.required_env if not env.get(name)]
    if missing:
        logger.critical("Missing required environment variables: %s", ", ".join(missing))
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    if not rules.scheduling.audience_roles:
        raise ConfigurationError("scheduling.audience_roles must not be empty")

    logger.info("Configuration validated.")
