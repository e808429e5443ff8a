import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from coursecast import __version__
from coursecast.api.deps import get_settings
from coursecast.app_shell.config import validate_ops_rules
from coursecast.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
        validate_ops_rules(rules)
        logger.info("Rules loaded from %s", settings.rules_path)
    except Exception:
        logger.critical("Rules load failed", exc_info=True)
        raise

    yield


app = FastAPI(
    title="Coursecast API",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from coursecast.api.routes import admin_scheduled_emails, cron  # noqa: E402

app.include_router(cron.router, prefix="/api/cron", tags=["Cron"])
app.include_router(
    admin_scheduled_emails.router,
    prefix="/api/admin/scheduled-emails",
    tags=["Admin Scheduled Emails"],
)
app.include_router(
    admin_scheduled_emails.assignments_router,
    prefix="/api/admin/assignments",
    tags=["Admin Assignments"],
)


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "coursecast"}
