"""
Cron API Routes.

Endpoints invoked by an external scheduler. Both require
`Authorization: Bearer <CRON_SECRET>`. Partial failures are reported
in-band with a 200; only auth, configuration and selection failures
produce an error status.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from coursecast.api.deps import get_dispatch_worker, get_publish_worker, verify_cron_auth
from coursecast.components.dispatch import EmailDispatchWorker
from coursecast.components.scheduler import PublishWorker
from coursecast.domain.errors import SelectionError

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(verify_cron_auth)])


@router.get("/publish-scheduled")
def publish_scheduled(
    worker: PublishWorker = Depends(get_publish_worker),
) -> dict[str, Any]:
    """Publish assignments whose scheduled time has arrived."""
    try:
        result = worker.run()
    except SelectionError:
        logger.exception("Cron publish-scheduled error")
        raise HTTPException(status_code=500, detail="Internal server error") from None
    return {"published": result.published_count, "errors": result.errors}


@router.get("/send-scheduled-emails")
def send_scheduled_emails(
    worker: EmailDispatchWorker = Depends(get_dispatch_worker),
) -> dict[str, Any]:
    """Send scheduled emails whose time has arrived."""
    try:
        result = worker.run()
    except SelectionError:
        logger.exception("Cron send-scheduled-emails error")
        raise HTTPException(status_code=500, detail="Internal server error") from None
    return {"processed": result.processed_count, "errors": result.errors}
