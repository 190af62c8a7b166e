# feedsync/entrypoints/api/routers/health.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from ..deps import require_api_key
from ....adapters.clients.odata_feed import redact_token
from ....config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/debug/config", dependencies=[Depends(require_api_key)])
def debug_config() -> dict[str, Any]:
    return {
        "ENV": settings.ENV,
        "FEEDSYNC_DB_URL": settings.FEEDSYNC_DB_URL,
        "FEED_API_URL": redact_token(settings.FEED_API_URL) if settings.FEED_API_URL else None,
        "FEED_FILTER": settings.FEED_FILTER,
        "FEED_IMPORT_OWNER_ID": settings.FEED_IMPORT_OWNER_ID,
        "RUN_FEED_CRON": settings.RUN_FEED_CRON,
        "SCHED_IMPORT_INTERVAL_HOURS": settings.SCHED_IMPORT_INTERVAL_HOURS,
        "SCHED_IMPORT_BUDGET": settings.SCHED_IMPORT_BUDGET,
    }
