from __future__ import annotations
from fastapi import APIRouter, Depends, Request
from datetime import datetime, timezone
from memecontest.config import settings
from memecontest.store import ContestStore, get_store
from memecontest.services.time_windows import utc_today

router = APIRouter(tags=["system"])

@router.get("/health")
async def health(request: Request):
    now = datetime.now(timezone.utc)
    return {
        "status": "ok",
        "env": settings.environment,
        "time": now.isoformat(),
        "contest_day": utc_today(now),
        "request_id": request.state.request_id,
    }

@router.get("/health/store")
async def store_health(store: ContestStore = Depends(get_store)):
    # RedisError surfaces through the app-level 503 handler
    await store.client.ping()
    return {"status": "ok", "redis": "up"}

@router.get("/version")
async def version():
    return {
        "name": settings.app_name,
        "display_name": settings.app_display_name,
        "version": settings.app_version,
        "git_sha": settings.git_sha,
    }
