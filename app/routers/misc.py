from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from app.core.settings import S

router = APIRouter(tags=["misc"])


@router.get("/health")
async def health():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": S.app_env,
    }


@router.get("/api/ping")
async def ping():
    return {"ok": True}
