from __future__ import annotations

from fastapi import APIRouter, Depends

from app.auth.deps import require_user
from app.core.tables import Tables, get_tables
from app.services.notifications import list_notifications, mark_all_read, mark_read, notification_out

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
async def ui_list_notifications(ctx=Depends(require_user), tables: Tables = Depends(get_tables)):
    return [notification_out(it) for it in list_notifications(tables, ctx["id"])]


# Declared before /{notification_id}/read so "read-all" is never taken for an id.
@router.post("/read-all")
async def ui_mark_all_read(ctx=Depends(require_user), tables: Tables = Depends(get_tables)):
    updated = mark_all_read(tables, ctx["id"])
    return {"message": "All read", "updated": updated}


@router.post("/{notification_id}/read")
async def ui_mark_read(notification_id: str, ctx=Depends(require_user), tables: Tables = Depends(get_tables)):
    return notification_out(mark_read(tables, ctx["id"], notification_id))
