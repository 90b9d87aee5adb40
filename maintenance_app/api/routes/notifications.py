# maintenance_app/api/routes/notifications.py
from fastapi import APIRouter, HTTPException, Depends, Query
from maintenance_app.api.deps import get_current_user
from maintenance_app.repositories import notifications_repo as repo

router = APIRouter()

@router.get("")
async def my_notifications(limit: int = Query(30, ge=1, le=100), current=Depends(get_current_user)):
    items = await repo.list_by_user(current["id"], limit)
    return {"items": items, "unread": sum(1 for n in items if not n.get("read"))}

@router.post("/read-all")
async def mark_all_read(current=Depends(get_current_user)):
    return {"ok": True, "updated": await repo.mark_all_read(current["id"])}

@router.post("/{notification_id}/read")
async def mark_read(notification_id: str, current=Depends(get_current_user)):
    if not await repo.mark_read(notification_id, current["id"]):
        raise HTTPException(404, "Notificación no encontrada")
    return {"ok": True}
