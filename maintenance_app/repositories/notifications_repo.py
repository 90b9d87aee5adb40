# maintenance_app/repositories/notifications_repo.py
from __future__ import annotations
from typing import List
from maintenance_app.core.db import get_db

async def insert_many(docs: List[dict]) -> int:
    if not docs:
        return 0
    # insert_many agrega _id a cada dict; se pasan copias
    await get_db().notifications.insert_many([dict(d) for d in docs])
    return len(docs)

async def list_by_user(user_id: str, limit: int = 30) -> List[dict]:
    cur = get_db().notifications.find({"user_id": user_id}, {"_id": 0}).sort("created_at", -1).limit(limit)
    return await cur.to_list(length=limit)

async def mark_read(notification_id: str, user_id: str) -> bool:
    res = await get_db().notifications.update_one({"id": notification_id, "user_id": user_id}, {"$set": {"read": True}})
    return res.matched_count == 1

async def mark_all_read(user_id: str) -> int:
    res = await get_db().notifications.update_many({"user_id": user_id, "read": False}, {"$set": {"read": True}})
    return res.modified_count
