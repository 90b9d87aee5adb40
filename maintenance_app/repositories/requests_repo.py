# maintenance_app/repositories/requests_repo.py
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional
from pymongo import ReturnDocument
from maintenance_app.core.db import get_db

_NO_ID = {"_id": 0}

async def find_by_id(request_id: str) -> dict | None:
    return await get_db().requests.find_one({"id": request_id}, _NO_ID)

async def insert(doc: dict):
    await get_db().requests.insert_one(dict(doc))

async def update_status_if(
    request_id: str,
    expected_status: str,
    new_status: str,
    new_stage: int,
    extra: Optional[Dict[str, Any]] = None,
) -> bool:
    """
    Escritura condicional: solo aplica si el estado persistido sigue siendo
    `expected_status`. False = otro actor ganó la transición (conflicto).
    """
    upd = {"status": new_status, "current_stage": new_stage, "updated_at": datetime.now(timezone.utc)}
    upd.update(extra or {})
    res = await get_db().requests.update_one(
        {"id": request_id, "status": expected_status},
        {"$set": upd},
    )
    return res.matched_count == 1

async def list_paginated(filt: Dict[str,Any], sort_field: str, sort_dir: int, skip: int, limit: int) -> List[dict]:
    cur = get_db().requests.find(filt, _NO_ID).sort(sort_field, sort_dir).skip(skip).limit(limit)
    return await cur.to_list(length=limit)

async def count(filt: Dict[str,Any]) -> int:
    return await get_db().requests.count_documents(filt)

async def next_sequence() -> int:
    # contador atómico para ids legibles (MR-000123)
    doc = await get_db().counters.find_one_and_update(
        {"_id": "requests"}, {"$inc": {"seq": 1}}, upsert=True, return_document=ReturnDocument.AFTER,
    )
    return int(doc["seq"])
