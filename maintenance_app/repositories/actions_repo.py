# maintenance_app/repositories/actions_repo.py
from __future__ import annotations
from typing import List
from maintenance_app.core.db import get_db
from maintenance_app.models.request import WorkflowActionRecord

async def append(record: WorkflowActionRecord) -> dict:
    doc = record.model_dump()
    await get_db().workflow_actions.insert_one(dict(doc))
    return doc

async def list_by_request(request_id: str, limit: int = 200) -> List[dict]:
    cur = get_db().workflow_actions.find({"request_id": request_id}, {"_id": 0}).sort("created_at", 1).limit(limit)
    return await cur.to_list(length=limit)
