# maintenance_app/repositories/users_repo.py
from __future__ import annotations
from typing import List, Optional
from maintenance_app.core.db import get_db

_PUBLIC = {"_id": 0, "password_hash": 0}

async def find_by_username(username: str) -> dict | None:
    # incluye password_hash: solo para login
    return await get_db().users.find_one({"username": username}, {"_id": 0})

async def insert(doc: dict):
    await get_db().users.insert_one(dict(doc))

async def list_all(limit: int = 1000) -> List[dict]:
    return await get_db().users.find({}, _PUBLIC).to_list(limit)

async def list_by_role(role: str, store: Optional[str] = None) -> List[dict]:
    """Usuarios con `role`; si se indica tienda, solo los de esa tienda o con acceso "ALL"."""
    filt: dict = {"role": role}
    if store is not None:
        filt["store"] = {"$in": [store, "ALL"]}
    return await get_db().users.find(filt, _PUBLIC).to_list(1000)
