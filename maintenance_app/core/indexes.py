# maintenance_app/core/indexes.py
import logging
from datetime import datetime, timezone
import os
import uuid
from maintenance_app.core.db import get_db
from maintenance_app.core.security import hash_password

logger = logging.getLogger(__name__)

async def ensure_core_indexes(db):
    # solicitudes
    await db.requests.create_index("id", unique=True)
    await db.requests.create_index([("created_at",-1)])
    await db.requests.create_index([("status",1)])
    await db.requests.create_index([("store",1),("status",1)])
    await db.requests.create_index([("flow_type",1)])
    await db.requests.create_index([("reported_by",1)])

    # auditoría del flujo
    await db.workflow_actions.create_index([("request_id",1),("created_at",1)])
    await db.workflow_actions.create_index([("actor_id",1)])

    # notificaciones in-app
    await db.notifications.create_index("id", unique=True)
    await db.notifications.create_index([("user_id",1),("created_at",-1)])
    await db.notifications.create_index([("user_id",1),("read",1)])

    # usuarios
    await db.users.create_index([("username",1)], unique=True)
    await db.users.create_index([("role",1),("store",1)])

async def init_data(db):
    """Crea el administrador inicial si no existe ninguno (ADMIN_PASSWORD en el entorno)."""
    if await db.users.find_one({"role":"admin"}):
        return
    password = os.getenv("ADMIN_PASSWORD")
    if not password:
        logger.warning("init_data: no hay administradores y ADMIN_PASSWORD no está definido")
        return
    await db.users.insert_one({
        "id": uuid.uuid4().hex, "username": "admin", "full_name": "Administrador Sistema",
        "email": None, "role": "admin", "store": "ALL", "department": None,
        "created_at": datetime.now(timezone.utc), "password_hash": hash_password(password),
    })
    logger.info("init_data: administrador inicial creado")

async def startup_tasks():
    db = get_db()
    await ensure_core_indexes(db)
    await init_data(db)
