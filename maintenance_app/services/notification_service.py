# maintenance_app/services/notification_service.py
"""
Despachador de notificaciones in-app.

Se invoca después de confirmar una transición. Los llamadores capturan sus
errores: una notificación fallida nunca revierte ni bloquea la transición.
"""
import logging
from typing import Iterable, List, Optional

from maintenance_app.core.config import settings
from maintenance_app.models.request import Notification
from maintenance_app.repositories import notifications_repo, users_repo
from maintenance_app.workflow.flows import role_for_status
from maintenance_app.workflow.labels import action_label, status_label
from maintenance_app.workflow.permissions import is_completed, is_rejected, is_terminal

logger = logging.getLogger(__name__)


def _unique(ids: Iterable[Optional[str]]) -> List[str]:
    seen, out = set(), []
    for i in ids:
        if i and i not in seen:
            seen.add(i)
            out.append(i)
    return out


def build_title(request_id: str, new_status: str, action_taken: str) -> str:
    if action_taken == "send_back":
        return f"Request {request_id} - Sent Back"
    if is_rejected(new_status):
        return f"Request {request_id} - Rejected"
    if is_completed(new_status):
        return f"Request {request_id} - Completed"
    return f"Request {request_id} - Action Required"


def build_message(new_status: str, action_taken: str, actor_label: str, notes: Optional[str]) -> str:
    msg = f"{status_label(new_status)}. Action: {action_label(action_taken)} by {actor_label}"
    if notes:
        msg += f". Notes: {notes}"
    return msg


async def recipients_for(request: dict, new_status: str, action_taken: str) -> List[str]:
    """
    - rol que debe actuar en el nuevo estado (misma tienda o "ALL")
    - el solicitante, si la solicitud terminó (completada o rechazada)
    - coordinadores de tienda + solicitante, si fue devuelta (send_back)
    """
    store = request.get("store")
    ids: List[Optional[str]] = []

    next_role = role_for_status(new_status)
    if next_role and not is_terminal(new_status):
        ids += [u["id"] for u in await users_repo.list_by_role(next_role, store)]

    if is_terminal(new_status):
        ids.append(request.get("reported_by"))

    if action_taken == "send_back":
        ids += [u["id"] for u in await users_repo.list_by_role("store_coordinator", store)]
        ids.append(request.get("reported_by"))

    return _unique(ids)


async def notify(request: dict, new_status: str, action_taken: str, actor_label: str, notes: Optional[str] = None) -> int:
    if not settings.notifications_enabled:
        return 0
    user_ids = await recipients_for(request, new_status, action_taken)
    if not user_ids:
        logger.info("Sin destinatarios para %s en estado %s", request.get("id"), new_status)
        return 0

    title = build_title(request["id"], new_status, action_taken)
    message = build_message(new_status, action_taken, actor_label, notes)
    docs = [
        Notification(user_id=uid, request_id=request["id"], title=title, message=message).model_dump()
        for uid in user_ids
    ]
    sent = await notifications_repo.insert_many(docs)
    logger.info("Notificaciones para %s (%s): %d destinatarios", request["id"], new_status, sent)
    return sent


async def notify_created(request: dict) -> int:
    """Alta de solicitud: jefes de tienda (misma tienda o "ALL") y administradores."""
    if not settings.notifications_enabled:
        return 0
    managers = await users_repo.list_by_role("store_manager", request.get("store"))
    admins = await users_repo.list_by_role("admin")
    user_ids = _unique([u["id"] for u in managers] + [u["id"] for u in admins])
    if not user_ids:
        return 0
    title = f"New Request {request['id']}"
    message = f"{request.get('category')} at {request.get('store')} reported by {request.get('reported_by_name')}"
    docs = [
        Notification(user_id=uid, request_id=request["id"], title=title, message=message).model_dump()
        for uid in user_ids
    ]
    return await notifications_repo.insert_many(docs)
