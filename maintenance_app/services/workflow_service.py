# maintenance_app/services/workflow_service.py
"""
Orquesta una acción de flujo sobre una solicitud persistida:

lee la solicitud -> resuelve la etapa -> valida permiso y acción ->
calcula la transición -> escritura condicional (estado previo) ->
registra auditoría -> notifica.

La autorización se aplica aquí, antes de calcular la transición; la
función de transición no conoce usuarios.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException
from pydantic import ValidationError

from maintenance_app.models.request import ActionPayload, WorkflowActionRecord
from maintenance_app.repositories import actions_repo, requests_repo as repo
from maintenance_app.services import notification_service
from maintenance_app.services.request_service import is_visible
from maintenance_app.workflow.flows import lookup_stage
from maintenance_app.workflow.permissions import can_act, is_terminal
from maintenance_app.workflow.roles import label_for
from maintenance_app.workflow.transitions import ReturnAddress, next_state

logger = logging.getLogger(__name__)

# acciones válidas en cualquier etapa aunque no figuren en su lista
UNIVERSAL_ACTIONS = ("send_back", "re_raise")
NOTES_REQUIRED = ("reject", "return", "send_back")


def return_address_of(doc: dict) -> Optional[ReturnAddress]:
    status = doc.get("sent_back_from_status")
    stage = doc.get("sent_back_from_stage")
    if not status or not stage:
        return None
    try:
        return ReturnAddress(status=status, stage=stage, flow_type=doc.get("sent_back_from_flow"))
    except ValidationError:
        logger.warning("Dirección de retorno inválida en %s: %s/%s", doc.get("id"), status, stage)
        return None


def actor_display(actor: dict) -> str:
    return actor.get("full_name") or label_for(actor.get("role"))


async def apply_action(request_id: str, payload: ActionPayload, actor: dict) -> dict:
    doc = await repo.find_by_id(request_id)
    # otra tienda: se responde igual que si no existiera
    if not doc or not is_visible(doc, actor):
        raise HTTPException(404, "Solicitud no encontrada")

    status = doc["status"]
    flow_type = doc.get("flow_type")
    if is_terminal(status):
        raise HTTPException(400, f"La solicitud ya está cerrada ({status})")

    info = lookup_stage(status, flow_type)
    if info is None:
        logger.error("Estado inconsistente en %s: status=%s flow_type=%s", request_id, status, flow_type)
        raise HTTPException(409, "No se puede determinar el estado del flujo")

    if not can_act(actor.get("role"), info):
        raise HTTPException(403, "No autorizado para actuar en esta etapa")

    action = payload.action
    if action not in UNIVERSAL_ACTIONS and not info.allows(action):
        raise HTTPException(400, f"Acción no permitida en la etapa {info.stage}: {action}")
    if action == "send_back" and info.stage == 1:
        raise HTTPException(400, "La solicitud ya está en la etapa inicial")

    notes = (payload.notes or "").strip() or None
    if action in NOTES_REQUIRED and not notes:
        raise HTTPException(422, "Debe indicar el motivo.")
    if info.requires_quality_check and action == "quality_check":
        if not payload.quality_rating or not notes:
            raise HTTPException(422, "El control de calidad requiere calificación y comentario.")

    tr = next_state(status, flow_type, action, return_address_of(doc))
    if tr is None:
        raise HTTPException(400, f"Transición no disponible: {status} ({action})")

    addr = tr.return_address
    extra = {
        "flow_type": tr.flow_type,
        "sent_back_from_status": addr.status if addr else None,
        "sent_back_from_stage": addr.stage if addr else None,
        "sent_back_from_flow": addr.flow_type if addr else None,
    }
    if is_terminal(tr.next_status):
        extra["completion_date"] = datetime.now(timezone.utc)

    won = await repo.update_status_if(request_id, status, tr.next_status, tr.next_stage, extra)
    if not won:
        # otro usuario movió la solicitud: nunca reintentar con el estado viejo
        raise HTTPException(409, "La solicitud cambió de estado; recargue e intente de nuevo")

    try:
        await actions_repo.append(WorkflowActionRecord(
            request_id=request_id,
            stage=info.stage,
            action=action,
            actor_id=actor["id"],
            actor_name=actor.get("full_name"),
            notes=notes,
            from_status=status,
            to_status=tr.next_status,
            quality_rating=payload.quality_rating,
        ))
    except Exception:
        # la transición ya quedó escrita; no se deshace por fallar la auditoría
        logger.exception("Fallo al registrar la auditoría de %s (%s -> %s)", request_id, status, tr.next_status)
    logger.info("%s: %s -> %s (%s por %s)", request_id, status, tr.next_status, action, actor.get("id"))

    updated = await repo.find_by_id(request_id) or {**doc, "status": tr.next_status, "current_stage": tr.next_stage, **extra}
    try:
        await notification_service.notify(updated, tr.next_status, action, actor_display(actor), notes)
    except Exception:
        logger.exception("Fallo al notificar la transición de %s", request_id)
    return updated
