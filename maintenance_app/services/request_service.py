# maintenance_app/services/request_service.py
import logging
from typing import Dict, Any, Optional

from fastapi import HTTPException

from maintenance_app.models.common import ALL_STORES
from maintenance_app.models.request import RequestCreate, RequestInDB, WorkflowActionRecord
from maintenance_app.repositories import actions_repo, requests_repo as repo
from maintenance_app.services import notification_service
from maintenance_app.workflow.catalog import get_catalog
from maintenance_app.workflow.flows import lookup_stage, stages_for_flow
from maintenance_app.workflow.permissions import available_actions, can_act, is_completed, is_rejected, is_terminal

logger = logging.getLogger(__name__)

# el alta deja la solicitud esperando al jefe de tienda
CREATED_STATUS = "Pending-Stage-2"


def normalize(doc: Dict[str,Any]) -> Dict[str,Any]:
    out = dict(doc)
    out.pop("_id", None)
    out.setdefault("flow_type", None)
    out.setdefault("priority", "Medium")
    if out.get("flow_type") not in ("internal", "external"):
        out["flow_type"] = None
    # documentos antiguos sin etapa: se deriva del estado
    if not out.get("current_stage"):
        info = lookup_stage(out.get("status", ""), out["flow_type"])
        if info is not None:
            out["current_stage"] = info.stage
    return out


def spans_all_stores(user: dict) -> bool:
    return user.get("role") == "admin" or user.get("store") == ALL_STORES


def is_visible(doc: Dict[str,Any], user: dict) -> bool:
    """Un usuario solo ve y actúa sobre solicitudes de su tienda, salvo admin o acceso "ALL"."""
    return spans_all_stores(user) or (bool(user.get("store")) and doc.get("store") == user.get("store"))


def store_filter(user: dict, requested: Optional[str] = None) -> Dict[str,Any]:
    if not spans_all_stores(user):
        return {"store": user.get("store")}
    return {"store": requested} if requested else {}


def resolve_store(payload: RequestCreate, actor: dict) -> str:
    if spans_all_stores(actor):
        store = payload.store or actor.get("store")
    else:
        store = actor.get("store")
        if payload.store and payload.store != store:
            raise HTTPException(403, "No puede crear solicitudes para otra tienda")
    if not store or store == ALL_STORES:
        raise HTTPException(422, "Debe indicar la tienda.")
    return store


def can_create(user: dict) -> bool:
    catalog = get_catalog()
    first = lookup_stage(catalog.initial_status, None, catalog)
    return first is not None and can_act(user.get("role"), first)


async def create_request(payload: RequestCreate, actor: dict) -> dict:
    if not can_create(actor):
        raise HTTPException(403, "No autorizado para crear solicitudes")

    store = resolve_store(payload, actor)

    seq = await repo.next_sequence()
    info = lookup_stage(CREATED_STATUS, None)
    req = RequestInDB(
        id=f"MR-{seq:06d}",
        store=store,
        category=payload.category,
        sub_category=payload.sub_category,
        department=payload.department,
        description=payload.description.strip(),
        priority=payload.priority,
        contact_number=payload.contact_number,
        remarks=(payload.remarks or "").strip() or None,
        reported_by=actor["id"],
        reported_by_name=actor.get("full_name") or actor.get("username") or actor["id"],
        status=CREATED_STATUS,
        current_stage=info.stage,
    )
    doc = req.model_dump()
    await repo.insert(doc)
    await actions_repo.append(WorkflowActionRecord(
        request_id=req.id,
        stage=1,
        action="submit",
        actor_id=actor["id"],
        actor_name=actor.get("full_name"),
        to_status=CREATED_STATUS,
    ))
    logger.info("Solicitud %s creada en %s por %s", req.id, store, actor["id"])

    try:
        await notification_service.notify_created(doc)
    except Exception:
        logger.exception("Fallo al notificar el alta de %s", req.id)
    return normalize(doc)


def describe(doc: Dict[str,Any], user: dict) -> Dict[str,Any]:
    """Solicitud + etapa actual + acciones que el usuario puede ofrecer."""
    req = normalize(doc)
    status, flow_type = req.get("status", ""), req["flow_type"]
    info = lookup_stage(status, flow_type)
    actions = []
    if info is not None and not is_terminal(status):
        actions = [a.model_dump() for a in available_actions(user.get("role"), info)]
        if can_act(user.get("role"), info):
            if info.stage > 1:
                actions.append({"action": "send_back", "label": "Send Back", "style": "outline"})
            elif req.get("sent_back_from_status"):
                actions.append({"action": "re_raise", "label": "Re-raise", "style": "default"})
    return {
        "request": req,
        "stage": info.model_dump() if info else None,
        "stages": [s.model_dump() for s in stages_for_flow(flow_type)],
        "available_actions": actions,
        "is_completed": is_completed(status),
        "is_rejected": is_rejected(status),
        # estado no terminal sin etapa conocida: no ofrecer acciones
        "state_error": info is None and not is_terminal(status),
    }
