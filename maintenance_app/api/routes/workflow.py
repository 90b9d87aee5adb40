# maintenance_app/api/routes/workflow.py
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from maintenance_app.api.deps import get_current_user
from maintenance_app.models.common import CATEGORIES, PRIORITIES
from maintenance_app.workflow.catalog import get_catalog
from maintenance_app.workflow.flows import stages_for_flow
from maintenance_app.workflow.labels import STATUS_LABELS
from maintenance_app.workflow.roles import ROLE_LABELS

router = APIRouter(prefix="/workflow", tags=["workflow"])

@router.get("/stages")
async def get_stages(flow_type: Optional[str] = None, current=Depends(get_current_user)):
    if flow_type not in (None, "internal", "external"):
        raise HTTPException(422, "flow_type debe ser internal o external")
    catalog = get_catalog()
    return {
        "version": catalog.version,
        "flow_type": flow_type,
        "stages": [s.model_dump() for s in stages_for_flow(flow_type, catalog)],
    }

@router.get("/roles")
async def get_roles():
    return [{"value": k, "label": v} for k, v in ROLE_LABELS.items()]

@router.get("/statuses")
async def get_statuses():
    return [{"value": k, "label": v} for k, v in STATUS_LABELS.items()]

@router.get("/options")
async def get_form_options():
    # valores para el formulario de alta
    return {"categories": CATEGORIES, "priorities": PRIORITIES}
