# maintenance_app/api/routes/requests.py
from fastapi import APIRouter, HTTPException, Query, Depends
from datetime import datetime
from typing import Optional, Dict, Any
from maintenance_app.api.deps import get_current_user
from maintenance_app.core.config import settings
from maintenance_app.models.request import ActionPayload, RequestCreate
from maintenance_app.repositories import actions_repo, requests_repo as repo
from maintenance_app.services import request_service, workflow_service
from maintenance_app.utils.pagination import meta, page_response

router = APIRouter()

SORT_FIELDS = {"created_at","updated_at","status","store","priority","current_stage"}


@router.post("")
async def create_request(payload: RequestCreate, current=Depends(get_current_user)):
    return await request_service.create_request(payload, current)

@router.get("")
async def get_requests(
    current=Depends(get_current_user),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=settings.max_page_size),
    status: Optional[str] = None, store: Optional[str] = None, flow_type: Optional[str] = None,
    category: Optional[str] = None, priority: Optional[str] = None,
    date_from: Optional[datetime] = None, date_to: Optional[datetime] = None,
    sort: Optional[str] = Query("-created_at"),
):
    filt: Dict[str,Any] = request_service.store_filter(current, store)
    if status: filt["status"] = status
    if flow_type: filt["flow_type"] = flow_type
    if category: filt["category"] = category
    if priority: filt["priority"] = priority
    if date_from or date_to:
        dr = {}
        if date_from: dr["$gte"] = date_from
        if date_to: dr["$lte"] = date_to
        filt["created_at"] = dr

    sort_field, sort_dir = ("created_at", -1)
    if sort:
        if sort.startswith("-"): sort_field, sort_dir = (sort[1:], -1)
        else: sort_field, sort_dir = (sort, 1)
    if sort_field not in SORT_FIELDS:
        sort_field = "created_at"

    total = await repo.count(filt)
    m = meta(total, page, page_size)
    items = await repo.list_paginated(filt, sort_field, sort_dir, (m.page-1)*page_size, page_size)
    return page_response([request_service.normalize(d) for d in items], m)

@router.get("/{request_id}")
async def get_request_detail(request_id: str, current=Depends(get_current_user)):
    doc = await repo.find_by_id(request_id)
    if not doc or not request_service.is_visible(doc, current):
        raise HTTPException(404, "Solicitud no encontrada")
    return request_service.describe(doc, current)

@router.get("/{request_id}/actions")
async def list_actions(request_id: str, current=Depends(get_current_user)):
    doc = await repo.find_by_id(request_id)
    if not doc or not request_service.is_visible(doc, current):
        raise HTTPException(404, "Solicitud no encontrada")
    return {"items": await actions_repo.list_by_request(request_id)}

@router.post("/{request_id}/actions")
async def submit_action(request_id: str, payload: ActionPayload, current=Depends(get_current_user)):
    doc = await workflow_service.apply_action(request_id, payload, current)
    return request_service.describe(doc, current)
