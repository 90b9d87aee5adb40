# maintenance_app/models/request.py
from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional
import uuid
from maintenance_app.models.common import ActionKind, FlowType, Priority, QualityRating, RequestStatus

class RequestInDB(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    store: str
    category: str
    sub_category: Optional[str] = None
    department: Optional[str] = None
    description: str
    priority: Priority = "Medium"
    contact_number: str
    reported_by: str
    reported_by_name: str
    status: RequestStatus = "Pending-Stage-2"
    flow_type: Optional[FlowType] = None
    current_stage: int = 2
    # dirección de retorno para re_raise (se fija al devolver la solicitud)
    sent_back_from_status: Optional[RequestStatus] = None
    sent_back_from_stage: Optional[int] = None
    sent_back_from_flow: Optional[FlowType] = None
    remarks: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completion_date: Optional[datetime] = None

class RequestCreate(BaseModel):
    store: Optional[str] = None
    category: str
    sub_category: Optional[str] = None
    department: Optional[str] = None
    description: str = Field(min_length=1)
    priority: Priority = "Medium"
    contact_number: str
    remarks: Optional[str] = None

class ActionPayload(BaseModel):
    action: ActionKind
    notes: Optional[str] = None
    # solo para etapas con control de calidad
    quality_rating: Optional[QualityRating] = None

class WorkflowActionRecord(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    request_id: str
    stage: int
    action: ActionKind
    actor_id: str
    actor_name: Optional[str] = None
    notes: Optional[str] = None
    from_status: Optional[RequestStatus] = None
    to_status: Optional[RequestStatus] = None
    quality_rating: Optional[QualityRating] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class Notification(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    user_id: str
    request_id: Optional[str] = None
    title: str
    message: str
    read: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
