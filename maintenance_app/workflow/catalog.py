# maintenance_app/workflow/catalog.py
"""
Catálogo de etapas del flujo de mantenimiento.

Cada versión del catálogo es configuración estática: tres listas ordenadas
(etapas comunes 1-3, ruta interna, ruta externa). Cambiar una etapa implica
publicar una versión nueva, no tocar la función de transición.
"""
from typing import Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from maintenance_app.workflow.roles import Role

RequestStatus = Literal[
    "Submitted",
    "Pending-Stage-2",
    "Pending-Stage-3",
    # ruta interna
    "Internal-Pending-MM",
    "Internal-Pending-SM",
    "Completed-Internal",
    # ruta externa
    "External-Pending-RM",
    "External-Pending-MC-QC",
    "External-Pending-MM",
    "External-Pending-Admin",
    "External-Pending-MC-2",
    "External-Pending-MM-2",
    "External-Pending-SM",
    "Completed-External",
    # rechazo
    "Rejected",
]

FlowType = Literal["internal", "external"]

ActionKind = Literal[
    "submit", "approve", "reject", "decide_internal", "decide_external",
    "acknowledge", "verify", "return", "quality_check", "close",
    "send_back", "re_raise",
]

ActionStyle = Literal["default", "destructive", "outline"]

ALL_STATUSES: Tuple[str, ...] = (
    "Submitted",
    "Pending-Stage-2",
    "Pending-Stage-3",
    "Internal-Pending-MM",
    "Internal-Pending-SM",
    "Completed-Internal",
    "External-Pending-RM",
    "External-Pending-MC-QC",
    "External-Pending-MM",
    "External-Pending-Admin",
    "External-Pending-MC-2",
    "External-Pending-MM-2",
    "External-Pending-SM",
    "Completed-External",
    "Rejected",
)

ALL_ACTIONS: Tuple[str, ...] = (
    "submit", "approve", "reject", "decide_internal", "decide_external",
    "acknowledge", "verify", "return", "quality_check", "close",
    "send_back", "re_raise",
)

COMPLETED_STATUSES = frozenset({"Completed-Internal", "Completed-External"})
REJECTED_STATUS = "Rejected"


class StageAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    action: ActionKind
    label: str
    style: ActionStyle = "default"


class StageInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    stage: int = Field(ge=1)
    label: str
    status: RequestStatus
    actor_role: Role
    actions: Tuple[StageAction, ...] = ()
    next_status: Optional[RequestStatus] = None
    reject_status: Optional[RequestStatus] = None
    return_to_stage: Optional[int] = None
    # la etapa exige calificación (Good/Better) y comentario
    requires_quality_check: bool = False

    @property
    def action_kinds(self) -> Tuple[str, ...]:
        return tuple(a.action for a in self.actions)

    def allows(self, action: str) -> bool:
        return action in self.action_kinds


class StageCatalog(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: str
    initial_status: RequestStatus = "Submitted"
    decision_stage: int = 3
    common: Tuple[StageInfo, ...]
    internal: Tuple[StageInfo, ...]
    external: Tuple[StageInfo, ...]

    def path(self, flow_type: str) -> Tuple[StageInfo, ...]:
        if flow_type == "internal":
            return self.internal
        if flow_type == "external":
            return self.external
        return ()


def _approve() -> StageAction:
    return StageAction(action="approve", label="Approve")


def _reject() -> StageAction:
    return StageAction(action="reject", label="Reject", style="destructive")


def _close() -> StageAction:
    return StageAction(action="close", label="Verify & Close")


# === Versión 2 (canónica) ===
COMMON_STAGES_V2 = (
    StageInfo(
        stage=1,
        label="Request Creation",
        status="Submitted",
        actor_role="store_coordinator",
    ),
    StageInfo(
        stage=2,
        label="Store Manager Approval",
        status="Pending-Stage-2",
        actor_role="store_manager",
        actions=(_approve(), _reject()),
        next_status="Pending-Stage-3",
        reject_status="Rejected",
    ),
    StageInfo(
        stage=3,
        label="Coordinator Decision",
        status="Pending-Stage-3",
        actor_role="maintenance_coordinator",
        actions=(
            StageAction(action="decide_internal", label="Internal"),
            StageAction(action="decide_external", label="External", style="outline"),
        ),
    ),
)

# Interna: MM -> SM -> Completed
INTERNAL_STAGES_V2 = (
    StageInfo(
        stage=4,
        label="Maintenance Manager Approval",
        status="Internal-Pending-MM",
        actor_role="maintenance_manager",
        actions=(_approve(),),
        next_status="Internal-Pending-SM",
    ),
    StageInfo(
        stage=5,
        label="Store Manager Verify & Close",
        status="Internal-Pending-SM",
        actor_role="store_manager",
        actions=(_close(),),
        next_status="Completed-Internal",
    ),
)

# Externa: RM -> MC QC -> MM -> Admin -> MC -> MM -> SM -> Completed
EXTERNAL_STAGES_V2 = (
    StageInfo(
        stage=4,
        label="Regional Manager Approval",
        status="External-Pending-RM",
        actor_role="regional_manager",
        actions=(_approve(), _reject()),
        next_status="External-Pending-MC-QC",
        reject_status="Rejected",
    ),
    StageInfo(
        stage=5,
        label="Maintenance Coordinator Quality Check",
        status="External-Pending-MC-QC",
        actor_role="maintenance_coordinator",
        actions=(StageAction(action="quality_check", label="Submit Quality Check"),),
        next_status="External-Pending-MM",
        requires_quality_check=True,
    ),
    StageInfo(
        stage=6,
        label="Maintenance Manager Approval",
        status="External-Pending-MM",
        actor_role="maintenance_manager",
        actions=(_approve(),),
        next_status="External-Pending-Admin",
    ),
    StageInfo(
        stage=7,
        label="Admin Manager Approval",
        status="External-Pending-Admin",
        actor_role="admin_manager",
        actions=(_approve(), _reject()),
        next_status="External-Pending-MC-2",
        reject_status="Rejected",
    ),
    StageInfo(
        stage=8,
        label="Maintenance Coordinator Acknowledge",
        status="External-Pending-MC-2",
        actor_role="maintenance_coordinator",
        actions=(StageAction(action="acknowledge", label="Acknowledge & Forward"),),
        next_status="External-Pending-MM-2",
    ),
    StageInfo(
        stage=9,
        label="Maintenance Manager Final Approval",
        status="External-Pending-MM-2",
        actor_role="maintenance_manager",
        actions=(_approve(),),
        next_status="External-Pending-SM",
    ),
    StageInfo(
        stage=10,
        label="Store Manager Verify & Close",
        status="External-Pending-SM",
        actor_role="store_manager",
        actions=(_close(),),
        next_status="Completed-External",
    ),
)

CATALOG_V2 = StageCatalog(
    version="2",
    common=COMMON_STAGES_V2,
    internal=INTERNAL_STAGES_V2,
    external=EXTERNAL_STAGES_V2,
)

CATALOGS: Dict[str, StageCatalog] = {
    CATALOG_V2.version: CATALOG_V2,
}

DEFAULT_CATALOG_VERSION = CATALOG_V2.version


def get_catalog(version: Optional[str] = None) -> StageCatalog:
    """
    Devuelve el catálogo registrado para `version` (o el configurado en settings).
    Una versión desconocida es un error de despliegue: KeyError.
    """
    if version is None:
        from maintenance_app.core.config import settings
        version = settings.workflow_catalog_version
    try:
        return CATALOGS[version]
    except KeyError:
        raise KeyError(f"Versión de catálogo desconocida: {version}") from None
