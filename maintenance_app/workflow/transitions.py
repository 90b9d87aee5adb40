# maintenance_app/workflow/transitions.py
"""
Función de transición del flujo de mantenimiento.

`next_state` es pura: recibe el estado actual, el flujo y la acción, y
propone el siguiente (estado, etapa). No valida permisos ni persiste nada;
eso lo hace la capa de servicio.

Orden de evaluación (gana la primera regla que aplique):

1. etapa actual desconocida           -> None
2. send_back                          -> etapa 1 (estado inicial), flujo sin definir
3. re_raise                           -> dirección de retorno recibida, o None
4. etapa de decisión + decide_*       -> primera etapa de la ruta elegida
5. reject con reject_status           -> estado de rechazo, misma etapa
6. reject/return con return_to_stage  -> etapa destino dentro del mismo flujo
7. next_status declarado              -> siguiente estado, etapa + 1
8. resto                              -> None
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict

from maintenance_app.workflow.catalog import FlowType, RequestStatus, StageCatalog, get_catalog
from maintenance_app.workflow.flows import lookup_stage, stage_by_number

DECISIONS = {
    "decide_internal": "internal",
    "decide_external": "external",
}


class ReturnAddress(BaseModel):
    """Posición a la que vuelve una solicitud al re-enviarse (re_raise)."""
    model_config = ConfigDict(frozen=True)

    status: RequestStatus
    stage: int
    flow_type: Optional[FlowType] = None


class Transition(BaseModel):
    model_config = ConfigDict(frozen=True)

    next_status: RequestStatus
    next_stage: int
    # flujo de la solicitud tras la transición (None = sin definir)
    flow_type: Optional[FlowType] = None
    # valor a persistir como dirección de retorno; None la limpia
    return_address: Optional[ReturnAddress] = None


def next_state(
    current_status: str,
    flow_type: Optional[str],
    action: str,
    return_address: Optional[ReturnAddress] = None,
    catalog: Optional[StageCatalog] = None,
) -> Optional[Transition]:
    catalog = catalog or get_catalog()
    info = lookup_stage(current_status, flow_type, catalog)
    if info is None:
        return None
    if flow_type not in ("internal", "external"):
        flow_type = None

    here = ReturnAddress(status=info.status, stage=info.stage, flow_type=flow_type)

    if action == "send_back":
        return Transition(next_status=catalog.initial_status, next_stage=1, flow_type=None, return_address=here)

    if action == "re_raise":
        if return_address is None:
            return None
        return Transition(
            next_status=return_address.status,
            next_stage=return_address.stage,
            flow_type=return_address.flow_type,
        )

    if not info.allows(action):
        return None

    if info.stage == catalog.decision_stage and action in DECISIONS:
        chosen = DECISIONS[action]
        path = catalog.path(chosen)
        if not path:
            return None
        first = path[0]
        return Transition(next_status=first.status, next_stage=first.stage, flow_type=chosen)

    if action == "reject" and info.reject_status:
        return Transition(next_status=info.reject_status, next_stage=info.stage, flow_type=flow_type)

    if action in ("reject", "return") and info.return_to_stage is not None:
        target = stage_by_number(info.return_to_stage, flow_type, catalog)
        if target is None:
            return None
        return Transition(next_status=target.status, next_stage=target.stage, flow_type=flow_type, return_address=here)

    if info.next_status and action not in ("reject", "return"):
        return Transition(next_status=info.next_status, next_stage=info.stage + 1, flow_type=flow_type)

    return None
