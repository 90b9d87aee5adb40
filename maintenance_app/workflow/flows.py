# maintenance_app/workflow/flows.py
from typing import Optional, Tuple

from maintenance_app.workflow.catalog import StageCatalog, StageInfo, get_catalog


def stages_for_flow(flow_type: Optional[str], catalog: Optional[StageCatalog] = None) -> Tuple[StageInfo, ...]:
    """
    Secuencia ordenada de etapas para un flujo.

    Sin flujo (None) solo existen las etapas comunes; con flujo se concatenan
    las comunes y las de la ruta elegida. Los números de etapa no se reinician
    en la bifurcación.
    """
    catalog = catalog or get_catalog()
    return catalog.common + catalog.path(flow_type)


def lookup_stage(status: str, flow_type: Optional[str], catalog: Optional[StageCatalog] = None) -> Optional[StageInfo]:
    # None = combinación estado/flujo inconsistente (error de integridad para el llamador)
    for info in stages_for_flow(flow_type, catalog):
        if info.status == status:
            return info
    return None


def stage_by_number(stage: int, flow_type: Optional[str], catalog: Optional[StageCatalog] = None) -> Optional[StageInfo]:
    for info in stages_for_flow(flow_type, catalog):
        if info.stage == stage:
            return info
    return None


def role_for_status(status: str, catalog: Optional[StageCatalog] = None) -> Optional[str]:
    """Rol que debe actuar en `status` (cualquier ruta); None para estados terminales."""
    catalog = catalog or get_catalog()
    for info in catalog.common + catalog.internal + catalog.external:
        if info.status == status:
            return info.actor_role
    return None
