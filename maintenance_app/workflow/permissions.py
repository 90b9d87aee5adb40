# maintenance_app/workflow/permissions.py
from typing import Optional, Tuple

from maintenance_app.workflow.catalog import COMPLETED_STATUSES, REJECTED_STATUS, StageAction, StageInfo


def can_act(role: Optional[str], stage_info: StageInfo) -> bool:
    """admin puede actuar en cualquier etapa; el resto solo en la de su rol."""
    if not role:
        return False
    if role == "admin":
        return True
    return role == stage_info.actor_role


def available_actions(role: Optional[str], stage_info: StageInfo) -> Tuple[StageAction, ...]:
    if not can_act(role, stage_info):
        return ()
    return stage_info.actions


def is_completed(status: str) -> bool:
    return status in COMPLETED_STATUSES


def is_rejected(status: str) -> bool:
    return status == REJECTED_STATUS


def is_terminal(status: str) -> bool:
    # sin panel de acciones una vez finalizada o rechazada
    return is_completed(status) or is_rejected(status)
