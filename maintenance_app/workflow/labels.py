# maintenance_app/workflow/labels.py
from typing import Dict, Optional

# Textos usados en notificaciones (no intervienen en la lógica del flujo)
STATUS_LABELS: Dict[str, str] = {
    "Submitted": "Request Created - Awaiting Store Coordinator",
    "Pending-Stage-2": "Pending Store Manager Approval",
    "Pending-Stage-3": "Pending Coordinator Decision (Internal/External)",
    "Internal-Pending-MM": "Internal - Pending Maintenance Manager Approval",
    "Internal-Pending-SM": "Internal - Pending Store Manager Verification",
    "External-Pending-RM": "External - Pending Regional Manager Approval",
    "External-Pending-MC-QC": "External - Pending Quality Check",
    "External-Pending-MM": "External - Pending Maintenance Manager Approval",
    "External-Pending-Admin": "External - Pending Admin Manager Approval",
    "External-Pending-MC-2": "External - Pending Coordinator Acknowledgment",
    "External-Pending-MM-2": "External - Pending Maintenance Manager Final Review",
    "External-Pending-SM": "External - Pending Store Manager Verification",
    "Completed-Internal": "Completed (Internal)",
    "Completed-External": "Completed (External)",
    "Rejected": "Rejected",
}


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def action_label(action: Optional[str]) -> str:
    """send_back -> 'Send Back'"""
    return (action or "").replace("_", " ").title()
