# maintenance_app/workflow/roles.py
from typing import Dict, Literal, Optional

Role = Literal[
    "admin",
    "local_user",
    "store_coordinator",
    "store_manager",
    "maintenance_coordinator",
    "regional_manager",
    "maintenance_manager",
    "admin_manager",
    "quality_verification",
]

# Orden de presentación (selectores de rol en administración de usuarios)
ROLE_LABELS: Dict[str, str] = {
    "admin": "Admin",
    "store_coordinator": "Store Coordinator",
    "store_manager": "Store Manager",
    "maintenance_coordinator": "Maintenance Coordinator",
    "regional_manager": "Regional Manager",
    "maintenance_manager": "Maintenance Manager",
    "admin_manager": "Admin Manager",
    "quality_verification": "Quality Verification",
    "local_user": "Local User",
}

ALL_ROLES = tuple(ROLE_LABELS.keys())


def label_for(role: Optional[str]) -> str:
    """Etiqueta visible de un rol; si no está mapeado devuelve el identificador tal cual."""
    if role is None:
        return ""
    return ROLE_LABELS.get(role, role)
