# maintenance_app/models/common.py
from typing import Literal

from maintenance_app.workflow.catalog import ActionKind, FlowType, RequestStatus  # noqa: F401
from maintenance_app.workflow.roles import Role  # noqa: F401

Priority = Literal["Low","Medium","High","Critical"]

PRIORITIES = ["Low","Medium","High","Critical"]

CATEGORIES = [
    "Electrical","IT Support","Plumbing","Carpentry",
    "Interior Works","Exterior Works","Masonry","Painting",
    "Flooring","HVAC","Network","Building Construction","Other",
]

QualityRating = Literal["Good","Better"]

# tienda comodín: usuarios con acceso a todas las tiendas
ALL_STORES = "ALL"
