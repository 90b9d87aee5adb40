# maintenance_app/models/user.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from maintenance_app.models.common import Role

class UserOut(BaseModel):
    id: str
    username: str
    full_name: str
    email: Optional[str] = None
    role: Role
    store: Optional[str] = None      # "ALL" = todas las tiendas
    department: Optional[str] = None
    created_at: datetime

class UserCreate(BaseModel):
    username: str
    password: str
    full_name: str
    email: Optional[str] = None
    role: Role
    store: Optional[str] = None
    department: Optional[str] = None

class UserLogin(BaseModel):
    username: str
    password: str
