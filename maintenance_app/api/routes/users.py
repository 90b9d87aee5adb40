# maintenance_app/api/routes/users.py
from datetime import datetime, timezone
import uuid
from fastapi import APIRouter, HTTPException, Depends
from maintenance_app.api.deps import require_role
from maintenance_app.core.security import hash_password
from maintenance_app.models.user import UserCreate, UserOut
from maintenance_app.repositories import users_repo

router = APIRouter()

@router.post("", response_model=UserOut)
async def create_user(payload: UserCreate, current=Depends(require_role(["admin"]))):
    if await users_repo.find_by_username(payload.username):
        raise HTTPException(400, "El usuario ya existe")
    user = payload.model_dump(exclude={"password"})
    user["id"] = uuid.uuid4().hex
    user["created_at"] = datetime.now(timezone.utc)
    user["password_hash"] = hash_password(payload.password)
    await users_repo.insert(user)
    return user

@router.get("", response_model=list[UserOut])
async def list_users(current=Depends(require_role(["admin"]))):
    return await users_repo.list_all()
