# maintenance_app/api/routes/auth.py
from fastapi import APIRouter, HTTPException, Request as FastAPIRequest, Depends
from maintenance_app.core.rate_limit import limiter, LOGIN_LIMIT
from maintenance_app.core.security import verify_password, create_access_token
from maintenance_app.api.deps import get_current_user
from maintenance_app.models.user import UserLogin
from maintenance_app.repositories import users_repo

router = APIRouter(prefix="/auth")

@router.post("/login")
@limiter.limit(LOGIN_LIMIT)
async def login(request: FastAPIRequest, user_login: UserLogin):
    user_doc = await users_repo.find_by_username(user_login.username)
    if not user_doc or not verify_password(user_login.password, user_doc.get("password_hash")):
        raise HTTPException(401, "Usuario o contraseña incorrectos")

    token = create_access_token(user_doc)
    user_doc.pop("password_hash", None)
    return {"access_token": token, "token_type": "bearer", "user": user_doc}

@router.get("/me")
async def me(current_user=Depends(get_current_user)):
    return current_user
