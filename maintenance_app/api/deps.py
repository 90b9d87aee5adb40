# maintenance_app/api/deps.py
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt
from maintenance_app.core.security import claims_match, decode_token
from maintenance_app.repositories import users_repo
from typing import List

security = HTTPBearer()

async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)):
    token = credentials.credentials
    try:
        payload = decode_token(token)
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Credenciales inválidas")
    username = payload.get("sub")
    if not username:
        raise HTTPException(status_code=401, detail="Credenciales inválidas")

    user = await users_repo.find_by_username(username)
    if not user:
        raise HTTPException(status_code=401, detail="Usuario no encontrado")
    if not claims_match(payload, user):
        raise HTTPException(status_code=401, detail="Sesión desactualizada, inicie sesión de nuevo")
    user.pop("password_hash", None)
    return user  # dict: id, role, store, ...

def require_role(roles: List[str]):
    async def checker(user=Depends(get_current_user)):
        if user.get("role") not in roles:
            raise HTTPException(status_code=403, detail="No autorizado")
        return user
    return checker
