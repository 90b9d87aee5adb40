# maintenance_app/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional
from passlib.context import CryptContext
import jwt
from maintenance_app.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# sin estos claims el token se rechaza
REQUIRED_CLAIMS = ["sub", "role", "iat", "exp"]

def verify_password(plain: str, hashed: Optional[str]) -> bool:
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        # hash con formato desconocido
        return False

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def create_access_token(user: dict, minutes: Optional[int] = None) -> str:
    """Token de acceso con el rol y la tienda que el usuario tenía al iniciar sesión."""
    now = datetime.now(timezone.utc)
    claims = {
        "sub": user["username"],
        "uid": user["id"],
        "role": user["role"],
        "store": user.get("store"),
        "iat": now,
        "exp": now + timedelta(minutes=minutes or settings.access_token_expire_minutes),
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)

def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm],
                      options={"require": REQUIRED_CLAIMS})

def claims_match(claims: dict, user: dict) -> bool:
    # un cambio de rol o de tienda invalida los tokens emitidos antes
    return claims.get("role") == user.get("role") and claims.get("store") == user.get("store")
