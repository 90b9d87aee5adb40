# maintenance_app/core/rate_limit.py
import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from maintenance_app.core.config import settings

logger = logging.getLogger(__name__)

# límite por IP; solo se aplica a las rutas decoradas (login)
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)
LOGIN_LIMIT = settings.login_rate_limit

def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Límite de intentos superado: ip=%s ruta=%s límite=%s",
                   get_remote_address(request), request.url.path, exc.detail)
    return JSONResponse(
        status_code=429,
        content={"detail": "Demasiados intentos fallidos. Inténtalo más tarde.", "limit": exc.detail},
    )
