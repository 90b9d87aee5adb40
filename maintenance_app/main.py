# maintenance_app/main.py
import logging
import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi.errors import RateLimitExceeded

from maintenance_app.api.router import api_router
from maintenance_app.core.config import settings
from maintenance_app.core.db import close_db
from maintenance_app.core.indexes import startup_tasks
from maintenance_app.core.logging_config import setup_logging
from maintenance_app.core.rate_limit import limiter, rate_limit_handler
from maintenance_app.workflow.catalog import get_catalog

setup_logging()
logger = logging.getLogger(__name__)

APP_NAME = os.getenv("APP_NAME", "Maintenance Requests Backend")
APP_VERSION = os.getenv("APP_VERSION", "0.1.0")

# Fronts locales más comunes + lo que venga en CORS_ORIGINS
defaults = {
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:8080",
    "http://127.0.0.1:8080",
}
CORS_ORIGINS = sorted(set((settings.cors_origins or []) + list(defaults)))

app = FastAPI(title=APP_NAME, version=APP_VERSION)

# --- IMPORTANTE: CORS primero ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1024)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)

app.include_router(api_router, prefix="")

@app.get("/health")
async def health():
    return {"ok": True}

@app.get("/ready")
async def ready():
    return {"ready": True, "workflow_catalog": get_catalog().version}

@app.on_event("startup")
async def startup():
    # falla al arrancar si la versión del catálogo no existe
    catalog = get_catalog()
    logger.info("Catálogo de flujo versión %s", catalog.version)
    await startup_tasks()

@app.on_event("shutdown")
async def shutdown_db_client():
    await close_db()

# Runner local opcional
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("maintenance_app.main:app", reload=True, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
