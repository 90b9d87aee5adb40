# maintenance_app/api/router.py
from fastapi import APIRouter
from maintenance_app.api.routes import auth, users, requests, workflow, notifications

api_router = APIRouter()
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(workflow.router)
api_router.include_router(requests.router, prefix="/requests", tags=["requests"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
