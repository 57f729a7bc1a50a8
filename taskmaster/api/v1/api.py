from fastapi import APIRouter

from taskmaster.api.v1.routes_auth import router as auth_router
from taskmaster.api.v1.routes_tasks import router as tasks_router


api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(tasks_router, prefix="/tasks", tags=["tasks"])
