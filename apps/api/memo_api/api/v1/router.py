"""API v1 router."""

from fastapi import APIRouter, Depends

from memo_api.api.v1.endpoints import health, recordings
from memo_api.core.security import get_current_user_id

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(
    recordings.router,
    prefix="/recordings",
    tags=["recordings"],
    dependencies=[Depends(get_current_user_id)],
)
