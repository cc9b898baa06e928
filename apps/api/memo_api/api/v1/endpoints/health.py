"""Health check endpoints."""

from fastapi import APIRouter, Request
from sqlalchemy import text

router = APIRouter()


@router.get("/")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "voice-memo-api"}


@router.get("/ready")
async def readiness_check(request: Request) -> dict[str, str]:
    """Readiness check: the database answers a trivial query."""
    async with request.app.state.db.session() as session:
        await session.execute(text("SELECT 1"))
    return {"status": "ready", "service": "voice-memo-api"}
