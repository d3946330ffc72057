# bjjconnect/routers/health.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from bjjconnect.core.config import settings
from bjjconnect.db.sql import get_session, ping_db

router = APIRouter()


@router.get("/health")
async def health_root():
    return {"success": True, "status": "ok", "env": settings.APP_ENV}


@router.get("/health/db")
async def health_db(session: AsyncSession = Depends(get_session)):
    """
    Validates database connectivity with SELECT 1.
    Returns 503 if no connectivity (useful for readiness checks).
    """
    try:
        await ping_db(session)
    except SQLAlchemyError as exc:
        # Don't expose internal details
        raise HTTPException(status_code=503, detail="database_unavailable") from exc
    return {"success": True, "status": "ok", "database": session.bind.dialect.name}
