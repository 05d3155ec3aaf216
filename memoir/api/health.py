"""Health check endpoints."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from memoir.config import get_settings
from memoir.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Liveness: the process is up."""
    return {"status": "healthy", "environment": get_settings().environment}


@router.get("/api/health/ready")
async def readiness_check(db: Annotated[Session, Depends(get_db)]):
    """Readiness: the database answers a trivial query."""
    timestamp = datetime.now(UTC).isoformat()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "error",
                "timestamp": timestamp,
                "message": "Database connection failed",
            },
        )
    return {"status": "ok", "timestamp": timestamp}
