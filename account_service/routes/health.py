"""
Health check endpoints
"""
from fastapi import APIRouter, HTTPException, status
from datetime import datetime, timezone
from typing import Dict, Any

from .. import db

router = APIRouter(tags=["health"])


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", status_code=status.HTTP_200_OK)
def health_check() -> Dict[str, Any]:
    """
    Liveness probe, no dependencies checked.
    """
    return {
        "status": "healthy",
        "timestamp": _timestamp()
    }


@router.get("/ready", status_code=status.HTTP_200_OK)
def readiness_check() -> Dict[str, Any]:
    """
    Readiness probe.

    Raises:
        HTTPException: 503 if the database is unreachable
    """
    db_connected = db.check_db_connection()

    response = {
        "status": "ready" if db_connected else "not_ready",
        "database": "connected" if db_connected else "disconnected",
        "timestamp": _timestamp()
    }

    if not db_connected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=response
        )

    return response
