"""Health endpoints."""

from __future__ import annotations

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status

router = APIRouter(tags=["health"])

_STARTED_AT = time.monotonic()


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime_seconds": round(time.monotonic() - _STARTED_AT),
    }


@router.get("/health/logs", status_code=status.HTTP_200_OK)
def health_logs(request: Request) -> dict:
    """Recent log lines, newest first."""
    buffer = getattr(request.app.state, "log_buffer", None)
    if buffer is None:
        return {"capturing": False, "logs": []}
    return {"capturing": True, "capacity": buffer.capacity, "logs": buffer.lines()}


def _get_osrm_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.routing.osrm_client import check_health as osrm_health_check
    return osrm_health_check


@router.get("/health/osrm", status_code=status.HTTP_200_OK)
def health_osrm() -> dict:
    """Check OSRM service health."""
    osrm_health_check = _get_osrm_health_check()
    return {"service": "osrm", "healthy": osrm_health_check()}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check database connection."""
    from ...db.supabase import get_supabase_client
    from ...persistence.database import check_connection

    if not get_supabase_client():
        return {
            "configured": False,
            "connected": False,
            "message": "Supabase not configured. Set TCR_SUPABASE_URL and TCR_SUPABASE_KEY environment variables.",
        }
    connected = check_connection()
    return {
        "configured": True,
        "connected": connected,
        "message": "Database connected." if connected else "Database connection error; see logs.",
    }
