"""Administrative batch endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...persistence.database import PersistenceError
from ...schemas.routing import BulkRequest, BulkResponse
from ...services.routing.service import process_all_territories

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/optimize-all", response_model=BulkResponse, status_code=status.HTTP_200_OK)
def optimize_all(payload: BulkRequest) -> BulkResponse:
    """Optimize or recalculate every territory in turn.

    Territories are processed sequentially with a pause between them, so the
    request takes roughly ``bulk_delay_seconds`` per territory.
    """
    try:
        result = process_all_territories(payload.action)
    except PersistenceError as exc:
        logging.exception(f"Batch operation failed: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Batch operation failed: {str(exc)}",
        ) from exc
    return BulkResponse(
        action=result.action,
        count=result.processed,
        failed_territory_ids=result.failed_territory_ids,
    )
