"""Territory routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response, status

from ...models.domain import GeoPoint
from ...persistence.database import PersistenceError, TerritoryNotFoundError, get_territory
from ...schemas.routing import (
    GeometryResponse,
    OptimizeRequest,
    OptimizeResponse,
    RouteSheetResponse,
)
from ...services.outputs.routing_formatter import route_sheet_to_csv, route_sheet_to_json
from ...services.routing.geometry import calculate_route
from ...services.routing.models import GeometryResult
from ...services.routing.service import get_route_sheet, optimize_territory_route

router = APIRouter(prefix="/territories", tags=["territories"])

logger = logging.getLogger(__name__)


def _geometry_response(result: GeometryResult) -> GeometryResponse:
    return GeometryResponse(
        territory_id=result.territory_id,
        source=result.source.value,
        point_count=len(result.coordinates or []),
    )


@router.post("/{territory_id}/optimize", response_model=OptimizeResponse, status_code=status.HTTP_200_OK)
def optimize(territory_id: int, payload: OptimizeRequest | None = None) -> OptimizeResponse:
    """Re-sequence the territory's stops and refresh its route geometry."""
    start_point = None
    if payload and payload.start_point:
        start_point = GeoPoint(latitude=payload.start_point.lat, longitude=payload.start_point.lng)
    try:
        get_territory(territory_id)
        result = optimize_territory_route(territory_id, start_point)
    except TerritoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except PersistenceError as exc:
        logger.exception(f"Error optimizing route for territory {territory_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize route: {str(exc)}",
        ) from exc

    return OptimizeResponse(
        territory_id=result.territory_id,
        strategy=result.strategy.value,
        stop_ids=result.stop_ids,
        geometry=_geometry_response(result.geometry) if result.geometry else None,
    )


@router.post("/{territory_id}/calculate-route", response_model=GeometryResponse, status_code=status.HTTP_200_OK)
def calculate(territory_id: int) -> GeometryResponse:
    """Recompute the route geometry for the current stop order without re-sequencing."""
    try:
        get_territory(territory_id)
        result = calculate_route(territory_id)
    except TerritoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except PersistenceError as exc:
        logger.exception(f"Error calculating route for territory {territory_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to calculate route: {str(exc)}",
        ) from exc
    return _geometry_response(result)


@router.get("/{territory_id}/route", response_model=RouteSheetResponse, status_code=status.HTTP_200_OK)
def route_sheet(territory_id: int) -> RouteSheetResponse:
    """Ordered stop list and stored path for the driver view."""
    try:
        territory, stops = get_route_sheet(territory_id)
    except TerritoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except PersistenceError as exc:
        logger.exception(f"Error loading route sheet for territory {territory_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to load route: {str(exc)}",
        ) from exc
    return RouteSheetResponse(**route_sheet_to_json(territory, stops))


@router.get("/{territory_id}/route.csv", status_code=status.HTTP_200_OK)
def route_sheet_csv(territory_id: int) -> Response:
    try:
        territory, stops = get_route_sheet(territory_id)
    except TerritoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except PersistenceError as exc:
        logger.exception(f"Error exporting route sheet for territory {territory_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to export route: {str(exc)}",
        ) from exc
    return Response(
        content=route_sheet_to_csv(stops),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="territory_{territory.territory_id}_route.csv"'},
    )
