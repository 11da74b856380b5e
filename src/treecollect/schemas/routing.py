"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class StartPointModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class OptimizeRequest(BaseModel):
    start_point: Optional[StartPointModel] = Field(
        default=None,
        description="Where the driver sets off. Without it the route starts at the northernmost stop.",
    )


class GeometryResponse(BaseModel):
    territory_id: int
    source: Literal["osrm", "straight_line", "cleared"]
    point_count: int


class OptimizeResponse(BaseModel):
    success: bool = True
    territory_id: int
    strategy: Literal["osrm_trip", "heuristic", "skipped"]
    stop_ids: List[int]
    geometry: Optional[GeometryResponse] = None


class RouteStopModel(BaseModel):
    stop_id: int
    sequence: int
    name: Optional[str] = None
    address: Optional[str] = None
    status: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class RouteSheetResponse(BaseModel):
    territory_id: int
    name: str
    color: str
    driver_name: Optional[str] = None
    route_geometry: Optional[List[List[float]]] = None
    stops: List[RouteStopModel]


class BulkRequest(BaseModel):
    action: Literal["optimize", "calculate"]


class BulkResponse(BaseModel):
    success: bool = True
    action: Literal["optimize", "calculate"]
    count: int
    failed_territory_ids: List[int] = Field(default_factory=list)
