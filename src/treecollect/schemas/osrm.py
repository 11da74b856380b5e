"""Validated shapes of the OSRM responses the routing services consume."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class TripWaypoint(BaseModel):
    model_config = ConfigDict(extra="ignore")

    waypoint_index: int = Field(..., ge=0)
    trips_index: int = 0


class TripResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: str
    message: str | None = None
    waypoints: List[TripWaypoint] = Field(default_factory=list)


class LineStringGeometry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str = "LineString"
    coordinates: List[tuple[float, float]]


class DirectionsRoute(BaseModel):
    model_config = ConfigDict(extra="ignore")

    geometry: LineStringGeometry
    distance: float | None = None
    duration: float | None = None


class RouteResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: str
    message: str | None = None
    routes: List[DirectionsRoute] = Field(default_factory=list)
