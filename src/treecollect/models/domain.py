"""Domain models for collection stops and territories."""

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True, frozen=True)
class GeoPoint:
    """A bare WGS84 coordinate, e.g. a caller-supplied route start."""

    latitude: float
    longitude: float


@dataclass(slots=True)
class Stop:
    """A registered tree pickup location.

    Coordinates are optional because not every registration could be geocoded.
    ``sequence`` is the visiting order inside ``territory_id`` and carries no
    meaning across territories.
    """

    stop_id: int
    latitude: Optional[float]
    longitude: Optional[float]
    territory_id: Optional[int] = None
    sequence: int = 0
    name: Optional[str] = None
    address: Optional[str] = None
    status: str = "open"

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(slots=True)
class Territory:
    """A polygonal collection area with its last computed route path."""

    territory_id: int
    name: str
    color: str
    polygon: list[tuple[float, float]]
    route_geometry: Optional[list[tuple[float, float]]] = None
    driver_name: Optional[str] = None
