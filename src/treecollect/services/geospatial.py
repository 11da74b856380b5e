"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Optional, Protocol, Sequence

EARTH_RADIUS_M = 6_371_000.0


class Locatable(Protocol):
    latitude: Optional[float]
    longitude: Optional[float]


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance in meters between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def distance(a: Locatable, b: Locatable) -> float:
    """Great-circle distance between two located objects in meters.

    Returns ``math.inf`` when either side is missing a coordinate, so unlocated
    points sort last in any nearest-first comparison instead of raising.
    """

    if a.latitude is None or a.longitude is None or b.latitude is None or b.longitude is None:
        return math.inf
    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)


def route_length(route: Sequence[Locatable]) -> float:
    """Total length in meters of an open path visiting ``route`` in order."""

    return sum(distance(route[index], route[index + 1]) for index in range(len(route) - 1))
