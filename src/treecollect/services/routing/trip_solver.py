"""Stop ordering delegated to the OSRM trip service.

The adapter turns stops into an ordered candidate list, asks OSRM for a trip
starting at the first candidate and maps OSRM's positional answer back onto
the original Stop objects.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ...models.domain import GeoPoint, Stop
from .heuristic import northernmost_index
from .models import ServiceResult, TripPoint
from .osrm_client import OSRMClient

logger = logging.getLogger(__name__)


def build_trip_points(stops: Sequence[Stop], start_point: Optional[GeoPoint] = None) -> list[TripPoint]:
    """Order candidates for the trip request.

    With a start point it leads the list untagged; otherwise the northernmost
    stop leads so OSRM gets the same anchor the local heuristic would use.
    """
    if not stops:
        return []

    if start_point is not None:
        points = [TripPoint(latitude=start_point.latitude, longitude=start_point.longitude)]
        points.extend(TripPoint(latitude=stop.latitude, longitude=stop.longitude, stop=stop) for stop in stops)
        return points

    first_index = northernmost_index(stops)
    ordered = [stops[first_index], *stops[:first_index], *stops[first_index + 1 :]]
    return [TripPoint(latitude=stop.latitude, longitude=stop.longitude, stop=stop) for stop in ordered]


def solve_trip(points: Sequence[TripPoint], client: OSRMClient) -> ServiceResult[list[Stop]]:
    """Reorder the tagged points by the OSRM trip and return their stops.

    OSRM reports, for every input point, its position in the trip; the
    response is not pre-sorted, so the mapping is inverted here. The untagged
    start point, if any, is dropped from the result.
    """
    outcome = client.trip([(point.latitude, point.longitude) for point in points])
    if not outcome.succeeded:
        return outcome

    positions = outcome.data
    trip_order: list[Optional[TripPoint]] = [None] * len(points)
    for input_index, position in enumerate(positions):
        trip_order[position] = points[input_index]

    ordered_stops = [point.stop for point in trip_order if point is not None and point.stop is not None]
    logger.debug(f"OSRM trip ordered {len(ordered_stops)} stops")
    return ServiceResult.ok(ordered_stops)
