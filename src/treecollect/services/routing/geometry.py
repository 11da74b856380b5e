"""Route geometry for map display.

Only this module writes ``territories.route_geometry``.
"""

from __future__ import annotations

import logging

from ...persistence.database import get_stops_for_territory, set_territory_geometry
from .models import GeometryResult, GeometrySource, OutcomeStatus
from .osrm_client import OSRMClient

logger = logging.getLogger(__name__)


def calculate_route(territory_id: int, client: OSRMClient | None = None) -> GeometryResult:
    """Refresh the stored path for a territory's current stop order.

    Uses the OSRM route service when it answers and the straight polyline
    through the stops otherwise. Fewer than two located stops clears the path.
    Persistence errors propagate; routing service errors never do.
    """
    stops = [stop for stop in get_stops_for_territory(territory_id) if stop.has_location]

    if len(stops) < 2:
        set_territory_geometry(territory_id, None)
        logger.info(f"Territory {territory_id} has {len(stops)} located stop(s); route geometry cleared")
        return GeometryResult(territory_id=territory_id, source=GeometrySource.CLEARED, coordinates=None)

    waypoints = [(stop.latitude, stop.longitude) for stop in stops]
    client = client or OSRMClient()
    outcome = client.route(waypoints)

    match outcome.status:
        case OutcomeStatus.SUCCESS:
            path = outcome.data
            source = GeometrySource.OSRM
        case OutcomeStatus.RATE_LIMITED:
            logger.warning(f"Rate limit exceeded for territory {territory_id}. Using straight lines.")
            path = waypoints
            source = GeometrySource.STRAIGHT_LINE
        case _:
            logger.warning(
                f"Failed to get OSRM route geometry for territory {territory_id}: {outcome.reason}. "
                f"Using straight lines."
            )
            path = waypoints
            source = GeometrySource.STRAIGHT_LINE

    set_territory_geometry(territory_id, path)
    return GeometryResult(territory_id=territory_id, source=source, coordinates=list(path))
