"""Routing orchestration service."""

from __future__ import annotations

import logging
import time
from typing import Callable, Literal, Optional

from ...config import settings
from ...models.domain import GeoPoint, Stop, Territory
from ...persistence.database import (
    get_stops_for_territory,
    get_territory,
    list_territory_ids,
    set_stop_sequence,
)
from .geometry import calculate_route
from .heuristic import solve_heuristic
from .models import BulkResult, OutcomeStatus, SequencingResult, SequencingStrategy
from .osrm_client import OSRMClient
from .trip_solver import build_trip_points, solve_trip

logger = logging.getLogger(__name__)

BulkAction = Literal["optimize", "calculate"]


def _order_stops(
    territory_id: int,
    stops: list[Stop],
    start_point: Optional[GeoPoint],
    client: OSRMClient,
) -> tuple[list[Stop], SequencingStrategy]:
    if len(stops) < settings.trip_max_stops:
        outcome = solve_trip(build_trip_points(stops, start_point), client)
        match outcome.status:
            case OutcomeStatus.SUCCESS:
                return outcome.data, SequencingStrategy.OSRM_TRIP
            case _:
                logger.warning(
                    f"OSRM optimization failed for territory {territory_id} ({outcome.reason}), "
                    f"falling back to heuristic"
                )
    else:
        logger.info(
            f"Territory {territory_id} has {len(stops)} stops (limit {settings.trip_max_stops}); "
            f"using heuristic ordering"
        )

    return solve_heuristic(stops, start_point), SequencingStrategy.HEURISTIC


def optimize_territory_route(
    territory_id: int,
    start_point: Optional[GeoPoint] = None,
    client: OSRMClient | None = None,
) -> SequencingResult:
    """Compute, persist and draw the visiting order for a territory.

    Only stops with both coordinates take part; the others keep whatever
    sequence they had. Routing service failures fall back to the local
    heuristic and straight-line geometry, so the call only fails when the
    store does.
    """
    stops = [stop for stop in get_stops_for_territory(territory_id) if stop.has_location]
    client = client or OSRMClient()
    if len(stops) < 2:
        logger.info(f"Territory {territory_id} has {len(stops)} located stop(s); nothing to sequence")
        return SequencingResult(
            territory_id=territory_id,
            strategy=SequencingStrategy.SKIPPED,
            stop_ids=[stop.stop_id for stop in stops],
            geometry=calculate_route(territory_id, client=client),
        )

    ordered, strategy = _order_stops(territory_id, stops, start_point, client)

    set_stop_sequence(territory_id, [(stop.stop_id, sequence) for sequence, stop in enumerate(ordered)])
    logger.info(f"Sequenced {len(ordered)} stops in territory {territory_id} using {strategy.value}")

    geometry = calculate_route(territory_id, client=client)
    return SequencingResult(
        territory_id=territory_id,
        strategy=strategy,
        stop_ids=[stop.stop_id for stop in ordered],
        geometry=geometry,
    )


def process_all_territories(
    action: BulkAction,
    delay_seconds: float | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BulkResult:
    """Run ``optimize`` or ``calculate`` for every territory, one at a time.

    Territories are spaced ``delay_seconds`` apart to stay under the public
    OSRM rate limit. A failing territory is logged and skipped.
    """
    if action not in ("optimize", "calculate"):
        raise ValueError(f"Unknown bulk action '{action}'. Expected 'optimize' or 'calculate'.")
    delay_seconds = delay_seconds if delay_seconds is not None else settings.bulk_delay_seconds

    territory_ids = list_territory_ids()
    client = OSRMClient()
    failed: list[int] = []

    for position, territory_id in enumerate(territory_ids):
        if position > 0 and delay_seconds > 0:
            sleep(delay_seconds)
        try:
            if action == "optimize":
                optimize_territory_route(territory_id, client=client)
            else:
                calculate_route(territory_id, client=client)
        except Exception as exc:
            logger.exception(f"Error processing territory {territory_id}: {exc}")
            failed.append(territory_id)

    logger.info(
        f"Bulk {action} finished: {len(territory_ids)} territories, {len(failed)} failed"
    )
    return BulkResult(action=action, processed=len(territory_ids), failed_territory_ids=failed)


def get_route_sheet(territory_id: int) -> tuple[Territory, list[Stop]]:
    """Territory with all of its stops in driving order, unlocated ones included."""
    territory = get_territory(territory_id)
    stops = sorted(get_stops_for_territory(territory_id), key=lambda stop: (stop.sequence, stop.stop_id))
    return territory, stops
