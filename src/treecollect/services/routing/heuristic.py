"""Local route ordering: nearest-neighbor construction refined by 2-opt.

This is the dependency-free fallback used when the OSRM trip solver is skipped
or unavailable. Both steps are deterministic for a given input order.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import GeoPoint, Stop
from ..geospatial import distance


def northernmost_index(stops: Sequence[Stop]) -> int:
    best_index = 0
    best_lat = -math.inf
    for index, stop in enumerate(stops):
        if stop.latitude > best_lat:
            best_lat = stop.latitude
            best_index = index
    return best_index


def nearest_neighbor(stops: Sequence[Stop], start_point: Optional[GeoPoint] = None) -> list[Stop]:
    """Build a greedy visiting order.

    Without a start point the route begins at the northernmost stop; with one it
    begins at the stop closest to it. Ties keep the earlier stop in input order.
    Callers must pass located stops only.
    """
    remaining = list(stops)
    if not remaining:
        return []

    if start_point is not None:
        first_index = 0
        nearest = math.inf
        for index, stop in enumerate(remaining):
            candidate = distance(start_point, stop)
            if candidate < nearest:
                nearest = candidate
                first_index = index
    else:
        first_index = northernmost_index(remaining)

    current = remaining.pop(first_index)
    ordered = [current]

    while remaining:
        nearest_index = 0
        nearest = math.inf
        for index, stop in enumerate(remaining):
            candidate = distance(current, stop)
            if candidate < nearest:
                nearest = candidate
                nearest_index = index
        current = remaining.pop(nearest_index)
        ordered.append(current)

    return ordered


def two_opt(route: Sequence[Stop], max_passes: int | None = None) -> list[Stop]:
    """Remove crossing edges from an open path with the classic 2-opt move.

    Passes repeat until one makes no improvement or ``max_passes`` is reached.
    """
    max_passes = max_passes if max_passes is not None else settings.two_opt_max_passes
    route = list(route)
    n = len(route)
    if n < 4:
        return route

    improved = True
    passes = 0
    while improved and passes < max_passes:
        improved = False
        passes += 1
        for i in range(n - 2):
            for j in range(i + 2, n - 1):
                current_cost = distance(route[i], route[i + 1]) + distance(route[j], route[j + 1])
                swapped_cost = distance(route[i], route[j]) + distance(route[i + 1], route[j + 1])
                if swapped_cost < current_cost:
                    route[i + 1 : j + 1] = reversed(route[i + 1 : j + 1])
                    improved = True

    return route


def solve_heuristic(
    stops: Sequence[Stop],
    start_point: Optional[GeoPoint] = None,
    max_passes: int | None = None,
) -> list[Stop]:
    return two_opt(nearest_neighbor(stops, start_point), max_passes=max_passes)
