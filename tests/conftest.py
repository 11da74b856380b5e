from __future__ import annotations

from dataclasses import replace

import pytest

from src.treecollect.models.domain import Stop, Territory
from src.treecollect.persistence.database import PersistenceError, TerritoryNotFoundError


class FakeStore:
    """In-memory stand-in for the Supabase persistence functions."""

    def __init__(self) -> None:
        self.territories: dict[int, Territory] = {}
        self.stops: dict[int, Stop] = {}
        self.sequence_writes: list[tuple[int, list[tuple[int, int]]]] = []
        self.geometry_writes: list[tuple[int, list | None]] = []
        self.fail_sequence_write = False
        self.broken_territories: set[int] = set()

    def add_territory(self, territory_id: int, name: str = "North") -> Territory:
        territory = Territory(
            territory_id=territory_id,
            name=name,
            color="#ff0000",
            polygon=[(49.0, 11.0), (49.5, 11.0), (49.5, 12.0), (49.0, 12.0)],
        )
        self.territories[territory_id] = territory
        return territory

    def add_stop(self, stop_id: int, lat: float | None, lng: float | None, territory_id: int = 1, sequence: int = 0) -> Stop:
        stop = Stop(
            stop_id=stop_id,
            latitude=lat,
            longitude=lng,
            territory_id=territory_id,
            sequence=sequence,
            name=f"Tree {stop_id}",
            address=f"Hauptstrasse {stop_id}",
        )
        self.stops[stop_id] = stop
        return stop

    # persistence API

    def get_stops_for_territory(self, territory_id: int) -> list[Stop]:
        if territory_id in self.broken_territories:
            raise PersistenceError(f"Failed to load stops for territory {territory_id}")
        stops = [stop for stop in self.stops.values() if stop.territory_id == territory_id]
        return [replace(stop) for stop in sorted(stops, key=lambda s: (s.sequence, s.stop_id))]

    def set_stop_sequence(self, territory_id: int, assignments) -> None:
        if self.fail_sequence_write:
            raise PersistenceError("connection reset")
        assignments = list(assignments)
        self.sequence_writes.append((territory_id, assignments))
        for stop_id, sequence in assignments:
            self.stops[stop_id].sequence = sequence

    def get_territory(self, territory_id: int) -> Territory:
        if territory_id not in self.territories:
            raise TerritoryNotFoundError(territory_id)
        return self.territories[territory_id]

    def set_territory_geometry(self, territory_id: int, path) -> None:
        value = list(path) if path is not None else None
        self.geometry_writes.append((territory_id, value))
        if territory_id in self.territories:
            self.territories[territory_id].route_geometry = value

    def list_territory_ids(self) -> list[int]:
        return sorted(self.territories)


@pytest.fixture
def store(monkeypatch: pytest.MonkeyPatch) -> FakeStore:
    from src.treecollect.api.routes import territories as territories_routes
    from src.treecollect.services.routing import geometry as geometry_service
    from src.treecollect.services.routing import service as routing_service

    fake = FakeStore()
    for module in (routing_service, geometry_service, territories_routes):
        for name in (
            "get_stops_for_territory",
            "set_stop_sequence",
            "get_territory",
            "set_territory_geometry",
            "list_territory_ids",
        ):
            if hasattr(module, name):
                monkeypatch.setattr(module, name, getattr(fake, name))
    return fake


class DummyOSRM:
    """Scripted OSRM client recording every call."""

    def __init__(self, trip_result=None, route_result=None) -> None:
        self.trip_result = trip_result
        self.route_result = route_result
        self.trip_calls: list[list[tuple[float, float]]] = []
        self.route_calls: list[list[tuple[float, float]]] = []

    def trip(self, coordinates):
        self.trip_calls.append(list(coordinates))
        return self.trip_result

    def route(self, coordinates):
        self.route_calls.append(list(coordinates))
        return self.route_result
