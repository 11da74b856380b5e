from types import SimpleNamespace

import pytest

from src.treecollect.persistence import database
from src.treecollect.persistence.database import PersistenceError, TerritoryNotFoundError


class FakeQuery:
    def __init__(self, client, name: str) -> None:
        self.client = client
        self.name = name
        self.calls: list[tuple] = []

    def __getattr__(self, method):
        def record(*args, **kwargs):
            self.calls.append((method, *args))
            return self

        return record

    def execute(self):
        if self.client.error:
            raise self.client.error
        return SimpleNamespace(data=self.client.rows.get(self.name, []))


class FakeSupabase:
    def __init__(self, rows=None, error: Exception | None = None) -> None:
        self.rows = rows or {}
        self.error = error
        self.queries: list[FakeQuery] = []
        self.rpc_calls: list[tuple[str, dict]] = []

    def table(self, name: str) -> FakeQuery:
        query = FakeQuery(self, name)
        self.queries.append(query)
        return query

    def rpc(self, name: str, params: dict) -> FakeQuery:
        self.rpc_calls.append((name, params))
        return FakeQuery(self, name)


@pytest.fixture
def use_supabase(monkeypatch):
    def install(fake):
        monkeypatch.setattr(database, "get_supabase_client", lambda: fake)
        return fake

    return install


def test_stops_are_parsed_with_optional_coordinates(use_supabase):
    fake = use_supabase(
        FakeSupabase(
            rows={
                "trees": [
                    {"id": 4, "name": "Tree 4", "address": "Ring 4", "lat": "49.4", "lng": 11.8, "territory_id": 1, "status": "open", "sequence": 0},
                    {"id": 5, "name": None, "address": None, "lat": None, "lng": None, "territory_id": 1, "status": None, "sequence": None},
                ]
            }
        )
    )

    stops = database.get_stops_for_territory(1)

    assert stops[0].latitude == 49.4 and stops[0].has_location
    assert not stops[1].has_location
    assert stops[1].sequence == 0
    assert stops[1].status == "open"
    assert ("eq", "territory_id", 1) in fake.queries[0].calls
    assert [call for call in fake.queries[0].calls if call[0] == "order"] == [("order", "sequence"), ("order", "id")]


def test_sequence_is_written_through_one_rpc_call(use_supabase):
    fake = use_supabase(FakeSupabase())

    database.set_stop_sequence(3, [(12, 0), (10, 1)])

    assert fake.rpc_calls == [
        ("set_tree_sequence", {"p_territory_id": 3, "p_sequence": [{"id": 12, "sequence": 0}, {"id": 10, "sequence": 1}]})
    ]


def test_empty_sequence_writes_nothing(use_supabase):
    fake = use_supabase(FakeSupabase())

    database.set_stop_sequence(3, [])

    assert fake.rpc_calls == []


def test_store_errors_become_persistence_errors(use_supabase):
    use_supabase(FakeSupabase(error=ConnectionError("connection reset")))

    with pytest.raises(PersistenceError, match="connection reset"):
        database.set_stop_sequence(3, [(12, 0)])
    with pytest.raises(PersistenceError):
        database.get_stops_for_territory(3)


def test_unconfigured_database_is_a_persistence_error(use_supabase):
    use_supabase(None)

    with pytest.raises(PersistenceError, match="not configured"):
        database.list_territory_ids()
    assert database.check_connection() is False


def test_territory_paths_are_decoded(use_supabase):
    use_supabase(
        FakeSupabase(
            rows={
                "territories": [
                    {
                        "id": 2,
                        "name": "Sued",
                        "color": "#123456",
                        "polygon": "[[49.0, 11.0], [49.1, 11.0], [49.1, 11.1]]",
                        "route_geometry": [[49.4, 11.8], [49.41, 11.81]],
                        "driver_name": None,
                    }
                ]
            }
        )
    )

    territory = database.get_territory(2)

    assert territory.polygon[0] == (49.0, 11.0)
    assert territory.route_geometry == [(49.4, 11.8), (49.41, 11.81)]


def test_missing_territory_raises_not_found(use_supabase):
    use_supabase(FakeSupabase(rows={"territories": []}))

    with pytest.raises(TerritoryNotFoundError):
        database.get_territory(99)


def test_geometry_is_stored_as_lat_lng_pairs(use_supabase):
    fake = use_supabase(FakeSupabase())

    database.set_territory_geometry(2, [(49.4, 11.8), (49.41, 11.81)])
    database.set_territory_geometry(2, None)

    assert ("update", {"route_geometry": [[49.4, 11.8], [49.41, 11.81]]}) in fake.queries[0].calls
    assert ("update", {"route_geometry": None}) in fake.queries[1].calls


def test_geometry_needs_two_points(use_supabase):
    use_supabase(FakeSupabase())

    with pytest.raises(ValueError):
        database.set_territory_geometry(2, [(49.4, 11.8)])
