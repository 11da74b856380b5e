"""Database persistence for collection stops and territories.

Trees and territories live in Supabase (see ``supabase/schema.sql``). Every
reader and writer raises ``PersistenceError`` on failure; only
``check_connection`` reports a boolean.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

from ..db.supabase import get_supabase_client
from ..models.domain import Stop, Territory

logger = logging.getLogger(__name__)

STOP_COLUMNS = "id, name, address, lat, lng, territory_id, status, sequence"
TERRITORY_COLUMNS = "id, name, color, polygon, route_geometry, driver_name"


class PersistenceError(RuntimeError):
    """Raised when the store is unreachable or rejects a read or write."""


class TerritoryNotFoundError(LookupError):
    def __init__(self, territory_id: int) -> None:
        super().__init__(f"Territory {territory_id} not found")
        self.territory_id = territory_id


def _client():
    supabase = get_supabase_client()
    if not supabase:
        raise PersistenceError(
            "Database not configured. Set TCR_SUPABASE_URL and TCR_SUPABASE_KEY environment variables."
        )
    return supabase


def _parse_path(value: Any) -> Optional[list[tuple[float, float]]]:
    """Decode a stored ``[[lat, lng], ...]`` path (JSON text or jsonb)."""
    if value is None:
        return None
    if isinstance(value, str):
        value = json.loads(value)
    return [(float(point[0]), float(point[1])) for point in value]


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def _row_to_stop(row: dict[str, Any]) -> Stop:
    return Stop(
        stop_id=int(row["id"]),
        latitude=_optional_float(row.get("lat")),
        longitude=_optional_float(row.get("lng")),
        territory_id=row.get("territory_id"),
        sequence=int(row.get("sequence") or 0),
        name=row.get("name"),
        address=row.get("address"),
        status=row.get("status") or "open",
    )


def _row_to_territory(row: dict[str, Any]) -> Territory:
    return Territory(
        territory_id=int(row["id"]),
        name=row.get("name") or "",
        color=row.get("color") or "",
        polygon=_parse_path(row.get("polygon")) or [],
        route_geometry=_parse_path(row.get("route_geometry")),
        driver_name=row.get("driver_name"),
    )


def get_stops_for_territory(territory_id: int) -> list[Stop]:
    """Return the territory's stops ordered by ``sequence`` (ties by id)."""
    supabase = _client()
    try:
        response = (
            supabase.table("trees")
            .select(STOP_COLUMNS)
            .eq("territory_id", territory_id)
            .order("sequence")
            .order("id")
            .execute()
        )
    except Exception as exc:
        raise PersistenceError(f"Failed to load stops for territory {territory_id}: {exc}") from exc
    return [_row_to_stop(row) for row in (response.data or [])]


def set_stop_sequence(territory_id: int, assignments: Sequence[tuple[int, int]]) -> None:
    """Renumber stops atomically.

    The ``set_tree_sequence`` function runs as a single Postgres transaction,
    so readers see either the old or the new order, never a mix.

    Args:
        territory_id: Territory whose stops are renumbered
        assignments: (stop_id, sequence) pairs
    """
    if not assignments:
        return
    supabase = _client()
    payload = [{"id": stop_id, "sequence": sequence} for stop_id, sequence in assignments]
    try:
        supabase.rpc(
            "set_tree_sequence",
            {"p_territory_id": territory_id, "p_sequence": payload},
        ).execute()
    except Exception as exc:
        raise PersistenceError(f"Failed to save stop sequence for territory {territory_id}: {exc}") from exc
    logger.info(f"Saved sequence for {len(assignments)} stops in territory {territory_id}")


def get_territory(territory_id: int) -> Territory:
    supabase = _client()
    try:
        response = supabase.table("territories").select(TERRITORY_COLUMNS).eq("id", territory_id).limit(1).execute()
    except Exception as exc:
        raise PersistenceError(f"Failed to load territory {territory_id}: {exc}") from exc
    if not response.data:
        raise TerritoryNotFoundError(territory_id)
    return _row_to_territory(response.data[0])


def set_territory_geometry(territory_id: int, path: Optional[Sequence[tuple[float, float]]]) -> None:
    """Store the display path, or clear it with ``None``."""
    if path is not None and len(path) < 2:
        raise ValueError("A route geometry needs at least two points.")
    value = [[lat, lng] for lat, lng in path] if path is not None else None
    supabase = _client()
    try:
        supabase.table("territories").update({"route_geometry": value}).eq("id", territory_id).execute()
    except Exception as exc:
        raise PersistenceError(f"Failed to save route geometry for territory {territory_id}: {exc}") from exc


def list_territory_ids() -> list[int]:
    supabase = _client()
    try:
        response = supabase.table("territories").select("id").order("id").execute()
    except Exception as exc:
        raise PersistenceError(f"Failed to list territories: {exc}") from exc
    return [int(row["id"]) for row in (response.data or [])]


def check_connection() -> bool:
    """Return True when the territories table can be queried."""
    supabase = get_supabase_client()
    if not supabase:
        return False
    try:
        supabase.table("territories").select("id").limit(1).execute()
    except Exception as exc:
        logger.warning(f"Database connection check failed: {exc}")
        return False
    return True
