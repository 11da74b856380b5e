"""Serializers for driver route sheets."""

from __future__ import annotations

import csv
import io
from typing import Sequence

from ...models.domain import Stop, Territory


def route_sheet_to_json(territory: Territory, stops: Sequence[Stop]) -> dict:
    return {
        "territory_id": territory.territory_id,
        "name": territory.name,
        "color": territory.color,
        "driver_name": territory.driver_name,
        "route_geometry": [list(point) for point in territory.route_geometry] if territory.route_geometry else None,
        "stops": [
            {
                "stop_id": stop.stop_id,
                "sequence": stop.sequence,
                "name": stop.name,
                "address": stop.address,
                "status": stop.status,
                "latitude": stop.latitude,
                "longitude": stop.longitude,
            }
            for stop in stops
        ],
    }


def route_sheet_to_csv(stops: Sequence[Stop]) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "sequence",
        "stop_id",
        "name",
        "address",
        "status",
        "latitude",
        "longitude",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for stop in stops:
        writer.writerow(
            {
                "sequence": stop.sequence,
                "stop_id": stop.stop_id,
                "name": stop.name or "",
                "address": stop.address or "",
                "status": stop.status,
                "latitude": "" if stop.latitude is None else stop.latitude,
                "longitude": "" if stop.longitude is None else stop.longitude,
            }
        )
    return buffer.getvalue()
