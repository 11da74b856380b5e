"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx
from pydantic import ValidationError

from ...config import settings
from ...schemas.osrm import RouteResponse, TripResponse
from .models import ServiceResult

CONNECT_TIMEOUT_SECONDS = 2.0

logger = logging.getLogger(__name__)


def format_coordinates(coordinates: Sequence[tuple[float, float]]) -> str:
    """OSRM expects ``lon,lat`` pairs joined by semicolons; input is (lat, lon)."""
    return ";".join(f"{lon},{lat}" for lat, lon in coordinates)


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        trip_timeout: float | None = None,
        route_timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.trip_timeout = trip_timeout if trip_timeout is not None else settings.trip_timeout_seconds
        self.route_timeout = route_timeout if route_timeout is not None else settings.route_timeout_seconds
        self._transport = transport

    def _get_client(self, timeout: float) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(timeout, connect=min(timeout, CONNECT_TIMEOUT_SECONDS)),
            transport=self._transport,
        )

    def _get_json(self, url: str, params: dict[str, str], timeout: float) -> ServiceResult[Any]:
        """Issue a single GET and classify the outcome. No retries."""
        client = self._get_client(timeout)
        try:
            response = client.get(url, params=params)
            if response.status_code == 429:
                return ServiceResult.rate_limited(f"OSRM rate limit exceeded ({url})")
            response.raise_for_status()
            return ServiceResult.ok(response.json())
        except httpx.TimeoutException as exc:
            return ServiceResult.failed(f"OSRM request timed out after {timeout:.1f}s: {exc}")
        except httpx.HTTPStatusError as exc:
            return ServiceResult.failed(f"OSRM returned HTTP {exc.response.status_code}")
        except httpx.HTTPError as exc:
            return ServiceResult.failed(f"Failed to reach OSRM service at {self.base_url}: {exc}")
        except ValueError as exc:
            return ServiceResult.failed(f"OSRM response is not valid JSON: {exc}")
        finally:
            client.close()

    def trip(self, coordinates: Sequence[tuple[float, float]]) -> ServiceResult[list[int]]:
        """Ask the OSRM trip service for a visiting order.

        The first coordinate is fixed as the trip start and the trip does not
        return to it. On success ``data`` holds, for each input coordinate, its
        position in the computed trip (OSRM's ``waypoint_index``).

        Args:
            coordinates: Sequence of (lat, lon) tuples; the first one is the start
        """
        if len(coordinates) < 2:
            return ServiceResult.failed("At least two coordinates are required for OSRM trip.")

        url = f"{self.base_url}/trip/v1/{self.profile}/{format_coordinates(coordinates)}"
        params = {"source": "first", "roundtrip": "false"}

        outcome = self._get_json(url, params, self.trip_timeout)
        if not outcome.succeeded:
            return outcome

        try:
            payload = TripResponse.model_validate(outcome.data)
        except ValidationError as exc:
            return ServiceResult.failed(f"Malformed OSRM trip response: {exc.error_count()} validation error(s)")

        if payload.code != "Ok":
            return ServiceResult.failed(f"OSRM trip request failed: {payload.code} {payload.message or ''}".strip())
        if not payload.waypoints:
            return ServiceResult.failed("OSRM trip response contains no waypoints.")
        if len(payload.waypoints) != len(coordinates):
            return ServiceResult.failed(
                f"OSRM trip returned {len(payload.waypoints)} waypoints for {len(coordinates)} coordinates."
            )

        positions = [waypoint.waypoint_index for waypoint in payload.waypoints]
        if sorted(positions) != list(range(len(coordinates))):
            return ServiceResult.failed("OSRM trip waypoint indices are not a permutation of the input.")
        return ServiceResult.ok(positions)

    def route(self, coordinates: Sequence[tuple[float, float]]) -> ServiceResult[list[tuple[float, float]]]:
        """Get a street-following path through the coordinates in the given order.

        Args:
            coordinates: Sequence of (lat, lon) tuples for the route waypoints

        Returns:
            On success, the full route geometry as (lat, lon) tuples
        """
        if len(coordinates) < 2:
            return ServiceResult.failed("At least two coordinates are required for OSRM route.")

        url = f"{self.base_url}/route/v1/{self.profile}/{format_coordinates(coordinates)}"
        params = {
            "overview": "full",
            "geometries": "geojson",
            "steps": "false",
        }

        outcome = self._get_json(url, params, self.route_timeout)
        if not outcome.succeeded:
            return outcome

        try:
            payload = RouteResponse.model_validate(outcome.data)
        except ValidationError as exc:
            return ServiceResult.failed(f"Malformed OSRM route response: {exc.error_count()} validation error(s)")

        if payload.code != "Ok":
            return ServiceResult.failed(f"OSRM route request failed: {payload.code} {payload.message or ''}".strip())
        if not payload.routes:
            return ServiceResult.failed("OSRM route response contains no routes.")

        # GeoJSON is [lon, lat]; the rest of the app works in (lat, lon)
        path = [(lat, lon) for lon, lat in payload.routes[0].geometry.coordinates]
        if len(path) < 2:
            return ServiceResult.failed("OSRM route geometry has fewer than two points.")
        return ServiceResult.ok(path)


def check_health(base_url: str | None = None) -> bool:
    """Check OSRM service health with a minimal two-point route request.

    Public OSRM endpoints do not expose a /health endpoint.
    """
    base = base_url or settings.osrm_base_url
    if not base:
        return False
    try:
        test_coords = "11.80,49.40;11.81,49.41"
        url = f"{base.rstrip('/')}/route/v1/{settings.osrm_profile}/{test_coords}"
        response = httpx.get(url, params={"overview": "false"}, timeout=settings.route_timeout_seconds)
        response.raise_for_status()
        return response.json().get("code") == "Ok"
    except httpx.HTTPError as exc:
        logger.warning(f"OSRM health check failed: {exc}")
        return False
    except ValueError:
        return False
