#!/usr/bin/env python3
"""Manual check that the configured OSRM server answers trip and route requests."""

import sys
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from treecollect.config import settings
from treecollect.services.routing.models import OutcomeStatus
from treecollect.services.routing.osrm_client import OSRMClient, check_health

# Three pickups around Nuremberg, (lat, lon)
SAMPLE_COORDINATES = [
    (49.4521, 11.0767),
    (49.4480, 11.0850),
    (49.4560, 11.0900),
]


def main() -> int:
    print("=" * 60)
    print("OSRM Connection Test")
    print("=" * 60)
    print(f"Base URL: {settings.osrm_base_url}")
    print(f"Profile:  {settings.osrm_profile}")
    print()

    print("1. Health check...")
    if not check_health():
        print("   [ERROR] OSRM service is not responding")
        return 1
    print("   [OK] OSRM service is reachable")

    client = OSRMClient()

    print("2. Trip request...")
    trip = client.trip(SAMPLE_COORDINATES)
    if trip.status is not OutcomeStatus.SUCCESS:
        print(f"   [ERROR] {trip.status.value}: {trip.reason}")
        return 1
    print(f"   [OK] Trip positions per input point: {trip.data}")

    print("3. Route request...")
    route = client.route(SAMPLE_COORDINATES)
    if route.status is not OutcomeStatus.SUCCESS:
        print(f"   [ERROR] {route.status.value}: {route.reason}")
        return 1
    print(f"   [OK] Route geometry has {len(route.data)} points")

    print()
    print("[SUCCESS] OSRM is connected and working!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
