"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from ...models.domain import Stop

T = TypeVar("T")


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    RATE_LIMITED = "rate_limited"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class ServiceResult(Generic[T]):
    """Outcome of a call to an external routing service.

    Callers branch on ``status`` to pick a fallback; network and protocol
    problems never escape as exceptions.
    """

    status: OutcomeStatus
    data: Optional[T] = None
    reason: Optional[str] = None

    @classmethod
    def ok(cls, data: T) -> "ServiceResult[T]":
        return cls(status=OutcomeStatus.SUCCESS, data=data)

    @classmethod
    def rate_limited(cls, reason: str = "rate limit exceeded") -> "ServiceResult[T]":
        return cls(status=OutcomeStatus.RATE_LIMITED, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> "ServiceResult[T]":
        return cls(status=OutcomeStatus.FAILED, reason=reason)

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS


@dataclass(slots=True, frozen=True)
class TripPoint:
    """Candidate trip waypoint; ``stop`` is None for a synthetic start point."""

    latitude: float
    longitude: float
    stop: Optional[Stop] = None


class SequencingStrategy(str, Enum):
    OSRM_TRIP = "osrm_trip"
    HEURISTIC = "heuristic"
    SKIPPED = "skipped"


class GeometrySource(str, Enum):
    OSRM = "osrm"
    STRAIGHT_LINE = "straight_line"
    CLEARED = "cleared"


@dataclass(slots=True)
class GeometryResult:
    territory_id: int
    source: GeometrySource
    coordinates: Optional[List[tuple[float, float]]]


@dataclass(slots=True)
class SequencingResult:
    territory_id: int
    strategy: SequencingStrategy
    stop_ids: List[int]
    geometry: Optional[GeometryResult] = None


@dataclass(slots=True)
class BulkResult:
    action: str
    processed: int
    failed_territory_ids: List[int] = field(default_factory=list)
