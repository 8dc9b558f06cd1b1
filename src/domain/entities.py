"""
Domain value objects and read models.

These are plain dataclasses handed between the services and the API layer
so that neither depends on ORM instances leaking out of a session.

- ``BoundingBox``   -- rectangular lat/lng prefilter region.
- ``Principal``     -- the verified subject behind a bearer token.
- ``LeaveResult``   -- recoverable outcome of leaving / removing from a queue.
- ``QueueStatus``   -- a user's live position and wait estimate.
- ``NearbyBarber``  -- a search hit annotated with queue load.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .enums import Role


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, lat: float, lng: float) -> bool:
        """Inclusive on every edge."""
        return (
            self.min_lat <= lat <= self.max_lat
            and self.min_lng <= lng <= self.max_lng
        )


@dataclass(frozen=True)
class Principal:
    subject_id: int
    role: Role


@dataclass(frozen=True)
class BarberSummary:
    id: int
    name: str


@dataclass(frozen=True)
class UserSummary:
    id: int
    name: str


# ── Read models ───────────────────────────────────────────────────────


@dataclass
class QueueSlot:
    """One queue entry with the summaries of both sides joined in."""

    id: int
    user: UserSummary
    barber: BarberSummary
    entered_at: datetime
    service_type: Optional[str] = None
    position: Optional[int] = None


@dataclass
class LeaveResult:
    success: bool
    removed_from: Optional[BarberSummary] = None
    removed_at: Optional[datetime] = None
    reason: Optional[str] = None

    @classmethod
    def removed(cls, barber: BarberSummary, at: datetime) -> "LeaveResult":
        return cls(success=True, removed_from=barber, removed_at=at)

    @classmethod
    def failed(cls, reason: str) -> "LeaveResult":
        return cls(success=False, reason=reason)


@dataclass
class QueueStatus:
    in_queue: bool = False
    queue_position: Optional[int] = None
    barber: Optional[BarberSummary] = None
    entered_at: Optional[datetime] = None
    service_type: Optional[str] = None
    estimated_wait_time: Optional[int] = None


@dataclass
class NearbyBarber:
    id: int
    name: str
    username: str
    lat: float
    long: float
    distance_km: float
    queue_length: int
    estimated_wait_time: int
