"""
Nearby Barber Search
====================

1. **Validate**  -- lat in [-90, 90], lng in [-180, 180], radius > 0.
2. **Prefilter** -- bounding box turned into an indexed range query.
3. **Exact**     -- Haversine distance per candidate; anything farther
   than the radius is dropped (box corners admit a few).
4. **Annotate**  -- queue length and the wait a newcomer would face.

Complexity
----------
Let B = barbers inside the box and Q = their total queue entries.
O(B log B + Q): one distance per candidate, one sort, one pass over
queues for the wait estimate.
"""

from __future__ import annotations

import logging
import math

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.distance import bounding_box, haversine_km
from src.domain.entities import NearbyBarber
from src.domain.exceptions import ValidationError
from src.domain.waiting import estimate_wait
from src.infrastructure.repositories import BarberRepository

logger = logging.getLogger(__name__)


def validate_search(lat: float, lng: float, radius_km: float) -> None:
    if not (math.isfinite(lat) and -90 <= lat <= 90):
        raise ValidationError("Latitude must be between -90 and 90")
    if not (math.isfinite(lng) and -180 <= lng <= 180):
        raise ValidationError("Longitude must be between -180 and 180")
    if not (math.isfinite(radius_km) and radius_km > 0):
        raise ValidationError("Radius must be a positive, finite number")


async def find_nearby(
    db: AsyncSession, lat: float, lng: float, radius_km: float
) -> list[NearbyBarber]:
    """Barbers within *radius_km* of (lat, lng), nearest first."""
    validate_search(lat, lng, radius_km)

    box = bounding_box(lat, lng, radius_km)
    candidates = await BarberRepository(db).find_in_box(box)

    hits: list[NearbyBarber] = []
    for barber in candidates:
        distance = haversine_km(lat, lng, barber.lat, barber.long)
        if distance > radius_km:
            continue
        hits.append(
            NearbyBarber(
                id=barber.id,
                name=barber.name,
                username=barber.username,
                lat=barber.lat,
                long=barber.long,
                distance_km=distance,
                queue_length=len(barber.queue_entries),
                estimated_wait_time=estimate_wait(barber.queue_entries),
            )
        )
    hits.sort(key=lambda b: (b.distance_km, b.id))

    logger.info(
        "Nearby search (%.4f, %.4f) r=%.2fkm: %d candidates, %d within radius",
        lat, lng, radius_km, len(candidates), len(hits),
    )
    return hits
