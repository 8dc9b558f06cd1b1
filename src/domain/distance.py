"""
Distance calculation using the Haversine formula, plus the bounding-box
prefilter used to narrow datastore candidates before exact filtering.

Assumption
----------
Barbers are matched on great-circle (Haversine) distance rather than real
walking / road distance.  The bounding box is a cheap *superset* of the
search circle: it may admit points near its corners that the exact
Haversine check then discards.

Complexity: O(1) per call.
"""

from __future__ import annotations

import math

from .entities import BoundingBox

EARTH_RADIUS_KM = 6_371.0
KM_PER_DEGREE_LAT = 111.0


def haversine_km(
    lat1: float, lng1: float, lat2: float, lng2: float
) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    # rounding can push ``a`` a hair past 1.0 for antipodal points
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, a)))


def bounding_box(lat: float, lng: float, radius_km: float) -> BoundingBox:
    """
    Rectangle around (lat, lng) that contains every point within
    ``radius_km``.

    One degree of latitude is ~111 km everywhere; a degree of longitude
    shrinks by ``cos(lat)``.  Near the poles that delta diverges, and a box
    that would wrap the antimeridian cannot be expressed as a single range,
    so in both cases the longitude bounds widen to the full [-180, 180].
    """
    lat_delta = radius_km / KM_PER_DEGREE_LAT
    min_lat = max(-90.0, lat - lat_delta)
    max_lat = min(90.0, lat + lat_delta)

    cos_lat = math.cos(math.radians(lat))
    lng_delta = radius_km / (KM_PER_DEGREE_LAT * cos_lat) if cos_lat > 1e-12 else math.inf

    min_lng, max_lng = lng - lng_delta, lng + lng_delta
    if (
        not math.isfinite(lng_delta)
        or lng_delta >= 180.0
        or min_lng < -180.0
        or max_lng > 180.0
    ):
        min_lng, max_lng = -180.0, 180.0

    return BoundingBox(
        min_lat=min_lat, max_lat=max_lat, min_lng=min_lng, max_lng=max_lng
    )
