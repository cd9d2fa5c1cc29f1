"""
Geospatial helpers.

A tiny geometry layer (great-circle distance, point-in-polygon) so the catalog
can answer queries without pulling in heavier GIS dependencies.
"""

from __future__ import annotations

from collections.abc import Sequence
from math import atan2, cos, pi, sin, sqrt

from agrospace.domain.models import Location

EARTH_RADIUS_M = 6_371_000


def to_radians(degrees: float) -> float:
    return degrees * pi / 180


def haversine_m(a: Location, b: Location) -> float:
    """Compute great-circle distance in meters between two points."""
    dlat = to_radians(b.lat - a.lat)
    dlng = to_radians(b.lng - a.lng)

    h = sin(dlat / 2) ** 2 + cos(to_radians(a.lat)) * cos(to_radians(b.lat)) * sin(dlng / 2) ** 2
    # Rounding can leave h just outside [0, 1] near antipodes.
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_M * 2 * atan2(sqrt(h), sqrt(1 - h))


def contains_point(polygon: Sequence[Location], p: Location) -> bool:
    """Even-odd ray casting test; the ring is closed implicitly (last point -> first).

    Points exactly on an edge or vertex may be classified either way.
    """
    n = len(polygon)
    if n < 3:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        vi = polygon[i]
        vj = polygon[j]
        if (vi.lat > p.lat) != (vj.lat > p.lat):
            crossing_lng = (vj.lng - vi.lng) * (p.lat - vi.lat) / (vj.lat - vi.lat) + vi.lng
            if p.lng < crossing_lng:
                inside = not inside
        j = i
    return inside
