"""Great-circle distance between geographic coordinates."""

from dataclasses import dataclass
from math import asin, cos, radians, sin, sqrt

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinate:
    """A point on the globe, in decimal degrees."""

    lat: float
    lng: float


def distance_km(a, b) -> float:
    """Return the haversine distance in kilometres between ``a`` and ``b``.

    Both arguments only need ``lat`` and ``lng`` attributes in degrees, so
    coordinates, request payloads and stored addresses can be mixed freely.
    The result does not depend on argument order and is exactly ``0.0`` for
    identical points.
    """
    lat1, lat2 = radians(a.lat), radians(b.lat)
    # absolute deltas keep the result bit-for-bit symmetric
    dlat = abs(lat2 - lat1)
    dlng = abs(radians(b.lng) - radians(a.lng))

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlng / 2) ** 2
    # rounding can push h slightly outside [0, 1] near antipodes
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * asin(sqrt(h))
