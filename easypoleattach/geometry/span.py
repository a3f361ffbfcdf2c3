"""Great-circle span length between two poles."""

import math
from typing import Any, Optional, Tuple

from ..core.units import parse_number

EARTH_RADIUS_M = 6371000.0
FEET_PER_METER = 3.28084


def _coordinate(value: Any, limit: float) -> Optional[float]:
    number = parse_number(value)
    if number is None or abs(number) > limit:
        return None
    return number


def _coordinates(
    lat1: Any, lon1: Any, lat2: Any, lon2: Any
) -> Optional[Tuple[float, float, float, float]]:
    values = (
        _coordinate(lat1, 90.0),
        _coordinate(lon1, 180.0),
        _coordinate(lat2, 90.0),
        _coordinate(lon2, 180.0),
    )
    if any(v is None for v in values):
        return None
    return values  # type: ignore[return-value]


def haversine_ft(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in feet.

    Args:
        lat1: Latitude of the first point (degrees)
        lon1: Longitude of the first point (degrees)
        lat2: Latitude of the second point (degrees)
        lon2: Longitude of the second point (degrees)

    Returns:
        Distance in feet
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(max(0.0, 1 - a)))
    return EARTH_RADIUS_M * c * FEET_PER_METER


def estimate_span_ft(lat1: Any, lon1: Any, lat2: Any, lon2: Any) -> Optional[float]:
    """Span length from pole coordinates.

    Returns:
        Span in feet, or None when a coordinate is missing, out of range
        or both poles share a location
    """
    coords = _coordinates(lat1, lon1, lat2, lon2)
    if coords is None:
        return None
    distance = haversine_ft(*coords)
    if not math.isfinite(distance) or distance <= 0:
        return None
    return distance


def midpoint(lat1: Any, lon1: Any, lat2: Any, lon2: Any) -> Optional[Tuple[float, float]]:
    """Great-circle midpoint of a span as (lat, lon) degrees."""
    coords = _coordinates(lat1, lon1, lat2, lon2)
    if coords is None:
        return None
    phi1, lambda1, phi2, lambda2 = (math.radians(v) for v in coords)

    bx = math.cos(phi2) * math.cos(lambda2 - lambda1)
    by = math.cos(phi2) * math.sin(lambda2 - lambda1)
    phi_m = math.atan2(
        math.sin(phi1) + math.sin(phi2),
        math.sqrt((math.cos(phi1) + bx) ** 2 + by**2),
    )
    lambda_m = lambda1 + math.atan2(by, math.cos(phi1) + bx)
    lon = (math.degrees(lambda_m) + 540.0) % 360.0 - 180.0
    return math.degrees(phi_m), lon
