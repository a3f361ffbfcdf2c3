"""Down guy sizing and line-angle pull geometry."""

import logging
import math
from types import MappingProxyType
from typing import Mapping, Optional

from ..config import (
    COSTS,
    DEFAULT_PULL_BASE_SPAN_FT,
    DEFAULT_WIND_SPEED_MPH,
    GUY_ANGLE_RANGE,
    GUY_ATTACH_FRACTION,
    GUY_DEFAULT_ANGLE_DEG,
    GUY_REQUIRED_TENSION_LB,
    GUY_UNBALANCED_FRACTION,
)
from ..core.models import CableSpec, GuyResult, PullAutofill
from ..core.units import parse_number, round_half_up
from .sag import wind_load_per_ft

logger = logging.getLogger(__name__)


def clamp(value: float, lower: float, upper: float) -> float:
    """Limit a value to the closed interval [lower, upper]."""
    return max(lower, min(upper, value))


def deg_to_rad(degrees: float) -> float:
    return degrees * math.pi / 180


def rad_to_deg(radians: float) -> float:
    return radians * 180 / math.pi


def normalize_bearing_deg(bearing_deg: float) -> float:
    """Wrap a bearing into [0, 360)."""
    bearing = float(bearing_deg) % 360.0
    return 0.0 if bearing >= 360.0 else bearing


def pull_from_angle_deg(
    theta_deg: float, base_span_ft: float = DEFAULT_PULL_BASE_SPAN_FT
) -> float:
    """Lateral pull for a line angle.

    Uses ``pull = 2 * S * tan(theta / 4)`` where S is the base span. For
    small angles this matches the chord offset ``S * sin(theta / 2)``, and
    unlike the chord it stays invertible up to 180 deg (pull = 2 * S).
    Angles outside [0, 180] are clamped.

    Args:
        theta_deg: Line angle (deflection) in degrees
        base_span_ft: Reference span in feet

    Returns:
        Pull in feet
    """
    theta = clamp(theta_deg, 0.0, 180.0)
    return 2 * base_span_ft * math.tan(deg_to_rad(theta) / 4)


def angle_deg_from_pull(
    pull_ft: float, base_span_ft: float = DEFAULT_PULL_BASE_SPAN_FT
) -> float:
    """Line angle for a measured pull; inverse of :func:`pull_from_angle_deg`."""
    if base_span_ft <= 0:
        return 0.0
    ratio = clamp(pull_ft / (2 * base_span_ft), 0.0, 1.0)
    return rad_to_deg(4 * math.atan(ratio))


def normalize_included_angle_deg(bearing_a_deg: float, bearing_b_deg: float) -> float:
    """Smallest angle between two bearings, in [0, 180].

    Adding any multiple of 360 to either bearing gives the same result.
    """
    diff = abs(normalize_bearing_deg(bearing_a_deg) - normalize_bearing_deg(bearing_b_deg))
    return 360.0 - diff if diff > 180.0 else diff


def compute_pull_autofill(
    incoming_bearing_deg: float,
    outgoing_bearing_deg: float,
    base_span_ft: float = DEFAULT_PULL_BASE_SPAN_FT,
) -> PullAutofill:
    """Suggest line angle and pull from the bearings of the two spans.

    Bearings of 0 and 180 deg (spans leaving in opposite directions) give
    an angle of 180 deg.
    """
    theta = normalize_included_angle_deg(incoming_bearing_deg, outgoing_bearing_deg)
    return PullAutofill(theta_deg=theta, pull_ft=pull_from_angle_deg(theta, base_span_ft))


# Sanity values at the default base span
PULL_EXAMPLES: Mapping[int, float] = MappingProxyType(
    {angle: pull_from_angle_deg(angle) for angle in (0, 60, 120, 180)}
)


def calculate_down_guy(
    pole_above_ground_ft: float,
    attachment_height_ft: float,
    cable_spec: Optional[CableSpec],
    span_length_ft: float,
    wind_speed_mph: float = DEFAULT_WIND_SPEED_MPH,
    pull_direction_deg: float = 0.0,
    deflection_deg: Optional[float] = None,
    guy_angle_deg: float = GUY_DEFAULT_ANGLE_DEG,
) -> Optional[GuyResult]:
    """Size a down guy for the horizontal load of a new attachment.

    The horizontal load at the attachment is the unbalanced line tension
    plus wind on the span. Unbalanced tension is ``2 T sin(deflection / 2)``
    when a line angle is known and ``0.1 T`` otherwise. Wind load is
    ``0.00256 V^2 * d/12 * L``.

    The guy attaches at 85% of the above-ground height. Taking moments
    about the ground line, the guy carries
    ``H * attach_height / guy_attach / sin(angle)`` where the angle is
    measured from the pole (clamped to 30-60 deg).

    Args:
        pole_above_ground_ft: Pole height above ground
        attachment_height_ft: Height of the new attachment
        cable_spec: Attachment cable
        span_length_ft: Span length in feet
        wind_speed_mph: Wind speed in mph
        pull_direction_deg: Bearing of the resultant pull
        deflection_deg: Line angle in degrees, if known
        guy_angle_deg: Guy angle from the pole

    Returns:
        Guy result, or None when the cable, span or attach height is
        missing or non-positive
    """
    span = parse_number(span_length_ft)
    attach = parse_number(attachment_height_ft)
    if cable_spec is None or span is None or attach is None or span <= 0 or attach <= 0:
        return None

    above_ground = parse_number(pole_above_ground_ft) or 0.0
    wind = parse_number(wind_speed_mph)
    if wind is None or wind < 0:
        wind = DEFAULT_WIND_SPEED_MPH

    tension = cable_spec.rated_tension_lb
    deflection = parse_number(deflection_deg)
    if deflection is not None:
        unbalanced = 2 * tension * math.sin(deg_to_rad(clamp(deflection, 0.0, 180.0)) / 2)
    else:
        unbalanced = tension * GUY_UNBALANCED_FRACTION
    wind_load = wind_load_per_ft(wind, cable_spec.diameter_in) * span
    horizontal = unbalanced + wind_load

    guy_attach = max(1.0, above_ground) * GUY_ATTACH_FRACTION
    angle = clamp(guy_angle_deg, GUY_ANGLE_RANGE["min"], GUY_ANGLE_RANGE["max"])
    lead = guy_attach * math.tan(deg_to_rad(angle))
    guy_tension = horizontal * attach / guy_attach / math.sin(deg_to_rad(angle))

    if not (math.isfinite(guy_tension) and math.isfinite(horizontal)):
        logger.debug(f"Guy tension not finite (span {span}, attach {attach})")
        return None

    required = guy_tension > GUY_REQUIRED_TENSION_LB
    cost = 0.0
    if required:
        variable = min(
            COSTS["guy_max_variable"],
            round_half_up(guy_tension / 10) * COSTS["guy_per_10_lb"],
        )
        cost = COSTS["guy_base"] + variable

    logger.debug(
        f"Guy: H={horizontal:.1f} lb, T={guy_tension:.1f} lb, "
        f"lead={lead:.1f} ft, required={required}"
    )

    pull_direction = parse_number(pull_direction_deg) or 0.0
    return GuyResult(
        required=required,
        tension_lb=guy_tension,
        angle_deg=angle,
        lead_distance_ft=lead,
        guy_attach_height_ft=guy_attach,
        pull_direction_deg=normalize_bearing_deg(pull_direction),
        horizontal_load_lb=horizontal,
        total_cost=float(cost),
    )
