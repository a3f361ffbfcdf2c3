"""Conductor sag under wind and ice loading."""

import math
from typing import Any, Optional, Tuple

import numpy as np

from ..config import (
    DEFAULT_CABLE_DIAMETER_IN,
    DEFAULT_CABLE_TENSION_LB,
    DEFAULT_ICE_THICKNESS_IN,
    DEFAULT_WIND_SPEED_MPH,
    ICE_DENSITY_LB_FT3,
    WIND_PRESSURE_COEFFICIENT,
)
from ..core.models import CableSpec, SpanLoadResult


def _number(value: Any, default: float) -> float:
    """Coerce to a finite float, using the default otherwise."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def ice_weight_per_ft(cable_diameter_in: float, ice_thickness_in: float) -> float:
    """Weight of a radial ice shell in lb/ft."""
    diameter = max(0.0, cable_diameter_in)
    iced = diameter + 2 * max(0.0, ice_thickness_in)
    area_sq_in = math.pi / 4 * (iced * iced - diameter * diameter)
    return ICE_DENSITY_LB_FT3 * area_sq_in / 144


def wind_load_per_ft(wind_speed_mph: float, iced_diameter_in: float) -> float:
    """Horizontal wind load on the projected (iced) cable in lb/ft."""
    wind = max(0.0, wind_speed_mph)
    pressure = WIND_PRESSURE_COEFFICIENT * wind * wind
    return pressure * max(0.0, iced_diameter_in) / 12


def effective_weight(
    weight_lb_per_ft: float,
    wind_speed_mph: float = DEFAULT_WIND_SPEED_MPH,
    cable_diameter_in: float = DEFAULT_CABLE_DIAMETER_IN,
    ice_thickness_in: float = DEFAULT_ICE_THICKNESS_IN,
) -> float:
    """Resultant per-foot load of gravity (cable + ice) and wind.

    Wind acts horizontally and gravity vertically, so the two combine as a
    vector magnitude rather than a sum.
    """
    weight = max(0.0, _number(weight_lb_per_ft, 0.0))
    diameter = max(0.0, _number(cable_diameter_in, DEFAULT_CABLE_DIAMETER_IN))
    ice = max(0.0, _number(ice_thickness_in, DEFAULT_ICE_THICKNESS_IN))
    wind = max(0.0, _number(wind_speed_mph, DEFAULT_WIND_SPEED_MPH))

    vertical = weight + ice_weight_per_ft(diameter, ice)
    horizontal = wind_load_per_ft(wind, diameter + 2 * ice)
    return math.hypot(vertical, horizontal)


def calculate_sag(
    span_ft: float,
    weight_lb_per_ft: float,
    tension_lb: float,
    wind_speed_mph: float = DEFAULT_WIND_SPEED_MPH,
    cable_diameter_in: float = DEFAULT_CABLE_DIAMETER_IN,
    ice_thickness_in: float = DEFAULT_ICE_THICKNESS_IN,
) -> float:
    """Calculate conductor sag using the parabolic approximation.

    Uses the formula: sag = w_eff * L^2 / (8 * T)
    where:
    - w_eff: Resultant of cable, ice and wind load (lb/ft)
    - L: Span length (ft)
    - T: Horizontal tension (lb)

    Sag never decreases with span and never increases with tension.

    Args:
        span_ft: Span length in feet (negative treated as 0)
        weight_lb_per_ft: Bare cable weight in lb/ft
        tension_lb: Cable tension in lb (at least 1 lb)
        wind_speed_mph: Wind speed in mph
        cable_diameter_in: Cable diameter in inches
        ice_thickness_in: Radial ice thickness in inches

    Returns:
        Sag in feet
    """
    span = max(0.0, _number(span_ft, 0.0))
    tension = max(1.0, _number(tension_lb, DEFAULT_CABLE_TENSION_LB))
    w_eff = effective_weight(
        weight_lb_per_ft, wind_speed_mph, cable_diameter_in, ice_thickness_in
    )
    return (w_eff * span * span) / (8 * tension)


def span_profile(
    span_ft: float,
    attach_a_ft: float,
    attach_b_ft: float,
    sag_ft: float,
    samples: int = 51,
) -> Tuple[np.ndarray, np.ndarray]:
    """Sample the sagged conductor height along a span.

    The profile is the chord between the two attachments minus a parabola
    whose depth at midspan equals the sag.

    Returns:
        Tuple of (distance_ft, height_ft) arrays
    """
    if span_ft <= 0:
        return np.array([0.0]), np.array([float(attach_a_ft)])

    x = np.linspace(0.0, span_ft, max(2, samples))
    chord = attach_a_ft + (attach_b_ft - attach_a_ft) * x / span_ft
    drop = 4.0 * sag_ft * (x / span_ft) * ((span_ft - x) / span_ft)
    return x, chord - drop


def calculate_span_load(
    span_ft: float,
    attach_a_ft: Optional[float],
    attach_b_ft: Optional[float],
    cable_spec: CableSpec,
    wind_speed_mph: float = DEFAULT_WIND_SPEED_MPH,
    ice_thickness_in: float = DEFAULT_ICE_THICKNESS_IN,
    cable_diameter_in: Optional[float] = None,
) -> SpanLoadResult:
    """Sag and midspan height for a span between two attachments.

    Midspan height is the mean of both attach heights minus sag. When the
    far-end height is unknown the near-end height is used for both. A span
    of zero is not applicable: sag is 0 and midspan is None.

    Args:
        span_ft: Span length in feet
        attach_a_ft: Attach height at this pole
        attach_b_ft: Attach height at the adjacent pole
        cable_spec: Attachment cable
        wind_speed_mph: Wind speed in mph
        ice_thickness_in: Radial ice in inches
        cable_diameter_in: Override of the catalogue diameter

    Returns:
        Span load result
    """
    span = max(0.0, _number(span_ft, 0.0))
    wind = max(0.0, _number(wind_speed_mph, DEFAULT_WIND_SPEED_MPH))
    ice = max(0.0, _number(ice_thickness_in, DEFAULT_ICE_THICKNESS_IN))
    diameter = _number(cable_diameter_in, cable_spec.diameter_in)
    if diameter <= 0:
        diameter = cable_spec.diameter_in

    sag = calculate_sag(
        span,
        cable_spec.unit_weight_lb_per_ft,
        cable_spec.rated_tension_lb,
        wind,
        diameter,
        ice,
    )

    if span <= 0 or attach_a_ft is None or not math.isfinite(sag):
        return SpanLoadResult(
            span_ft=span,
            wind_mph=wind,
            ice_in=ice,
            sag_ft=0.0,
            attach_a_ft=attach_a_ft,
            attach_b_ft=attach_b_ft,
        )

    far_end = attach_b_ft if attach_b_ft is not None else attach_a_ft
    midspan = (attach_a_ft + far_end) / 2 - sag
    _, heights = span_profile(span, attach_a_ft, far_end, sag)
    low_point = float(np.min(heights))

    return SpanLoadResult(
        span_ft=span,
        wind_mph=wind,
        ice_in=ice,
        sag_ft=sag,
        attach_a_ft=attach_a_ft,
        attach_b_ft=far_end,
        midspan_ft=midspan,
        low_point_ft=low_point if math.isfinite(low_point) else None,
    )
