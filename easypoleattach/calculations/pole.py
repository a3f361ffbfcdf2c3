"""Pole burial depth, above-ground height and class selection."""

import math
from typing import Optional

from ..config import (
    BURIAL_FRACTION,
    BURIAL_OFFSET_FT,
    MIN_BURIAL_FT,
    POLE_CLASS_CAPACITY_LBF,
    REPLACEMENT_MARGIN_FT,
    STANDARD_POLE_STEP_FT,
)
from ..core.models import PoleGeometry, PoleReplacement

# Height brackets (upper bound, typical class) used for UI hinting
_TYPICAL_CLASS_BY_HEIGHT = [
    (30.0, "Class 6 typical"),
    (35.0, "Class 4-5 typical"),
    (40.0, "Class 3-4 typical"),
    (45.0, "Class 2-3 typical"),
]
_TALL_POLE_CLASS = "Class 1-2 typical"


def _finite_or_zero(value: Optional[float]) -> float:
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def calculate_burial_depth(total_height_ft: float) -> float:
    """Setting depth: 10% of pole length plus 2 ft, at least 5 ft."""
    height = _finite_or_zero(total_height_ft)
    return max(MIN_BURIAL_FT, height * BURIAL_FRACTION + BURIAL_OFFSET_FT)


def typical_class_for_height(total_height_ft: float) -> str:
    """Typical wood pole class for a given length."""
    height = _finite_or_zero(total_height_ft)
    for upper, label in _TYPICAL_CLASS_BY_HEIGHT:
        if height <= upper:
            return label
    return _TALL_POLE_CLASS


def get_pole_burial_data(total_height_ft: float, class_label: str = "") -> PoleGeometry:
    """Derive burial and above-ground geometry for a pole.

    Uses the setting rule ``buried = max(5, 0.1 * h + 2)``. A pathologically
    short pole still yields a result with zero above-ground height; the
    caller decides how to report it.

    Args:
        total_height_ft: Total pole length in feet
        class_label: Field class (e.g. "Class 3"); blank uses the typical class

    Returns:
        Pole geometry
    """
    height = _finite_or_zero(total_height_ft)
    buried = calculate_burial_depth(height)
    above_ground = max(0.0, height - buried)
    recommended = typical_class_for_height(height)

    return PoleGeometry(
        input_height_ft=height,
        buried_ft=buried,
        above_ground_ft=above_ground,
        class_label=class_label or recommended,
        recommended_class_label=recommended,
    )


def pole_class_capacity(class_label: Optional[str]) -> Optional[float]:
    """Nominal horizontal capacity (lbf) for a class label, if known."""
    if not class_label:
        return None
    label = str(class_label).strip().lower()
    for name, capacity in POLE_CLASS_CAPACITY_LBF.items():
        if label == name.lower() or label == name.split()[-1]:
            return capacity
    return None


def recommend_pole_class(required_load_lbf: float) -> Optional[str]:
    """Weakest pole class whose nominal capacity covers the load.

    Returns:
        Class label, or None when no listed class is strong enough
    """
    load = _finite_or_zero(required_load_lbf)
    for name, capacity in sorted(POLE_CLASS_CAPACITY_LBF.items(), key=lambda x: x[1]):
        if capacity >= load:
            return name
    return None


def recommend_pole_replacement(
    pole_height_ft: float, required_above_ground_ft: float
) -> PoleReplacement:
    """Recommend a taller pole when the existing one lacks height.

    Replacement is suggested when the above-ground height leaves less than
    2 ft of margin over the required height. The suggestion is the shortest
    standard length (5 ft steps) that restores that margin.

    Args:
        pole_height_ft: Existing pole length in feet
        required_above_ground_ft: Highest point needed above ground

    Returns:
        Replacement recommendation
    """
    height = _finite_or_zero(pole_height_ft)
    required = _finite_or_zero(required_above_ground_ft)
    margin = get_pole_burial_data(height).above_ground_ft - required

    if margin >= REPLACEMENT_MARGIN_FT:
        return PoleReplacement(replace=False, suggested_height_ft=height, margin_ft=margin)

    # Above ground is min(h - 5, 0.9h - 2); solve both branches for h
    target = required + REPLACEMENT_MARGIN_FT
    needed = max(
        target + MIN_BURIAL_FT,
        (target + BURIAL_OFFSET_FT) / (1 - BURIAL_FRACTION),
    )
    if not math.isfinite(needed):
        return PoleReplacement(replace=True, suggested_height_ft=height, margin_ft=margin)
    suggested = max(
        float(STANDARD_POLE_STEP_FT),
        math.ceil(needed / STANDARD_POLE_STEP_FT) * STANDARD_POLE_STEP_FT,
    )

    return PoleReplacement(replace=True, suggested_height_ft=float(suggested), margin_ft=margin)
