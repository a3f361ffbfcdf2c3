"""Make-ready assessment for existing lines."""

import math
from typing import Any, Optional, Tuple

from ..config import COSTS, LINE_SEPARATION_IN
from ..core.models import MakeReadyItem
from ..core.units import parse_feet, round_half_up

_POWER_WORDS = ("power", "primary", "secondary", "electric")


def required_separation_in(line_type: Optional[str]) -> Tuple[float, float]:
    """Separation a communication attachment needs from an existing line.

    Returns:
        Tuple of (at_pole_in, midspan_in)
    """
    kind = str(line_type or "").strip().lower()
    if "drop" in kind:
        return LINE_SEPARATION_IN["drop"]
    if "neutral" in kind:
        return LINE_SEPARATION_IN["neutral"]
    if any(word in kind for word in _POWER_WORDS):
        return LINE_SEPARATION_IN["power"]
    return LINE_SEPARATION_IN["communication"]


def analyze_make_ready_impact(
    existing_ft: Any,
    proposed_ft: Any,
    min_separation_ft: Any,
    rate_per_inch: float = COSTS["make_ready_per_inch"],
) -> Optional[MakeReadyItem]:
    """Assess whether an existing line must move for the new attachment.

    The line keeps its side of the proposed attachment: a line above the
    proposed height is raised, a line below is lowered, each to exactly the
    minimum separation. Lowered lines stop at grade.

    Args:
        existing_ft: Existing line height (feet or text)
        proposed_ft: Proposed attachment height (feet or text)
        min_separation_ft: Required separation in feet
        rate_per_inch: Cost per inch of movement

    Returns:
        Make-ready item, or None when any input is missing or non-finite
        or the movement is too large to express in inches
    """
    existing = parse_feet(existing_ft)
    proposed = parse_feet(proposed_ft)
    min_sep = parse_feet(min_separation_ft)
    if existing is None or proposed is None or min_sep is None:
        return None

    separation = abs(existing - proposed)
    shortfall = max(0.0, min_sep - separation)
    if not math.isfinite(shortfall * 12):
        return None
    required = shortfall > 1e-9
    if not required:
        return MakeReadyItem(
            required=False,
            adjustment_in=0,
            recommended_height_ft=existing,
            estimated_cost=0.0,
            existing_height_ft=existing,
        )

    if existing >= proposed:
        recommended = proposed + min_sep
    else:
        recommended = max(0.0, proposed - min_sep)
    adjustment_in = round_half_up(shortfall * 12)

    return MakeReadyItem(
        required=True,
        adjustment_in=adjustment_in,
        recommended_height_ft=recommended,
        estimated_cost=adjustment_in * rate_per_inch,
        existing_height_ft=existing,
    )
