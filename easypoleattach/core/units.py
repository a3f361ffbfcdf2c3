"""Feet-and-inches measurement parsing and formatting."""

import math
import re
from typing import Any, Optional, Tuple

_INCH_MARK = r"(?:\"\"|''|\"|in|inch|inches)"
_FOOT_MARK = r"(?:'|ft|feet|foot)"
_NUMBER = r"(\d+(?:\.\d+)?)"

INCHES_ONLY = re.compile(rf"^{_NUMBER}\s*{_INCH_MARK}$")
FEET_ONLY = re.compile(rf"^{_NUMBER}\s*{_FOOT_MARK}$")
FEET_AND_INCHES = re.compile(rf"^{_NUMBER}\s*{_FOOT_MARK}\s*{_NUMBER}\s*{_INCH_MARK}?$")
PLAIN_NUMBER = re.compile(r"^[-+]?(?:\d+(?:\.\d*)?|\.\d+)$")

PLACEHOLDER = "--"


def parse_feet(value: Any) -> Optional[float]:
    """Parse a height measurement into decimal feet.

    Accepts feet only (``15'``, ``15ft``), inches only (``6"``, ``6in``),
    feet and inches (``35' 6"``, ``35ft 6in``, ``35'6``) or a bare decimal
    taken as feet (``15.5``). Numbers pass through unchanged.

    Args:
        value: Text or number to parse

    Returns:
        Decimal feet, or None when the value is blank or cannot be
        interpreted (so callers can tell "missing" from zero)
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None

    text = str(value).strip().lower()
    if not text:
        return None

    match = INCHES_ONLY.match(text)
    if match:
        return float(match.group(1)) / 12

    match = FEET_ONLY.match(text)
    if match:
        return float(match.group(1))

    match = FEET_AND_INCHES.match(text)
    if match:
        return float(match.group(1)) + float(match.group(2)) / 12

    if PLAIN_NUMBER.match(text):
        return float(text)

    return None


def parse_number(value: Any) -> Optional[float]:
    """Parse a plain finite number (mph, inches, degrees), else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not PLAIN_NUMBER.match(text):
            return None
        number = float(text)
    return number if math.isfinite(number) else None


def _split_feet_inches(feet: float) -> Tuple[str, int, int]:
    sign = "-" if feet < 0 else ""
    magnitude = abs(feet)
    whole = math.floor(magnitude)
    inches = round_half_up((magnitude - whole) * 12)
    if inches >= 12:
        whole += 1
        inches = 0
    if whole == 0 and inches == 0:
        sign = ""
    return sign, int(whole), int(inches)


def _as_finite(feet: Any) -> Optional[float]:
    if feet is None or isinstance(feet, bool):
        return None
    try:
        number = float(feet)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def format_feet_inches(
    feet: Any, compact: bool = False, tick_marks: bool = False
) -> str:
    """Format decimal feet as whole feet and rounded inches.

    Inches are rounded half-up; a result of 12 carries into the next foot.

    Args:
        feet: Decimal feet
        compact: Use the short tick-mark form
        tick_marks: Use the tick-mark form (``18' 6"``) instead of the
            verbose form (``18ft 6in``)

    Returns:
        Formatted string, or ``--`` for missing/non-finite values
    """
    value = _as_finite(feet)
    if value is None:
        return PLACEHOLDER
    sign, whole, inches = _split_feet_inches(value)
    if tick_marks or compact:
        return f"{sign}{whole}' {inches}\""
    return f"{sign}{whole}ft {inches}in"


def format_feet_inches_tick_marks(feet: Any) -> str:
    """Format as ``18' 6"``."""
    return format_feet_inches(feet, tick_marks=True)


def format_feet_inches_verbose(feet: Any) -> str:
    """Format as ``18ft 6in``."""
    return format_feet_inches(feet)


def feet_to_inches(feet: float) -> float:
    return feet * 12


def inches_to_feet(inches: float) -> float:
    return inches / 12


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Raises:
        ValueError: If the value is infinite or NaN
    """
    if not math.isfinite(value):
        raise ValueError(f"Cannot round non-finite value: {value}")
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def format_inches(feet: Any) -> str:
    """Format decimal feet as whole inches (``40"``), ``--`` when not finite."""
    value = _as_finite(feet)
    if value is None or not math.isfinite(value * 12):
        return PLACEHOLDER
    return f"{round_half_up(value * 12)}\""
