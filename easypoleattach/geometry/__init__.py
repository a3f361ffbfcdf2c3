"""Span geometry from pole coordinates."""

from .span import estimate_span_ft, haversine_ft, midpoint

__all__ = [
    "haversine_ft",
    "estimate_span_ft",
    "midpoint",
]
