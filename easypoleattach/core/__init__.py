"""Core data models and measurement handling."""

from .models import (
    AnalysisFailure,
    AnalysisInputs,
    AnalysisOutcome,
    AnalysisResult,
    AnalysisSuccess,
    CableSpec,
    ClearanceOverrides,
    ClearanceProfile,
    Environment,
    ExistingLine,
    SpanSegment,
    UtilityPreset,
    VoltageClass,
)
from .units import format_feet_inches, parse_feet

__all__ = [
    "AnalysisFailure",
    "AnalysisInputs",
    "AnalysisOutcome",
    "AnalysisResult",
    "AnalysisSuccess",
    "CableSpec",
    "ClearanceOverrides",
    "ClearanceProfile",
    "Environment",
    "ExistingLine",
    "SpanSegment",
    "UtilityPreset",
    "VoltageClass",
    "format_feet_inches",
    "parse_feet",
]
