"""Easy Pole Attach - Communication attachment clearance, sag and make-ready analysis."""

__version__ = "0.1.0"

# Core functionality
from .core.pipeline import AnalysisConfig, AttachmentAnalysisPipeline, compute_analysis

# Core models
from .core.models import (
    AnalysisFailure,
    AnalysisInputs,
    AnalysisResult,
    AnalysisSuccess,
    CableSpec,
    ClearanceOverrides,
    ExistingLine,
    SpanSegment,
)
from .core.units import format_feet_inches, parse_feet

# Main convenience function
__all__ = [
    "compute_analysis",
    "AttachmentAnalysisPipeline",
    "AnalysisConfig",
    "AnalysisInputs",
    "AnalysisResult",
    "AnalysisSuccess",
    "AnalysisFailure",
    "CableSpec",
    "ClearanceOverrides",
    "ExistingLine",
    "SpanSegment",
    "parse_feet",
    "format_feet_inches",
]
