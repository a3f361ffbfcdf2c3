"""Engineering calculations for pole attachments."""

from .clearances import (
    PRESETS,
    apply_overrides,
    apply_preset_object,
    apply_preset_to_clearances,
    controlling_environment,
    controlling_ground_target,
    get_environment_target,
    get_nesc_clearances,
    lookup_preset,
    preset_for_owner,
    resolve_clearances,
)
from .guying import (
    PULL_EXAMPLES,
    angle_deg_from_pull,
    calculate_down_guy,
    clamp,
    compute_pull_autofill,
    deg_to_rad,
    normalize_bearing_deg,
    normalize_included_angle_deg,
    pull_from_angle_deg,
    rad_to_deg,
)
from .make_ready import analyze_make_ready_impact, required_separation_in
from .pole import (
    calculate_burial_depth,
    get_pole_burial_data,
    pole_class_capacity,
    recommend_pole_class,
    recommend_pole_replacement,
    typical_class_for_height,
)
from .sag import (
    calculate_sag,
    calculate_span_load,
    effective_weight,
    ice_weight_per_ft,
    span_profile,
    wind_load_per_ft,
)

__all__ = [
    # Clearances
    "PRESETS",
    "get_nesc_clearances",
    "lookup_preset",
    "preset_for_owner",
    "apply_preset_object",
    "apply_preset_to_clearances",
    "apply_overrides",
    "resolve_clearances",
    "get_environment_target",
    "controlling_environment",
    "controlling_ground_target",
    # Pole geometry
    "calculate_burial_depth",
    "typical_class_for_height",
    "get_pole_burial_data",
    "pole_class_capacity",
    "recommend_pole_class",
    "recommend_pole_replacement",
    # Sag and loading
    "ice_weight_per_ft",
    "wind_load_per_ft",
    "effective_weight",
    "calculate_sag",
    "span_profile",
    "calculate_span_load",
    # Guying
    "clamp",
    "deg_to_rad",
    "rad_to_deg",
    "normalize_bearing_deg",
    "pull_from_angle_deg",
    "angle_deg_from_pull",
    "normalize_included_angle_deg",
    "compute_pull_autofill",
    "PULL_EXAMPLES",
    "calculate_down_guy",
    # Make-ready
    "analyze_make_ready_impact",
    "required_separation_in",
]
