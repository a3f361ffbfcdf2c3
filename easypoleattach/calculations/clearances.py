"""Clearance rule resolution: code baseline, utility presets and job overrides."""

import logging
from dataclasses import replace
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from ..config import (
    ENVIRONMENT_TARGETS,
    FIRST_ENERGY_OWNER_HINTS,
    NESC_CLEARANCES,
    POWER_RAILROAD_TARGET,
    ROAD_LIKE_ENVIRONMENTS,
    UTILITY_PRESETS,
)
from ..core.models import (
    ClearanceOverrides,
    ClearanceProfile,
    Environment,
    SpanSegment,
    UtilityPreset,
    VoltageClass,
)
from ..core.units import parse_feet, parse_number

logger = logging.getLogger(__name__)

# Read-only preset registry built once from config
PRESETS: Mapping[str, UtilityPreset] = MappingProxyType(
    {key: UtilityPreset.from_dict(key, data) for key, data in UTILITY_PRESETS.items()}
)

FIRST_ENERGY_PRESET_KEY = "firstEnergy"


def get_nesc_clearances(
    voltage: Union[str, VoltageClass] = VoltageClass.COMMUNICATION,
    environment: Optional[str] = Environment.ROAD.value,
) -> ClearanceProfile:
    """Build the code-baseline clearance profile.

    The selected environment decides which ground clearance applies (road
    value for road-like environments), but every environment target is
    carried so that several candidates can be compared later.

    Args:
        voltage: Voltage class; unknown values fall back to communication
        environment: Span environment key

    Returns:
        Fresh clearance profile in feet
    """
    voltage_class = VoltageClass.coerce(voltage)
    table = NESC_CLEARANCES[voltage_class.value]
    env = str(environment or Environment.ROAD.value)

    targets = dict(ENVIRONMENT_TARGETS)
    if voltage_class != VoltageClass.COMMUNICATION:
        targets[Environment.RAILROAD.value] = POWER_RAILROAD_TARGET

    ground = table["ground_road"] if env in ROAD_LIKE_ENVIRONMENTS else table["ground_other"]

    return ClearanceProfile(
        voltage=voltage_class.value,
        environment=env,
        ground_clearance=ground,
        road_clearance=table["road_clearance"],
        minimum_pole_top_space=table["minimum_pole_top_space"],
        power_clearance_distribution=table["power_clearance_distribution"],
        power_clearance_transmission=table["power_clearance_transmission"],
        comm_to_comm_vertical=table.get("comm_to_comm_vertical"),
        comm_to_comm_midspan=table.get("comm_to_comm_midspan"),
        neutral_clearance=table.get("neutral_clearance"),
        drop_wire_clearance=table.get("drop_wire_clearance"),
        environment_targets=targets,
    )


def _layer(
    profile: ClearanceProfile,
    values: Dict[str, float],
    env_targets: Mapping[str, float],
    source: str,
) -> ClearanceProfile:
    """Return a copy of the profile with one layer of values applied."""
    sources = dict(profile.sources)
    targets = dict(profile.environment_targets)
    changes: Dict[str, Any] = dict(values)

    for key in values:
        sources[key] = source

    for env, target in env_targets.items():
        targets[env] = float(target)
        sources[f"env:{env}"] = source
        # A target for the profile's own environment becomes its ground clearance
        if env == profile.environment and "ground_clearance" not in values:
            changes["ground_clearance"] = float(target)
            sources["ground_clearance"] = source

    return replace(profile, environment_targets=targets, sources=sources, **changes)


def lookup_preset(preset_key: Optional[str]) -> Optional[UtilityPreset]:
    """Find a named utility preset.

    Unknown keys are not an error: presets are advisory, so the caller
    simply keeps the code baseline.
    """
    if not preset_key:
        return None
    preset = PRESETS.get(str(preset_key))
    if preset is None:
        logger.debug(f"Unknown preset {preset_key!r}, using code baseline")
    return preset


def preset_for_owner(job_owner: Optional[str]) -> Optional[str]:
    """Infer a preset key from the job owner (FirstEnergy subsidiaries)."""
    if not job_owner:
        return None
    owner = str(job_owner).strip().lower()
    if any(hint in owner for hint in FIRST_ENERGY_OWNER_HINTS):
        logger.debug(f"Job owner {job_owner!r} implies the FirstEnergy preset")
        return FIRST_ENERGY_PRESET_KEY
    return None


def apply_preset_object(
    clearances: ClearanceProfile,
    preset: Union[UtilityPreset, Mapping[str, Any], None],
) -> ClearanceProfile:
    """Overlay an explicit preset onto a profile.

    Only values present in the preset override; the separation (inches)
    lands on the tier of the preset's voltage.

    Args:
        clearances: Profile to overlay
        preset: Preset object or config-style dictionary

    Returns:
        New profile; the input is not modified
    """
    if not preset:
        return clearances
    if isinstance(preset, Mapping):
        preset = UtilityPreset.from_dict(str(preset.get("key", "custom")), preset)

    values: Dict[str, float] = {}
    if preset.min_top_space_ft is not None:
        values["minimum_pole_top_space"] = float(preset.min_top_space_ft)
    if preset.road_clearance_ft is not None:
        values["road_clearance"] = float(preset.road_clearance_ft)
    if preset.comm_to_power_in is not None:
        if VoltageClass.coerce(preset.voltage) == VoltageClass.TRANSMISSION:
            values["power_clearance_transmission"] = preset.comm_to_power_in / 12
        else:
            values["power_clearance_distribution"] = preset.comm_to_power_in / 12

    updated = _layer(clearances, values, preset.environment_targets, "preset")
    return replace(updated, preset_key=preset.key)


def apply_preset_to_clearances(
    clearances: ClearanceProfile, preset_key: Optional[str]
) -> ClearanceProfile:
    """Overlay a named preset; unknown names leave the baseline untouched."""
    return apply_preset_object(clearances, lookup_preset(preset_key))


def apply_overrides(
    clearances: ClearanceProfile, overrides: Optional[ClearanceOverrides]
) -> ClearanceProfile:
    """Apply job-level overrides, the highest precedence layer.

    Blank or unparseable values fall through to the preset/baseline.
    """
    if overrides is None:
        return clearances

    values: Dict[str, float] = {}
    for attr, key in (
        ("min_top_space", "minimum_pole_top_space"),
        ("road_clearance", "road_clearance"),
        ("ground_clearance", "ground_clearance"),
        ("min_comm_attach", "min_comm_attach"),
    ):
        value = parse_feet(getattr(overrides, attr))
        if value is not None:
            values[key] = value

    separation_in = parse_number(overrides.comm_to_power_in)
    if separation_in is not None:
        values["power_clearance_distribution"] = separation_in / 12

    env_targets: Dict[str, float] = {}
    for env, raw in (overrides.environment_targets or {}).items():
        target = parse_feet(raw)
        if target is not None:
            env_targets[env] = target

    return _layer(clearances, values, env_targets, "override")


def resolve_clearances(
    voltage: Union[str, VoltageClass],
    environment: Optional[str],
    preset_key: Optional[str] = None,
    preset: Optional[UtilityPreset] = None,
    overrides: Optional[ClearanceOverrides] = None,
    job_owner: Optional[str] = None,
) -> ClearanceProfile:
    """Build the effective profile: baseline, then preset, then overrides.

    An explicit preset object wins over a preset key; a preset key wins
    over the preset implied by the job owner.
    """
    profile = get_nesc_clearances(voltage, environment)
    if preset is not None:
        profile = apply_preset_object(profile, preset)
    else:
        profile = apply_preset_to_clearances(
            profile, preset_key or preset_for_owner(job_owner)
        )
    return apply_overrides(profile, overrides)


def get_environment_target(profile: ClearanceProfile, env: Optional[str]) -> Optional[float]:
    """Ground clearance target for one environment."""
    return profile.environment_target(env)


def controlling_environment(
    profile: ClearanceProfile,
    segments: Optional[Iterable[Union[SpanSegment, Mapping[str, Any]]]],
    fallback_env: Optional[str],
) -> Tuple[Optional[str], Optional[float]]:
    """Environment with the highest target across span segments.

    Returns:
        Tuple of (environment, target_ft); falls back to the fallback
        environment when no segments are given
    """
    segment_list = list(segments or [])
    if not segment_list:
        return fallback_env, profile.environment_target(fallback_env)

    best_env: Optional[str] = None
    best_target: Optional[float] = None
    for segment in segment_list:
        if isinstance(segment, SpanSegment):
            env = segment.env
        elif isinstance(segment, Mapping):
            env = SpanSegment.from_mapping(segment).env
        else:
            continue
        env = env or fallback_env
        target = profile.environment_target(env)
        if target is not None and (best_target is None or target > best_target):
            best_env, best_target = env, target
    return best_env, best_target


def controlling_ground_target(
    profile: ClearanceProfile,
    segments: Optional[Iterable[Union[SpanSegment, Mapping[str, Any]]]],
    fallback_env: Optional[str],
) -> Optional[float]:
    """Highest ground clearance target across span segments."""
    return controlling_environment(profile, segments, fallback_env)[1]
