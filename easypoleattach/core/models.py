"""Core data models for pole attachment analysis."""

import math
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Union

from ..config import CABLE_TYPES

# Raw user input for a height: text such as 18' 6", a number, or blank
HeightInput = Union[str, float, int, None]


class VoltageClass(str, Enum):
    """Voltage class of the highest existing facility on the pole."""

    COMMUNICATION = "communication"
    DISTRIBUTION = "distribution"
    TRANSMISSION = "transmission"

    @classmethod
    def coerce(cls, value: Any) -> "VoltageClass":
        """Map free input onto a voltage class, defaulting to communication."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.COMMUNICATION


class Environment(str, Enum):
    """Span environment categories with their own ground clearance target."""

    ROAD = "road"
    RESIDENTIAL = "residential"
    PEDESTRIAN = "pedestrian"
    FIELD = "field"
    RESIDENTIAL_YARD = "residentialYard"
    RESIDENTIAL_DRIVEWAY = "residentialDriveway"
    NON_RESIDENTIAL_DRIVEWAY = "nonResidentialDriveway"
    WATERWAY = "waterway"
    WV_HIGHWAY = "wvHighway"
    PA_HIGHWAY = "paHighway"
    OH_HIGHWAY = "ohHighway"
    MD_HIGHWAY = "mdHighway"
    INTERSTATE = "interstate"
    INTERSTATE_NEW_CROSSING = "interstateNewCrossing"
    RAILROAD = "railroad"


@dataclass(frozen=True)
class CableSpec:
    """Attachment cable reference data."""

    key: str
    label: str
    unit_weight_lb_per_ft: float  # Bare cable weight in lb/ft
    rated_tension_lb: float  # Installation tension in lb
    diameter_in: float  # Outside diameter in inches

    def __post_init__(self) -> None:
        """Validate cable specifications."""
        if self.unit_weight_lb_per_ft <= 0:
            raise ValueError("Cable weight must be positive")
        if self.rated_tension_lb <= 0:
            raise ValueError("Cable tension must be positive")
        if self.diameter_in <= 0:
            raise ValueError("Cable diameter must be positive")

    @classmethod
    def from_catalogue(cls, key: Optional[str]) -> "CableSpec":
        """Select a catalogue cable by key, falling back to the first entry."""
        entry = next((c for c in CABLE_TYPES if c["key"] == key), CABLE_TYPES[0])
        return cls(
            key=str(entry["key"]),
            label=str(entry["label"]),
            unit_weight_lb_per_ft=float(entry["weight"]),
            rated_tension_lb=float(entry["tension"]),
            diameter_in=float(entry["diameter"]),
        )


@dataclass(frozen=True)
class UtilityPreset:
    """Named utility clearance conventions.

    Numeric fields left as None inherit the code baseline.
    """

    key: str
    label: str
    voltage: str = VoltageClass.DISTRIBUTION.value
    comm_to_power_in: Optional[float] = None
    min_top_space_ft: Optional[float] = None
    road_clearance_ft: Optional[float] = None
    environment_targets: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate preset values."""
        for name in ("comm_to_power_in", "min_top_space_ft", "road_clearance_ft"):
            value = getattr(self, name)
            if value is not None and (not math.isfinite(value) or value < 0):
                raise ValueError(f"Preset {self.key}: {name} must be non-negative")
        for env, target in self.environment_targets.items():
            if not math.isfinite(target) or target <= 0:
                raise ValueError(f"Preset {self.key}: target for {env} must be positive")

    @classmethod
    def from_dict(cls, key: str, data: Mapping[str, Any]) -> "UtilityPreset":
        """Build a preset from a config-style dictionary."""
        return cls(
            key=key,
            label=str(data.get("label", key)),
            voltage=str(data.get("voltage", VoltageClass.DISTRIBUTION.value)),
            comm_to_power_in=data.get("comm_to_power_in"),
            min_top_space_ft=data.get("min_top_space_ft"),
            road_clearance_ft=data.get("road_clearance_ft"),
            environment_targets=dict(data.get("environment_targets") or {}),
        )


@dataclass
class ClearanceOverrides:
    """Job-level clearance overrides (highest precedence).

    Each value may be a number or text. A value only overrides when it
    parses to a finite number; blanks fall through to the preset and then
    to the code baseline.
    """

    min_top_space: HeightInput = None  # feet
    road_clearance: HeightInput = None  # feet
    comm_to_power_in: HeightInput = None  # inches, distribution tier
    ground_clearance: HeightInput = None  # feet
    min_comm_attach: HeightInput = None  # feet
    environment_targets: Dict[str, HeightInput] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ClearanceOverrides":
        """Build overrides from a dictionary, ignoring unknown keys."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        kwargs["environment_targets"] = dict(kwargs.get("environment_targets") or {})
        return cls(**kwargs)


@dataclass
class ClearanceProfile:
    """Effective clearance targets for one analysis (feet)."""

    voltage: str
    environment: str
    ground_clearance: float
    road_clearance: float
    minimum_pole_top_space: float
    power_clearance_distribution: float
    power_clearance_transmission: float
    comm_to_comm_vertical: Optional[float] = None
    comm_to_comm_midspan: Optional[float] = None
    neutral_clearance: Optional[float] = None
    drop_wire_clearance: Optional[float] = None
    min_comm_attach: Optional[float] = None
    environment_targets: Dict[str, float] = field(default_factory=dict)
    preset_key: Optional[str] = None
    sources: Dict[str, str] = field(default_factory=dict)

    def power_separation_for(self, voltage: Union[str, VoltageClass]) -> float:
        """Power-to-communication separation for the given voltage tier."""
        if VoltageClass.coerce(voltage) == VoltageClass.TRANSMISSION:
            return self.power_clearance_transmission
        return self.power_clearance_distribution

    def environment_target(self, env: Optional[str]) -> Optional[float]:
        """Ground clearance target for an environment, if known."""
        if not env:
            return None
        value = self.environment_targets.get(env)
        if value is None or not math.isfinite(value):
            return None
        return float(value)

    def source_of(self, key: str) -> str:
        """Which layer supplied a value: baseline, preset or override."""
        return self.sources.get(key, "baseline")


@dataclass
class PoleGeometry:
    """Burial and above-ground geometry of a pole."""

    input_height_ft: float
    buried_ft: float
    above_ground_ft: float
    class_label: str
    recommended_class_label: str


@dataclass
class SpanLoadResult:
    """Sag and midspan height for one span."""

    span_ft: float
    wind_mph: float
    ice_in: float
    sag_ft: float
    attach_a_ft: Optional[float] = None
    attach_b_ft: Optional[float] = None
    midspan_ft: Optional[float] = None  # None when span is not applicable
    low_point_ft: Optional[float] = None
    midpoint: Optional[Tuple[float, float]] = None  # (lat, lon) when both poles are located


@dataclass
class GuyResult:
    """Down guy requirement and geometry."""

    required: bool
    tension_lb: float
    angle_deg: float  # Angle between guy and pole
    lead_distance_ft: float
    guy_attach_height_ft: float
    pull_direction_deg: float
    horizontal_load_lb: float
    total_cost: float


@dataclass
class MakeReadyItem:
    """Make-ready assessment for one existing line."""

    required: bool
    adjustment_in: float
    recommended_height_ft: float
    estimated_cost: float
    line_type: str = ""
    company_name: str = ""
    existing_height_ft: Optional[float] = None


@dataclass
class ClearanceCandidate:
    """One clearance rule evaluated as a bound on the attach height."""

    key: str
    label: str
    kind: Literal["floor", "ceiling"]
    clearance_ft: float
    limit_ft: float  # Attach height the rule allows (ceiling) or needs (floor)
    source: str = "baseline"


@dataclass
class AttachRecommendation:
    """Proposed attach height and the clearances that justify it."""

    proposed_attach_ft: float
    basis: str
    detail: str
    clearance_in: Optional[float]  # None when too large to express in inches
    controlling: Optional[ClearanceCandidate] = None
    candidates: List[ClearanceCandidate] = field(default_factory=list)

    @property
    def satisfies_controlling(self) -> bool:
        """Whether the attach height meets the controlling floor."""
        if self.controlling is None:
            return True
        return self.proposed_attach_ft + 1e-9 >= self.controlling.limit_ft


@dataclass
class PullAutofill:
    """Guy pull suggestion from two span bearings."""

    theta_deg: float
    pull_ft: float


@dataclass
class PoleReplacement:
    """Pole replacement recommendation."""

    replace: bool
    suggested_height_ft: float
    margin_ft: float


@dataclass
class ExistingLine:
    """An existing line on the pole."""

    type: str
    height: HeightInput = None
    make_ready: bool = False
    make_ready_height: HeightInput = None
    company_name: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ExistingLine":
        """Build a line record from a dictionary."""
        return cls(
            type=str(data.get("type") or data.get("line_type") or ""),
            height=data.get("height"),
            make_ready=bool(data.get("make_ready", False)),
            make_ready_height=data.get("make_ready_height"),
            company_name=str(data.get("company_name") or ""),
        )


@dataclass
class SpanSegment:
    """Portion of a span crossing one environment."""

    env: str
    portion: Optional[float] = None  # Percent of span, informational

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SpanSegment":
        """Build a segment from a dictionary, ignoring unknown keys."""
        env = data.get("env") or data.get("environment") or ""
        portion = data.get("portion")
        try:
            portion = float(portion) if portion is not None else None
        except (TypeError, ValueError):
            portion = None
        if portion is not None and not math.isfinite(portion):
            portion = None
        return cls(env=str(env).strip(), portion=portion)


@dataclass
class AnalysisInputs:
    """Inputs for one pole attachment analysis.

    Only ``pole_height`` is always required; ``existing_power_height`` is
    required unless ``is_new_construction``. Every other field is optional
    and falls back to the documented default. Clearance precedence is
    ``overrides`` > ``preset_profile`` (or the preset implied by
    ``job_owner``) > code baseline.
    """

    pole_height: HeightInput = None
    pole_class: str = ""
    existing_power_height: HeightInput = None
    existing_power_voltage: str = VoltageClass.DISTRIBUTION.value
    span_distance: HeightInput = None  # feet, 0/blank = use GPS or skip span
    is_new_construction: bool = False
    adjacent_pole_height: HeightInput = None  # blank = same attach height at far end
    attachment_type: str = "communication"
    cable_diameter: HeightInput = None  # inches, blank = catalogue diameter
    wind_speed: HeightInput = None  # mph, blank = 90
    ice_thickness_in: HeightInput = None  # inches, blank = 0
    span_environment: str = Environment.ROAD.value
    span_segments: List[SpanSegment] = field(default_factory=list)
    street_light_height: HeightInput = None
    drip_loop_height: HeightInput = None
    proposed_line_height: HeightInput = None
    existing_lines: List[ExistingLine] = field(default_factory=list)
    has_transformer: bool = False
    preset_profile: Optional[str] = None
    overrides: Optional[ClearanceOverrides] = None
    job_owner: str = ""
    evaluate_guying: bool = True
    pull_direction_deg: HeightInput = None
    incoming_bearing_deg: HeightInput = None
    outgoing_bearing_deg: HeightInput = None
    pole_latitude: HeightInput = None
    pole_longitude: HeightInput = None
    adjacent_pole_latitude: HeightInput = None
    adjacent_pole_longitude: HeightInput = None

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "AnalysisInputs":
        """Build inputs from a dictionary with snake_case keys."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {k: v for k, v in data.items() if k in known}
        # Entries that are neither records nor mappings are dropped
        kwargs["existing_lines"] = [
            line if isinstance(line, ExistingLine) else ExistingLine.from_mapping(line)
            for line in _records(kwargs.get("existing_lines"))
            if isinstance(line, (ExistingLine, Mapping)) and line
        ]
        kwargs["span_segments"] = [
            seg if isinstance(seg, SpanSegment) else SpanSegment.from_mapping(seg)
            for seg in _records(kwargs.get("span_segments"))
            if isinstance(seg, (SpanSegment, Mapping)) and seg
        ]
        overrides = kwargs.get("overrides")
        if isinstance(overrides, Mapping):
            kwargs["overrides"] = ClearanceOverrides.from_mapping(overrides)
        elif not isinstance(overrides, ClearanceOverrides):
            kwargs["overrides"] = None
        return cls(**kwargs)


def _records(value: Any) -> List[Any]:
    """List of nested records; anything but a list or tuple counts as none."""
    return list(value) if isinstance(value, (list, tuple)) else []


@dataclass
class AnalysisResult:
    """Aggregate result of one analysis."""

    pole: PoleGeometry
    clearances: ClearanceProfile
    attach: AttachRecommendation
    span: SpanLoadResult
    guy: Optional[GuyResult] = None
    make_ready: List[MakeReadyItem] = field(default_factory=list)  # lines that must move
    make_ready_total: float = 0.0
    pull: Optional[PullAutofill] = None
    pole_replacement: Optional[PoleReplacement] = None
    cost_breakdown: Dict[str, float] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    cost: float = 0.0


@dataclass
class AnalysisFailure:
    """Validation failure: required inputs missing or unparseable."""

    errors: Dict[str, str]

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {"errors": dict(self.errors)}


@dataclass
class AnalysisSuccess:
    """Successful analysis."""

    results: AnalysisResult
    warnings: List[str]
    notes: List[str]
    cost: float

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": asdict(self.results),
            "warnings": list(self.warnings),
            "notes": list(self.notes),
            "cost": self.cost,
        }


AnalysisOutcome = Union[AnalysisFailure, AnalysisSuccess]
