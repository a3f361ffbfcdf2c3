"""Single-pass pole attachment analysis pipeline."""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..calculations.clearances import controlling_environment, resolve_clearances
from ..calculations.guying import calculate_down_guy, compute_pull_autofill
from ..calculations.make_ready import analyze_make_ready_impact, required_separation_in
from ..calculations.pole import (
    get_pole_burial_data,
    pole_class_capacity,
    recommend_pole_class,
    recommend_pole_replacement,
)
from ..calculations.sag import calculate_sag, calculate_span_load
from ..config import (
    COMM_SUPPORT_SPAN_FT,
    COSTS,
    DEFAULT_ICE_THICKNESS_IN,
    DEFAULT_PULL_BASE_SPAN_FT,
    DEFAULT_WIND_SPEED_MPH,
    LIGHT_CLEARANCE_IN,
    LONG_SPAN_FT,
    ROAD_LIKE_ENVIRONMENTS,
)
from ..geometry.span import estimate_span_ft, midpoint
from .models import (
    AnalysisFailure,
    AnalysisInputs,
    AnalysisOutcome,
    AnalysisResult,
    AnalysisSuccess,
    AttachRecommendation,
    CableSpec,
    ClearanceCandidate,
    ClearanceProfile,
    Environment,
    GuyResult,
    MakeReadyItem,
    PoleGeometry,
    PoleReplacement,
    PullAutofill,
    SpanLoadResult,
    VoltageClass,
)
from .units import (
    format_feet_inches,
    format_inches,
    parse_feet,
    parse_number,
    round_half_up,
)

logger = logging.getLogger(__name__)

_EPSILON = 1e-9


@dataclass
class AnalysisConfig:
    """Tunable constants of the analysis pipeline."""

    default_wind_speed_mph: float = DEFAULT_WIND_SPEED_MPH
    pull_base_span_ft: float = DEFAULT_PULL_BASE_SPAN_FT
    # Far-end attach sits this far below the adjacent pole's top
    adjacent_attach_offset_ft: float = 1.0
    costs: Dict[str, float] = field(default_factory=lambda: dict(COSTS))


@dataclass
class _Ledger:
    """Warnings, notes and cost lines collected during one run."""

    warnings: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    costs: Dict[str, float] = field(default_factory=dict)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def note(self, message: str) -> None:
        self.notes.append(message)

    def charge(self, key: str, amount: float) -> None:
        if math.isfinite(amount) and amount:
            self.costs[key] = self.costs.get(key, 0.0) + amount

    @property
    def total(self) -> float:
        return float(sum(self.costs.values()))


def _span_coordinates(inputs: AnalysisInputs) -> Tuple[Any, Any, Any, Any]:
    return (
        inputs.pole_latitude,
        inputs.pole_longitude,
        inputs.adjacent_pole_latitude,
        inputs.adjacent_pole_longitude,
    )



class AttachmentAnalysisPipeline:
    """Pole attachment analysis: clearances, sag, guying, make-ready and cost."""

    def __init__(self, config: Optional[AnalysisConfig] = None) -> None:
        """Initialize pipeline.

        Args:
            config: Optional configuration; defaults to the standard constants
        """
        self.config = config or AnalysisConfig()

    def run(self, inputs: Union[AnalysisInputs, Mapping[str, Any], None]) -> AnalysisOutcome:
        """Run the analysis.

        Never raises for user input: missing required fields come back as an
        :class:`AnalysisFailure`, degenerate geometry as warnings.

        Args:
            inputs: Analysis inputs or a dictionary of input fields

        Returns:
            Failure with per-field errors, or success with results
        """
        if not isinstance(inputs, AnalysisInputs):
            inputs = AnalysisInputs.from_mapping(inputs)

        errors = self._validate(inputs)
        if errors:
            logger.debug(f"Validation failed: {errors}")
            return AnalysisFailure(errors=errors)

        ledger = _Ledger()
        costs = self.config.costs

        # Step 1: Clearance rules
        voltage = VoltageClass.coerce(inputs.existing_power_voltage)
        environment = inputs.span_environment or Environment.ROAD.value
        clearances = resolve_clearances(
            voltage,
            environment,
            preset_key=inputs.preset_profile,
            overrides=inputs.overrides,
            job_owner=inputs.job_owner,
        )
        if clearances.preset_key:
            ledger.note(f"Utility preset applied: {clearances.preset_key}")
        logger.debug(
            f"Clearances ({voltage.value}/{environment}): ground "
            f"{clearances.ground_clearance:.2f} ft, top space "
            f"{clearances.minimum_pole_top_space:.2f} ft, power separation "
            f"{clearances.power_separation_for(voltage):.2f} ft"
        )

        # Step 2: Pole geometry
        pole_height = parse_feet(inputs.pole_height) or 0.0
        pole = get_pole_burial_data(pole_height, inputs.pole_class)
        if pole.above_ground_ft <= 0:
            ledger.warn(
                f"Pole height {format_feet_inches(pole_height)} leaves no height "
                f"above ground after {format_feet_inches(pole.buried_ft)} burial"
            )

        # Step 3: Loading and sag
        cable = CableSpec.from_catalogue(inputs.attachment_type)
        wind = parse_number(inputs.wind_speed)
        if wind is None or wind < 0:
            wind = self.config.default_wind_speed_mph
        ice = parse_number(inputs.ice_thickness_in)
        if ice is None or ice < 0:
            ice = DEFAULT_ICE_THICKNESS_IN
        diameter = parse_number(inputs.cable_diameter)
        if diameter is None or diameter <= 0:
            diameter = cable.diameter_in

        span_ft = self._resolve_span(inputs, ledger)
        sag_ft = 0.0
        if span_ft > 0:
            sag_ft = calculate_sag(
                span_ft,
                cable.unit_weight_lb_per_ft,
                cable.rated_tension_lb,
                wind,
                diameter,
                ice,
            )
            if not math.isfinite(sag_ft):
                ledger.warn("Sag could not be computed for this span; span checks skipped")
                span_ft, sag_ft = 0.0, 0.0

        # Step 4: Attach height arbitration
        power_ft = parse_feet(inputs.existing_power_height)
        attach = self._arbitrate(inputs, pole, clearances, power_ft, voltage, sag_ft, ledger)
        proposed = attach.proposed_attach_ft

        replacement: Optional[PoleReplacement] = None
        if not attach.satisfies_controlling and attach.controlling is not None:
            shortfall = attach.controlling.limit_ft - proposed
            replacement = recommend_pole_replacement(
                pole_height, pole.above_ground_ft + shortfall
            )
            if replacement.replace:
                ledger.note(
                    f"Pole replacement suggested: {replacement.suggested_height_ft:.0f} ft "
                    f"pole restores clearance"
                )

        # Step 5: Span load
        far_end: Optional[float] = None
        adjacent_ft = parse_feet(inputs.adjacent_pole_height)
        if adjacent_ft is not None and adjacent_ft > 0:
            adjacent = get_pole_burial_data(adjacent_ft)
            far_end = max(0.0, adjacent.above_ground_ft - self.config.adjacent_attach_offset_ft)
        span = calculate_span_load(span_ft, proposed, far_end, cable, wind, ice, diameter)
        span = replace(span, midpoint=midpoint(*_span_coordinates(inputs)))
        self._check_span(inputs, span, attach, ledger)
        if span.span_ft > LONG_SPAN_FT:
            ledger.charge("long_span", costs["long_span"])

        # Step 6: Proposed line against pole-top, power and lights
        user_height = parse_feet(inputs.proposed_line_height)
        line_height = user_height if user_height is not None else proposed
        self._check_proposed_height(
            inputs, user_height, line_height, pole, clearances, power_ft, voltage, ledger
        )

        # Step 7: Existing lines and make-ready
        make_ready = self._assess_existing_lines(inputs, line_height, span, ledger)
        make_ready_total = float(sum(item.estimated_cost for item in make_ready))
        ledger.charge("make_ready", make_ready_total)

        # Step 8: Guying
        pull: Optional[PullAutofill] = None
        incoming = parse_number(inputs.incoming_bearing_deg)
        outgoing = parse_number(inputs.outgoing_bearing_deg)
        if incoming is not None and outgoing is not None:
            pull = compute_pull_autofill(incoming, outgoing, self.config.pull_base_span_ft)
            ledger.note(
                f"Line angle {pull.theta_deg:.1f} deg: pull {pull.pull_ft:.2f} ft "
                f"over {self.config.pull_base_span_ft:.0f} ft"
            )

        guy: Optional[GuyResult] = None
        if inputs.evaluate_guying:
            guy = self._evaluate_guying(inputs, pole, cable, span_ft, proposed, wind, pull, ledger)

        # Step 9: Costs
        if inputs.is_new_construction:
            ledger.charge("new_construction", costs["new_construction"])
        else:
            ledger.charge("existing_construction", costs["existing_construction"])
        if inputs.has_transformer:
            ledger.charge("transformer", costs["transformer"])
            ledger.note("Transformer on pole: additional coordination required")

        result = AnalysisResult(
            pole=pole,
            clearances=clearances,
            attach=attach,
            span=span,
            guy=guy,
            make_ready=make_ready,
            make_ready_total=make_ready_total,
            pull=pull,
            pole_replacement=replacement,
            cost_breakdown=dict(ledger.costs),
            warnings=list(ledger.warnings),
            notes=list(ledger.notes),
            cost=ledger.total,
        )

        logger.info(
            f"Analysis complete: attach {format_feet_inches(proposed)}, "
            f"{len(ledger.warnings)} warnings, cost ${ledger.total:.2f}"
        )
        return AnalysisSuccess(
            results=result,
            warnings=list(ledger.warnings),
            notes=list(ledger.notes),
            cost=ledger.total,
        )

    def _validate(self, inputs: AnalysisInputs) -> Dict[str, str]:
        """Check required inputs; returns errors keyed by field."""
        errors: Dict[str, str] = {}
        height = parse_feet(inputs.pole_height)
        if height is None or height <= 0:
            errors["pole_height"] = "Pole height required for analysis"
        if not inputs.is_new_construction and parse_feet(inputs.existing_power_height) is None:
            errors["existing_power_height"] = (
                "Power wire height required for existing pole analysis"
            )
        return errors

    def _resolve_span(self, inputs: AnalysisInputs, ledger: _Ledger) -> float:
        """Span length as given, else estimated from pole coordinates."""
        span = parse_feet(inputs.span_distance)
        if span is not None and span > 0:
            return span

        estimate = estimate_span_ft(*_span_coordinates(inputs))
        if estimate is None:
            return 0.0

        ledger.note(f"Span length estimated from GPS: {estimate:.1f} ft")
        return estimate

    def _arbitrate(
        self,
        inputs: AnalysisInputs,
        pole: PoleGeometry,
        clearances: ClearanceProfile,
        power_ft: Optional[float],
        voltage: VoltageClass,
        sag_ft: float,
        ledger: _Ledger,
    ) -> AttachRecommendation:
        """Choose the attach height from ceiling and floor clearances.

        Ceilings (pole-top space, power separation) cap the attach height;
        the lowest one sets it. Floors (ground, environment, road and
        minimum attach targets plus sag) are requirements; the highest one
        controls and is recorded so a shortfall can be reported.
        """
        top_space = clearances.minimum_pole_top_space
        candidates: List[ClearanceCandidate] = [
            ClearanceCandidate(
                key="pole_top_space",
                label="Pole-top space",
                kind="ceiling",
                clearance_ft=top_space,
                limit_ft=pole.above_ground_ft - top_space,
                source=clearances.source_of("minimum_pole_top_space"),
            )
        ]

        if not inputs.is_new_construction and power_ft is not None:
            separation = clearances.power_separation_for(voltage)
            tier = (
                "power_clearance_transmission"
                if voltage == VoltageClass.TRANSMISSION
                else "power_clearance_distribution"
            )
            candidates.append(
                ClearanceCandidate(
                    key="power_separation",
                    label=f"Power separation ({voltage.value})",
                    kind="ceiling",
                    clearance_ft=separation,
                    limit_ft=power_ft - separation,
                    source=clearances.source_of(tier),
                )
            )
            if power_ft > pole.above_ground_ft + _EPSILON:
                ledger.warn(
                    f"Existing power at {format_feet_inches(power_ft)} is above the "
                    f"pole top ({format_feet_inches(pole.above_ground_ft)} above ground)"
                )

        floors = [
            ("ground_clearance", "Ground clearance", clearances.ground_clearance),
        ]
        env, env_target = controlling_environment(
            clearances, inputs.span_segments, clearances.environment
        )
        if env_target is not None:
            floors.append((f"env:{env}", f"Environment target ({env})", env_target))
        if clearances.environment in ROAD_LIKE_ENVIRONMENTS:
            floors.append(("road_clearance", "Road clearance", clearances.road_clearance))
        for key, label, target in floors:
            candidates.append(
                ClearanceCandidate(
                    key=key,
                    label=label,
                    kind="floor",
                    clearance_ft=target,
                    limit_ft=target + sag_ft,
                    source=clearances.source_of(key),
                )
            )
        if clearances.min_comm_attach is not None:
            candidates.append(
                ClearanceCandidate(
                    key="min_comm_attach",
                    label="Minimum communication attach",
                    kind="floor",
                    clearance_ft=clearances.min_comm_attach,
                    limit_ft=clearances.min_comm_attach,
                    source=clearances.source_of("min_comm_attach"),
                )
            )

        ceilings = [c for c in candidates if c.kind == "ceiling"]
        basis = min(ceilings, key=lambda c: c.limit_ft)
        floor_candidates = [c for c in candidates if c.kind == "floor"]
        controlling = max(floor_candidates, key=lambda c: c.limit_ft) if floor_candidates else None

        proposed = basis.limit_ft
        if proposed < 0:
            ledger.warn(
                f"{basis.label} leaves no room to attach; attach height clamped to 0"
            )
            proposed = 0.0

        if basis.key == "power_separation" and power_ft is not None:
            detail = (
                f"{format_inches(basis.clearance_ft)} below power at "
                f"{format_feet_inches(power_ft)}"
            )
            ledger.note(
                f"Existing power clearance: {format_inches(basis.clearance_ft)} "
                f"({basis.clearance_ft:.2f} ft)"
            )
        else:
            detail = (
                f"{format_feet_inches(basis.clearance_ft)} below pole top at "
                f"{format_feet_inches(pole.above_ground_ft)}"
            )
            if inputs.is_new_construction:
                ledger.note(
                    f"New construction: attach {format_feet_inches(basis.clearance_ft)} "
                    f"below pole top"
                )

        if controlling is not None and proposed + _EPSILON < controlling.limit_ft:
            ledger.warn(
                f"Proposed attach {format_feet_inches(proposed)} is below the "
                f"{controlling.label.lower()} requirement of "
                f"{format_feet_inches(controlling.limit_ft)} "
                f"({format_feet_inches(controlling.clearance_ft)} + "
                f"{format_feet_inches(sag_ft)} sag)"
            )

        logger.debug(
            f"Attach {proposed:.2f} ft set by {basis.key}; controlling floor "
            f"{controlling.key if controlling else None}"
        )
        clearance_in = basis.clearance_ft * 12
        return AttachRecommendation(
            proposed_attach_ft=proposed,
            basis=basis.label,
            detail=detail,
            clearance_in=clearance_in if math.isfinite(clearance_in) else None,
            controlling=controlling,
            candidates=candidates,
        )

    def _check_span(
        self,
        inputs: AnalysisInputs,
        span: SpanLoadResult,
        attach: AttachRecommendation,
        ledger: _Ledger,
    ) -> None:
        """Midspan clearance and span length warnings."""
        if span.span_ft <= 0:
            return

        if span.midspan_ft is not None:
            targets = [
                c.clearance_ft
                for c in attach.candidates
                if c.kind == "floor" and c.key != "min_comm_attach"
            ]
            target = max(targets) if targets else 0.0
            if span.midspan_ft < 0:
                ledger.warn(
                    f"Midspan {format_feet_inches(span.midspan_ft)} is below grade; "
                    f"check span and attach heights"
                )
            elif span.midspan_ft + _EPSILON < target:
                ledger.warn(
                    f"CRITICAL: midspan {format_feet_inches(span.midspan_ft)} < "
                    f"min ground clearance {format_feet_inches(target)}"
                )

        if span.span_ft > LONG_SPAN_FT:
            ledger.warn(
                f"Span {span.span_ft:.0f} ft exceeds {LONG_SPAN_FT:.0f} ft: "
                f"additional engineering required"
            )
        if span.span_ft > COMM_SUPPORT_SPAN_FT and "communication" in str(
            inputs.attachment_type
        ).lower():
            ledger.warn(
                f"Communication span {span.span_ft:.0f} ft exceeds "
                f"{COMM_SUPPORT_SPAN_FT:.0f} ft: consider intermediate support"
            )

    def _check_proposed_height(
        self,
        inputs: AnalysisInputs,
        user_height: Optional[float],
        line_height: float,
        pole: PoleGeometry,
        clearances: ClearanceProfile,
        power_ft: Optional[float],
        voltage: VoltageClass,
        ledger: _Ledger,
    ) -> None:
        """Rules for a user-proposed height and nearby street lights."""
        if user_height is not None:
            top_limit = pole.above_ground_ft - clearances.minimum_pole_top_space
            if user_height > top_limit + _EPSILON:
                ledger.warn(
                    f"Pole-top space violated: proposed {format_feet_inches(user_height)} "
                    f"is within {format_feet_inches(clearances.minimum_pole_top_space)} "
                    f"of the pole top"
                )
            if not inputs.is_new_construction and power_ft is not None:
                separation = clearances.power_separation_for(voltage)
                gap = power_ft - user_height
                if gap + _EPSILON < separation:
                    ledger.warn(
                        f"Power separation violated: {format_inches(gap)} to power "
                        f"(need {format_inches(separation)})"
                    )

        lights = [
            h
            for h in (
                parse_feet(inputs.street_light_height),
                parse_feet(inputs.drip_loop_height),
            )
            if h is not None
        ]
        if lights:
            limit = max(lights) - LIGHT_CLEARANCE_IN / 12
            if line_height > limit + _EPSILON:
                ledger.warn(
                    f"Proposed line must maintain {LIGHT_CLEARANCE_IN:.0f}\" clearance "
                    f"below street light/drip loop ({format_feet_inches(max(lights))})"
                )

    def _assess_existing_lines(
        self,
        inputs: AnalysisInputs,
        line_height: float,
        span: SpanLoadResult,
        ledger: _Ledger,
    ) -> List[MakeReadyItem]:
        """Separation checks and make-ready items for existing lines."""
        rate = self.config.costs["make_ready_per_inch"]
        items: List[MakeReadyItem] = []

        for line in inputs.existing_lines:
            if not line.type:
                continue
            current_ft = parse_feet(line.height)
            if current_ft is None:
                continue
            planned_ft = parse_feet(line.make_ready_height) if line.make_ready else None
            check_ft = planned_ft if planned_ft is not None else current_ft
            pole_req_in, mid_req_in = required_separation_in(line.type)

            gap_in = abs(line_height - check_ft) * 12
            if gap_in + _EPSILON < pole_req_in:
                ledger.warn(
                    f"Pole clearance to {line.type}: {gap_in:.1f}\" (need {pole_req_in:.0f}\")"
                )
            if span.midspan_ft is not None:
                # Existing line assumed to sag like the new cable
                mid_gap_in = abs(span.midspan_ft - (check_ft - span.sag_ft)) * 12
                if mid_gap_in + _EPSILON < mid_req_in:
                    ledger.warn(
                        f"Midspan clearance to {line.type}: {mid_gap_in:.1f}\" "
                        f"(need {mid_req_in:.0f}\")"
                    )

            if not line.make_ready:
                continue

            owner = f" ({line.company_name})" if line.company_name else ""
            item = analyze_make_ready_impact(current_ft, line_height, pole_req_in / 12, rate)
            if item is None:
                ledger.warn(f"Make-ready for {line.type}{owner} could not be computed")
                continue
            if planned_ft is not None:
                moved_in = abs(planned_ft - current_ft) * 12
                if not math.isfinite(moved_in):
                    ledger.warn(
                        f"Make-ready height for {line.type}{owner} is out of range; skipped"
                    )
                    continue
                adjustment_in = round_half_up(moved_in)
                item = replace(
                    item,
                    required=adjustment_in > 0,
                    adjustment_in=adjustment_in,
                    recommended_height_ft=planned_ft,
                    estimated_cost=adjustment_in * rate,
                )

            if not item.required:
                ledger.note(f"Make-ready: {line.type}{owner} already clear")
                continue
            item = replace(item, line_type=line.type, company_name=line.company_name)
            items.append(item)
            ledger.note(
                f"Make-ready: move {line.type}{owner} {item.adjustment_in:.0f}\" to "
                f"{format_feet_inches(item.recommended_height_ft)} "
                f"(${item.estimated_cost:.2f})"
            )

        return items

    def _evaluate_guying(
        self,
        inputs: AnalysisInputs,
        pole: PoleGeometry,
        cable: CableSpec,
        span_ft: float,
        attach_ft: float,
        wind: float,
        pull: Optional[PullAutofill],
        ledger: _Ledger,
    ) -> Optional[GuyResult]:
        """Down guy when needed, otherwise a pole class check."""
        if span_ft <= 0 or pole.above_ground_ft <= 0 or attach_ft <= 0:
            return None

        guy = calculate_down_guy(
            pole.above_ground_ft,
            attach_ft,
            cable,
            span_ft,
            wind,
            pull_direction_deg=parse_number(inputs.pull_direction_deg) or 0.0,
            deflection_deg=pull.theta_deg if pull is not None else None,
        )
        if guy is None:
            return None

        if guy.required:
            ledger.charge("guy", guy.total_cost)
            ledger.note(
                f"Down guy required: {guy.tension_lb:.0f} lb at {guy.angle_deg:.0f} deg, "
                f"lead {format_feet_inches(guy.lead_distance_ft)} (${guy.total_cost:.2f})"
            )
            return guy

        # Unguyed load referred to the class rating point 2 ft below the top
        lever = max(1.0, pole.above_ground_ft - 2.0)
        load = guy.horizontal_load_lb * attach_ft / lever
        capacity = pole_class_capacity(pole.class_label)
        if capacity is not None and load > capacity:
            ledger.warn(
                f"Horizontal load {load:.0f} lbf exceeds {pole.class_label} "
                f"capacity {capacity:.0f} lbf"
            )
        minimum = recommend_pole_class(load)
        if minimum is None:
            ledger.warn(f"Horizontal load {load:.0f} lbf exceeds every listed pole class")
        else:
            ledger.note(f"Unguyed horizontal load {load:.0f} lbf: {minimum} or stronger")
        return guy


def compute_analysis(
    inputs: Union[AnalysisInputs, Mapping[str, Any], None],
    config: Optional[AnalysisConfig] = None,
) -> AnalysisOutcome:
    """Analyze a proposed pole attachment.

    Args:
        inputs: Analysis inputs or a dictionary of input fields
        config: Optional pipeline configuration

    Returns:
        :class:`AnalysisFailure` with per-field errors, or
        :class:`AnalysisSuccess` with results, warnings, notes and cost
    """
    return AttachmentAnalysisPipeline(config).run(inputs)
