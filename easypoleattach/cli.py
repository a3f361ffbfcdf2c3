"""Command-line interface for easypoleattach."""

import json
import logging
from itertools import groupby
from pathlib import Path
from typing import Any, Dict, Optional

import click

from .calculations.guying import calculate_down_guy, compute_pull_autofill
from .calculations.sag import calculate_sag
from .config import (
    CABLE_TYPES,
    DEFAULT_ICE_THICKNESS_IN,
    DEFAULT_PULL_BASE_SPAN_FT,
    DEFAULT_WIND_SPEED_MPH,
    UTILITY_PRESETS,
)
from .core.models import AnalysisSuccess, CableSpec, Environment, VoltageClass
from .core.pipeline import compute_analysis
from .core.units import format_feet_inches, parse_feet
from .reporting import CSVReporter, JSONReporter

CABLE_KEYS = [str(c["key"]) for c in CABLE_TYPES]
VALIDATION_EXIT_CODE = 2


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _text_report(success: AnalysisSuccess, tick_marks: bool) -> str:
    """Plain text report grouped by section."""
    rows = CSVReporter(tick_marks=tick_marks).rows(success)[1:]
    lines = []
    for section, group in groupby(rows, key=lambda row: row[0]):
        lines.append(section)
        for _, field_name, value in group:
            lines.append(f"  {field_name}: {value}" if field_name else f"  - {value}")
    return "\n".join(lines)


@click.group()
@click.version_option()
def main() -> None:
    """Easy Pole Attach - Communication attachment analysis for utility poles."""
    pass


@main.command()
@click.option(
    "--input",
    "input_file",
    type=click.Path(exists=True),
    help="Job file (JSON) with analysis inputs",
)
@click.option("--pole-height", help="Pole height, e.g. 45 or 45' 0\"")
@click.option("--pole-class", help="Pole class, e.g. Class 3")
@click.option("--power-height", help="Existing power height, e.g. 30' 0\"")
@click.option(
    "--voltage",
    type=click.Choice([v.value for v in VoltageClass]),
    help="Existing power voltage class",
)
@click.option("--span", help="Span length (ft)")
@click.option(
    "--environment",
    type=click.Choice([e.value for e in Environment]),
    help="Span environment",
)
@click.option("--attachment-type", type=click.Choice(CABLE_KEYS), help="Attachment cable")
@click.option("--wind", type=float, help="Wind speed (mph)")
@click.option("--ice", type=float, help="Radial ice thickness (in)")
@click.option("--adjacent-height", help="Adjacent pole height")
@click.option("--proposed-height", help="Proposed attach height to check")
@click.option("--preset", type=click.Choice(sorted(UTILITY_PRESETS)), help="Utility preset")
@click.option("--owner", help="Job owner (utility)")
@click.option("--new-construction", is_flag=True, help="New construction (no existing power)")
@click.option(
    "--format",
    type=click.Choice(["text", "csv", "json"]),
    default="text",
    help="Output format",
)
@click.option("--tick-marks", is_flag=True, help="Format heights as 18' 6\"")
@click.option("--output", "-o", type=click.Path(), help="Output file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def analyze(
    ctx: click.Context,
    input_file: Optional[str],
    pole_height: Optional[str],
    pole_class: Optional[str],
    power_height: Optional[str],
    voltage: Optional[str],
    span: Optional[str],
    environment: Optional[str],
    attachment_type: Optional[str],
    wind: Optional[float],
    ice: Optional[float],
    adjacent_height: Optional[str],
    proposed_height: Optional[str],
    preset: Optional[str],
    owner: Optional[str],
    new_construction: bool,
    format: str,
    tick_marks: bool,
    output: Optional[str],
    verbose: bool,
) -> None:
    """Analyze a proposed communication attachment."""
    _configure_logging(verbose)

    try:
        data: Dict[str, Any] = {}
        if input_file:
            with open(input_file, encoding="utf-8") as f:
                loaded = json.load(f)
            if not isinstance(loaded, dict):
                raise ValueError("Job file must contain a JSON object")
            data.update(loaded)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Failed to read job file: {e}")

    # Command-line options win over the job file
    options = {
        "pole_height": pole_height,
        "pole_class": pole_class,
        "existing_power_height": power_height,
        "existing_power_voltage": voltage,
        "span_distance": span,
        "span_environment": environment,
        "attachment_type": attachment_type,
        "wind_speed": wind,
        "ice_thickness_in": ice,
        "adjacent_pole_height": adjacent_height,
        "proposed_line_height": proposed_height,
        "preset_profile": preset,
        "job_owner": owner,
        "is_new_construction": True if new_construction else None,
    }
    data.update({k: v for k, v in options.items() if v is not None})

    if verbose:
        click.echo(f"Analyzing pole: {data.get('pole_height')}")
        click.echo(f"Power: {data.get('existing_power_height')}")
        click.echo(f"Span: {data.get('span_distance')}")
        click.echo("")

    try:
        outcome = compute_analysis(data)
    except (TypeError, ValueError) as e:
        raise click.ClickException(f"Invalid job input: {e}")

    if format == "json":
        report = JSONReporter().dumps(outcome)
    elif isinstance(outcome, AnalysisSuccess):
        if format == "csv":
            report = CSVReporter(tick_marks=tick_marks).render(outcome)
        else:
            report = _text_report(outcome, tick_marks)
    else:
        report = "\n".join(f"✗ {key}: {message}" for key, message in outcome.errors.items())
    click.echo(report)

    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(report, encoding="utf-8")
        click.echo(f"\n✓ Report saved to: {output_path}")

    if not outcome.ok:
        ctx.exit(VALIDATION_EXIT_CODE)


@main.command()
@click.option("--span", type=float, required=True, help="Span length (ft)")
@click.option(
    "--cable", type=click.Choice(CABLE_KEYS), default="communication", help="Cable type"
)
@click.option("--wind", type=float, default=DEFAULT_WIND_SPEED_MPH, help="Wind speed (mph)")
@click.option("--ice", type=float, default=DEFAULT_ICE_THICKNESS_IN, help="Radial ice (in)")
@click.option("--tension", type=float, help="Tension override (lb)")
@click.option("--tick-marks", is_flag=True, help="Format heights as 18' 6\"")
def sag(
    span: float,
    cable: str,
    wind: float,
    ice: float,
    tension: Optional[float],
    tick_marks: bool,
) -> None:
    """Calculate sag for a span."""
    spec = CableSpec.from_catalogue(cable)
    result = calculate_sag(
        span,
        spec.unit_weight_lb_per_ft,
        tension if tension is not None else spec.rated_tension_lb,
        wind,
        spec.diameter_in,
        ice,
    )
    click.echo(f"Cable: {spec.label}")
    click.echo(f"Span: {span:.1f} ft, wind {wind:.0f} mph, ice {ice:.2f} in")
    click.echo(f"Sag: {format_feet_inches(result, tick_marks=tick_marks)} ({result:.2f} ft)")


@main.command()
@click.option("--above-ground", type=float, required=True, help="Pole height above ground (ft)")
@click.option("--attach", type=float, required=True, help="Attach height (ft)")
@click.option("--span", type=float, required=True, help="Span length (ft)")
@click.option(
    "--cable", type=click.Choice(CABLE_KEYS), default="communication", help="Cable type"
)
@click.option("--wind", type=float, default=DEFAULT_WIND_SPEED_MPH, help="Wind speed (mph)")
@click.option("--deflection", type=float, help="Line angle (deg)")
def guy(
    above_ground: float,
    attach: float,
    span: float,
    cable: str,
    wind: float,
    deflection: Optional[float],
) -> None:
    """Check whether a down guy is required."""
    result = calculate_down_guy(
        above_ground,
        attach,
        CableSpec.from_catalogue(cable),
        span,
        wind,
        deflection_deg=deflection,
    )
    if result is None:
        click.echo("Guying not applicable for these inputs")
        return

    status = "✓ Down guy required" if result.required else "✓ No down guy required"
    click.echo(status)
    click.echo(f"  Horizontal load: {result.horizontal_load_lb:.0f} lb")
    click.echo(f"  Guy tension: {result.tension_lb:.0f} lb at {result.angle_deg:.0f} deg")
    click.echo(f"  Guy attach: {format_feet_inches(result.guy_attach_height_ft)}")
    click.echo(f"  Lead: {format_feet_inches(result.lead_distance_ft)}")
    if result.required:
        click.echo(f"  Estimated cost: ${result.total_cost:.2f}")


@main.command()
@click.option("--incoming", type=float, required=True, help="Incoming span bearing (deg)")
@click.option("--outgoing", type=float, required=True, help="Outgoing span bearing (deg)")
@click.option(
    "--base-span", type=float, default=DEFAULT_PULL_BASE_SPAN_FT, help="Base span (ft)"
)
def pull(incoming: float, outgoing: float, base_span: float) -> None:
    """Suggest line angle and pull from span bearings."""
    result = compute_pull_autofill(incoming, outgoing, base_span)
    click.echo(f"Line angle: {result.theta_deg:.1f} deg")
    click.echo(f"Pull: {result.pull_ft:.2f} ft over {base_span:.0f} ft")


@main.command()
@click.argument("value")
@click.option("--tick-marks", is_flag=True, help="Format as 18' 6\"")
def convert(value: str, tick_marks: bool) -> None:
    """Parse a measurement and print it as feet and inches."""
    feet = parse_feet(value)
    if feet is None:
        raise click.ClickException(f"Cannot parse measurement: {value!r}")
    click.echo(f"{format_feet_inches(feet, tick_marks=tick_marks)} ({feet:.4f} ft)")


if __name__ == "__main__":
    main()
