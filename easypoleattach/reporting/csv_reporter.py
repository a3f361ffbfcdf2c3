"""CSV report generation for pole attachment analysis."""

import csv
import io
from pathlib import Path
from typing import List, Optional, Union

from ..core.models import AnalysisSuccess
from ..core.units import format_feet_inches

Row = List[str]


class CSVReporter:
    """Flatten an analysis into ``Section,Field,Value`` rows."""

    headers = ["Section", "Field", "Value"]

    def __init__(self, tick_marks: bool = False) -> None:
        """Initialize CSV reporter.

        Args:
            tick_marks: Format heights as 18' 6" instead of 18ft 6in
        """
        self.tick_marks = tick_marks

    def _height(self, feet: Optional[float]) -> str:
        return format_feet_inches(feet, tick_marks=self.tick_marks)

    def rows(self, success: AnalysisSuccess) -> List[Row]:
        """Build report rows for a successful analysis.

        Args:
            success: Successful analysis outcome

        Returns:
            Rows, header first
        """
        results = success.results
        pole = results.pole
        attach = results.attach
        span = results.span
        clearances = results.clearances
        height = self._height

        rows: List[Row] = [list(self.headers)]

        # Pole
        rows.append(["Pole", "Height", height(pole.input_height_ft)])
        rows.append(["Pole", "Class", pole.class_label])
        rows.append(["Pole", "Buried", height(pole.buried_ft)])
        rows.append(["Pole", "Above Ground", height(pole.above_ground_ft)])
        if results.pole_replacement is not None and results.pole_replacement.replace:
            rows.append(
                [
                    "Pole",
                    "Suggested Replacement",
                    f"{results.pole_replacement.suggested_height_ft:.0f} ft",
                ]
            )

        # Attachment
        rows.append(["Attach", "Proposed Height", height(attach.proposed_attach_ft)])
        rows.append(["Attach", "Basis", attach.basis])
        rows.append(["Attach", "Detail", attach.detail])
        if attach.controlling is not None:
            rows.append(["Attach", "Controlling Clearance", attach.controlling.label])
            rows.append(["Attach", "Controlling Height", height(attach.controlling.limit_ft)])

        # Span
        rows.append(["Span", "Length (ft)", f"{span.span_ft:.1f}"])
        rows.append(["Span", "Wind (mph)", f"{span.wind_mph:.0f}"])
        rows.append(["Span", "Ice (in)", f"{span.ice_in:.2f}"])
        rows.append(["Span", "Sag", height(span.sag_ft)])
        rows.append(["Span", "Midspan Height", height(span.midspan_ft)])
        rows.append(["Span", "Low Point", height(span.low_point_ft)])
        if span.midpoint is not None:
            rows.append(["Span", "Midpoint", f"{span.midpoint[0]:.6f}, {span.midpoint[1]:.6f}"])

        # Clearances
        rows.append(["Clearances", "Voltage", clearances.voltage])
        rows.append(["Clearances", "Environment", clearances.environment])
        rows.append(["Clearances", "Ground", height(clearances.ground_clearance)])
        rows.append(["Clearances", "Road", height(clearances.road_clearance)])
        rows.append(["Clearances", "Pole-Top Space", height(clearances.minimum_pole_top_space)])
        rows.append(
            [
                "Clearances",
                "Power Separation (in)",
                f"{clearances.power_separation_for(clearances.voltage) * 12:.0f}",
            ]
        )
        if clearances.preset_key:
            rows.append(["Clearances", "Preset", clearances.preset_key])

        # Make-ready
        for item in results.make_ready:
            label = item.line_type
            if item.company_name:
                label = f"{label} ({item.company_name})"
            rows.append(
                [
                    "Make-Ready",
                    label,
                    f"{item.adjustment_in:.0f} in to {height(item.recommended_height_ft)} "
                    f"(${item.estimated_cost:.2f})",
                ]
            )
        if results.make_ready:
            rows.append(["Make-Ready", "Total", f"${results.make_ready_total:.2f}"])

        # Guying
        if results.guy is not None:
            guy = results.guy
            rows.append(["Guying", "Required", "Yes" if guy.required else "No"])
            rows.append(["Guying", "Tension (lb)", f"{guy.tension_lb:.0f}"])
            rows.append(["Guying", "Horizontal Load (lb)", f"{guy.horizontal_load_lb:.0f}"])
            rows.append(["Guying", "Lead", height(guy.lead_distance_ft)])
            rows.append(["Guying", "Guy Attach", height(guy.guy_attach_height_ft)])
            rows.append(["Guying", "Cost", f"${guy.total_cost:.2f}"])
        if results.pull is not None:
            rows.append(["Guying", "Line Angle (deg)", f"{results.pull.theta_deg:.1f}"])
            rows.append(["Guying", "Pull (ft)", f"{results.pull.pull_ft:.2f}"])

        # Cost
        for key, amount in results.cost_breakdown.items():
            rows.append(["Cost", key, f"${amount:.2f}"])
        rows.append(["Cost", "Total", f"${success.cost:.2f}"])

        for warning in success.warnings:
            rows.append(["Warnings", "", warning])
        for note in success.notes:
            rows.append(["Notes", "", note])

        return rows

    def render(self, success: AnalysisSuccess) -> str:
        """Rows as CSV text."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerows(self.rows(success))
        return buffer.getvalue()

    def write(self, success: AnalysisSuccess, output_path: Union[str, Path]) -> None:
        """Write the report to a CSV file.

        Args:
            success: Successful analysis outcome
            output_path: Output CSV file path
        """
        with open(output_path, "w", newline="", encoding="utf-8") as csvfile:
            writer = csv.writer(csvfile)
            writer.writerows(self.rows(success))


def generate_csv_report(
    success: AnalysisSuccess,
    output_path: Union[str, Path],
    tick_marks: bool = False,
) -> None:
    """Convenience function to write a CSV report."""
    CSVReporter(tick_marks=tick_marks).write(success, output_path)
