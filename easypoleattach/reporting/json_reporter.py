"""JSON report generation for pole attachment analysis."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Union

from .. import __version__
from ..core.models import AnalysisOutcome


class JSONReporter:
    """Generate structured JSON reports for analysis outcomes."""

    def __init__(self, indent: int = 2) -> None:
        """Initialize JSON reporter.

        Args:
            indent: JSON indentation for readable output
        """
        self.indent = indent

    def build(self, outcome: AnalysisOutcome) -> Dict[str, Any]:
        """Wrap an outcome with report metadata.

        Failures keep their ``errors`` mapping; successes carry results,
        warnings, notes and cost.
        """
        report: Dict[str, Any] = {
            "metadata": {
                "analysis_date": datetime.now().isoformat(),
                "generator": "easypoleattach",
                "version": __version__,
            },
            "ok": outcome.ok,
        }
        report.update(outcome.to_dict())
        return report

    def dumps(self, outcome: AnalysisOutcome) -> str:
        return json.dumps(self.build(outcome), indent=self.indent, ensure_ascii=False)

    def write(self, outcome: AnalysisOutcome, output_path: Union[str, Path]) -> None:
        """Write the report to a JSON file.

        Args:
            outcome: Analysis outcome
            output_path: Output JSON file path
        """
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.build(outcome), f, indent=self.indent, ensure_ascii=False)


def generate_json_report(outcome: AnalysisOutcome, output_path: Union[str, Path]) -> None:
    """Convenience function to write a JSON report."""
    JSONReporter().write(outcome, output_path)
