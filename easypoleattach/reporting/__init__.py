"""Report export for analysis outcomes."""

from .csv_reporter import CSVReporter, generate_csv_report
from .json_reporter import JSONReporter, generate_json_report

__all__ = [
    "CSVReporter",
    "JSONReporter",
    "generate_csv_report",
    "generate_json_report",
]
