"""Output layer: summaries, terminal tables and CSV files."""

from .csv_report import CSVOutput, normalised_filename
from .summary import (
    SUMMARY_COLUMNS,
    Output,
    OutputData,
    ScheduleSummary,
    ShiftsSummary,
    TypeDurations,
    duration_format,
    print_outputs,
    sheet_duration_format,
)
from .table import TABLE_HEADERS, TableOutput

__all__ = [
    "SUMMARY_COLUMNS",
    "TABLE_HEADERS",
    "CSVOutput",
    "Output",
    "OutputData",
    "ScheduleSummary",
    "ShiftsSummary",
    "TableOutput",
    "TypeDurations",
    "duration_format",
    "normalised_filename",
    "print_outputs",
    "sheet_duration_format",
]
