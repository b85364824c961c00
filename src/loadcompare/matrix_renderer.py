"""Colored spreadsheet report (xlsx)."""
import io
import logging
from typing import Dict, List

from openpyxl import Workbook
from openpyxl.comments import Comment
from openpyxl.styles import Font, PatternFill
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.worksheet.worksheet import Worksheet

from src.const import TEST_DURATION_ROUNDING
from .delta_classifier import MetricDelta, ScenarioComparison, percentage_increase
from .durations import format_duration, round_duration, smart_format
from .models import Classification, MarginConfig, RunTotals
from .numeric_kinds import DurationKind
from .report_renderer import ReportRenderer, format_percent


# Configure logging
logger = logging.getLogger(__name__)

SHEET_NAME = "Sheet1"
COMMENT_AUTHOR = "loadcompare"
HEADER_ROW = 7

# (column, metric key, header, decimals shown for non-duration metrics)
METRIC_COLUMNS = (
    ("B", "requests", "Total requests change", 0),
    ("C", "rate", "Request rate change", 0),
    ("D", "throughput", "Throughput change", 1),
    ("E", "mean", "Mean change", 0),
    ("F", "p50", "P50 change", 0),
    ("G", "p95", "P95 change", 0),
    ("H", "p99", "P99 change", 0),
    ("I", "max", "Max change", 0),
    ("J", "bytes_out_mean", "Mean bytes sent change", 0),
    ("K", "bytes_in_mean", "Mean bytes received change", 0),
    ("L", "success", "Success change", 0),
)
DURATION_COLUMN = "M"

COLUMN_WIDTHS = {
    "A": 22, "B": 19, "C": 18, "D": 18,
    "E": 13, "F": 13, "G": 13, "H": 13, "I": 13,
    "J": 25, "K": 25, "L": 14, "M": 14,
}

LEGEND = (
    (Classification.IMPROVED, "Good"),
    (Classification.UNCHANGED, "No change"),
    (Classification.WITHIN_MARGIN, "Within margin of error"),
    (Classification.REGRESSED, "Individual metric worse"),
)

DATA_SIZE_FORMAT = '[<1000000]0.00," KB";[<1000000000]0.00,," MB";0.00,,," GB"'
COMMA_NUMBER_FORMAT = '#,##0'


def _solid(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


FILLS: Dict[Classification, PatternFill] = {
    Classification.IMPROVED: _solid("29FD2E"),
    Classification.UNCHANGED: _solid("B7B7B7"),
    Classification.WITHIN_MARGIN: _solid("CCCCCC"),
    Classification.REGRESSED: _solid("FC0D1B"),
}
REGRESSED_FONT = Font(color="FFFFFF")
BOLD = Font(bold=True)


def cell_text(delta: MetricDelta, decimals: int) -> str:
    """Displayed delta, e.g. -36ms or 12 requests."""
    if isinstance(delta.metric.kind, DurationKind):
        return smart_format(delta.difference)
    return f"{delta.after - delta.before:.{decimals}f} {delta.metric.unit}".rstrip()


def cell_comment(delta: MetricDelta, decimals: int) -> str:
    """Literal before and after values with the percentage change."""
    percent = format_percent(delta.percent)
    if isinstance(delta.metric.kind, DurationKind):
        return f"{smart_format(delta.before)} -> {smart_format(delta.after)} ({percent})"
    unit = f" {delta.metric.unit}" if delta.metric.unit else ""
    return f"{delta.before:.{decimals}f}{unit} -> {delta.after:.{decimals}f}{unit} ({percent})"


class MatrixRenderer(ReportRenderer):
    """Spreadsheet with one colored row per scenario, a legend and run totals."""

    binary = True

    def __init__(self, margins: MarginConfig):
        self.margins = margins

    def _comment(self, text: str) -> Comment:
        return Comment(text, COMMENT_AUTHOR)

    def _annotation(self, delta: MetricDelta, decimals: int) -> str:
        text = cell_comment(delta, decimals)
        margin = delta.metric.margin(self.margins)
        if not margin:
            return text
        if isinstance(delta.metric.kind, DurationKind):
            return f"{text}, margin {smart_format(margin)}"
        return f"{text}, margin {margin:g} {delta.metric.unit}".rstrip()

    def _write_header(self, ws: Worksheet, totals: RunTotals) -> None:
        for column, width in COLUMN_WIDTHS.items():
            ws.column_dimensions[column].width = width

        ws["A1"] = "Legend"
        ws["A1"].font = BOLD
        for row, (classification, label) in enumerate(LEGEND, start=2):
            cell = ws[f"A{row}"]
            cell.value = label
            cell.fill = FILLS[classification]
            if classification is Classification.REGRESSED:
                cell.font = REGRESSED_FONT

        ws["C1"] = "Dataset total"
        ws["C1"].font = BOLD
        ws["C2"] = totals.dataset_bytes
        ws["C2"].number_format = DATA_SIZE_FORMAT

        ws["D1"] = "Requests total"
        ws["D1"].font = BOLD
        ws["D2"] = totals.requests
        ws["D2"].number_format = COMMA_NUMBER_FORMAT

        ws[f"A{HEADER_ROW}"] = "Name"
        for column, _, header, _ in METRIC_COLUMNS:
            ws[f"{column}{HEADER_ROW}"] = header
        ws[f"{DURATION_COLUMN}{HEADER_ROW}"] = "Test duration"
        for cell in ws[HEADER_ROW]:
            cell.font = BOLD

    def _write_scenario(self, ws: Worksheet, row: int, comparison: ScenarioComparison) -> None:
        # Control characters are not valid in xlsx cells
        name = ILLEGAL_CHARACTERS_RE.sub("", comparison.name)
        ws[f"A{row}"] = name
        ws[f"A{row}"].comment = self._comment(f"Name: {name}")

        for column, key, _, decimals in METRIC_COLUMNS:
            delta = comparison[key]
            cell = ws[f"{column}{row}"]
            cell.value = cell_text(delta, decimals)
            cell.comment = self._comment(self._annotation(delta, decimals))
            cell.fill = FILLS[delta.classification]
            if delta.classification is Classification.REGRESSED:
                cell.font = REGRESSED_FONT

        before, after = comparison.pair.before, comparison.pair.after
        before_duration = format_duration(round_duration(before.duration, TEST_DURATION_ROUNDING))
        after_duration = format_duration(round_duration(after.duration, TEST_DURATION_ROUNDING))
        cell = ws[f"{DURATION_COLUMN}{row}"]
        cell.value = after_duration
        percent = format_percent(percentage_increase(before.duration, after.duration))
        cell.comment = self._comment(f"{before_duration} -> {after_duration} ({percent})")

    def render(self, comparisons: List[ScenarioComparison], totals: RunTotals) -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = SHEET_NAME

        self._write_header(ws, totals)
        for row, comparison in enumerate(comparisons, start=HEADER_ROW + 1):
            self._write_scenario(ws, row, comparison)

        buffer = io.BytesIO()
        wb.save(buffer)
        logger.debug(f"Matrix report has {len(comparisons)} scenario rows")
        return buffer.getvalue()
