"""CSV export with one flat row per scenario."""
import logging
from typing import Dict, List

import pandas as pd

from src.const import TEST_DURATION_ROUNDING
from .delta_classifier import ScenarioComparison
from .durations import format_duration, round_duration
from .models import RunTotals
from .report_renderer import ReportRenderer, format_percent


# Configure logging
logger = logging.getLogger(__name__)

# (metric key, column label); each expands to change, before and after columns
TRACKED_METRICS = (
    ("bytes_out_mean", "Mean bytes sent"),
    ("bytes_in_mean", "Mean bytes received"),
    ("throughput", "Throughput"),
    ("mean", "Mean"),
    ("p50", "P50"),
    ("p95", "P95"),
    ("p99", "P99"),
    ("max", "Max"),
)


def _build_columns() -> List[str]:
    columns = ["Name", "Queries per second", "Duration"]
    for _, label in TRACKED_METRICS:
        columns.extend([f"{label} change", f"{label} before", f"{label} after"])
    columns.extend([
        "Success before",
        "Success after",
        "Total sent bytes before",
        "Total sent bytes after",
        "Total received bytes before",
        "Total received bytes after",
    ])
    return columns


COLUMNS = _build_columns()


class TabularRenderer(ReportRenderer):
    """Flat CSV rows; column order is fixed so downstream tools can parse by position."""

    def _row(self, comparison: ScenarioComparison) -> Dict[str, str]:
        before, after = comparison.pair.before, comparison.pair.after
        row = {
            "Name": comparison.name,
            "Queries per second": f"{after.rate:.0f}",
            "Duration": format_duration(round_duration(after.duration, TEST_DURATION_ROUNDING)),
        }
        for key, label in TRACKED_METRICS:
            delta = comparison[key]
            kind = delta.metric.kind
            row[f"{label} change"] = format_percent(delta.percent)
            row[f"{label} before"] = kind.format(delta.before)
            row[f"{label} after"] = kind.format(delta.after)
        row["Success before"] = f"{before.success * 100.0:.1f}%"
        row["Success after"] = f"{after.success * 100.0:.1f}%"
        row["Total sent bytes before"] = str(before.bytes_out.total)
        row["Total sent bytes after"] = str(after.bytes_out.total)
        row["Total received bytes before"] = str(before.bytes_in.total)
        row["Total received bytes after"] = str(after.bytes_in.total)
        return row

    def render(self, comparisons: List[ScenarioComparison], totals: RunTotals) -> str:
        df = pd.DataFrame([self._row(comparison) for comparison in comparisons], columns=COLUMNS)
        logger.debug(f"Tabular report has {len(df)} rows")
        return df.to_csv(index=False, lineterminator="\n")
