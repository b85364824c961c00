"""Markdown report of latency and success changes."""
from typing import List

from .delta_classifier import MetricDelta, ScenarioComparison
from .durations import smart_format
from .models import RunTotals
from .report_renderer import ReportRenderer, format_percent, format_ratio_percent

LATENCY_COLUMNS = ("mean", "p50", "p95", "p99", "max")


def format_duration_change(delta: MetricDelta) -> str:
    """e.g. 178ms → 142ms (-20.22%)"""
    return f"{smart_format(delta.before)} → {smart_format(delta.after)} ({format_percent(delta.percent, 2, signed=True)})"


class NarrativeRenderer(ReportRenderer):
    """One Markdown section per scenario."""

    def render(self, comparisons: List[ScenarioComparison], totals: RunTotals) -> str:
        lines = []
        for comparison in comparisons:
            success = comparison["success"]
            cells = [format_duration_change(comparison[key]) for key in LATENCY_COLUMNS]
            cells.append(f"{format_ratio_percent(success.before)} → {format_ratio_percent(success.after)}")

            lines.append(f"### {comparison.name}")
            lines.append("")
            lines.append("| Mean | P50 | P95 | P99 | Max | Success Ratio |")
            lines.append("|------|-----|-----|-----|-----|---------------|")
            lines.append("| " + " | ".join(cells) + " |")
            lines.append("")
        return "".join(line + "\n" for line in lines)
