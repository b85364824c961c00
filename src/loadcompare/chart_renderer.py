"""Latency comparison chart (png)."""
import io
import logging
from typing import List

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from src.const import MILLISECOND
from .delta_classifier import ScenarioComparison
from .models import RunTotals
from .report_renderer import ReportRenderer, format_percent


# Configure logging
logger = logging.getLogger(__name__)

LATENCY_METRICS = ("mean", "p50", "p95", "p99", "max")


def latency_frame(comparisons: List[ScenarioComparison]) -> pd.DataFrame:
    """
    Long-form latency data for plotting.

    Args:
        comparisons: Classified scenarios.

    Returns:
        DataFrame with position, scenario, metric, run and latency_ms columns;
        position is the scenario's index in the report, names may repeat.
    """
    rows = []
    for position, comparison in enumerate(comparisons):
        for key in LATENCY_METRICS:
            delta = comparison[key]
            rows.append({'position': position, 'scenario': comparison.name, 'metric': delta.metric.label,
                         'run': 'Before', 'latency_ms': delta.before / MILLISECOND})
            rows.append({'position': position, 'scenario': comparison.name, 'metric': delta.metric.label,
                         'run': 'After', 'latency_ms': delta.after / MILLISECOND})
    return pd.DataFrame(rows, columns=['position', 'scenario', 'metric', 'run', 'latency_ms'])


class ChartRenderer(ReportRenderer):
    """Grouped before/after latency bars, one panel per scenario."""

    binary = True

    def render(self, comparisons: List[ScenarioComparison], totals: RunTotals) -> bytes:
        df = latency_frame(comparisons)
        panels = max(1, len(comparisons))
        fig, axs = plt.subplots(panels, 1, figsize=(10, 4 * panels), squeeze=False)

        if not comparisons:
            axs[0, 0].text(0.5, 0.5, "No scenarios to compare", ha='center', va='center')
            axs[0, 0].set_axis_off()

        for i, comparison in enumerate(comparisons):
            ax = axs[i, 0]
            sns.barplot(data=df[df['position'] == i], x='metric', y='latency_ms',
                        hue='run', ax=ax)
            ax.set_title(comparison.name)
            ax.set_xlabel("")
            ax.set_ylabel("Latency (ms)")

            # Percentage change above each metric group
            for position, key in enumerate(LATENCY_METRICS):
                delta = comparison[key]
                top = max(delta.before, delta.after) / MILLISECOND
                ax.text(position, top, format_percent(delta.percent, 1, signed=True),
                        ha='center', va='bottom', fontsize=8)

        fig.suptitle(f"{totals.requests} requests from {totals.files} recordings")
        fig.tight_layout()
        buffer = io.BytesIO()
        fig.savefig(buffer, format='png')
        plt.close(fig)
        logger.debug(f"Chart rendered for {len(comparisons)} scenarios")
        return buffer.getvalue()
