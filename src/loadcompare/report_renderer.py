"""Base class and factory for comparison reports."""
import logging
from abc import ABC, abstractmethod
from typing import IO, List, Optional, Union

from .delta_classifier import ScenarioComparison
from .exceptions import RenderError
from .models import MarginConfig, OutputFormat, RunTotals


# Configure logging
logger = logging.getLogger(__name__)


def format_percent(percent: float, decimals: int = 0, signed: bool = False) -> str:
    """Format a percentage change, e.g. -20.22%."""
    sign = "+" if signed else ""
    return f"{percent:{sign}.{decimals}f}%"


def format_ratio_percent(value: float) -> str:
    """Format a success percentage with at most two decimals, e.g. 99.5%."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text}%"


class ReportRenderer(ABC):
    """Renders classified scenario comparisons into one complete document."""

    binary = False

    @abstractmethod
    def render(self, comparisons: List[ScenarioComparison], totals: RunTotals) -> Union[str, bytes]:
        """
        Produce the whole report.

        Args:
            comparisons: Classified scenarios in report order.
            totals: Input consumed by the run.

        Returns:
            The document, text or bytes depending on the format.
        """

    def write(self, comparisons: List[ScenarioComparison], totals: RunTotals, stream: IO) -> None:
        """
        Render the report and write it to a stream in one piece.

        Raises:
            RenderError: If rendering or writing fails.
        """
        try:
            document = self.render(comparisons, totals)
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"failed to render report: {e}") from e
        if self.binary:
            stream = getattr(stream, 'buffer', stream)
        try:
            stream.write(document)
            stream.flush()
        except (OSError, ValueError) as e:
            raise RenderError(f"failed to write report: {e}") from e
        logger.info(f"Wrote {type(self).__name__} report for {len(comparisons)} scenarios")


def create_renderer(output_format: OutputFormat, margins: Optional[MarginConfig] = None) -> ReportRenderer:
    """
    Return the renderer for an output format.

    Args:
        output_format: Requested format.
        margins: Margin configuration, used by the matrix format.

    Returns:
        ReportRenderer instance.
    """
    from .chart_renderer import ChartRenderer
    from .matrix_renderer import MatrixRenderer
    from .narrative_renderer import NarrativeRenderer
    from .tabular_renderer import TabularRenderer

    if output_format is OutputFormat.CSV:
        return TabularRenderer()
    if output_format is OutputFormat.XLSX:
        return MatrixRenderer(margins or MarginConfig())
    if output_format is OutputFormat.PNG:
        return ChartRenderer()
    return NarrativeRenderer()
