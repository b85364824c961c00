"""Comparison runner to orchestrate a before/after comparison."""
import logging
import sys
from typing import IO, List, Optional, Tuple

from .concurrency_manager import ConcurrencyManager
from .delta_classifier import DeltaClassifier, ScenarioComparison
from .models import CompareOptions, RunTotals
from .report_renderer import create_renderer
from .scenario_pairer import ScenarioPairer


# Configure logging
logger = logging.getLogger(__name__)


class ComparisonRunner:
    """Pairs, aggregates, classifies and renders one comparison run."""

    def __init__(self, options: CompareOptions):
        self.options = options
        self.pairer = ScenarioPairer(ConcurrencyManager(options.workers), strict=options.strict)
        self.classifier = DeltaClassifier(options.margins)
        self.renderer = create_renderer(options.output_format, options.margins)

    def compare(self) -> Tuple[List[ScenarioComparison], RunTotals]:
        """
        Aggregate and classify every scenario.

        Returns:
            Tuple of classified comparisons in report order and the run totals.
        """
        pairs, totals = self.pairer.pair(self.options.before_dir, self.options.after_dir)
        logger.info(f"Aggregated {totals.requests} requests ({totals.dataset_bytes} bytes) from {totals.files} files")
        return self.classifier.compare_all(pairs), totals

    def run(self, stream: Optional[IO] = None) -> None:
        """Run the comparison and write the report once everything is aggregated."""
        try:
            comparisons, totals = self.compare()
            self.renderer.write(comparisons, totals, stream or sys.stdout)
            logger.info("Comparison completed successfully")
        except Exception as e:
            logger.debug(f"Comparison failed: {e}", exc_info=True)
            raise
