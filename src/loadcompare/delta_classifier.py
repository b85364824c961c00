"""Classifies before/after metric pairs against error margins."""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple, Union

from .models import Classification, MarginConfig, MetricsSummary, Polarity, ScenarioPair
from .numeric_kinds import COUNT, DURATION, RATIO, NumericKind

# Configure logging
logger = logging.getLogger(__name__)

Number = Union[int, float]


@dataclass(frozen=True)
class DeltaResult:
    """Percentage change and classification of one metric."""
    percent: float
    classification: Classification


@dataclass(frozen=True)
class MetricDefinition:
    """A tracked metric: how to read it, its unit, polarity and margin."""
    key: str
    label: str
    kind: NumericKind
    polarity: Polarity
    margin_field: str
    extract: Callable[[MetricsSummary], Number]
    unit: str = ""

    def margin(self, margins: MarginConfig) -> Number:
        return self.kind.coerce(getattr(margins, self.margin_field))


@dataclass(frozen=True)
class MetricDelta:
    """Classified comparison of one metric for one scenario."""
    metric: MetricDefinition
    before: Number
    after: Number
    margin: Number
    percent: float
    classification: Classification

    @property
    def difference(self) -> Number:
        return self.metric.kind.difference(self.before, self.after)


@dataclass(frozen=True)
class ScenarioComparison:
    """All classified metrics of one scenario pair."""
    pair: ScenarioPair
    deltas: Dict[str, MetricDelta]

    @property
    def name(self) -> str:
        return self.pair.name

    def __getitem__(self, key: str) -> MetricDelta:
        return self.deltas[key]


METRICS: Tuple[MetricDefinition, ...] = (
    MetricDefinition("requests", "Total requests", COUNT, Polarity.HIGHER_IS_BETTER,
                     "total_requests", lambda m: m.requests, "requests"),
    MetricDefinition("rate", "Request rate", RATIO, Polarity.HIGHER_IS_BETTER,
                     "request_rate", lambda m: m.rate, "requests"),
    MetricDefinition("throughput", "Throughput", RATIO, Polarity.HIGHER_IS_BETTER,
                     "throughput", lambda m: m.throughput, "requests"),
    MetricDefinition("mean", "Mean", DURATION, Polarity.LOWER_IS_BETTER,
                     "request_duration", lambda m: m.latencies.mean),
    MetricDefinition("p50", "P50", DURATION, Polarity.LOWER_IS_BETTER,
                     "request_duration", lambda m: m.latencies.p50),
    MetricDefinition("p95", "P95", DURATION, Polarity.LOWER_IS_BETTER,
                     "request_duration", lambda m: m.latencies.p95),
    MetricDefinition("p99", "P99", DURATION, Polarity.LOWER_IS_BETTER,
                     "request_duration", lambda m: m.latencies.p99),
    MetricDefinition("max", "Max", DURATION, Polarity.LOWER_IS_BETTER,
                     "request_duration", lambda m: m.latencies.max),
    MetricDefinition("bytes_out_mean", "Mean bytes sent", RATIO, Polarity.HIGHER_IS_BETTER,
                     "mean_bytes_sent", lambda m: m.bytes_out.mean, "bytes"),
    MetricDefinition("bytes_in_mean", "Mean bytes received", RATIO, Polarity.HIGHER_IS_BETTER,
                     "mean_bytes_received", lambda m: m.bytes_in.mean, "bytes"),
    MetricDefinition("success", "Success", RATIO, Polarity.HIGHER_IS_BETTER,
                     "success", lambda m: m.success * 100.0, "percent"),
)

METRICS_BY_KEY: Dict[str, MetricDefinition] = {metric.key: metric for metric in METRICS}


def percentage_increase(before: Number, after: Number) -> float:
    """Percentage change from before to after; 0 when before is 0."""
    if before == 0:
        return 0.0
    return (float(after) - float(before)) / float(before) * 100.0


def classify(before: Number, after: Number, margin: Number, polarity: Polarity,
             kind: NumericKind = RATIO) -> DeltaResult:
    """
    Classify the change of one metric.

    Args:
        before: Value of the before run.
        after: Value of the after run.
        margin: Tolerance in the metric's own unit; 0 means any difference counts.
        polarity: Whether higher or lower values are better.
        kind: Numeric kind the values belong to.

    Returns:
        DeltaResult with the percentage change and classification.
    """
    before, after = kind.coerce(before), kind.coerce(after)
    percent = percentage_increase(before, after)

    if kind.compare(before, after) == 0:
        return DeltaResult(percent, Classification.UNCHANGED)
    if kind.within_margin(before, after, margin):
        return DeltaResult(percent, Classification.WITHIN_MARGIN)

    if polarity is Polarity.HIGHER_IS_BETTER:
        better = kind.compare(after, before) > 0
    else:
        better = kind.compare(after, before) < 0
    return DeltaResult(percent, Classification.IMPROVED if better else Classification.REGRESSED)


class DeltaClassifier:
    """Produces classified comparisons for scenario pairs."""

    def __init__(self, margins: MarginConfig):
        self.margins = margins

    def compare(self, pair: ScenarioPair) -> ScenarioComparison:
        """
        Classify every tracked metric of a scenario pair.

        Args:
            pair: Scenario with before and after summaries.

        Returns:
            ScenarioComparison keyed by metric key.
        """
        deltas = {}
        for metric in METRICS:
            before = metric.extract(pair.before)
            after = metric.extract(pair.after)
            margin = metric.margin(self.margins)
            result = classify(before, after, margin, metric.polarity, metric.kind)
            deltas[metric.key] = MetricDelta(
                metric=metric,
                before=metric.kind.coerce(before),
                after=metric.kind.coerce(after),
                margin=margin,
                percent=result.percent,
                classification=result.classification,
            )
        logger.debug(f"Classified {len(deltas)} metrics for scenario {pair.name}")
        return ScenarioComparison(pair=pair, deltas=deltas)

    def compare_all(self, pairs: List[ScenarioPair]) -> List[ScenarioComparison]:
        """Classify a list of pairs, keeping their order."""
        return [self.compare(pair) for pair in pairs]
