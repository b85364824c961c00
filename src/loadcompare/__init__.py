"""Before/after comparison of vegeta load-test results."""
from .models import (
    RequestResult, LatencyMetrics, ByteMetrics, MetricsSummary, ScenarioPair, RunTotals,
    MarginConfig, Classification, Polarity, OutputFormat, CompareOptions
)
from .exceptions import CompareError, ConfigError, RecordingIOError, DecodeError, RenderError
from .durations import smart_format, format_duration, parse_duration, round_duration
from .numeric_kinds import NumericKind, DurationKind, CountKind, RatioKind, DURATION, COUNT, RATIO
from .result_decoder import ResultDecoder
from .summary_aggregator import SummaryAggregator, aggregate
from .concurrency_manager import ConcurrencyManager, RecordingSummary
from .scenario_pairer import ScenarioPairer, list_recordings, common_filenames
from .delta_classifier import (
    DeltaClassifier, DeltaResult, MetricDelta, ScenarioComparison, METRICS, classify, percentage_increase
)
from .report_renderer import ReportRenderer, create_renderer
from .narrative_renderer import NarrativeRenderer
from .tabular_renderer import TabularRenderer
from .matrix_renderer import MatrixRenderer
from .runner import ComparisonRunner

__all__ = [
    'RequestResult',
    'LatencyMetrics',
    'ByteMetrics',
    'MetricsSummary',
    'ScenarioPair',
    'RunTotals',
    'MarginConfig',
    'Classification',
    'Polarity',
    'OutputFormat',
    'CompareOptions',
    'CompareError',
    'ConfigError',
    'RecordingIOError',
    'DecodeError',
    'RenderError',
    'smart_format',
    'format_duration',
    'parse_duration',
    'round_duration',
    'NumericKind',
    'DurationKind',
    'CountKind',
    'RatioKind',
    'DURATION',
    'COUNT',
    'RATIO',
    'ResultDecoder',
    'SummaryAggregator',
    'aggregate',
    'ConcurrencyManager',
    'RecordingSummary',
    'ScenarioPairer',
    'list_recordings',
    'common_filenames',
    'DeltaClassifier',
    'DeltaResult',
    'MetricDelta',
    'ScenarioComparison',
    'METRICS',
    'classify',
    'percentage_increase',
    'ReportRenderer',
    'create_renderer',
    'NarrativeRenderer',
    'TabularRenderer',
    'MatrixRenderer',
    'ComparisonRunner'
]
