"""Data models for the comparison engine."""
import base64
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.const import DEFAULT_LOG_LEVEL, HTTP_SUCCESS_MAX, HTTP_SUCCESS_MIN, SECOND

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_timestamp(value: str) -> int:
    """Convert an RFC3339 timestamp with up to nanosecond precision to Unix nanoseconds."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    fraction = 0
    if "." in text:
        head, tail = text.split(".", 1)
        digits = len(tail) - len(tail.lstrip("0123456789"))
        if digits == 0 or digits > 9:
            raise ValueError(f"invalid fractional seconds in timestamp {value!r}")
        fraction = int(tail[:digits].ljust(9, "0"))
        text = head + tail[digits:]
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    seconds = (moment - EPOCH) // timedelta(seconds=1)
    return seconds * SECOND + fraction


class RequestResult(BaseModel):
    """One observed request, as recorded by vegeta."""
    model_config = ConfigDict(frozen=True, extra='ignore')

    attack: str = ""
    seq: int = 0
    code: int = 0
    timestamp: int = 0  # Unix nanoseconds
    latency: int = Field(default=0, ge=0)  # nanoseconds
    bytes_out: int = Field(default=0, ge=0)
    bytes_in: int = Field(default=0, ge=0)
    error: str = ""
    body: bytes = b""
    method: str = ""
    url: str = ""

    @field_validator('timestamp', mode='before')
    @classmethod
    def _timestamp_to_nanoseconds(cls, value):
        if isinstance(value, str) and not value.lstrip("-").isdigit():
            return parse_timestamp(value)
        return value

    @field_validator('body', mode='before')
    @classmethod
    def _decode_body(cls, value):
        if value is None:
            return b""
        if isinstance(value, str):
            return base64.b64decode(value)
        return value

    @field_validator('error', 'attack', 'method', 'url', mode='before')
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @property
    def succeeded(self) -> bool:
        return HTTP_SUCCESS_MIN <= self.code < HTTP_SUCCESS_MAX


@dataclass(frozen=True)
class LatencyMetrics:
    """Latency statistics in nanoseconds."""
    total: int = 0
    mean: int = 0
    p50: int = 0
    p90: int = 0
    p95: int = 0
    p99: int = 0
    max: int = 0
    min: int = 0


@dataclass(frozen=True)
class ByteMetrics:
    """Byte counter statistics."""
    total: int = 0
    mean: float = 0.0


@dataclass(frozen=True)
class MetricsSummary:
    """Aggregated statistics for one scenario on one side of the comparison."""
    requests: int = 0
    rate: float = 0.0
    throughput: float = 0.0
    duration: int = 0
    wait: int = 0
    latencies: LatencyMetrics = field(default_factory=LatencyMetrics)
    bytes_in: ByteMetrics = field(default_factory=ByteMetrics)
    bytes_out: ByteMetrics = field(default_factory=ByteMetrics)
    success: float = 0.0
    status_codes: Tuple[Tuple[str, int], ...] = ()
    errors: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ScenarioPair:
    """Before and after summaries of one scenario."""
    name: str
    filename: str
    before: MetricsSummary
    after: MetricsSummary


@dataclass(frozen=True)
class RunTotals:
    """Input consumed by a comparison run."""
    dataset_bytes: int = 0
    requests: int = 0
    files: int = 0

    def __add__(self, other: "RunTotals") -> "RunTotals":
        return RunTotals(
            dataset_bytes=self.dataset_bytes + other.dataset_bytes,
            requests=self.requests + other.requests,
            files=self.files + other.files,
        )


class MarginConfig(BaseModel):
    """Per-metric tolerances, each in the unit of the metric it gates."""
    model_config = ConfigDict(frozen=True)

    total_requests: int = Field(default=0, ge=0)
    request_rate: float = Field(default=0.0, ge=0)
    throughput: float = Field(default=0.0, ge=0)
    mean_bytes_sent: float = Field(default=0.0, ge=0)
    mean_bytes_received: float = Field(default=0.0, ge=0)
    success: float = Field(default=0.0, ge=0)  # percentage points
    request_duration: int = Field(default=0, ge=0)  # nanoseconds


class Classification(Enum):
    """Outcome of comparing one metric."""
    UNCHANGED = "unchanged"
    WITHIN_MARGIN = "within_margin"
    IMPROVED = "improved"
    REGRESSED = "regressed"


class Polarity(Enum):
    """Direction in which a metric improves."""
    HIGHER_IS_BETTER = "higher"
    LOWER_IS_BETTER = "lower"


class OutputFormat(Enum):
    """Report formats."""
    MARKDOWN = "markdown"
    CSV = "csv"
    XLSX = "xlsx"
    PNG = "png"


@dataclass
class CompareOptions:
    """Options for one comparison run."""
    before_dir: str
    after_dir: str
    output_format: OutputFormat = OutputFormat.MARKDOWN
    margins: MarginConfig = field(default_factory=MarginConfig)
    progress: bool = False
    workers: int = 1
    strict: bool = False
    log_level: str = DEFAULT_LOG_LEVEL
