"""Folds a stream of request results into a metrics summary."""
import logging
from typing import Dict, Iterable, List, Optional

import numpy as np

from src.const import SECOND
from .models import ByteMetrics, LatencyMetrics, MetricsSummary, RequestResult


# Configure logging
logger = logging.getLogger(__name__)

PERCENTILES = (50, 90, 95, 99)


def nearest_rank(sorted_values: np.ndarray, percentile: int) -> int:
    """
    Nearest-rank percentile of an ascending array.

    Args:
        sorted_values: Non-empty ascending latencies.
        percentile: Percentile between 1 and 100.

    Returns:
        The value at rank ceil(percentile * n / 100).
    """
    count = len(sorted_values)
    rank = -(-percentile * count // 100)
    rank = min(max(rank, 1), count)
    return int(sorted_values[rank - 1])


class SummaryAggregator:
    """Accumulates request results for one scenario and seals them into a summary."""

    def __init__(self):
        self.attack = ""
        self._latencies: List[int] = []
        self._requests = 0
        self._successes = 0
        self._bytes_in = 0
        self._bytes_out = 0
        self._earliest: Optional[int] = None
        self._latest: Optional[int] = None
        self._end: Optional[int] = None
        self._status_codes: Dict[str, int] = {}
        self._errors: Dict[str, None] = {}
        self._summary: Optional[MetricsSummary] = None

    @property
    def closed(self) -> bool:
        return self._summary is not None

    def add(self, result: RequestResult) -> None:
        """Add one result to the running statistics."""
        if self.closed:
            raise RuntimeError("cannot add results to a closed aggregator")
        if not self.attack and result.attack:
            self.attack = result.attack

        self._requests += 1
        self._latencies.append(result.latency)
        self._bytes_in += result.bytes_in
        self._bytes_out += result.bytes_out
        if result.succeeded:
            self._successes += 1

        code = str(result.code)
        self._status_codes[code] = self._status_codes.get(code, 0) + 1
        if result.error:
            self._errors.setdefault(result.error, None)

        if self._earliest is None or result.timestamp < self._earliest:
            self._earliest = result.timestamp
        if self._latest is None or result.timestamp > self._latest:
            self._latest = result.timestamp
        end = result.timestamp + result.latency
        if self._end is None or end > self._end:
            self._end = end

    def close(self) -> MetricsSummary:
        """Seal the aggregator and return its summary; later calls return the same summary."""
        if self._summary is None:
            self._summary = self._build()
            self._latencies = []
        return self._summary

    def _build(self) -> MetricsSummary:
        requests = self._requests
        if requests == 0:
            return MetricsSummary()

        latencies = np.sort(np.asarray(self._latencies, dtype=np.int64))
        total = sum(self._latencies)
        percentiles = {p: nearest_rank(latencies, p) for p in PERCENTILES}

        duration = self._latest - self._earliest
        wait = self._end - self._latest
        rate = requests / (duration / SECOND) if duration > 0 else 0.0
        elapsed = duration + wait
        throughput = self._successes / (elapsed / SECOND) if elapsed > 0 else 0.0

        return MetricsSummary(
            requests=requests,
            rate=rate,
            throughput=throughput,
            duration=duration,
            wait=wait,
            latencies=LatencyMetrics(
                total=total,
                mean=total // requests,
                p50=percentiles[50],
                p90=percentiles[90],
                p95=percentiles[95],
                p99=percentiles[99],
                max=int(latencies[-1]),
                min=int(latencies[0]),
            ),
            bytes_in=ByteMetrics(total=self._bytes_in, mean=self._bytes_in / requests),
            bytes_out=ByteMetrics(total=self._bytes_out, mean=self._bytes_out / requests),
            success=self._successes / requests,
            status_codes=tuple(sorted(self._status_codes.items())),
            errors=tuple(self._errors),
        )


def aggregate(results: Iterable[RequestResult]) -> MetricsSummary:
    """
    Aggregate a lazy stream of results in one forward pass.

    Args:
        results: Request results of one scenario; errors raised while iterating propagate.

    Returns:
        Sealed MetricsSummary.
    """
    aggregator = SummaryAggregator()
    for result in results:
        aggregator.add(result)
    return aggregator.close()
