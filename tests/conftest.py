"""Shared test configuration and fixtures for all tests."""

import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from src.const import PROGRESS_LOGGER
from src.loadcompare.models import ByteMetrics, LatencyMetrics, MetricsSummary, RequestResult, ScenarioPair
from tests.test_const import (
    AFTER_LATENCIES_MS, BASE_EPOCH_SECONDS, BEFORE_LATENCIES_MS, MS, REFERENCE_SUCCESS,
    SECOND, TEST_ATTACK, TEST_METHOD, TEST_URL
)


def rfc3339(timestamp_ns: int) -> str:
    """Format Unix nanoseconds the way vegeta writes JSON timestamps."""
    seconds, fraction = divmod(timestamp_ns, SECOND)
    seconds -= BASE_EPOCH_SECONDS
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    return f"2020-01-01T{hours:02d}:{minutes:02d}:{seconds:02d}.{fraction:09d}Z"


def make_result(**overrides) -> RequestResult:
    """RequestResult with sensible defaults."""
    values = {
        "attack": TEST_ATTACK,
        "seq": 0,
        "code": 200,
        "timestamp": BASE_EPOCH_SECONDS * SECOND,
        "latency": 10 * MS,
        "bytes_out": 10,
        "bytes_in": 100,
        "method": TEST_METHOD,
        "url": TEST_URL,
    }
    values.update(overrides)
    return RequestResult(**values)


def make_summary(latencies_ms: Optional[Dict[str, int]] = None, success: float = 1.0,
                 requests: int = 100, **overrides) -> MetricsSummary:
    """MetricsSummary with latencies given in milliseconds."""
    latencies_ms = latencies_ms or {"mean": 10, "p50": 10, "p95": 10, "p99": 10, "max": 10}
    latencies = LatencyMetrics(
        total=latencies_ms["mean"] * MS * requests,
        mean=latencies_ms["mean"] * MS,
        p50=latencies_ms["p50"] * MS,
        p90=latencies_ms.get("p90", latencies_ms["p95"]) * MS,
        p95=latencies_ms["p95"] * MS,
        p99=latencies_ms["p99"] * MS,
        max=latencies_ms["max"] * MS,
        min=latencies_ms.get("min", 0) * MS,
    )
    values = dict(
        requests=requests,
        rate=50.0,
        throughput=50.0 * success,
        duration=2 * SECOND,
        wait=latencies.mean,
        latencies=latencies,
        bytes_in=ByteMetrics(total=100 * requests, mean=100.0),
        bytes_out=ByteMetrics(total=10 * requests, mean=10.0),
        success=success,
        status_codes=(("200", requests),),
    )
    values.update(overrides)
    return MetricsSummary(**values)


class RecordingBuilder:
    """Builder for vegeta JSON recordings."""

    def __init__(self, attack: str = TEST_ATTACK):
        self.attack = attack
        self.records: List[dict] = []

    def with_result(self, latency_ms: float = 10, code: int = 200, offset_ms: int = None,
                    bytes_out: int = 10, bytes_in: int = 100, error: str = "") -> "RecordingBuilder":
        seq = len(self.records)
        offset = seq * 100 * MS if offset_ms is None else offset_ms * MS
        self.records.append({
            "attack": self.attack,
            "seq": seq,
            "code": code,
            "timestamp": rfc3339(BASE_EPOCH_SECONDS * SECOND + offset),
            "latency": int(latency_ms * MS),
            "bytes_out": bytes_out,
            "bytes_in": bytes_in,
            "error": error,
            "body": "",
            "method": TEST_METHOD,
            "url": TEST_URL,
            "headers": {},
        })
        return self

    def with_results(self, latencies_ms: List[float], code: int = 200) -> "RecordingBuilder":
        for latency in latencies_ms:
            self.with_result(latency, code=code)
        return self

    def lines(self) -> List[str]:
        return [json.dumps(record) for record in self.records]

    def write(self, path: Path, trailer: str = "") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        text = "".join(line + "\n" for line in self.lines()) + trailer
        path.write_text(text, encoding="utf-8")
        return path


@pytest.fixture
def recording_builder():
    """Builder fixture for creating recordings."""
    return RecordingBuilder


@pytest.fixture
def results_dirs(tmp_path):
    """Empty before/ and after/ directories."""
    before = tmp_path / "before"
    after = tmp_path / "after"
    before.mkdir()
    after.mkdir()
    return before, after


@pytest.fixture
def reference_pair():
    """Scenario pair with the reference before/after latencies."""
    return ScenarioPair(
        name=TEST_ATTACK,
        filename="checkout.json",
        before=make_summary(BEFORE_LATENCIES_MS, success=REFERENCE_SUCCESS),
        after=make_summary(AFTER_LATENCIES_MS, success=REFERENCE_SUCCESS),
    )


@pytest.fixture(autouse=True)
def restore_logging():
    """Remove handlers and levels installed by LoggingManager during a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
    logging.getLogger(PROGRESS_LOGGER).setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Run every test away from a developer's loadcompare.json and LOADCOMPARE_* variables."""
    for name in list(os.environ):
        if name.startswith("LOADCOMPARE_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
