"""Manages concurrent aggregation of recordings."""
import logging
import concurrent.futures
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .models import MetricsSummary
from .result_decoder import ResultDecoder
from .summary_aggregator import SummaryAggregator


# Configure logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordingSummary:
    """Summary of one recording file."""
    path: Path
    attack: str
    summary: MetricsSummary
    file_size: int


def aggregate_recording(path: Path) -> RecordingSummary:
    """
    Decode and aggregate a single recording.

    Args:
        path: Recording file.

    Returns:
        RecordingSummary with the first attack name seen and the sealed summary.
    """
    decoder = ResultDecoder(path)
    file_size = decoder.file_size
    aggregator = SummaryAggregator()
    for result in decoder.results():
        aggregator.add(result)
    summary = aggregator.close()
    logger.debug(f"Aggregated {summary.requests} results from {path}")
    return RecordingSummary(path=path, attack=aggregator.attack, summary=summary, file_size=file_size)


class ConcurrencyManager:
    """Manages concurrent aggregation of recordings."""

    def __init__(self, workers: int = 1):
        self.workers = max(1, workers)

    def aggregate_files(self, paths: List[Path],
                        on_complete: Optional[Callable[[RecordingSummary], None]] = None) -> Dict[Path, RecordingSummary]:
        """
        Aggregate recordings, in parallel when more than one worker is configured.

        Returns only once every recording is aggregated. The first failure
        cancels the remaining work and is re-raised.

        Args:
            paths: Recording files.
            on_complete: Called in the calling thread as each recording finishes.

        Returns:
            Dictionary of summaries keyed by path.
        """
        results: Dict[Path, RecordingSummary] = {}
        if self.workers == 1:
            for path in paths:
                results[path] = aggregate_recording(path)
                if on_complete:
                    on_complete(results[path])
            return results

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = {executor.submit(aggregate_recording, path): path for path in paths}
            try:
                for future in concurrent.futures.as_completed(futures):
                    recording = future.result()
                    results[futures[future]] = recording
                    if on_complete:
                        on_complete(recording)
            except BaseException:
                for pending in futures:
                    pending.cancel()
                raise
        return results
