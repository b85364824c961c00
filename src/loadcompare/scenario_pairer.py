"""Pairs before/after recordings by filename and summarises each scenario."""
import logging
from pathlib import Path
from typing import List, Set, Tuple, Union

from src.const import PROGRESS_LOGGER
from .concurrency_manager import ConcurrencyManager, RecordingSummary
from .exceptions import ConfigError, RecordingIOError
from .models import RunTotals, ScenarioPair


# Configure logging
logger = logging.getLogger(__name__)
progress_logger = logging.getLogger(PROGRESS_LOGGER)


def list_recordings(directory: Union[Path, str]) -> Set[str]:
    """
    List the regular files of a results directory.

    Args:
        directory: Directory holding one recording per scenario.

    Returns:
        Set of filenames; subdirectories are skipped.

    Raises:
        RecordingIOError: If the directory cannot be read.
    """
    directory = Path(directory)
    try:
        return {entry.name for entry in directory.iterdir() if entry.is_file()}
    except OSError as e:
        raise RecordingIOError(f"{directory}: {e.strerror or e}") from e


def common_filenames(before: Set[str], after: Set[str], strict: bool = False) -> List[str]:
    """
    Filenames present in both directories.

    Names found on one side only are dropped, unless strict is set.

    Args:
        before: Filenames of the before directory.
        after: Filenames of the after directory.
        strict: Raise instead of dropping one-sided names.

    Returns:
        Sorted list of common filenames.

    Raises:
        ConfigError: In strict mode, if the two sets differ.
    """
    unmatched = sorted(before ^ after)
    if unmatched:
        if strict:
            raise ConfigError(f"recordings present on one side only: {', '.join(unmatched)}")
        logger.debug(f"Skipping {len(unmatched)} unmatched recordings: {unmatched}")
    return sorted(before & after)


def scenario_name(filename: str, before: RecordingSummary, after: RecordingSummary) -> str:
    """Attack name of the before side, else of the after side, else the filename."""
    return before.attack or after.attack or filename


def totals_of(recording: RecordingSummary) -> RunTotals:
    return RunTotals(dataset_bytes=recording.file_size, requests=recording.summary.requests, files=1)


class ScenarioPairer:
    """Builds sorted scenario pairs from two results directories."""

    def __init__(self, concurrency_manager: ConcurrencyManager = None, strict: bool = False):
        self.concurrency_manager = concurrency_manager or ConcurrencyManager()
        self.strict = strict

    def pair(self, before_dir: Union[Path, str], after_dir: Union[Path, str]) -> Tuple[List[ScenarioPair], RunTotals]:
        """
        Aggregate both sides of every common recording.

        Args:
            before_dir: Directory of the before run.
            after_dir: Directory of the after run.

        Returns:
            Tuple of the pairs sorted by scenario name and the run totals.
        """
        before_dir, after_dir = Path(before_dir), Path(after_dir)
        filenames = common_filenames(list_recordings(before_dir), list_recordings(after_dir), self.strict)
        logger.info(f"Comparing {len(filenames)} scenarios")

        paths = []
        for filename in filenames:
            paths.extend([before_dir / filename, after_dir / filename])

        consumed = RunTotals()

        def report_progress(recording: RecordingSummary) -> None:
            nonlocal consumed
            consumed = consumed + totals_of(recording)
            progress_logger.info(
                f"Consumed {consumed.dataset_bytes} bytes, {consumed.requests} requests, from {consumed.files} files"
            )

        recordings = self.concurrency_manager.aggregate_files(paths, on_complete=report_progress)
        totals = sum((totals_of(recording) for recording in recordings.values()), RunTotals())

        pairs = []
        for filename in filenames:
            before = recordings[before_dir / filename]
            after = recordings[after_dir / filename]
            pairs.append(ScenarioPair(
                name=scenario_name(filename, before, after),
                filename=filename,
                before=before.summary,
                after=after.summary,
            ))
        pairs.sort(key=lambda p: (p.name, p.filename))
        return pairs, totals
