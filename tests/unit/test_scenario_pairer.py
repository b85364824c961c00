"""Unit tests for scenario pairing and concurrent aggregation."""

import logging
from unittest.mock import MagicMock, patch

import pytest

from src.loadcompare.concurrency_manager import ConcurrencyManager, aggregate_recording
from src.loadcompare.exceptions import ConfigError, DecodeError, RecordingIOError
from src.loadcompare.scenario_pairer import ScenarioPairer, common_filenames, list_recordings
from tests.test_const import MS


class TestListRecordings:
    """Test directory enumeration."""

    def test_skips_directories(self, tmp_path):
        (tmp_path / "a.json").write_text("")
        (tmp_path / "nested").mkdir()
        assert list_recordings(tmp_path) == {"a.json"}

    def test_missing_directory(self, tmp_path):
        with pytest.raises(RecordingIOError):
            list_recordings(tmp_path / "missing")


class TestCommonFilenames:
    """Test matching of filenames across directories."""

    def test_intersection_is_sorted(self):
        assert common_filenames({"b", "a", "c"}, {"c", "a", "d"}) == ["a", "c"]

    def test_one_sided_names_are_dropped(self):
        assert common_filenames({"only-before"}, {"only-after"}) == []

    def test_strict_mode_rejects_one_sided_names(self):
        with pytest.raises(ConfigError) as exc_info:
            common_filenames({"a", "b"}, {"a"}, strict=True)
        assert "b" in str(exc_info.value)

    def test_strict_mode_accepts_identical_sets(self):
        assert common_filenames({"a"}, {"a"}, strict=True) == ["a"]


class TestScenarioPairer:
    """Test building scenario pairs from directories."""

    def test_orders_by_scenario_name_not_filename(self, results_dirs, recording_builder):
        before, after = results_dirs
        for directory in results_dirs:
            recording_builder("zeta").with_results([10]).write(directory / "a.json")
            recording_builder("alpha").with_results([10]).write(directory / "b.json")

        pairs, _ = ScenarioPairer().pair(before, after)

        assert [p.name for p in pairs] == ["alpha", "zeta"]
        assert [p.filename for p in pairs] == ["b.json", "a.json"]

    def test_excludes_unmatched_files(self, results_dirs, recording_builder):
        before, after = results_dirs
        recording_builder("shared").with_results([10]).write(before / "shared.json")
        recording_builder("shared").with_results([12]).write(after / "shared.json")
        recording_builder("gone").with_results([10]).write(before / "gone.json")
        recording_builder("new").with_results([10]).write(after / "new.json")

        pairs, totals = ScenarioPairer().pair(before, after)

        assert [p.name for p in pairs] == ["shared"]
        assert pairs[0].before.latencies.max == 10 * MS
        assert pairs[0].after.latencies.max == 12 * MS
        assert totals.files == 2

    def test_name_falls_back_to_after_then_filename(self, results_dirs, recording_builder):
        before, after = results_dirs
        recording_builder("").with_results([10]).write(before / "x.json")
        recording_builder("from-after").with_results([10]).write(after / "x.json")
        (before / "y.json").write_text("")
        (after / "y.json").write_text("")

        pairs, _ = ScenarioPairer().pair(before, after)

        assert [p.name for p in pairs] == ["from-after", "y.json"]
        assert pairs[1].before.requests == 0

    def test_totals(self, results_dirs, recording_builder):
        before, after = results_dirs
        first = recording_builder("a").with_results([10, 20, 30]).write(before / "a.json")
        second = recording_builder("a").with_results([10]).write(after / "a.json")

        _, totals = ScenarioPairer().pair(before, after)

        assert totals.requests == 4
        assert totals.dataset_bytes == first.stat().st_size + second.stat().st_size

    def test_parallel_matches_sequential(self, results_dirs, recording_builder):
        before, after = results_dirs
        for i in range(6):
            recording_builder(f"scenario-{5 - i}").with_results([10 + i, 20 + i]).write(before / f"{i}.json")
            recording_builder(f"scenario-{5 - i}").with_results([15 + i]).write(after / f"{i}.json")

        sequential = ScenarioPairer(ConcurrencyManager(1)).pair(before, after)
        parallel = ScenarioPairer(ConcurrencyManager(4)).pair(before, after)

        assert sequential == parallel
        assert [p.name for p in parallel[0]] == [f"scenario-{i}" for i in range(6)]

    def test_progress_messages(self, results_dirs, recording_builder, caplog):
        before, after = results_dirs
        recording_builder("a").with_results([10]).write(before / "a.json")
        recording_builder("a").with_results([10]).write(after / "a.json")

        with caplog.at_level(logging.INFO, logger="src.loadcompare.progress"):
            ScenarioPairer().pair(before, after)

        messages = [r.getMessage() for r in caplog.records if r.name == "src.loadcompare.progress"]
        assert len(messages) == 2
        assert messages[-1].endswith("2 requests, from 2 files")


class TestConcurrencyManager:
    """Test fail-fast aggregation."""

    @pytest.mark.parametrize("workers", [1, 3])
    def test_decode_error_is_raised(self, tmp_path, recording_builder, workers):
        good = recording_builder().with_results([10]).write(tmp_path / "good.json")
        bad = recording_builder().with_results([10]).write(tmp_path / "bad.json", trailer="{oops\n")

        with pytest.raises(DecodeError):
            ConcurrencyManager(workers).aggregate_files([good, bad])

    def test_callback_runs_per_recording(self, tmp_path, recording_builder):
        paths = [recording_builder().with_results([10]).write(tmp_path / f"{i}.json") for i in range(3)]
        callback = MagicMock()

        results = ConcurrencyManager(2).aggregate_files(paths, on_complete=callback)

        assert set(results) == set(paths)
        assert callback.call_count == 3

    def test_workers_floor(self):
        assert ConcurrencyManager(0).workers == 1

    def test_aggregate_recording(self, tmp_path, recording_builder):
        path = recording_builder("login").with_results([10, 30]).write(tmp_path / "login.json")

        recording = aggregate_recording(path)

        assert recording.attack == "login"
        assert recording.summary.requests == 2
        assert recording.file_size == path.stat().st_size

    @patch('src.loadcompare.concurrency_manager.aggregate_recording')
    def test_sequential_stops_at_first_failure(self, mock_aggregate, tmp_path):
        mock_aggregate.side_effect = RecordingIOError("unreadable")
        with pytest.raises(RecordingIOError):
            ConcurrencyManager(1).aggregate_files([tmp_path / "a", tmp_path / "b"])
        assert mock_aggregate.call_count == 1
