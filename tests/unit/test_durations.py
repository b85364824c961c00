"""Unit tests for duration formatting and parsing."""

import pytest

from src.loadcompare.durations import format_duration, parse_duration, round_duration, smart_format
from src.loadcompare.exceptions import ConfigError
from tests.test_const import MS, SECOND


class TestSmartFormat:
    """Test compact duration rendering."""

    @pytest.mark.parametrize("duration, expected", [
        (30_918_273, "31ms"),
        (30_918_273_645, "30.9s"),
        (90_918_273_645, "91s"),
        (2_310_918_273_645, "2311s"),
        (-30_918_273, "-31ms"),
        (-30_918_273_645, "-30.9s"),
        (0, "0s"),
        (400_000, "0s"),
        (999_600_000, "1s"),
    ])
    def test_thresholds(self, duration, expected):
        """Test each magnitude band, including negative values."""
        assert smart_format(duration) == expected

    @pytest.mark.parametrize("duration", [131 * MS, 30_900 * MS, 91 * SECOND, -45 * MS])
    def test_already_rounded_values_are_stable(self, duration):
        """Test that formatting a value rounded to its unit reproduces the same text."""
        text = smart_format(duration)
        assert smart_format(parse_duration(text)) == text


class TestFormatDuration:
    """Test Go-style duration text."""

    @pytest.mark.parametrize("duration, expected", [
        (1, "1ns"),
        (1500, "1.5µs"),
        (750_000, "750µs"),
        (31 * MS, "31ms"),
        (1_500_000_000, "1.5s"),
        (120 * SECOND, "2m0s"),
        (3723 * SECOND, "1h2m3s"),
        (-2 * SECOND, "-2s"),
    ])
    def test_format(self, duration, expected):
        assert format_duration(duration) == expected


class TestRoundDuration:
    """Test rounding to a multiple."""

    def test_half_rounds_away_from_zero(self):
        assert round_duration(1_500_000, MS) == 2 * MS
        assert round_duration(-1_500_000, MS) == -2 * MS

    def test_below_half_rounds_down(self):
        assert round_duration(1_499_999, MS) == MS

    def test_test_duration_rounding(self):
        """Test that 1m58.99s rounds to 2m0s on a 3s grid."""
        assert format_duration(round_duration(118_999_964_907, 3 * SECOND)) == "2m0s"

    def test_non_positive_multiple_is_identity(self):
        assert round_duration(1234, 0) == 1234


class TestParseDuration:
    """Test parsing of duration flags."""

    @pytest.mark.parametrize("text, expected", [
        ("30ms", 30 * MS),
        ("1.5s", 1_500_000_000),
        ("1m30s", 90 * SECOND),
        ("250us", 250_000),
        ("250µs", 250_000),
        ("0", 0),
        ("-2ms", -2 * MS),
        ("1h", 3600 * SECOND),
    ])
    def test_valid(self, text, expected):
        assert parse_duration(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "30", "ms", "1x", "1s garbage"])
    def test_invalid(self, text):
        with pytest.raises(ConfigError):
            parse_duration(text)
