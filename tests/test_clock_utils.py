"""Tests for clock_utils.

Tests cover:
- "HH:MM" parsing and formatting with wrap-around
- Raw upstream time normalization
- Shortest signed distance on the 24-hour dial
- Countdown display formatting
"""

from __future__ import annotations

from datetime import datetime, time

import pytest

from custom_components.muslim_companion.utils.clock_utils import (
    UNKNOWN_TIME,
    ParseError,
    clean_raw_time,
    format_remaining,
    minutes_of_day,
    seconds_of_day,
    shortest_angular_difference,
    to_minutes,
    to_time_string,
)


class TestToMinutes:
    """Tests for to_minutes."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("00:00", 0), ("05:30", 330), ("5:30", 330), ("23:59", 1439)],
    )
    def test_valid_times(self, value: str, expected: int) -> None:
        """Two colon-separated integers convert to minutes since midnight."""
        assert to_minutes(value) == expected

    @pytest.mark.parametrize(
        "value",
        [
            "24:00",
            "12:60",
            "1230",
            "12:30:00",
            "ab:cd",
            "",
            "-1:30",
            "\u00b25:20",
            "\u0665:20",
            "123:45",
        ],
    )
    def test_invalid_times_raise(self, value: str) -> None:
        """Out-of-range or malformed values raise ParseError."""
        with pytest.raises(ParseError):
            to_minutes(value)

    def test_non_string_raises(self) -> None:
        """Non-string input is rejected rather than coerced."""
        with pytest.raises(ParseError):
            to_minutes(330)  # type: ignore[arg-type]

    def test_parse_error_is_value_error(self) -> None:
        """Callers catching ValueError also catch ParseError."""
        assert issubclass(ParseError, ValueError)


class TestToTimeString:
    """Tests for to_time_string."""

    def test_zero_padded(self) -> None:
        """Hours and minutes are always two digits."""
        assert to_time_string(65) == "01:05"

    def test_negative_wraps_to_previous_evening(self) -> None:
        """Ten minutes before midnight."""
        assert to_time_string(-10) == "23:50"

    def test_past_midnight_wraps(self) -> None:
        """Values past 1440 land on the next day's clock face."""
        assert to_time_string(1450) == "00:10"

    def test_roundtrip_with_to_minutes(self) -> None:
        """Formatting then parsing gives back every minute of the day."""
        for minute in range(1440):
            assert to_minutes(to_time_string(minute)) == minute


class TestCleanRawTime:
    """Tests for clean_raw_time."""

    def test_strips_timezone_annotation_and_seconds(self) -> None:
        """Provider values like "5:20:00 (SGT)" become "05:20"."""
        assert clean_raw_time("5:20:00 (SGT)") == "05:20"

    def test_strips_offset_annotation(self) -> None:
        """Numeric annotations are removed the same way."""
        assert clean_raw_time("19:12 (+08)") == "19:12"

    def test_already_clean(self) -> None:
        """Clean values pass through unchanged."""
        assert clean_raw_time("13:05") == "13:05"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty_returns_sentinel(self, raw: str | None) -> None:
        """Empty input yields the unknown sentinel."""
        assert clean_raw_time(raw) == UNKNOWN_TIME == "00:00"

    def test_garbage_raises(self) -> None:
        """Non-empty garbage is a parse failure, not the sentinel."""
        with pytest.raises(ParseError):
            clean_raw_time("sunrise")

    def test_non_ascii_digit_raises_parse_error(self) -> None:
        """A superscript digit in an annotated value is a parse failure."""
        with pytest.raises(ParseError):
            clean_raw_time("\u00b25:20 (+08)")


class TestShortestAngularDifference:
    """Tests for shortest_angular_difference."""

    def test_across_midnight_forward(self) -> None:
        """23:50 to 00:10 is twenty minutes forward."""
        assert shortest_angular_difference(1430, 10) == 20

    def test_across_midnight_backward(self) -> None:
        """00:10 to 23:50 is twenty minutes backward."""
        assert shortest_angular_difference(10, 1430) == -20

    def test_half_day_is_positive(self) -> None:
        """Exactly twelve hours resolves to +720."""
        assert shortest_angular_difference(0, 720) == 720

    def test_same_day(self) -> None:
        """Ordinary differences are b - a."""
        assert shortest_angular_difference(325, 320) == -5

    def test_range_and_antisymmetry(self) -> None:
        """Results lie in (-720, 720] and swap sign unless exactly half a day."""
        for a in range(0, 1440, 7):
            for b in range(0, 1440, 11):
                diff = shortest_angular_difference(a, b)
                assert -720 < diff <= 720
                assert (a + diff - b) % 1440 == 0
                if diff != 720:
                    assert shortest_angular_difference(b, a) == -diff


class TestClockPositions:
    """Tests for minutes_of_day and seconds_of_day."""

    def test_minutes_of_day_from_time(self) -> None:
        """Seconds are truncated."""
        assert minutes_of_day(time(5, 20, 59)) == 320

    def test_seconds_of_day_from_datetime(self) -> None:
        """Datetimes use their wall-clock components."""
        assert seconds_of_day(datetime(2026, 2, 19, 1, 2, 3)) == 3723


class TestFormatRemaining:
    """Tests for format_remaining."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (34800, "9h40m"),
            (125, "2m5s"),
            (3605, "1h0m5s"),
            (3600, "1h"),
            (59, "59s"),
            (0, "0s"),
            (-30, "0s"),
        ],
    )
    def test_display(self, seconds: int, expected: str) -> None:
        """Leading and trailing zero units are dropped."""
        assert format_remaining(seconds) == expected
