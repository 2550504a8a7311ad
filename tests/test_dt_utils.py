"""Tests for dt_utils date helpers."""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from custom_components.muslim_companion.utils import dt_utils
from custom_components.muslim_companion.utils.dt_utils import (
    dt_add_days,
    dt_at_minutes,
    dt_days_between,
    dt_parse_date,
)

SINGAPORE = ZoneInfo("Asia/Singapore")


@pytest.fixture
def restore_default_timezone():
    """Put the module default timezone back after a test changes it."""
    original = dt_utils.get_default_timezone()
    yield
    dt_utils.set_default_timezone(original)


class TestParseDate:
    """Tests for dt_parse_date."""

    @pytest.mark.parametrize(
        "value",
        ["2026-02-19", "19/2/2026", "19/02/2026", "19-02-2026", "19 Feb 2026"],
    )
    def test_supported_formats(self, value: str) -> None:
        """ISO, authority, provider and free-form day-first dates parse."""
        assert dt_parse_date(value) == date(2026, 2, 19)

    def test_day_first_when_ambiguous(self) -> None:
        """"3/4/2026" is the third of April."""
        assert dt_parse_date("3/4/2026") == date(2026, 4, 3)

    @pytest.mark.parametrize("value", [None, "", "not a date"])
    def test_unparseable_returns_none(self, value: str | None) -> None:
        """Failures return None instead of raising."""
        assert dt_parse_date(value) is None


class TestArithmetic:
    """Tests for day arithmetic."""

    def test_days_between(self) -> None:
        """Whole days, negative when going backwards."""
        assert dt_days_between(date(2026, 2, 19), date(2026, 2, 23)) == 4
        assert dt_days_between(date(2026, 2, 19), date(2026, 2, 18)) == -1

    def test_add_days_crosses_month(self) -> None:
        """Day 30 of a window starting 19 Feb lands in March."""
        assert dt_add_days(date(2026, 2, 19), 29) == date(2026, 3, 20)

    def test_at_minutes_builds_local_datetime(self) -> None:
        """The result is aware and on the requested clock."""
        result = dt_at_minutes(date(2026, 2, 19), 320, SINGAPORE)
        assert result == datetime(2026, 2, 19, 5, 20, tzinfo=SINGAPORE)

    def test_at_minutes_negative_rolls_back(self) -> None:
        """Suhoor leads before midnight belong to the previous evening."""
        result = dt_at_minutes(date(2026, 2, 19), -15, SINGAPORE)
        assert result == datetime(2026, 2, 18, 23, 45, tzinfo=SINGAPORE)


class TestDefaultTimezone:
    """Tests for the module default timezone."""

    def test_set_and_get(self, restore_default_timezone) -> None:
        """Helpers without an explicit tz use the configured default."""
        dt_utils.set_default_timezone(SINGAPORE)

        assert dt_utils.get_default_timezone() == SINGAPORE
        assert dt_utils.dt_now_local().tzinfo == SINGAPORE
        assert dt_at_minutes(date(2026, 2, 19), 0).tzinfo == SINGAPORE
