"""Tests for MuslimCompanionCoordinator.

Tests cover:
- Dual-source reconciliation on refresh
- Last-known and regional fallbacks when both sources fail
- Window detection and once-per-year tracker auto-initialization
- Read queries (period, next prayer, countdown, stats, schedule)
"""

# pylint: disable=protected-access  # Accessing coordinator._data for testing
# pylint: disable=redefined-outer-name  # Pytest fixtures redefine names

from datetime import date, datetime
import logging
from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from homeassistant.util import dt as dt_util
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.muslim_companion import const
from custom_components.muslim_companion.api import FetchResult
from custom_components.muslim_companion.coordinator import MuslimCompanionCoordinator
from custom_components.muslim_companion.type_defs import CountdownTarget, PrayerPeriod

TODAY_PATH = "custom_components.muslim_companion.coordinator.dt_today_local"


@pytest.fixture
def coordinator(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> MuslimCompanionCoordinator:
    """Return the loaded coordinator."""
    return hass.data[const.DOMAIN][init_integration.entry_id][const.COORDINATOR]


def local_time(hour: int, minute: int) -> datetime:
    """Return a datetime on the first fasting day in the configured zone."""
    return datetime(
        2026, 2, 19, hour, minute, tzinfo=dt_util.get_default_time_zone()
    )


def fail_both_sources(mock_upstream: dict[str, Any]) -> None:
    """Make both time sources report a network failure."""
    mock_upstream["timings"].return_value = FetchResult.failure(
        const.FETCH_ERROR_NETWORK, "down"
    )
    mock_upstream["authority_day"].return_value = FetchResult.failure(
        const.FETCH_ERROR_NETWORK, "down"
    )


class TestRefresh:
    """Tests for the periodic update."""

    async def test_reconciles_both_sources(
        self, coordinator: MuslimCompanionCoordinator
    ) -> None:
        """Authority boundaries win and Imsak is derived from its Subuh."""
        data = coordinator.data

        assert data["times"][const.PRAYER_IMSAK] == "05:20"
        assert data["times"][const.PRAYER_MAGHRIB] == "19:12"
        assert data["sources"][const.PRAYER_IMSAK] == const.SOURCE_AUTHORITY_DERIVED
        assert data["sources"][const.PRAYER_ZOHOR] == const.SOURCE_AUTHORITY
        assert data["low_confidence"] is False

    async def test_calculated_only(
        self,
        coordinator: MuslimCompanionCoordinator,
        mock_upstream: dict[str, Any],
    ) -> None:
        """Without the authority every value comes from the calculation."""
        mock_upstream["authority_day"].return_value = FetchResult.failure(
            const.FETCH_ERROR_NOT_CONFIGURED
        )

        await coordinator.async_refresh()

        assert coordinator.data["times"][const.PRAYER_IMSAK] == "05:25"
        assert coordinator.data["sources"][const.PRAYER_MAGHRIB] == (
            const.SOURCE_CALCULATED
        )

    async def test_remembers_last_known_times(
        self, coordinator: MuslimCompanionCoordinator
    ) -> None:
        """A successful fetch is stored as the last-known set."""
        stored = coordinator._data[const.DATA_LAST_KNOWN_TIMES]

        assert stored[const.DATA_LAST_KNOWN_DATE] == dt_util.now().date().isoformat()
        assert coordinator.last_known_times[const.PRAYER_IMSAK] == "05:20"

    async def test_both_fail_uses_last_known(
        self,
        coordinator: MuslimCompanionCoordinator,
        mock_upstream: dict[str, Any],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """The last-known set is used before the regional defaults."""
        previous = dict(coordinator.data["times"])
        fail_both_sources(mock_upstream)

        await coordinator.async_refresh()

        assert coordinator.last_update_success
        assert coordinator.data["times"] == previous
        assert coordinator.data["sources"][const.PRAYER_IMSAK] == (
            const.SOURCE_LAST_KNOWN
        )
        assert coordinator.data["low_confidence"] is True
        assert "Both time sources unavailable" in caplog.text

    async def test_both_fail_without_history(
        self,
        coordinator: MuslimCompanionCoordinator,
        mock_upstream: dict[str, Any],
    ) -> None:
        """With nothing remembered the regional defaults apply."""
        coordinator._data[const.DATA_LAST_KNOWN_TIMES] = None
        fail_both_sources(mock_upstream)

        await coordinator.async_refresh()

        assert coordinator.data["times"] == const.FALLBACK_TIMES
        assert coordinator.data["sources"][const.PRAYER_SUBUH] == const.SOURCE_FALLBACK
        # Fallback values are never remembered as last-known times.
        assert coordinator._data[const.DATA_LAST_KNOWN_TIMES] is None


class TestDetection:
    """Tests for window detection and auto-initialization."""

    async def test_outside_window(
        self, coordinator: MuslimCompanionCoordinator
    ) -> None:
        """A Rajab reading after the official dates is inactive."""
        detection = coordinator.get_detection()

        assert detection.state == const.RAMADAN_STATE_INACTIVE
        assert coordinator.data["detection"]["is_in_window"] is False

    async def test_hijri_failure(
        self,
        coordinator: MuslimCompanionCoordinator,
        mock_upstream: dict[str, Any],
    ) -> None:
        """No lunar reading is treated as outside the window."""
        mock_upstream["hijri"].return_value = FetchResult.failure(
            const.FETCH_ERROR_TIMEOUT
        )

        await coordinator.async_refresh()

        assert coordinator.hijri is None
        assert coordinator.get_detection().is_in_window is False

    async def test_auto_initializes_tracker(
        self, coordinator: MuslimCompanionCoordinator
    ) -> None:
        """Entering the window creates the tracker from the official dates."""
        coordinator._data[const.DATA_TRACKER] = None

        with patch(TODAY_PATH, return_value=date(2026, 2, 21)):
            await coordinator.async_refresh()

        tracker = coordinator.tracker_manager.tracker
        assert tracker[const.DATA_TRACKER_YEAR] == 1447
        assert tracker[const.DATA_TRACKER_START_DATE] == "2026-02-19"
        assert tracker[const.DATA_TRACKER_TOTAL_DAYS] == 30
        assert coordinator.get_detection().current_day == 3
        assert (
            coordinator._data[const.DATA_FLAGS][const.DATA_FLAG_AUTO_INITIALIZED_YEAR]
            == 1447
        )

    async def test_auto_initializes_once_per_year(
        self, hass: HomeAssistant, coordinator: MuslimCompanionCoordinator
    ) -> None:
        """A tracker reset inside the window is not undone by the next refresh."""
        with patch(TODAY_PATH, return_value=date(2026, 2, 21)):
            await coordinator.async_refresh()
            coordinator.tracker_manager.reset()
            await hass.async_block_till_done()
            await coordinator.async_refresh()

        assert coordinator.tracker_manager.tracker is None


class TestQueries:
    """Tests for the read queries."""

    async def test_current_period(
        self, coordinator: MuslimCompanionCoordinator
    ) -> None:
        """13:30 falls into Zohor."""
        result = coordinator.get_current_period(local_time(13, 30))

        assert result.period == PrayerPeriod.ZOHOR

    async def test_next_prayer(self, coordinator: MuslimCompanionCoordinator) -> None:
        """After Zohor the next boundary is Asar."""
        upcoming = coordinator.get_next_prayer(local_time(13, 30))

        assert upcoming.name == const.PRAYER_ASAR
        assert upcoming.time == "16:30"
        assert upcoming.minutes_until == 180

    async def test_countdown(self, coordinator: MuslimCompanionCoordinator) -> None:
        """At noon the countdown targets Maghrib."""
        result = coordinator.get_countdown(local_time(12, 0))

        assert result.next_target == CountdownTarget.SECOND
        assert result.remaining_display == "7h12m"

    async def test_stats_without_tracker(
        self,
        coordinator: MuslimCompanionCoordinator,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Statistics need a tracker and warn when asked too early."""
        coordinator._data[const.DATA_TRACKER] = None

        with caplog.at_level(logging.WARNING):
            assert coordinator.get_stats() is None
            assert coordinator.get_share_summary() is None
        assert coordinator.current_tracker_day() == 0
        assert any(
            record.levelno == logging.WARNING
            and "before tracker initialization" in record.getMessage()
            for record in caplog.records
        )

    async def test_stats(
        self, coordinator: MuslimCompanionCoordinator, tracker_factory
    ) -> None:
        """Statistics are computed on read from the logs."""
        coordinator._data[const.DATA_TRACKER] = tracker_factory(
            fasting={
                "1": const.FASTING_STATUS_FASTED,
                "2": const.FASTING_STATUS_FASTED,
                "3": const.FASTING_STATUS_MISSED,
                "4": const.FASTING_STATUS_FASTED,
                "5": const.FASTING_STATUS_FASTED,
            },
            juz_completed=3,
        )

        stats = coordinator.get_stats(date(2026, 2, 23))

        assert stats.current_day == 5
        assert stats.days_fasted == 4
        assert stats.days_missed == 1
        assert stats.fasting_streak == 2
        assert stats.juz_completed == 3
        assert stats.quran_progress == 10

        summary = coordinator.get_share_summary(date(2026, 2, 23))
        assert summary.startswith("Ramadan 1447 Progress")
        assert "Quran: 3/30 juz (10%)" in summary

    @pytest.mark.parametrize(
        ("today", "expected"),
        [(date(2026, 2, 10), 0), (date(2026, 2, 19), 1), (date(2026, 4, 1), 30)],
    )
    async def test_current_tracker_day(
        self,
        coordinator: MuslimCompanionCoordinator,
        tracker_factory,
        today: date,
        expected: int,
    ) -> None:
        """The ordinal day is clamped to the window."""
        coordinator._data[const.DATA_TRACKER] = tracker_factory()

        assert coordinator.current_tracker_day(today) == expected

    async def test_schedule_fetches_each_month(
        self,
        coordinator: MuslimCompanionCoordinator,
        mock_upstream: dict[str, Any],
        tracker_factory,
    ) -> None:
        """A window spanning two months fetches both calendars."""
        coordinator._data[const.DATA_TRACKER] = tracker_factory()
        mock_upstream["calendar"].reset_mock()

        schedule = await coordinator.async_get_schedule()

        assert len(schedule) == 30
        assert {call.args for call in mock_upstream["calendar"].await_args_list} == {
            (2026, 2),
            (2026, 3),
        }
        # Empty calendars fall back to the last-known set.
        assert schedule[0].imsak == "05:20"

    async def test_schedule_without_tracker(
        self, coordinator: MuslimCompanionCoordinator
    ) -> None:
        """No tracker means no schedule."""
        coordinator._data[const.DATA_TRACKER] = None

        assert await coordinator.async_get_schedule() == []
