"""Shared fixtures for Muslim Companion tests."""

from collections.abc import Generator
from datetime import date
from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.muslim_companion import const
from custom_components.muslim_companion.api import (
    AladhanClient,
    AuthorityTimetableClient,
    FetchResult,
)
from custom_components.muslim_companion.engines import HijriDate

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.MUSLIM_COMPANION_TITLE,
        data={
            const.CONF_LATITUDE: const.DEFAULT_LATITUDE,
            const.CONF_LONGITUDE: const.DEFAULT_LONGITUDE,
            const.CONF_CALCULATION_METHOD: const.DEFAULT_CALCULATION_METHOD,
            const.CONF_SCHOOL: const.DEFAULT_SCHOOL,
            const.CONF_AUTHORITY_URL: "https://timetable.example/{year}/{month}",
        },
        options={
            const.CONF_UPDATE_INTERVAL: const.DEFAULT_UPDATE_INTERVAL,
            const.CONF_NOTIFY_SERVICE: "notify.mobile_app_phone",
            const.CONF_SUHOOR_REMINDER_MINUTES: const.DEFAULT_SUHOOR_REMINDER_MINUTES,
        },
        entry_id="test_entry_id",
        unique_id="test_unique_id",
    )


@pytest.fixture
def calculated_times() -> dict[str, str]:
    """Return a provider A boundary set (imsak included)."""
    return {
        const.PRAYER_IMSAK: "05:25",
        const.PRAYER_SUBUH: "05:35",
        const.PRAYER_SYURUK: "07:05",
        const.PRAYER_ZOHOR: "13:10",
        const.PRAYER_ASAR: "16:35",
        const.PRAYER_MAGHRIB: "19:15",
        const.PRAYER_ISYAK: "20:30",
    }


@pytest.fixture
def authority_times() -> dict[str, str]:
    """Return an authority boundary set (no imsak)."""
    return {
        const.PRAYER_SUBUH: "05:30",
        const.PRAYER_SYURUK: "07:00",
        const.PRAYER_ZOHOR: "13:05",
        const.PRAYER_ASAR: "16:30",
        const.PRAYER_MAGHRIB: "19:12",
        const.PRAYER_ISYAK: "20:25",
    }


@pytest.fixture
def mock_upstream(
    calculated_times: dict[str, str],  # pylint: disable=redefined-outer-name
    authority_times: dict[str, str],  # pylint: disable=redefined-outer-name
) -> Generator[dict[str, Any]]:
    """Patch both upstream clients with healthy responses.

    The Hijri reading defaults to a Rajab date so the window stays inactive.
    """
    with (
        patch.object(
            AladhanClient,
            "async_fetch_timings",
            return_value=FetchResult.success(dict(calculated_times)),
        ) as fetch_timings,
        patch.object(
            AladhanClient,
            "async_fetch_hijri_date",
            return_value=FetchResult.success(HijriDate(10, "Rajab", 1447)),
        ) as fetch_hijri,
        patch.object(
            AladhanClient,
            "async_fetch_calendar",
            return_value=FetchResult.success({}),
        ) as fetch_calendar,
        patch.object(
            AuthorityTimetableClient,
            "async_fetch_day",
            return_value=FetchResult.success(dict(authority_times)),
        ) as fetch_day,
        patch.object(
            AuthorityTimetableClient,
            "async_fetch_month",
            return_value=FetchResult.success({}),
        ) as fetch_month,
    ):
        yield {
            "timings": fetch_timings,
            "hijri": fetch_hijri,
            "calendar": fetch_calendar,
            "authority_day": fetch_day,
            "authority_month": fetch_month,
        }


@pytest.fixture
def mock_storage_data() -> dict[str, Any] | None:
    """Return the stored document loaded at setup (None means fresh install)."""
    return None


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_data: dict[str, Any] | None,  # pylint: disable=redefined-outer-name
    mock_upstream: dict[str, Any],  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up the Muslim Companion integration with mocked storage and upstreams."""
    mock_config_entry.add_to_hass(hass)

    # Mock the Store's async_load to return our test data
    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=mock_storage_data,
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    yield mock_config_entry

    await hass.config_entries.async_unload(mock_config_entry.entry_id)
    await hass.async_block_till_done()


def create_mock_tracker(
    year: int = 1447,
    start_date: date = date(2026, 2, 19),
    total_days: int = 30,
    fasting: dict[str, str] | None = None,
    tarawih: dict[str, str] | None = None,
    juz_completed: int = 0,
) -> dict[str, Any]:
    """Build tracker data with status-only logs keyed by str(day)."""
    quran_log = {
        str(juz): {
            const.DATA_LOG_JUZ: juz,
            const.DATA_LOG_PAGES_READ: const.PAGES_PER_JUZ,
            const.DATA_LOG_STATUS: const.QURAN_STATUS_COMPLETED,
        }
        for juz in range(1, juz_completed + 1)
    }
    return {
        const.DATA_TRACKER_YEAR: year,
        const.DATA_TRACKER_START_DATE: start_date.isoformat(),
        const.DATA_TRACKER_END_DATE: date.fromordinal(
            start_date.toordinal() + total_days - 1
        ).isoformat(),
        const.DATA_TRACKER_TOTAL_DAYS: total_days,
        const.DATA_TRACKER_FASTING_LOG: {
            day: {const.DATA_LOG_STATUS: status}
            for day, status in (fasting or {}).items()
        },
        const.DATA_TRACKER_TARAWIH_LOG: {
            day: {const.DATA_LOG_STATUS: status}
            for day, status in (tarawih or {}).items()
        },
        const.DATA_TRACKER_QURAN_LOG: quran_log,
        const.DATA_TRACKER_CREATED_AT: "2026-02-19T00:00:00+00:00",
    }


@pytest.fixture
def tracker_factory():
    """Return the tracker builder so tests can shape their own logs."""
    return create_mock_tracker
