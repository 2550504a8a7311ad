"""Tests for Muslim Companion diagnostics module.

Diagnostics export the raw storage document next to the coordinator's live
view, so a user can paste the storage section back for recovery.
"""

# pylint: disable=redefined-outer-name  # Pytest fixtures shadow names
# pylint: disable=unused-argument  # Some fixtures needed for setup only

from typing import Any

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.muslim_companion import const
from custom_components.muslim_companion.diagnostics import (
    async_get_config_entry_diagnostics,
)


@pytest.fixture
def mock_storage_data(tracker_factory) -> dict[str, Any]:
    """Create mock raw storage data (simulates muslim_companion_data file)."""
    return {
        const.DATA_META: {const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION},
        const.DATA_TRACKER: tracker_factory(
            fasting={"1": const.FASTING_STATUS_FASTED}
        ),
        const.DATA_FLAGS: {const.DATA_FLAG_AUTO_INITIALIZED_YEAR: 1447},
        const.DATA_NOTIFICATION_PREFS: dict(const.DEFAULT_NOTIFICATION_PREFS),
    }


async def test_config_entry_diagnostics(
    hass: HomeAssistant,
    init_integration: MockConfigEntry,
    mock_storage_data: dict[str, Any],
) -> None:
    """Test the storage section carries the loaded document."""
    result = await async_get_config_entry_diagnostics(hass, init_integration)

    storage = result["storage"]
    assert storage[const.DATA_TRACKER][const.DATA_TRACKER_YEAR] == 1447
    assert storage[const.DATA_TRACKER][const.DATA_TRACKER_FASTING_LOG] == {
        "1": {const.DATA_LOG_STATUS: const.FASTING_STATUS_FASTED}
    }
    assert storage[const.DATA_FLAGS] == {const.DATA_FLAG_AUTO_INITIALIZED_YEAR: 1447}


async def test_diagnostics_live_view(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Test the live section mirrors the coordinator snapshot."""
    coordinator = hass.data[const.DOMAIN][init_integration.entry_id][
        const.COORDINATOR
    ]

    result = await async_get_config_entry_diagnostics(hass, init_integration)

    assert result["live"] == coordinator.data
    assert result["live"]["times"][const.PRAYER_IMSAK] == "05:20"
    assert result["scheduled_reminders"] == (
        coordinator.notification_manager.scheduled_count
    )
