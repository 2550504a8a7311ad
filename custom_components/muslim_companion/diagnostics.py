"""Diagnostics support for Muslim Companion integration.

Returns the raw storage document next to the coordinator's live view (today's
reconciled times, their sources and the window detection) for troubleshooting.
"""

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import MuslimCompanionCoordinator


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry.

    The storage section is byte-for-byte the muslim_companion_data document.
    """
    coordinator: MuslimCompanionCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]

    return {
        "storage": coordinator.storage_manager.data,
        "live": coordinator.data,
        "scheduled_reminders": coordinator.notification_manager.scheduled_count,
    }
