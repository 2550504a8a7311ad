# File: __init__.py
"""Initialization file for the Muslim Companion integration.

Handles setting up the integration, including loading configuration entries,
initializing data storage, and preparing the coordinator for data handling.

Key Features:
- Config entry setup and unload support.
- Coordinator initialization for prayer times and Ramadan window detection.
- Manager setup for the tracker and reminder scheduling.
- Storage management for persistent data handling.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from . import const
from .api import AladhanClient, AuthorityTimetableClient
from .coordinator import MuslimCompanionCoordinator
from .services import async_setup_services, async_unload_services
from .storage_manager import MuslimCompanionStorageManager


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info(
        "INFO: Starting setup for Muslim Companion entry: %s", entry.entry_id
    )

    # Must be done early before any components that use datetime helpers
    const.set_default_timezone(hass)

    # Initialize the storage manager to handle persistent data.
    storage_manager = MuslimCompanionStorageManager(hass, const.STORAGE_KEY)
    await storage_manager.async_initialize()

    # Upstream providers share Home Assistant's HTTP session.
    session = async_get_clientsession(hass)
    aladhan = AladhanClient(
        session,
        latitude=entry.data.get(const.CONF_LATITUDE, const.DEFAULT_LATITUDE),
        longitude=entry.data.get(const.CONF_LONGITUDE, const.DEFAULT_LONGITUDE),
        method=entry.data.get(
            const.CONF_CALCULATION_METHOD, const.DEFAULT_CALCULATION_METHOD
        ),
        school=entry.data.get(const.CONF_SCHOOL, const.DEFAULT_SCHOOL),
    )
    authority = AuthorityTimetableClient(
        session, entry.data.get(const.CONF_AUTHORITY_URL, const.DEFAULT_AUTHORITY_URL)
    )

    # Create the data coordinator for managing updates and synchronization.
    coordinator = MuslimCompanionCoordinator(
        hass, entry, storage_manager, aladhan, authority
    )

    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        const.LOGGER.error("ERROR: Failed to refresh coordinator data: %s", e)
        raise ConfigEntryNotReady from e

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORAGE_MANAGER: storage_manager,
        const.TRACKER_MANAGER: coordinator.tracker_manager,
        const.NOTIFICATION_MANAGER: coordinator.notification_manager,
    }

    # Managers subscribe to each other's events before anything can emit them.
    await coordinator.tracker_manager.async_setup()
    await coordinator.notification_manager.async_setup()

    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    # Reload on options change (update interval, notify service, suhoor lead).
    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    # First reminder pass; the notification manager reschedules daily after this.
    entry.async_create_background_task(
        hass,
        coordinator.notification_manager.async_schedule_reminders(),
        f"{const.DOMAIN}_initial_reminders",
    )

    const.LOGGER.info(
        "INFO: Muslim Companion setup complete for entry: %s", entry.entry_id
    )
    return True


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry after its options changed."""
    const.LOGGER.debug("DEBUG: Options changed; reloading entry %s", entry.entry_id)
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass, entry):
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading Muslim Companion entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        hass.data[const.DOMAIN].pop(entry.entry_id)
        await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry."""
    const.LOGGER.info("INFO: Removing Muslim Companion entry: %s", entry.entry_id)

    # The entry is already unloaded here, so hass.data no longer holds a manager.
    storage_manager = MuslimCompanionStorageManager(hass, const.STORAGE_KEY)
    await storage_manager.async_delete_storage()

    const.LOGGER.info(
        "INFO: Muslim Companion entry data cleared: %s", entry.entry_id
    )
