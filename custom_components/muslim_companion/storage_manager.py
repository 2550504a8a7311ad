# File: storage_manager.py
"""Handles persistent data storage for the Muslim Companion integration.

Uses Home Assistant's Storage helper to save and load the tracker, notification
preferences, flags, last-known prayer times and the last reminder pass, ensuring
the state is preserved across restarts.
"""

from __future__ import annotations

import copy
from typing import Any

from homeassistant.core import HomeAssistant
from homeassistant.helpers.storage import Store

from . import const
from .utils.dt_utils import dt_now_iso


class MuslimCompanionStorageManager:
    """Manages loading, saving, and accessing data from Home Assistant's storage.

    The document is a flat mapping of section name to JSON-serializable value.
    Sections are addressed by key through async_get / async_set / async_delete.
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the storage manager.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).

        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}  # In-memory data cache for quick access.

    def _get_default_structure(self) -> dict[str, Any]:
        """Get the default empty data structure.

        Returns:
            dict: Default structure with all data keys initialized.
        """
        return {
            const.DATA_META: {
                const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION,
                const.DATA_META_CREATED_AT: dt_now_iso(),
            },
            const.DATA_TRACKER: None,
            const.DATA_NOTIFICATION_PREFS: dict(const.DEFAULT_NOTIFICATION_PREFS),
            const.DATA_FLAGS: {},
            const.DATA_LAST_KNOWN_TIMES: None,
            const.DATA_SCHEDULED_NOTIFICATIONS: {
                const.DATA_SCHEDULED_LAST_DATE: None,
                const.DATA_SCHEDULED_COUNT: 0,
                const.DATA_SCHEDULED_ITEMS: [],
            },
        }

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, initializes with an empty structure. Missing sections
        in an existing document are filled from the default structure.
        """
        const.LOGGER.debug(
            "DEBUG: MuslimCompanionStorageManager: Loading data from storage"
        )
        existing_data = await self._store.async_load()

        if existing_data is None:
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = self._get_default_structure()
        else:
            self._data = {**self._get_default_structure(), **existing_data}
            const.LOGGER.debug(
                "DEBUG: Loaded existing data from storage: %s",
                {
                    "tracker": self._data.get(const.DATA_TRACKER) is not None,
                    "total_keys": len(self._data.keys()),
                },
            )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    def set_data(self, new_data: dict[str, Any]) -> None:
        """Replace the entire in-memory data structure."""
        self._data = new_data

    # ────────────────────────────────────────────────────────────────
    # Key-value access
    # ────────────────────────────────────────────────────────────────

    async def async_get(self, key: str, default: Any = None) -> Any:
        """Return a deep copy of one section, or default when absent."""
        value = self._data.get(key)
        if value is None:
            return default
        return copy.deepcopy(value)

    async def async_set(self, key: str, value: Any) -> None:
        """Replace one section and save."""
        const.LOGGER.debug("DEBUG: Updating data for key: %s", key)
        self._data[key] = value
        await self.async_save()

    async def async_delete(self, key: str) -> None:
        """Remove one section and save. Unknown keys are ignored."""
        if self._data.pop(key, None) is None:
            const.LOGGER.debug("DEBUG: Nothing stored under key '%s'", key)
            return
        await self.async_save()

    # ────────────────────────────────────────────────────────────────
    # Persistence
    # ────────────────────────────────────────────────────────────────

    async def async_save(self) -> None:
        """Save the current data structure to storage asynchronously.

        Raises:
            No exceptions raised - errors are logged but do not stop execution.
            OSError: Logged when file system issues prevent saving.
            TypeError: Logged when data contains non-serializable types.
            ValueError: Logged when data is invalid for JSON serialization.
        """
        try:
            await self._store.async_save(self._data)
            const.LOGGER.debug("DEBUG: Data saved successfully to storage")
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
        except TypeError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to non-serializable data: %s. "
                "Data contains types that cannot be converted to JSON",
                err,
            )
        except ValueError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to invalid data format: %s. "
                "Data structure may be corrupted",
                err,
            )

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely from disk."""
        self._data = self._get_default_structure()

        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "INFO: Storage file removed successfully: %s",
                self._store.path,
            )
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )
