"""Base entity classes for Muslim Companion integration."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from . import const
from .coordinator import MuslimCompanionCoordinator


def create_device_info(entry: ConfigEntry) -> DeviceInfo:
    """Return the single device all Muslim Companion entities belong to."""
    return DeviceInfo(
        identifiers={(const.DOMAIN, entry.entry_id)},
        name=const.MUSLIM_COMPANION_TITLE,
        manufacturer=const.DEVICE_MANUFACTURER,
        model=const.DEVICE_MODEL,
    )


class MuslimCompanionCoordinatorEntity(CoordinatorEntity[MuslimCompanionCoordinator]):
    """Base entity class for Muslim Companion sensors with typed coordinator access.

    Every subclass is keyed by a sensor key: the unique id and the translation
    key are both derived from it, and all entities share one device.
    """

    _attr_has_entity_name = True

    def __init__(
        self, coordinator: MuslimCompanionCoordinator, entry: ConfigEntry, key: str
    ) -> None:
        """Initialize the entity.

        Args:
            coordinator: MuslimCompanionCoordinator instance for data access.
            entry: ConfigEntry for this integration instance.
            key: Sensor key (one of const.SENSOR_KEY_*).
        """
        super().__init__(coordinator)
        self._entry = entry
        self._attr_translation_key = key
        self._attr_unique_id = f"{entry.entry_id}_{key}"
        self._attr_device_info = create_device_info(entry)

    @property
    def coordinator(self) -> MuslimCompanionCoordinator:
        """Return typed coordinator.

        Uses object.__getattribute__ to access the private _coordinator attribute
        set by the parent CoordinatorEntity class.
        """
        return object.__getattribute__(self, "_coordinator")

    @coordinator.setter
    def coordinator(self, value: MuslimCompanionCoordinator) -> None:
        """Set coordinator with proper typing.

        Args:
            value: The MuslimCompanionCoordinator instance to set.
        """
        object.__setattr__(self, "_coordinator", value)
