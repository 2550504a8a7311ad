"""Shared plumbing for the Muslim Companion managers.

Both managers work on the same config entry: they read the tracker section
of the coordinator's document, talk to each other through dispatcher signals
scoped to the entry, and hand their teardown to the entry's unload callbacks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.helpers.dispatcher import (
    async_dispatcher_connect,
    async_dispatcher_send,
)

from .. import const

if TYPE_CHECKING:
    from collections.abc import Callable

    from homeassistant.core import HomeAssistant

    from ..coordinator import MuslimCompanionCoordinator
    from ..type_defs import TrackerData


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Return the dispatcher signal for one entry.

    Example:
        get_event_signal("abc123", const.SIGNAL_SUFFIX_TRACKER_RESET)
        → 'muslim_companion_abc123_tracker_reset'
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


class BaseManager:
    """Base for the tracker and notification managers.

    Writes go through coordinator._persist_and_update() when sensors should
    refresh (logs, tracker lifecycle) and coordinator._persist() for
    bookkeeping only (scheduled reminder records).
    """

    def __init__(
        self, hass: HomeAssistant, coordinator: MuslimCompanionCoordinator
    ) -> None:
        """Initialize manager."""
        self.hass = hass
        self.coordinator = coordinator
        self.entry_id = coordinator.config_entry.entry_id

    async def async_setup(self) -> None:
        """Set up the manager. Called once per entry setup."""
        const.LOGGER.debug(
            "DEBUG: %s initialized for entry %s",
            self.__class__.__name__,
            self.entry_id,
        )

    @property
    def tracker(self) -> TrackerData | None:
        """Return the stored tracker, or None before initialization."""
        return self.coordinator._data.get(const.DATA_TRACKER)

    # ────────────────────────────────────────────────────────────────
    # Entry-scoped events
    # ────────────────────────────────────────────────────────────────

    def emit(self, suffix: str, **payload: Any) -> None:
        """Send a signal to the other managers of this entry.

        The payload travels as one dict argument; the dispatcher only
        forwards positional arguments.
        """
        const.LOGGER.debug(
            "DEBUG: Emitting '%s' for entry %s with payload keys: %s",
            suffix,
            self.entry_id,
            list(payload),
        )
        async_dispatcher_send(
            self.hass, get_event_signal(self.entry_id, suffix), payload
        )

    def listen(self, suffix: str, callback: Callable[..., Any]) -> None:
        """Subscribe to a signal of this entry until the entry unloads."""
        self.on_unload(
            async_dispatcher_connect(
                self.hass, get_event_signal(self.entry_id, suffix), callback
            )
        )

    def on_unload(self, func: Callable[[], None]) -> None:
        """Run func when the config entry unloads."""
        self.coordinator.config_entry.async_on_unload(func)
