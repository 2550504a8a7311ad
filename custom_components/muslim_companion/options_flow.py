# File: options_flow.py
"""Options Flow for the Muslim Companion integration.

One form: coordinator update interval, notify service for reminders and the
Suhoor reminder lead time. Saving reloads the integration.
"""
# pylint: disable=protected-access

from typing import Any, Optional

from homeassistant import config_entries

from . import const
from . import flow_helpers as fh


class MuslimCompanionOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for general settings."""

    def __init__(self, _config_entry: config_entries.ConfigEntry):
        """Initialize the options flow."""
        self._entry_options: dict[str, Any] = {}

    def _get_coordinator(self):
        """Get the coordinator from hass.data, or None when not loaded."""
        entry_data = self.hass.data.get(const.DOMAIN, {}).get(
            self.config_entry.entry_id
        )
        if not entry_data:
            return None
        return entry_data[const.COORDINATOR]

    async def async_step_init(self, user_input: Optional[dict[str, Any]] = None):
        """Manage general options."""
        self._entry_options = dict(self.config_entry.options)

        errors: dict[str, str] = {}
        if user_input is not None:
            errors = fh.validate_general_options_inputs(self.hass, user_input)
            if not errors:
                self._entry_options.update(fh.build_general_options_data(user_input))
                const.LOGGER.debug(
                    "DEBUG: General Options Updated: Update Interval=%s, "
                    "Notify Service=%s, Suhoor Reminder=%s",
                    self._entry_options.get(const.CONF_UPDATE_INTERVAL),
                    self._entry_options.get(const.CONF_NOTIFY_SERVICE),
                    self._entry_options.get(const.CONF_SUHOOR_REMINDER_MINUTES),
                )
                self._sync_suhoor_preference()
                return self.async_create_entry(title="", data=self._entry_options)

        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT,
            data_schema=fh.build_general_options_schema(
                user_input or self._entry_options
            ),
            errors=errors,
        )

    def _sync_suhoor_preference(self) -> None:
        """Copy the Suhoor lead time into the stored notification preferences."""
        coordinator = self._get_coordinator()
        if coordinator is None:
            return
        minutes = self._entry_options[const.CONF_SUHOOR_REMINDER_MINUTES]
        prefs = coordinator.tracker_manager.notification_prefs
        if prefs.get(const.PREF_SUHOOR_REMINDER_MINUTES) != minutes:
            coordinator.tracker_manager.update_notification_prefs(
                **{const.PREF_SUHOOR_REMINDER_MINUTES: minutes}
            )
