# File: config_flow.py
"""Config flow for the Muslim Companion integration.

Single instance. The one step collects the location, the calculation method
and school used for computed prayer times, and an optional local authority
timetable URL. General options start from their defaults.
"""

from typing import Any, Optional

from homeassistant import config_entries
from homeassistant.core import callback

from . import const
from . import flow_helpers as fh
from .options_flow import MuslimCompanionOptionsFlowHandler


class MuslimCompanionConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for Muslim Companion."""

    VERSION = 1

    async def async_step_user(self, user_input: Optional[dict[str, Any]] = None):
        """Collect location and prayer time sources."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.ERROR_SINGLE_INSTANCE)

        errors: dict[str, str] = {}
        if user_input is not None:
            errors = fh.validate_location_inputs(user_input)
            if not errors:
                entry_data = fh.build_location_data(user_input)
                entry_options = {
                    const.CONF_UPDATE_INTERVAL: const.DEFAULT_UPDATE_INTERVAL,
                    const.CONF_NOTIFY_SERVICE: const.DEFAULT_NOTIFY_SERVICE,
                    const.CONF_SUHOOR_REMINDER_MINUTES: const.DEFAULT_SUHOOR_REMINDER_MINUTES,
                }
                const.LOGGER.debug(
                    "DEBUG: Creating config entry with data %s", entry_data
                )
                return self.async_create_entry(
                    title=const.MUSLIM_COMPANION_TITLE,
                    data=entry_data,
                    options=entry_options,
                )

        schema = fh.build_location_schema(
            user_input,
            home_latitude=self.hass.config.latitude,
            home_longitude=self.hass.config.longitude,
        )
        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER,
            data_schema=schema,
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return MuslimCompanionOptionsFlowHandler(config_entry)
