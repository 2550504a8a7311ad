# File: flow_helpers.py
"""Helpers for the Muslim Companion integration's Config and Options flow.

Provides schema builders, validators and data builders. Each settings group
follows the same three functions:

- build_<group>_schema(default, ...) -> vol.Schema
- validate_<group>_inputs(user_input, ...) -> errors_dict (empty = valid)
- build_<group>_data(user_input) -> dict stored on the config entry
"""

from typing import Any, Optional
from urllib.parse import urlparse

import voluptuous as vol
from homeassistant.core import HomeAssistant
from homeassistant.helpers import selector

from . import const
from .notification_helper import split_notify_service


# ----------------------------------------------------------------------------------
# LOCATION / SOURCES (config entry data)
# ----------------------------------------------------------------------------------


def build_location_schema(
    default: Optional[dict[str, Any]] = None,
    home_latitude: float = const.DEFAULT_LATITUDE,
    home_longitude: float = const.DEFAULT_LONGITUDE,
) -> vol.Schema:
    """Build schema for location, calculation method and authority source."""
    default = default or {}

    return vol.Schema(
        {
            vol.Required(
                const.CONF_LATITUDE,
                default=default.get(const.CONF_LATITUDE, home_latitude),
            ): vol.Coerce(float),
            vol.Required(
                const.CONF_LONGITUDE,
                default=default.get(const.CONF_LONGITUDE, home_longitude),
            ): vol.Coerce(float),
            vol.Required(
                const.CONF_CALCULATION_METHOD,
                default=str(
                    default.get(
                        const.CONF_CALCULATION_METHOD, const.DEFAULT_CALCULATION_METHOD
                    )
                ),
            ): selector.SelectSelector(
                selector.SelectSelectorConfig(
                    options=[
                        selector.SelectOptionDict(value=str(key), label=label)
                        for key, label in const.CALCULATION_METHODS.items()
                    ],
                    mode=selector.SelectSelectorMode.DROPDOWN,
                )
            ),
            vol.Required(
                const.CONF_SCHOOL,
                default=str(default.get(const.CONF_SCHOOL, const.DEFAULT_SCHOOL)),
            ): selector.SelectSelector(
                selector.SelectSelectorConfig(
                    options=[
                        selector.SelectOptionDict(value=str(key), label=label)
                        for key, label in const.SCHOOLS.items()
                    ],
                    mode=selector.SelectSelectorMode.DROPDOWN,
                )
            ),
            vol.Optional(
                const.CONF_AUTHORITY_URL,
                default=default.get(
                    const.CONF_AUTHORITY_URL, const.DEFAULT_AUTHORITY_URL
                ),
            ): selector.TextSelector(
                selector.TextSelectorConfig(type=selector.TextSelectorType.URL)
            ),
        }
    )


def validate_location_inputs(user_input: dict[str, Any]) -> dict[str, str]:
    """Validate location inputs.

    Returns:
        Dictionary of errors (empty if valid).
    """
    errors: dict[str, str] = {}

    if not -90 <= float(user_input[const.CONF_LATITUDE]) <= 90:
        errors[const.CONF_LATITUDE] = const.ERROR_INVALID_COORDINATES
    if not -180 <= float(user_input[const.CONF_LONGITUDE]) <= 180:
        errors[const.CONF_LONGITUDE] = const.ERROR_INVALID_COORDINATES

    url = (user_input.get(const.CONF_AUTHORITY_URL) or "").strip()
    if url:
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            errors[const.CONF_AUTHORITY_URL] = const.ERROR_INVALID_AUTHORITY_URL

    return errors


def build_location_data(user_input: dict[str, Any]) -> dict[str, Any]:
    """Build the config entry data from validated location inputs."""
    return {
        const.CONF_LATITUDE: float(user_input[const.CONF_LATITUDE]),
        const.CONF_LONGITUDE: float(user_input[const.CONF_LONGITUDE]),
        const.CONF_CALCULATION_METHOD: int(user_input[const.CONF_CALCULATION_METHOD]),
        const.CONF_SCHOOL: int(user_input[const.CONF_SCHOOL]),
        const.CONF_AUTHORITY_URL: (
            user_input.get(const.CONF_AUTHORITY_URL) or const.DEFAULT_AUTHORITY_URL
        ).strip(),
    }


# ----------------------------------------------------------------------------------
# GENERAL OPTIONS (config entry options)
# ----------------------------------------------------------------------------------


def build_general_options_schema(default: Optional[dict] = None) -> vol.Schema:
    """Build schema for general options: update interval and reminders."""
    default = default or {}
    default_interval = default.get(
        const.CONF_UPDATE_INTERVAL, const.DEFAULT_UPDATE_INTERVAL
    )
    default_notify = default.get(
        const.CONF_NOTIFY_SERVICE, const.DEFAULT_NOTIFY_SERVICE
    )
    default_suhoor = default.get(
        const.CONF_SUHOOR_REMINDER_MINUTES, const.DEFAULT_SUHOOR_REMINDER_MINUTES
    )

    return vol.Schema(
        {
            vol.Required(
                const.CONF_UPDATE_INTERVAL, default=default_interval
            ): selector.NumberSelector(
                selector.NumberSelectorConfig(
                    mode=selector.NumberSelectorMode.BOX,
                    min=1,
                    step=1,
                )
            ),
            vol.Optional(
                const.CONF_NOTIFY_SERVICE, default=default_notify
            ): selector.TextSelector(selector.TextSelectorConfig(multiline=False)),
            vol.Required(
                const.CONF_SUHOOR_REMINDER_MINUTES, default=str(default_suhoor)
            ): selector.SelectSelector(
                selector.SelectSelectorConfig(
                    options=[str(value) for value in const.SUHOOR_REMINDER_OPTIONS],
                    mode=selector.SelectSelectorMode.LIST,
                )
            ),
        }
    )


def validate_general_options_inputs(
    hass: HomeAssistant, user_input: dict[str, Any]
) -> dict[str, str]:
    """Validate general options.

    An empty notify service disables reminders; a non-empty one must exist.
    """
    errors: dict[str, str] = {}

    notify_service = (user_input.get(const.CONF_NOTIFY_SERVICE) or "").strip()
    if notify_service:
        domain, service = split_notify_service(notify_service)
        if not hass.services.has_service(domain, service):
            errors[const.CONF_NOTIFY_SERVICE] = const.ERROR_INVALID_NOTIFY_SERVICE

    return errors


def build_general_options_data(user_input: dict[str, Any]) -> dict[str, Any]:
    """Build the config entry options from validated general options."""
    return {
        const.CONF_UPDATE_INTERVAL: int(user_input[const.CONF_UPDATE_INTERVAL]),
        const.CONF_NOTIFY_SERVICE: (
            user_input.get(const.CONF_NOTIFY_SERVICE) or const.DEFAULT_NOTIFY_SERVICE
        ).strip(),
        const.CONF_SUHOOR_REMINDER_MINUTES: int(
            user_input[const.CONF_SUHOOR_REMINDER_MINUTES]
        ),
    }
