# File: notification_helper.py
"""Sends reminders using Home Assistant's notify services.

The target is a configured service name such as "notify.mobile_app_phone" or
just "mobile_app_phone" (the notify domain is assumed).
"""

from __future__ import annotations

from typing import Any

from homeassistant.core import HomeAssistant

from . import const


def split_notify_service(notify_service: str) -> tuple[str, str]:
    """Split a notify target into (domain, service)."""
    if const.DISPLAY_DOT not in notify_service:
        return const.NOTIFY_DOMAIN, notify_service
    domain, service = notify_service.split(const.DISPLAY_DOT, 1)
    return domain, service


async def async_send_notification(
    hass: HomeAssistant,
    notify_service: str,
    title: str,
    message: str,
    extra_data: dict[str, Any] | None = None,
) -> bool:
    """Send a notification through a notify service.

    Gracefully handles missing notification services (common in fresh installs
    or when the mobile app isn't configured yet). If the service doesn't exist,
    logs a warning and returns without raising an exception.

    Returns:
        True when the service call completed.
    """
    if not notify_service:
        const.LOGGER.debug("DEBUG: No notify service configured - skipping '%s'", title)
        return False

    domain, service = split_notify_service(notify_service)

    if not hass.services.has_service(domain, service):
        const.LOGGER.warning(
            "WARNING: Notification service '%s.%s' not available - skipping "
            "notification '%s'",
            domain,
            service,
            title,
        )
        return False

    payload: dict[str, Any] = {const.NOTIFY_TITLE: title, const.NOTIFY_MESSAGE: message}
    if extra_data:
        payload[const.NOTIFY_DATA] = dict(extra_data)

    try:
        await hass.services.async_call(domain, service, payload, blocking=True)
        const.LOGGER.debug("DEBUG: Notification sent via '%s.%s'", domain, service)
    except Exception as err:  # pylint: disable=broad-exception-caught
        # Runs from timer callbacks; a failing notify target must not raise
        # "Task exception was never retrieved".
        const.LOGGER.error(
            "ERROR: Unexpected error sending notification via '%s.%s': %s. Payload: %s",
            domain,
            service,
            err,
            payload,
        )
        return False
    return True
