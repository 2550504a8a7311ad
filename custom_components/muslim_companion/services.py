# File: services.py
"""Defines custom services for the Muslim Companion integration.

These services let scripts, automations and dashboards record Ramadan
activities, manage the tracked window and control reminders.
"""

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from . import const
from .coordinator import MuslimCompanionCoordinator

# --- Service Schemas ---
DAY_VALIDATOR = vol.All(
    vol.Coerce(int), vol.Range(min=1, max=const.RAMADAN_DEFAULT_TOTAL_DAYS)
)
JUZ_VALIDATOR = vol.All(vol.Coerce(int), vol.Range(min=1, max=const.TOTAL_JUZ))

LOG_FASTING_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_DAY): DAY_VALIDATOR,
        vol.Required(const.FIELD_STATUS): vol.In(const.FASTING_STATUSES),
        vol.Optional(const.FIELD_MISSED_REASON): vol.In(const.MISSED_REASONS),
        vol.Optional(const.FIELD_NOTES): cv.string,
    }
)

LOG_TARAWIH_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_DAY): DAY_VALIDATOR,
        vol.Required(const.FIELD_PRAYED): cv.boolean,
        vol.Optional(const.FIELD_LOCATION): vol.In(const.TARAWIH_LOCATIONS),
        vol.Optional(const.FIELD_MOSQUE_NAME): cv.string,
    }
)

LOG_QURAN_PROGRESS_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_JUZ): JUZ_VALIDATOR,
        vol.Required(const.FIELD_PAGES_READ): vol.All(
            vol.Coerce(int), vol.Range(min=0, max=const.PAGES_PER_JUZ)
        ),
    }
)

JUZ_SCHEMA = vol.Schema({vol.Required(const.FIELD_JUZ): JUZ_VALIDATOR})

INITIALIZE_TRACKER_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_YEAR): vol.Coerce(int),
        vol.Optional(const.FIELD_START_DATE): cv.date,
        vol.Optional(
            const.FIELD_TOTAL_DAYS, default=const.RAMADAN_DEFAULT_TOTAL_DAYS
        ): vol.All(
            vol.Coerce(int), vol.Range(min=29, max=const.RAMADAN_DEFAULT_TOTAL_DAYS)
        ),
        vol.Optional(const.FIELD_FORCE, default=False): cv.boolean,
    }
)

RESET_TRACKER_SCHEMA = vol.Schema({})

UPDATE_NOTIFICATION_PREFS_SCHEMA = vol.Schema(
    {
        vol.Optional(const.PREF_SUHOOR_REMINDER): cv.boolean,
        vol.Optional(const.PREF_SUHOOR_REMINDER_MINUTES): vol.All(
            vol.Coerce(int), vol.In(const.SUHOOR_REMINDER_OPTIONS)
        ),
        vol.Optional(const.PREF_IFTAR_ALERT): cv.boolean,
        vol.Optional(const.PREF_TARAWIH_REMINDER): cv.boolean,
        vol.Optional(const.PREF_LAST_TEN_NIGHTS): cv.boolean,
        vol.Optional(const.PREF_LAYLATUL_QADR_EMPHASIS): cv.boolean,
    }
)

RESCHEDULE_REMINDERS_SCHEMA = vol.Schema({})


def get_first_entry_coordinator(
    hass: HomeAssistant,
) -> MuslimCompanionCoordinator | None:
    """Retrieve the coordinator of the first loaded Muslim Companion entry."""
    domain_entries = hass.data.get(const.DOMAIN)
    if not domain_entries:
        return None
    entry_id = next(iter(domain_entries.keys()), None)
    if entry_id is None:
        return None
    return domain_entries[entry_id][const.COORDINATOR]


def async_setup_services(hass: HomeAssistant):
    """Register Muslim Companion services."""

    async def handle_log_fasting(call: ServiceCall):
        """Handle logging a fasting day."""
        coordinator = get_first_entry_coordinator(hass)
        if coordinator is None:
            const.LOGGER.warning("WARNING: Log Fasting: %s", const.MSG_NO_ENTRY_FOUND)
            return

        coordinator.tracker_manager.log_fasting(
            day=call.data[const.FIELD_DAY],
            status=call.data[const.FIELD_STATUS],
            missed_reason=call.data.get(const.FIELD_MISSED_REASON),
            notes=call.data.get(const.FIELD_NOTES),
        )

    async def handle_log_tarawih(call: ServiceCall):
        """Handle logging a Tarawih night."""
        coordinator = get_first_entry_coordinator(hass)
        if coordinator is None:
            const.LOGGER.warning("WARNING: Log Tarawih: %s", const.MSG_NO_ENTRY_FOUND)
            return

        coordinator.tracker_manager.log_tarawih(
            day=call.data[const.FIELD_DAY],
            prayed=call.data[const.FIELD_PRAYED],
            location=call.data.get(const.FIELD_LOCATION),
            mosque_name=call.data.get(const.FIELD_MOSQUE_NAME),
        )

    async def handle_log_quran_progress(call: ServiceCall):
        """Handle logging pages read in a juz."""
        coordinator = get_first_entry_coordinator(hass)
        if coordinator is None:
            const.LOGGER.warning(
                "WARNING: Log Quran Progress: %s", const.MSG_NO_ENTRY_FOUND
            )
            return

        coordinator.tracker_manager.log_quran_progress(
            juz=call.data[const.FIELD_JUZ],
            pages_read=call.data[const.FIELD_PAGES_READ],
        )

    async def handle_mark_juz_complete(call: ServiceCall):
        """Handle marking a juz complete."""
        coordinator = get_first_entry_coordinator(hass)
        if coordinator is None:
            const.LOGGER.warning(
                "WARNING: Mark Juz Complete: %s", const.MSG_NO_ENTRY_FOUND
            )
            return

        coordinator.tracker_manager.mark_juz_complete(call.data[const.FIELD_JUZ])

    async def handle_unmark_juz_complete(call: ServiceCall):
        """Handle returning a juz to in-progress."""
        coordinator = get_first_entry_coordinator(hass)
        if coordinator is None:
            const.LOGGER.warning(
                "WARNING: Unmark Juz Complete: %s", const.MSG_NO_ENTRY_FOUND
            )
            return

        coordinator.tracker_manager.unmark_juz_complete(call.data[const.FIELD_JUZ])

    async def handle_initialize_tracker(call: ServiceCall):
        """Handle creating the tracker.

        Uses the explicit year and start date when both are given, otherwise
        the window detected by the coordinator.
        """
        coordinator = get_first_entry_coordinator(hass)
        if coordinator is None:
            const.LOGGER.warning(
                "WARNING: Initialize Tracker: %s", const.MSG_NO_ENTRY_FOUND
            )
            return

        year = call.data.get(const.FIELD_YEAR)
        start_date = call.data.get(const.FIELD_START_DATE)
        force = call.data[const.FIELD_FORCE]

        if year is not None and start_date is not None:
            coordinator.tracker_manager.initialize(
                year,
                start_date,
                total_days=call.data[const.FIELD_TOTAL_DAYS],
                force=force,
            )
            return

        detection = coordinator.get_detection()
        if detection.start_date is None or not detection.governing_year:
            const.LOGGER.warning(
                "WARNING: Initialize Tracker: %s", const.ERROR_NO_WINDOW_DETECTED
            )
            raise HomeAssistantError(const.ERROR_NO_WINDOW_DETECTED)

        coordinator.tracker_manager.initialize_from_detection(detection, force=force)

    async def handle_reset_tracker(_call: ServiceCall):
        """Handle dropping the tracker and all logs."""
        coordinator = get_first_entry_coordinator(hass)
        if coordinator is None:
            const.LOGGER.warning(
                "WARNING: Reset Tracker: %s", const.MSG_NO_ENTRY_FOUND
            )
            return

        coordinator.tracker_manager.reset()

    async def handle_update_notification_prefs(call: ServiceCall):
        """Handle merging notification preference updates."""
        coordinator = get_first_entry_coordinator(hass)
        if coordinator is None:
            const.LOGGER.warning(
                "WARNING: Update Notification Prefs: %s", const.MSG_NO_ENTRY_FOUND
            )
            return

        coordinator.tracker_manager.update_notification_prefs(**call.data)

    async def handle_reschedule_reminders(_call: ServiceCall):
        """Handle rebuilding the pending reminders."""
        coordinator = get_first_entry_coordinator(hass)
        if coordinator is None:
            const.LOGGER.warning(
                "WARNING: Reschedule Reminders: %s", const.MSG_NO_ENTRY_FOUND
            )
            return

        await coordinator.notification_manager.async_schedule_reminders()

    # --- Register Services ---
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_LOG_FASTING,
        handle_log_fasting,
        schema=LOG_FASTING_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_LOG_TARAWIH,
        handle_log_tarawih,
        schema=LOG_TARAWIH_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_LOG_QURAN_PROGRESS,
        handle_log_quran_progress,
        schema=LOG_QURAN_PROGRESS_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_MARK_JUZ_COMPLETE,
        handle_mark_juz_complete,
        schema=JUZ_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UNMARK_JUZ_COMPLETE,
        handle_unmark_juz_complete,
        schema=JUZ_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_INITIALIZE_TRACKER,
        handle_initialize_tracker,
        schema=INITIALIZE_TRACKER_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_TRACKER,
        handle_reset_tracker,
        schema=RESET_TRACKER_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UPDATE_NOTIFICATION_PREFS,
        handle_update_notification_prefs,
        schema=UPDATE_NOTIFICATION_PREFS_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESCHEDULE_REMINDERS,
        handle_reschedule_reminders,
        schema=RESCHEDULE_REMINDERS_SCHEMA,
    )

    const.LOGGER.info("INFO: Muslim Companion services have been registered")


async def async_unload_services(hass: HomeAssistant):
    """Unregister Muslim Companion services when unloading the integration."""
    services = [
        const.SERVICE_LOG_FASTING,
        const.SERVICE_LOG_TARAWIH,
        const.SERVICE_LOG_QURAN_PROGRESS,
        const.SERVICE_MARK_JUZ_COMPLETE,
        const.SERVICE_UNMARK_JUZ_COMPLETE,
        const.SERVICE_INITIALIZE_TRACKER,
        const.SERVICE_RESET_TRACKER,
        const.SERVICE_UPDATE_NOTIFICATION_PREFS,
        const.SERVICE_RESCHEDULE_REMINDERS,
    ]

    for service in services:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: Muslim Companion services have been unregistered")
