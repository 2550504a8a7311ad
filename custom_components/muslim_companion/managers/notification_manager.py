# File: notification_manager.py
"""Notification Manager for Muslim Companion integration.

This manager owns reminder scheduling and delivery:
- Plans Suhoor, Iftar, Tarawih and last-ten-nights reminders for the next days
- Registers one point-in-time timer per reminder
- Delivers through the configured notify service
- Reschedules daily and whenever preferences or the tracker change

The manager carries its own is_scheduling flag. A scheduling pass started
while another is running is ignored with a warning.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.helpers.event import (
    async_track_point_in_time,
    async_track_time_change,
)

from .. import const
from ..engines.schedule_engine import ReminderPlan, ScheduleEngine
from ..notification_helper import async_send_notification
from ..utils.dt_utils import dt_days_between, dt_now_iso, dt_now_local
from .base_manager import BaseManager

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from homeassistant.core import HomeAssistant

    from ..coordinator import MuslimCompanionCoordinator
    from ..type_defs import ScheduledReminder


class NotificationManager(BaseManager):
    """Manager for Ramadan reminders.

    Responsibilities:
    - Turn the window schedule into ReminderPlans (via ScheduleEngine)
    - Own the timers registered for those plans
    - Record what was scheduled for diagnostics

    Uses coordinator for:
    - Tracker data, notification preferences and the notify service
    - Window schedules (async_get_schedule)
    """

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: MuslimCompanionCoordinator,
        schedule_engine: ScheduleEngine | None = None,
    ) -> None:
        """Initialize notification manager.

        Args:
            hass: Home Assistant instance
            coordinator: Parent coordinator for data access
            schedule_engine: Planner (defaults to a new ScheduleEngine)
        """
        super().__init__(hass, coordinator)
        self.schedule_engine = schedule_engine or ScheduleEngine()
        self.is_scheduling = False
        self._timer_unsubs: list[Callable[[], None]] = []
        self._daily_unsub: Callable[[], None] | None = None

    async def async_setup(self) -> None:
        """Subscribe to tracker and preference events and start the daily pass."""
        self.listen(const.SIGNAL_SUFFIX_PREFS_UPDATED, self._handle_changed)
        self.listen(const.SIGNAL_SUFFIX_TRACKER_INITIALIZED, self._handle_changed)
        self.listen(const.SIGNAL_SUFFIX_TRACKER_RESET, self._handle_tracker_reset)

        self._daily_unsub = async_track_time_change(
            self.hass,
            self._handle_daily,
            hour=const.REMINDER_RESCHEDULE_HOUR,
            minute=const.REMINDER_RESCHEDULE_MINUTE,
            second=0,
        )
        self.on_unload(self.async_unload)
        await super().async_setup()

    @callback
    def async_unload(self) -> None:
        """Cancel every timer owned by the manager."""
        if self._daily_unsub is not None:
            self._daily_unsub()
            self._daily_unsub = None
        self.async_cancel_reminders()

    # =========================================================================
    # Event handlers
    # =========================================================================

    @callback
    def _handle_changed(self, payload: dict[str, Any]) -> None:
        self.hass.async_create_task(self.async_schedule_reminders())

    @callback
    def _handle_tracker_reset(self, payload: dict[str, Any]) -> None:
        self.async_cancel_reminders()
        self._record_scheduled([])

    @callback
    def _handle_daily(self, now: datetime) -> None:
        self.hass.async_create_task(self.async_schedule_reminders())

    # =========================================================================
    # Scheduling
    # =========================================================================

    @property
    def scheduled_count(self) -> int:
        """Return the number of live reminder timers."""
        return len(self._timer_unsubs)

    @callback
    def async_cancel_reminders(self) -> None:
        """Cancel all pending reminder timers."""
        for unsub in self._timer_unsubs:
            unsub()
        if self._timer_unsubs:
            const.LOGGER.debug(
                "DEBUG: Cancelled %s pending reminders", len(self._timer_unsubs)
            )
        self._timer_unsubs.clear()

    async def async_schedule_reminders(self) -> int:
        """Replace the pending reminders with a fresh plan.

        Returns:
            Number of reminders registered (0 when skipped).
        """
        if self.is_scheduling:
            const.LOGGER.warning(
                "WARNING: Reminder scheduling already in progress; ignoring request"
            )
            return 0

        self.is_scheduling = True
        try:
            self.async_cancel_reminders()
            plans = await self._async_build_plans()
            for plan in plans:
                self._timer_unsubs.append(
                    async_track_point_in_time(
                        self.hass, partial(self._async_deliver, plan), plan.trigger
                    )
                )
            self._record_scheduled(plans)
            const.LOGGER.info("INFO: Scheduled %s Ramadan reminders", len(plans))
            return len(plans)
        finally:
            self.is_scheduling = False

    async def _async_build_plans(self) -> list[ReminderPlan]:
        tracker_manager = self.coordinator.tracker_manager
        tracker = self.tracker
        start = tracker_manager.start_date()
        if tracker is None or start is None:
            const.LOGGER.debug("DEBUG: No tracker; nothing to schedule")
            return []

        now = dt_now_local()
        total_days = int(tracker[const.DATA_TRACKER_TOTAL_DAYS])
        current_day = dt_days_between(start, now.date()) + 1
        first_day = max(1, current_day)
        last_day = min(total_days, current_day + const.REMINDER_DAYS_AHEAD - 1)
        if first_day > last_day:
            const.LOGGER.debug(
                "DEBUG: Window day %s is outside the reminder horizon", current_day
            )
            return []

        schedule = await self.coordinator.async_get_schedule(first_day, last_day)
        return self.schedule_engine.plan_reminders(
            schedule,
            first_day,
            total_days,
            tracker_manager.notification_prefs,
            now,
            days_ahead=last_day - first_day + 1,
        )

    def _record_scheduled(self, plans: list[ReminderPlan]) -> None:
        items: list[ScheduledReminder] = [
            {
                "kind": plan.kind,
                "day": plan.day,
                "date": plan.date.isoformat(),
                "scheduled_for": plan.trigger.isoformat(),
            }
            for plan in plans
        ]
        self.coordinator._data[const.DATA_SCHEDULED_NOTIFICATIONS] = {
            const.DATA_SCHEDULED_LAST_DATE: dt_now_iso(),
            const.DATA_SCHEDULED_COUNT: len(items),
            const.DATA_SCHEDULED_ITEMS: items,
        }
        self.coordinator._persist()

    # =========================================================================
    # Delivery
    # =========================================================================

    async def _async_deliver(self, plan: ReminderPlan, now: datetime) -> None:
        """Send one reminder when its timer fires."""
        const.LOGGER.debug(
            "DEBUG: Delivering %s reminder for day %s", plan.kind, plan.day
        )
        await async_send_notification(
            self.hass,
            self.coordinator.notify_service,
            plan.title,
            plan.message,
            extra_data={"tag": f"{const.DOMAIN}-{plan.kind}-{plan.day}"},
        )
