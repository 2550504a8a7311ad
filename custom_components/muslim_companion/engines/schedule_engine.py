"""Schedule Engine for Muslim Companion.

Builds the per-day schedule of the tracked window (reconciled Imsak, the six
prayer boundaries, last-ten-nights and odd-night markers) and plans reminder
triggers from it.

IMPORTANT: This module must NOT import from coordinator.py to avoid circular
imports. Only import from const.py, type_defs.py, sibling engines and utils.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .. import const
from ..utils.clock_utils import to_minutes
from ..utils.dt_utils import dt_add_days, dt_at_minutes
from .reconciliation_engine import TimeReconciler

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import date, datetime
    from zoneinfo import ZoneInfo

    from ..type_defs import BoundaryTimes, NotificationPrefs


@dataclass(frozen=True, slots=True)
class WindowDaySchedule:
    """One ordinal day of the tracked window."""

    day: int
    date: date
    imsak: str
    boundaries: dict[str, str]
    imsak_source: str
    is_last_ten_nights: bool
    is_special_night: bool
    low_confidence: bool = False

    @property
    def iftar(self) -> str:
        """Iftar is Maghrib."""
        return self.boundaries[const.PRAYER_MAGHRIB]


@dataclass(frozen=True, slots=True)
class ReminderPlan:
    """A reminder to deliver at a point in time."""

    kind: str
    day: int
    date: date
    trigger: datetime
    title: str
    message: str


class ScheduleEngine:
    """Window schedule builder and reminder planner.

    Holds a TimeReconciler but no other state. Imsak is reconciled
    independently for every day in the window.
    """

    def __init__(self, reconciler: TimeReconciler | None = None) -> None:
        """Initialize the engine with an optional custom reconciler."""
        self.reconciler = reconciler or TimeReconciler()

    # ────────────────────────────────────────────────────────────────
    # Special Nights
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def is_last_ten_nights(day: int) -> bool:
        """Return True from night 21 onwards."""
        return day >= const.LAST_TEN_NIGHTS_START

    @staticmethod
    def is_special_night(day: int) -> bool:
        """Return True on the odd nights of the last ten (Laylatul Qadr candidates)."""
        return day in const.LAYLATUL_QADR_NIGHTS

    # ────────────────────────────────────────────────────────────────
    # Window Schedule
    # ────────────────────────────────────────────────────────────────

    def build_schedule(
        self,
        start_date: date,
        total_days: int,
        calculated_by_date: Mapping[date, BoundaryTimes] | None = None,
        authority_by_date: Mapping[date, BoundaryTimes] | None = None,
        fallback: Mapping[str, str] | None = None,
        first_day: int = 1,
        last_day: int | None = None,
    ) -> list[WindowDaySchedule]:
        """Build the schedule for ordinal days first_day..last_day.

        Args:
            start_date: Gregorian date of ordinal day 1.
            total_days: Length of the window.
            calculated_by_date: Provider A times per date.
            authority_by_date: Authority times per date.
            fallback: Times to use where neither source covers a boundary.
            first_day: First ordinal day to include.
            last_day: Last ordinal day to include (defaults to total_days).
        """
        calculated_by_date = calculated_by_date or {}
        authority_by_date = authority_by_date or {}
        last = min(total_days, last_day if last_day is not None else total_days)

        schedule: list[WindowDaySchedule] = []
        for day in range(max(1, first_day), last + 1):
            day_date = dt_add_days(start_date, day - 1)
            resolved = self.reconciler.reconcile_day(
                day_date,
                calculated_by_date.get(day_date),
                authority_by_date.get(day_date),
                fallback,
            )
            schedule.append(
                WindowDaySchedule(
                    day=day,
                    date=day_date,
                    imsak=resolved.imsak.value,
                    boundaries=resolved.boundaries,
                    imsak_source=resolved.imsak.source,
                    is_last_ten_nights=self.is_last_ten_nights(day),
                    is_special_night=self.is_special_night(day),
                    low_confidence=resolved.low_confidence,
                )
            )
        return schedule

    # ────────────────────────────────────────────────────────────────
    # Reminder Planning
    # ────────────────────────────────────────────────────────────────

    def plan_reminders(
        self,
        schedule: Sequence[WindowDaySchedule],
        current_day: int,
        total_days: int,
        prefs: NotificationPrefs | Mapping[str, object],
        now: datetime,
        tz: ZoneInfo | None = None,
        days_ahead: int = const.REMINDER_DAYS_AHEAD,
    ) -> list[ReminderPlan]:
        """Plan reminders for the next days_ahead ordinal days.

        Reminders are skipped when their trigger is not in the future or the
        day lies beyond the window.

        Args:
            schedule: Window schedule covering at least the planned days.
            current_day: Current ordinal day (1-based).
            total_days: Length of the window.
            prefs: Which reminders are enabled.
            now: Current timezone-aware datetime.
            tz: Timezone for triggers (defaults to the dt_utils default).
            days_ahead: How many days to plan, including today.
        """
        by_day = {entry.day: entry for entry in schedule}
        plans: list[ReminderPlan] = []

        for offset in range(days_ahead):
            day = current_day + offset
            if day > total_days:
                break
            entry = by_day.get(day)
            if entry is None:
                const.LOGGER.debug("DEBUG: No schedule for day %s, skipping", day)
                continue

            for plan in self._plans_for_day(entry, prefs, tz):
                if plan.trigger > now:
                    plans.append(plan)

        return plans

    def _plans_for_day(
        self,
        entry: WindowDaySchedule,
        prefs: NotificationPrefs | Mapping[str, object],
        tz: ZoneInfo | None,
    ) -> list[ReminderPlan]:
        plans: list[ReminderPlan] = []
        imsak = to_minutes(entry.imsak)
        maghrib = to_minutes(entry.boundaries[const.PRAYER_MAGHRIB])
        isyak = to_minutes(entry.boundaries[const.PRAYER_ISYAK])

        if prefs.get(const.PREF_SUHOOR_REMINDER):
            lead = int(
                prefs.get(
                    const.PREF_SUHOOR_REMINDER_MINUTES,
                    const.DEFAULT_SUHOOR_REMINDER_MINUTES,
                )
            )
            plans.append(
                ReminderPlan(
                    kind=const.REMINDER_SUHOOR,
                    day=entry.day,
                    date=entry.date,
                    trigger=dt_at_minutes(entry.date, imsak - lead, tz),
                    title=const.REMINDER_TITLE_SUHOOR,
                    message=const.REMINDER_MESSAGE_SUHOOR.format(
                        minutes=lead, imsak=entry.imsak, dua=const.SUHOOR_DUA
                    ),
                )
            )

        if prefs.get(const.PREF_IFTAR_ALERT):
            plans.append(
                ReminderPlan(
                    kind=const.REMINDER_IFTAR,
                    day=entry.day,
                    date=entry.date,
                    trigger=dt_at_minutes(entry.date, maghrib, tz),
                    title=const.REMINDER_TITLE_IFTAR,
                    message=const.REMINDER_MESSAGE_IFTAR.format(dua=const.IFTAR_DUA),
                )
            )

        if prefs.get(const.PREF_TARAWIH_REMINDER):
            template = (
                const.REMINDER_MESSAGE_TARAWIH_LAST_TEN
                if entry.is_last_ten_nights
                else const.REMINDER_MESSAGE_TARAWIH
            )
            plans.append(
                ReminderPlan(
                    kind=const.REMINDER_TARAWIH,
                    day=entry.day,
                    date=entry.date,
                    trigger=dt_at_minutes(
                        entry.date, isyak + const.TARAWIH_REMINDER_OFFSET_MINUTES, tz
                    ),
                    title=const.REMINDER_TITLE_TARAWIH,
                    message=template.format(day=entry.day),
                )
            )

        if prefs.get(const.PREF_LAST_TEN_NIGHTS) and entry.is_last_ten_nights:
            emphasize = entry.is_special_night and prefs.get(
                const.PREF_LAYLATUL_QADR_EMPHASIS
            )
            plans.append(
                ReminderPlan(
                    kind=(
                        const.REMINDER_LAYLATUL_QADR
                        if emphasize
                        else const.REMINDER_LAST_TEN
                    ),
                    day=entry.day,
                    date=entry.date,
                    trigger=dt_at_minutes(
                        entry.date,
                        maghrib + const.SPECIAL_NIGHT_REMINDER_OFFSET_MINUTES,
                        tz,
                    ),
                    title=(
                        const.REMINDER_TITLE_LAYLATUL_QADR
                        if emphasize
                        else const.REMINDER_TITLE_LAST_TEN
                    ),
                    message=(
                        const.REMINDER_MESSAGE_LAYLATUL_QADR
                        if emphasize
                        else const.REMINDER_MESSAGE_LAST_TEN
                    ).format(day=entry.day),
                )
            )

        return plans
