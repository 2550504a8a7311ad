# File: coordinator.py
"""Coordinator for the Muslim Companion integration.

Fetches today's prayer times from both upstream providers and the Hijri date
from the lunar-calendar oracle, reconciles them into one trusted boundary set,
detects the Ramadan window and exposes the read queries used by entities,
services and the notification manager.

Upstream failures never surface here as exceptions: every client returns a
FetchResult and the coordinator picks the documented fallback (last-known
times, then the regional defaults; "outside the window" for detection).
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from . import const
from .engines import (
    AggregateStats,
    CalendarWindowDetector,
    CountdownProjector,
    CountdownResult,
    NextBoundary,
    PeriodDetector,
    PeriodResult,
    ReconciledDay,
    ScheduleEngine,
    StatisticsEngine,
    TimeReconciler,
    WindowDaySchedule,
    WindowDetection,
)
from .managers import NotificationManager, TrackerManager
from .utils.dt_utils import (
    dt_add_days,
    dt_days_between,
    dt_now_local,
    dt_today_local,
)

if TYPE_CHECKING:
    from datetime import date, datetime

    from .api import AladhanClient, AuthorityTimetableClient, FetchResult
    from .engines import HijriDate
    from .storage_manager import MuslimCompanionStorageManager
    from .type_defs import BoundaryTimes


class MuslimCompanionCoordinator(DataUpdateCoordinator):
    """Coordinator for Muslim Companion integration.

    Owns the engines, the two managers and the in-memory storage document.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        storage_manager: MuslimCompanionStorageManager,
        aladhan: AladhanClient,
        authority: AuthorityTimetableClient,
    ) -> None:
        """Initialize the MuslimCompanionCoordinator."""
        update_interval_minutes = config_entry.options.get(
            const.CONF_UPDATE_INTERVAL, const.DEFAULT_UPDATE_INTERVAL
        )

        super().__init__(
            hass,
            const.LOGGER,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=timedelta(minutes=update_interval_minutes),
        )
        self.config_entry = config_entry
        self.storage_manager = storage_manager
        self.aladhan = aladhan
        self.authority = authority
        self._data: dict[str, Any] = storage_manager.data

        # Engines (stateless)
        self.reconciler = TimeReconciler()
        self.period_detector = PeriodDetector()
        self.window_detector = CalendarWindowDetector()
        self.statistics = StatisticsEngine()
        self.countdown = CountdownProjector()
        self.schedule_engine = ScheduleEngine(self.reconciler)

        # Managers
        self.tracker_manager = TrackerManager(hass, self)
        self.notification_manager = NotificationManager(
            hass, self, self.schedule_engine
        )

        # Latest fetch results
        self.today: date | None = None
        self.today_times: ReconciledDay | None = None
        self.hijri: HijriDate | None = None
        self.detection: WindowDetection = WindowDetection()

    # -------------------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------------------

    @property
    def notify_service(self) -> str:
        """Return the configured notify service (may be empty)."""
        return self.config_entry.options.get(
            const.CONF_NOTIFY_SERVICE, const.DEFAULT_NOTIFY_SERVICE
        )

    @property
    def last_known_times(self) -> BoundaryTimes | None:
        """Return the last successfully reconciled boundary set, if any."""
        stored = self._data.get(const.DATA_LAST_KNOWN_TIMES)
        if not stored:
            return None
        return stored.get(const.DATA_LAST_KNOWN_VALUES)

    # -------------------------------------------------------------------------------------
    # Update
    # -------------------------------------------------------------------------------------

    async def _async_update_data(self) -> dict[str, Any]:
        """Periodic update."""
        try:
            today = dt_today_local()
            calculated, authority, hijri = await asyncio.gather(
                self.aladhan.async_fetch_timings(today),
                self.authority.async_fetch_day(today),
                self.aladhan.async_fetch_hijri_date(today),
            )

            self.today = today
            self.today_times = self._reconcile_today(today, calculated, authority)
            self.hijri = hijri.value if hijri.ok else None
            self.detection = self.window_detector.detect(today, self.hijri)
            self._auto_initialize_tracker(self.detection)

            return self._snapshot()
        except Exception as err:  # pylint: disable=broad-exception-caught
            raise UpdateFailed(f"Error updating Muslim Companion data: {err}") from err

    def _fallback_set(self) -> tuple[BoundaryTimes, str]:
        last_known = self.last_known_times
        if last_known:
            return dict(last_known), const.SOURCE_LAST_KNOWN
        return dict(const.FALLBACK_TIMES), const.SOURCE_FALLBACK

    def _reconcile_today(
        self,
        today: date,
        calculated: FetchResult[BoundaryTimes],
        authority: FetchResult[BoundaryTimes],
    ) -> ReconciledDay:
        """Reconcile today's times and remember them when any source answered."""
        fallback, fallback_source = self._fallback_set()

        if not calculated.ok and not authority.ok:
            const.LOGGER.warning(
                "WARNING: Both time sources unavailable (%s, %s); using %s times",
                calculated.error,
                authority.error,
                fallback_source,
            )

        resolved = self.reconciler.reconcile_day(
            today,
            calculated.value if calculated.ok else None,
            authority.value if authority.ok else None,
            fallback,
            fallback_source,
        )

        if calculated.ok or authority.ok:
            self._remember_times(today, resolved)
        return resolved

    def _remember_times(self, today: date, resolved: ReconciledDay) -> None:
        times = resolved.as_dict()
        stored = self._data.get(const.DATA_LAST_KNOWN_TIMES) or {}
        if (
            stored.get(const.DATA_LAST_KNOWN_DATE) == today.isoformat()
            and stored.get(const.DATA_LAST_KNOWN_VALUES) == times
        ):
            return
        self._data[const.DATA_LAST_KNOWN_TIMES] = {
            const.DATA_LAST_KNOWN_DATE: today.isoformat(),
            const.DATA_LAST_KNOWN_VALUES: times,
        }
        self._persist()

    def _auto_initialize_tracker(self, detection: WindowDetection) -> None:
        """Create the tracker once per governing year when the window starts."""
        if not detection.is_in_window or detection.start_date is None:
            return

        flags: dict[str, Any] = self._data.setdefault(const.DATA_FLAGS, {})
        if flags.get(const.DATA_FLAG_AUTO_INITIALIZED_YEAR) == detection.governing_year:
            return

        if self.tracker_manager.initialize_from_detection(detection) is not None:
            flags[const.DATA_FLAG_AUTO_INITIALIZED_YEAR] = detection.governing_year
            self._persist()

    def _snapshot(self) -> dict[str, Any]:
        times = self.today_times
        return {
            "date": self.today.isoformat() if self.today else None,
            "times": times.as_dict() if times else None,
            "sources": dict(times.sources) if times else {},
            "low_confidence": times.low_confidence if times else True,
            "detection": self.detection.as_dict(),
        }

    # -------------------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------------------

    def _current_times(self) -> BoundaryTimes:
        """Return today's reconciled times, else last-known, else regional."""
        if self.today_times is not None:
            return self.today_times.as_dict()
        fallback, _ = self._fallback_set()
        return fallback

    def get_detection(self) -> WindowDetection:
        """Return the latest window detection."""
        return self.detection

    def get_current_period(self, now: datetime | None = None) -> PeriodResult:
        """Classify now into a prayer period."""
        now = now or dt_now_local()
        return self.period_detector.classify(now, self._current_times())

    def get_next_prayer(self, now: datetime | None = None) -> NextBoundary:
        """Return the next boundary after now."""
        now = now or dt_now_local()
        return self.period_detector.next_boundary(now, self._current_times())

    def get_countdown(self, now: datetime | None = None) -> CountdownResult:
        """Return the Imsak / Maghrib countdown."""
        now = now or dt_now_local()
        times = self._current_times()
        return self.countdown.project(
            now, times[const.PRAYER_IMSAK], times[const.PRAYER_MAGHRIB]
        )

    def current_tracker_day(self, today: date | None = None) -> int:
        """Return today's ordinal day in the tracked window (0 before it starts)."""
        tracker = self.tracker_manager.tracker
        start = self.tracker_manager.start_date()
        if tracker is None or start is None:
            return 0
        today = today or dt_today_local()
        day = dt_days_between(start, today) + 1
        return max(0, min(day, int(tracker[const.DATA_TRACKER_TOTAL_DAYS])))

    def get_stats(self, today: date | None = None) -> AggregateStats | None:
        """Return AggregateStats, or None before the tracker exists."""
        tracker = self.tracker_manager.tracker
        if tracker is None:
            const.LOGGER.warning(
                "WARNING: Stats requested before tracker initialization"
            )
            return None
        return self.statistics.compute(tracker, self.current_tracker_day(today))

    def get_share_summary(self, today: date | None = None) -> str | None:
        """Return a plain-text progress summary, or None without a tracker."""
        stats = self.get_stats(today)
        tracker = self.tracker_manager.tracker
        if stats is None or tracker is None:
            return None
        return self.statistics.format_share_summary(
            stats, int(tracker[const.DATA_TRACKER_YEAR])
        )

    async def async_get_schedule(
        self, first_day: int = 1, last_day: int | None = None
    ) -> list[WindowDaySchedule]:
        """Build the window schedule for ordinal days first_day..last_day.

        Fetches the provider calendars for every Gregorian month the range
        touches. Months that fail fall back to the last-known or regional times.
        """
        tracker = self.tracker_manager.tracker
        start = self.tracker_manager.start_date()
        if tracker is None or start is None:
            return []

        total_days = int(tracker[const.DATA_TRACKER_TOTAL_DAYS])
        last = min(total_days, last_day if last_day is not None else total_days)
        months = sorted(
            {
                (day.year, day.month)
                for day in (
                    dt_add_days(start, offset)
                    for offset in range(max(1, first_day) - 1, last)
                )
            }
        )

        results = await asyncio.gather(
            *(self.aladhan.async_fetch_calendar(year, month) for year, month in months),
            *(self.authority.async_fetch_month(year, month) for year, month in months),
        )
        calculated_by_date: dict[date, BoundaryTimes] = {}
        authority_by_date: dict[date, BoundaryTimes] = {}
        for index, result in enumerate(results):
            if not result.ok or not result.value:
                continue
            target = calculated_by_date if index < len(months) else authority_by_date
            target.update(result.value)

        fallback, _ = self._fallback_set()
        return self.schedule_engine.build_schedule(
            start,
            total_days,
            calculated_by_date,
            authority_by_date,
            fallback,
            first_day=first_day,
            last_day=last,
        )

    # -------------------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------------------

    def _persist(self) -> None:
        """Save to persistent storage."""
        self.storage_manager.set_data(self._data)
        self.hass.add_job(self.storage_manager.async_save)

    def _persist_and_update(self) -> None:
        """Save and push the new state to entities."""
        self._persist()
        self.async_set_updated_data(self._snapshot())
