"""Tracker Manager - Ramadan activity log lifecycle.

This manager owns every write to the tracker section of storage:
- Initialize: create the window for a governing Hijri year (idempotent per year)
- Log: fasting days, tarawih nights and per-juz Quran progress
- Mark / unmark a juz complete
- Reset: drop the tracker entirely
- Notification preferences: merge updates

Writes issued before the tracker exists are dropped with a warning rather than
raising, so automations that fire early never fail.

Event Flow:
    TrackerManager.log_*() -> coordinator._persist_and_update() -> sensors
    TrackerManager.initialize() -> emit(TRACKER_INITIALIZED) -> NotificationManager
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError

from .. import const
from ..engines.statistics_engine import get_day_log
from ..type_defs import FastingStatus, MissedReason, TarawihLocation, TarawihStatus
from ..utils.dt_utils import dt_add_days, dt_now_iso, dt_parse_date
from .base_manager import BaseManager

if TYPE_CHECKING:
    from datetime import date

    from ..engines.calendar_window_engine import WindowDetection
    from ..type_defs import NotificationPrefs, TrackerData


class NotInitialized(HomeAssistantError):
    """Raised when a log write arrives before the tracker exists."""


class TrackerManager(BaseManager):
    """Manager for the Ramadan tracker and notification preferences.

    Responsibilities:
    - Create the tracker for a window, once per governing year
    - Validate and record per-day and per-juz logs
    - Keep logged_at stable and refresh updated_at on re-logging

    NOT responsible for:
    - Statistics (computed on read by the StatisticsEngine)
    - Reminder scheduling (NotificationManager listens to our events)
    """

    # ────────────────────────────────────────────────────────────────
    # Read access
    # ────────────────────────────────────────────────────────────────

    @property
    def is_initialized(self) -> bool:
        """Return True when a tracker exists."""
        return self.tracker is not None

    def _require_tracker(self) -> TrackerData:
        tracker = self.tracker
        if tracker is None:
            raise NotInitialized(const.ERROR_TRACKER_NOT_INITIALIZED)
        return tracker

    @staticmethod
    def _check_day(tracker: TrackerData, day: int) -> None:
        total_days = int(tracker[const.DATA_TRACKER_TOTAL_DAYS])
        if not 1 <= day <= total_days:
            raise HomeAssistantError(
                const.ERROR_DAY_OUT_OF_RANGE_FMT.format(day, total_days)
            )

    # ────────────────────────────────────────────────────────────────
    # Initialization
    # ────────────────────────────────────────────────────────────────

    def initialize(
        self,
        year: int,
        start_date: date,
        total_days: int = const.RAMADAN_DEFAULT_TOTAL_DAYS,
        end_date: date | None = None,
        force: bool = False,
    ) -> TrackerData:
        """Create the tracker for a governing year.

        Calling again for the year already tracked returns the existing tracker
        untouched unless force is set. A different year replaces it.

        Args:
            year: Governing Hijri year.
            start_date: Gregorian date of ordinal day 1.
            total_days: Length of the window.
            end_date: Gregorian end (derived from total_days when omitted).
            force: Replace the tracker even when the year matches.
        """
        existing = self.tracker
        if (
            existing is not None
            and int(existing.get(const.DATA_TRACKER_YEAR, 0)) == year
            and not force
        ):
            const.LOGGER.debug(
                "DEBUG: Tracker already initialized for year %s (%s fasting logs)",
                year,
                len(existing.get(const.DATA_TRACKER_FASTING_LOG, {})),
            )
            return existing

        if end_date is None:
            end_date = dt_add_days(start_date, total_days - 1)

        tracker: TrackerData = {
            const.DATA_TRACKER_YEAR: year,
            const.DATA_TRACKER_START_DATE: start_date.isoformat(),
            const.DATA_TRACKER_END_DATE: end_date.isoformat(),
            const.DATA_TRACKER_TOTAL_DAYS: total_days,
            const.DATA_TRACKER_FASTING_LOG: {},
            const.DATA_TRACKER_TARAWIH_LOG: {},
            const.DATA_TRACKER_QURAN_LOG: {},
            const.DATA_TRACKER_CREATED_AT: dt_now_iso(),
        }  # type: ignore[misc]
        self.coordinator._data[const.DATA_TRACKER] = tracker
        const.LOGGER.info(
            "INFO: Initialized Ramadan tracker for year %s (%s, %s days)",
            year,
            start_date,
            total_days,
        )
        self.coordinator._persist_and_update()
        self.emit(const.SIGNAL_SUFFIX_TRACKER_INITIALIZED, year=year)
        return tracker

    def initialize_from_detection(
        self, detection: WindowDetection, force: bool = False
    ) -> TrackerData | None:
        """Initialize from a window detection that knows its start date."""
        if detection.start_date is None or not detection.governing_year:
            const.LOGGER.warning(
                "WARNING: Cannot initialize tracker without a detected start date"
            )
            return None
        return self.initialize(
            detection.governing_year,
            detection.start_date,
            detection.total_days,
            detection.end_date,
            force=force,
        )

    def reset(self) -> None:
        """Drop the tracker and all its logs."""
        if self.tracker is None:
            const.LOGGER.debug("DEBUG: Reset requested but no tracker exists")
            return
        self.coordinator._data[const.DATA_TRACKER] = None
        const.LOGGER.warning("WARNING: Ramadan tracker reset; all logs removed")
        self.coordinator._persist_and_update()
        self.emit(const.SIGNAL_SUFFIX_TRACKER_RESET)

    # ────────────────────────────────────────────────────────────────
    # Log writes
    # ────────────────────────────────────────────────────────────────

    def _write_log(
        self, collection: str, key: int, fields: dict[str, Any]
    ) -> dict[str, Any]:
        """Insert or update one log entry in place."""
        tracker = self._require_tracker()
        logs: dict[str, Any] = tracker.setdefault(collection, {})  # type: ignore[misc]
        now_iso = dt_now_iso()
        entry = get_day_log(logs, key)
        if entry is None:
            entry = {const.DATA_LOG_LOGGED_AT: now_iso}
        else:
            entry = dict(entry)
            logs.pop(key, None)
        entry.update(fields)
        entry[const.DATA_LOG_UPDATED_AT] = now_iso
        logs[str(key)] = entry
        self.coordinator._persist_and_update()
        return entry

    def log_fasting(
        self,
        day: int,
        status: str,
        missed_reason: str | None = None,
        notes: str | None = None,
    ) -> dict[str, Any] | None:
        """Record the fasting status of an ordinal day.

        Returns:
            The stored log, or None when the tracker is not initialized.
        """
        try:
            tracker = self._require_tracker()
        except NotInitialized as err:
            const.LOGGER.warning("WARNING: Dropping fasting log for day %s: %s", day, err)
            return None
        self._check_day(tracker, day)

        try:
            parsed_status = FastingStatus(status)
            parsed_reason = MissedReason(missed_reason) if missed_reason else None
        except ValueError as err:
            raise HomeAssistantError(f"Invalid fasting log: {err}") from err

        entry = self._write_log(
            const.DATA_TRACKER_FASTING_LOG,
            day,
            {
                const.DATA_LOG_DAY: day,
                const.DATA_LOG_STATUS: parsed_status.value,
                const.DATA_LOG_MISSED_REASON: (
                    parsed_reason.value if parsed_reason else None
                ),
                const.DATA_LOG_NOTES: notes,
            },
        )
        const.LOGGER.info(
            "INFO: Fasting day %s logged as %s", day, parsed_status.value
        )
        return entry

    def log_tarawih(
        self,
        day: int,
        prayed: bool,
        location: str | None = None,
        mosque_name: str | None = None,
    ) -> dict[str, Any] | None:
        """Record whether tarawih was prayed on an ordinal night."""
        try:
            tracker = self._require_tracker()
        except NotInitialized as err:
            const.LOGGER.warning("WARNING: Dropping tarawih log for day %s: %s", day, err)
            return None
        self._check_day(tracker, day)

        try:
            parsed_location = TarawihLocation(location) if location else None
        except ValueError as err:
            raise HomeAssistantError(f"Invalid tarawih location: {err}") from err

        status = TarawihStatus.PRAYED if prayed else TarawihStatus.MISSED
        entry = self._write_log(
            const.DATA_TRACKER_TARAWIH_LOG,
            day,
            {
                const.DATA_LOG_DAY: day,
                const.DATA_LOG_STATUS: status.value,
                const.DATA_LOG_LOCATION: (
                    parsed_location.value if parsed_location and prayed else None
                ),
                const.DATA_LOG_MOSQUE_NAME: mosque_name if prayed else None,
            },
        )
        const.LOGGER.info("INFO: Tarawih night %s logged as %s", day, status.value)
        return entry

    @staticmethod
    def _check_juz(juz: int) -> None:
        if not 1 <= juz <= const.TOTAL_JUZ:
            raise HomeAssistantError(
                const.ERROR_JUZ_OUT_OF_RANGE_FMT.format(juz, const.TOTAL_JUZ)
            )

    def log_quran_progress(self, juz: int, pages_read: int) -> dict[str, Any] | None:
        """Record pages read in a juz; 20 pages completes it.

        A juz already marked complete stays complete.
        """
        try:
            tracker = self._require_tracker()
        except NotInitialized as err:
            const.LOGGER.warning("WARNING: Dropping quran log for juz %s: %s", juz, err)
            return None
        self._check_juz(juz)
        if not 0 <= pages_read <= const.PAGES_PER_JUZ:
            raise HomeAssistantError(
                const.ERROR_PAGES_OUT_OF_RANGE_FMT.format(
                    pages_read, const.PAGES_PER_JUZ
                )
            )

        existing = get_day_log(tracker[const.DATA_TRACKER_QURAN_LOG], juz) or {}
        already_complete = existing.get(const.DATA_LOG_STATUS) == (
            const.QURAN_STATUS_COMPLETED
        )
        completed = already_complete or pages_read >= const.PAGES_PER_JUZ
        completed_at = existing.get(const.DATA_LOG_COMPLETED_AT)
        if completed and not completed_at:
            completed_at = dt_now_iso()

        entry = self._write_log(
            const.DATA_TRACKER_QURAN_LOG,
            juz,
            {
                const.DATA_LOG_JUZ: juz,
                const.DATA_LOG_PAGES_READ: pages_read,
                const.DATA_LOG_STATUS: (
                    const.QURAN_STATUS_COMPLETED
                    if completed
                    else const.QURAN_STATUS_IN_PROGRESS
                ),
                const.DATA_LOG_COMPLETED_AT: completed_at if completed else None,
            },
        )
        const.LOGGER.info(
            "INFO: Juz %s progress logged: %s pages (completed=%s)",
            juz,
            pages_read,
            completed,
        )
        return entry

    def mark_juz_complete(self, juz: int) -> dict[str, Any] | None:
        """Mark a juz complete, keeping any recorded page count."""
        try:
            tracker = self._require_tracker()
        except NotInitialized as err:
            const.LOGGER.warning("WARNING: Dropping juz %s completion: %s", juz, err)
            return None
        self._check_juz(juz)

        existing = get_day_log(tracker[const.DATA_TRACKER_QURAN_LOG], juz) or {}
        entry = self._write_log(
            const.DATA_TRACKER_QURAN_LOG,
            juz,
            {
                const.DATA_LOG_JUZ: juz,
                const.DATA_LOG_PAGES_READ: existing.get(
                    const.DATA_LOG_PAGES_READ, const.PAGES_PER_JUZ
                ),
                const.DATA_LOG_STATUS: const.QURAN_STATUS_COMPLETED,
                const.DATA_LOG_COMPLETED_AT: dt_now_iso(),
            },
        )
        const.LOGGER.info("INFO: Juz %s marked complete", juz)
        return entry

    def unmark_juz_complete(self, juz: int) -> dict[str, Any] | None:
        """Return a completed juz to in-progress. Unknown juz are ignored."""
        try:
            tracker = self._require_tracker()
        except NotInitialized as err:
            const.LOGGER.warning("WARNING: Dropping juz %s unmark: %s", juz, err)
            return None
        self._check_juz(juz)

        if get_day_log(tracker[const.DATA_TRACKER_QURAN_LOG], juz) is None:
            const.LOGGER.warning("WARNING: Cannot unmark juz %s: not logged", juz)
            return None

        entry = self._write_log(
            const.DATA_TRACKER_QURAN_LOG,
            juz,
            {
                const.DATA_LOG_STATUS: const.QURAN_STATUS_IN_PROGRESS,
                const.DATA_LOG_COMPLETED_AT: None,
            },
        )
        const.LOGGER.info("INFO: Juz %s unmarked", juz)
        return entry

    # ────────────────────────────────────────────────────────────────
    # Notification preferences
    # ────────────────────────────────────────────────────────────────

    @property
    def notification_prefs(self) -> NotificationPrefs:
        """Return stored preferences merged over the defaults."""
        stored = self.coordinator._data.get(const.DATA_NOTIFICATION_PREFS) or {}
        return {**const.DEFAULT_NOTIFICATION_PREFS, **stored}  # type: ignore[typeddict-item]

    def update_notification_prefs(self, **updates: Any) -> NotificationPrefs:
        """Merge preference updates, ignoring unknown keys."""
        prefs = dict(self.notification_prefs)
        for key, value in updates.items():
            if key not in const.DEFAULT_NOTIFICATION_PREFS:
                const.LOGGER.warning("WARNING: Ignoring unknown preference '%s'", key)
                continue
            if value is not None:
                prefs[key] = value

        minutes = int(prefs[const.PREF_SUHOOR_REMINDER_MINUTES])
        if minutes not in const.SUHOOR_REMINDER_OPTIONS:
            raise HomeAssistantError(
                f"Suhoor reminder must be one of {const.SUHOOR_REMINDER_OPTIONS} minutes"
            )

        self.coordinator._data[const.DATA_NOTIFICATION_PREFS] = prefs
        const.LOGGER.info("INFO: Notification preferences updated: %s", prefs)
        self.coordinator._persist()
        self.emit(const.SIGNAL_SUFFIX_PREFS_UPDATED, **prefs)
        return prefs  # type: ignore[return-value]

    # ────────────────────────────────────────────────────────────────
    # Helpers
    # ────────────────────────────────────────────────────────────────

    def start_date(self) -> date | None:
        """Return the tracked window's start date."""
        tracker = self.tracker
        if tracker is None:
            return None
        return dt_parse_date(tracker.get(const.DATA_TRACKER_START_DATE))
