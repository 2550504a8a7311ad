"""Type definitions for Muslim Companion data structures.

HYBRID APPROACH (TypedDict + dict[str, Any])
============================================

1. **TypedDict for STATIC structures** (fixed keys known at design time):
   - Persisted tracker records: FastingDayLog, TarawihDayLog, QuranJuzLog
   - Preferences: NotificationPrefs

2. **dict[str, Any] for DYNAMIC structures** (keys determined at runtime):
   - Ordinal-day keyed log collections: fasting_log[str(day)]
   - Raw provider payloads

3. **StrEnum for CLOSED VOCABULARIES**: every tracked activity has its own
   status enumeration. Consumers match on them exhaustively so a new status
   shows up at every consumption site.

Engine results (detections, reconciled times, stats) are frozen dataclasses
defined next to the engine that produces them.

IMPORTANT: This file must NOT import from coordinator.py or any manager to
avoid circular dependencies. Only import from const.py and typing.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime checks (.get() defaults,
validation) remain in managers and services.
"""

from enum import StrEnum
from typing import Any, NotRequired, TypedDict

from . import const

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

ClockString = str  # "HH:MM", zero-padded 24-hour
ISODatetime = str  # ISO 8601 datetime string "2026-02-19T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-02-19"
OrdinalDay = int  # 1-based day within the tracked window

# Boundary key ("subuh", "maghrib", ...) -> "HH:MM"
BoundaryTimes = dict[str, ClockString]


# =============================================================================
# Closed Status Vocabularies
# =============================================================================


class FastingStatus(StrEnum):
    """Status of one fasting day."""

    FASTED = const.FASTING_STATUS_FASTED
    MISSED = const.FASTING_STATUS_MISSED
    EXCUSED = const.FASTING_STATUS_EXCUSED
    NOT_LOGGED = const.FASTING_STATUS_NOT_LOGGED


class MissedReason(StrEnum):
    """Why a fast was missed."""

    ILLNESS = const.MISSED_REASON_ILLNESS
    TRAVEL = const.MISSED_REASON_TRAVEL
    MENSTRUATION = const.MISSED_REASON_MENSTRUATION
    OTHER = const.MISSED_REASON_OTHER


class TarawihStatus(StrEnum):
    """Status of one night prayer."""

    PRAYED = const.TARAWIH_STATUS_PRAYED
    MISSED = const.TARAWIH_STATUS_MISSED


class TarawihLocation(StrEnum):
    """Where the night prayer was performed."""

    MOSQUE = const.TARAWIH_LOCATION_MOSQUE
    HOME = const.TARAWIH_LOCATION_HOME


class QuranStatus(StrEnum):
    """Reading progress for one juz."""

    COMPLETED = const.QURAN_STATUS_COMPLETED
    IN_PROGRESS = const.QURAN_STATUS_IN_PROGRESS


class PrayerPeriod(StrEnum):
    """Named periods a moment of the day can fall into."""

    SUBUH = const.PRAYER_SUBUH
    ZOHOR = const.PRAYER_ZOHOR
    ASAR = const.PRAYER_ASAR
    MAGHRIB = const.PRAYER_MAGHRIB
    ISYAK = const.PRAYER_ISYAK
    NONE = const.PRAYER_NONE


class CountdownTarget(StrEnum):
    """Which of the two daily boundaries a countdown points at."""

    FIRST = "first"
    SECOND = "second"


# =============================================================================
# Persisted Tracker Records
# =============================================================================


class FastingDayLog(TypedDict):
    """One ordinal day of the fasting log."""

    day: OrdinalDay
    status: str  # FastingStatus value
    missed_reason: NotRequired[str | None]  # MissedReason value
    notes: NotRequired[str | None]
    logged_at: ISODatetime
    updated_at: ISODatetime


class TarawihDayLog(TypedDict):
    """One ordinal night of the tarawih log."""

    day: OrdinalDay
    status: str  # TarawihStatus value
    location: NotRequired[str | None]  # TarawihLocation value
    mosque_name: NotRequired[str | None]
    logged_at: ISODatetime
    updated_at: ISODatetime


class QuranJuzLog(TypedDict):
    """Reading progress for one juz (1..30)."""

    juz: int
    status: str  # QuranStatus value
    pages_read: int
    logged_at: ISODatetime
    updated_at: ISODatetime


class TrackerData(TypedDict):
    """The tracked window and its log collections.

    Log collections are keyed by str(ordinal day) / str(juz) because the
    storage layer serializes to JSON.
    """

    year: int
    start_date: ISODate
    end_date: ISODate
    total_days: int
    fasting_log: dict[str, FastingDayLog]
    tarawih_log: dict[str, TarawihDayLog]
    quran_log: dict[str, QuranJuzLog]
    created_at: ISODatetime


class NotificationPrefs(TypedDict):
    """Which reminders to schedule."""

    suhoor_reminder: bool
    suhoor_reminder_minutes: int
    iftar_alert: bool
    tarawih_reminder: bool
    last_ten_nights: bool
    laylatul_qadr_emphasis: bool


class ScheduledReminder(TypedDict):
    """Metadata about one registered reminder."""

    kind: str
    day: OrdinalDay
    date: ISODate
    scheduled_for: ISODatetime


# Raw upstream payloads stay untyped
RawPayload = dict[str, Any]
