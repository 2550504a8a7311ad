"""Calendar Window Engine - is today inside, approaching or outside Ramadan?

The lunar calendar reading comes from an upstream oracle and is treated as
opaque. An official override table (start/end dates announced by the local
authority) supersedes the computed reading whenever it has an entry for the
governing Hijri year or the year after it.

Every call is a pure function of today's date and the lunar reading. Nothing
is persisted between calls.

Design Principles:
    - Best-effort: a missing lunar reading yields "not inside, not approaching"
    - Unknown month (0) is never treated as the target month
    - Override path: ordinal day = today - start + 1
    - Computed path: ordinal day = lunar day of month
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import dt_add_days, dt_days_between, dt_parse_date

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import date


@dataclass(frozen=True, slots=True)
class HijriDate:
    """A reading from the lunar-calendar oracle."""

    day: int
    month_name: str
    year: int


@dataclass(frozen=True, slots=True)
class WindowDetection:
    """Result of one detection query.

    Attributes:
        is_in_window: Today is inside the tracked month
        is_approaching: Not inside, and the start is within the threshold
        current_day: 1-based ordinal day when inside, else 0
        days_until_start: 0 when inside, days to go when known, else -1
        governing_year: Hijri year the window belongs to, 0 when unknown
        start_date: Gregorian start, when known
        end_date: Gregorian end, when known
        total_days: Number of days in the window
        hijri_month: Resolved month number (0 when unknown)
        hijri_month_name: Month name as delivered by the oracle
        from_override: True when the official table decided the result
    """

    is_in_window: bool = False
    is_approaching: bool = False
    current_day: int = 0
    days_until_start: int = const.DAYS_UNTIL_UNKNOWN
    governing_year: int = 0
    start_date: date | None = None
    end_date: date | None = None
    total_days: int = const.RAMADAN_DEFAULT_TOTAL_DAYS
    hijri_month: int = const.HIJRI_MONTH_UNKNOWN
    hijri_month_name: str = ""
    from_override: bool = False

    @property
    def state(self) -> str:
        """Return active / approaching / inactive."""
        if self.is_in_window:
            return const.RAMADAN_STATE_ACTIVE
        if self.is_approaching:
            return const.RAMADAN_STATE_APPROACHING
        return const.RAMADAN_STATE_INACTIVE

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly dict (dates as ISO strings)."""
        result = asdict(self)
        result["start_date"] = self.start_date.isoformat() if self.start_date else None
        result["end_date"] = self.end_date.isoformat() if self.end_date else None
        return result


def resolve_hijri_month(name: str | None) -> int:
    """Map a transliterated Hijri month name to its number.

    Tries, in order:
        1. Exact match against known transliterations
        2. Case-insensitive substring match in either direction
        3. Prefix heuristics for Ramadan and its neighbours

    Unresolvable names log a warning and return 0 (unknown).

    Examples:
        resolve_hijri_month("Ramaḍān") → 9
        resolve_hijri_month("RAMADHAN") → 9
        resolve_hijri_month("Sha'baan") → 8
        resolve_hijri_month("Nonsense") → 0
    """
    if not name or not name.strip():
        const.LOGGER.warning("WARNING: Empty Hijri month name")
        return const.HIJRI_MONTH_UNKNOWN

    cleaned = name.strip()
    if cleaned in const.HIJRI_MONTH_NAMES:
        return const.HIJRI_MONTH_NAMES[cleaned]

    lowered = cleaned.lower()
    for known, number in const.HIJRI_MONTH_NAMES.items():
        known_lower = known.lower()
        if known_lower in lowered or lowered in known_lower:
            return number

    for prefix, number in const.HIJRI_MONTH_PREFIXES:
        if lowered.startswith(prefix):
            return number

    const.LOGGER.warning("WARNING: Could not resolve Hijri month name '%s'", name)
    return const.HIJRI_MONTH_UNKNOWN


class CalendarWindowDetector:
    """Stateless detector for the Ramadan window.

    Example:
        detector = CalendarWindowDetector()
        result = detector.detect(date(2026, 2, 18), HijriDate(29, "Shaʿbān", 1447))
        result.is_approaching  # True, official start is tomorrow
        result.days_until_start  # 1
    """

    def __init__(
        self,
        overrides: Mapping[int, Mapping[str, str]] | None = None,
        approaching_threshold_days: int = const.APPROACHING_THRESHOLD_DAYS,
    ) -> None:
        """Initialize the detector.

        Args:
            overrides: Hijri year → {"start": ISO date, "end": ISO date}.
            approaching_threshold_days: How far ahead "approaching" reaches.
        """
        self.overrides = (
            const.OFFICIAL_RAMADAN_DATES if overrides is None else overrides
        )
        self.approaching_threshold_days = approaching_threshold_days

    def detect(self, today: date, hijri: HijriDate | None) -> WindowDetection:
        """Classify today relative to the Ramadan window.

        Args:
            today: Local Gregorian date.
            hijri: Lunar reading for today, or None when the oracle failed.
        """
        if hijri is None:
            const.LOGGER.debug(
                "DEBUG: No Hijri reading for %s, assuming outside the window", today
            )
            return WindowDetection()

        month = resolve_hijri_month(hijri.month_name)
        override = self._find_override(hijri.year)
        if override is not None:
            year, start, end = override
            detection = self._detect_from_override(today, year, start, end, hijri, month)
        else:
            detection = self._detect_from_lunar(today, hijri, month)

        const.LOGGER.debug(
            "DEBUG: Window detection for %s: state=%s day=%s days_until=%s override=%s",
            today,
            detection.state,
            detection.current_day,
            detection.days_until_start,
            detection.from_override,
        )
        return detection

    # ────────────────────────────────────────────────────────────────
    # Override Path
    # ────────────────────────────────────────────────────────────────

    def _find_override(self, hijri_year: int) -> tuple[int, date, date] | None:
        """Look up the governing year, then the following year."""
        for year in (hijri_year, hijri_year + 1):
            entry = self.overrides.get(year)
            if not entry:
                continue
            start = dt_parse_date(entry.get("start"))
            end = dt_parse_date(entry.get("end"))
            if start is None or end is None or end < start:
                const.LOGGER.warning(
                    "WARNING: Ignoring malformed override for Hijri year %s: %s",
                    year,
                    entry,
                )
                continue
            return year, start, end
        return None

    def _detect_from_override(
        self,
        today: date,
        year: int,
        start: date,
        end: date,
        hijri: HijriDate,
        month: int,
    ) -> WindowDetection:
        is_in = start <= today <= end
        days_to_start = dt_days_between(today, start)
        is_approaching = (
            not is_in and 0 < days_to_start <= self.approaching_threshold_days
        )

        if is_in:
            days_until = 0
        elif days_to_start > 0:
            days_until = days_to_start
        else:
            days_until = const.DAYS_UNTIL_UNKNOWN

        return WindowDetection(
            is_in_window=is_in,
            is_approaching=is_approaching,
            current_day=dt_days_between(start, today) + 1 if is_in else 0,
            days_until_start=days_until,
            governing_year=year,
            start_date=start,
            end_date=end,
            total_days=dt_days_between(start, end) + 1,
            hijri_month=month,
            hijri_month_name=hijri.month_name,
            from_override=True,
        )

    # ────────────────────────────────────────────────────────────────
    # Computed Lunar Path
    # ────────────────────────────────────────────────────────────────

    def _detect_from_lunar(
        self, today: date, hijri: HijriDate, month: int
    ) -> WindowDetection:
        total_days = const.RAMADAN_DEFAULT_TOTAL_DAYS

        if month == const.RAMADAN_HIJRI_MONTH:
            start = dt_add_days(today, -(hijri.day - 1))
            return WindowDetection(
                is_in_window=True,
                current_day=hijri.day,
                days_until_start=0,
                governing_year=hijri.year,
                start_date=start,
                end_date=dt_add_days(start, total_days - 1),
                total_days=total_days,
                hijri_month=month,
                hijri_month_name=hijri.month_name,
            )

        if month == const.SHABAN_HIJRI_MONTH:
            days_until = max(1, const.HIJRI_MONTH_DAYS - hijri.day)
            start = dt_add_days(today, days_until)
            return WindowDetection(
                is_approaching=days_until <= self.approaching_threshold_days,
                days_until_start=days_until,
                governing_year=hijri.year,
                start_date=start,
                end_date=dt_add_days(start, total_days - 1),
                total_days=total_days,
                hijri_month=month,
                hijri_month_name=hijri.month_name,
            )

        return WindowDetection(
            governing_year=hijri.year,
            hijri_month=month,
            hijri_month_name=hijri.month_name,
        )
