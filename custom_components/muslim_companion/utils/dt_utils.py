# File: utils/dt_utils.py
"""Date and time utilities for Muslim Companion.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed.
   Uses standard library: datetime, zoneinfo, dateutil.

Functions:
    - dt_today_local: Get today's date in local timezone
    - dt_now_local: Get current datetime in local timezone
    - dt_now_utc: Get current datetime in UTC
    - dt_now_iso: Get current datetime as ISO string
    - as_local: Convert a datetime to the local timezone
    - dt_parse_date: Parse ISO, provider and authority date strings
    - dt_days_between: Whole days from one date to another
    - dt_add_days: Calendar-safe day arithmetic
    - dt_at_minutes: Build a local datetime from a date and a clock time
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta
import logging
from zoneinfo import ZoneInfo

# Third-party date utilities (no HA dependency)
from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

# Formats used by the upstream providers
DATE_FORMAT_AUTHORITY = "%d/%m/%Y"  # "19/2/2026"
DATE_FORMAT_PROVIDER = "%d-%m-%Y"  # "19-02-2026"


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this during integration setup to configure the user's timezone.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone.

    Returns:
        The configured default timezone (ZoneInfo object)
    """
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`.

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Today's date in the specified timezone.
    """
    return dt_now_local(tz).date()


def dt_now_local(tz: ZoneInfo | None = None) -> datetime:
    """Return the current datetime in local timezone (timezone-aware).

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Current datetime in the specified timezone.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info)


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


def dt_now_iso() -> str:
    """Return the current UTC datetime as an ISO 8601 string."""
    return dt_now_utc().isoformat()


def as_local(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a datetime to the local timezone.

    Naive datetimes are assumed to be UTC.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        dt_obj = dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(tz_info)


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse_date(date_str: str | None) -> date | None:
    """Safely parse a date string into a `datetime.date`.

    Accepts formats:
    - "2026-02-19" (ISO format)
    - "19/2/2026" (authority timetable, day first)
    - "19-02-2026" (provider API, day first)
    - Anything else dateutil can read, interpreted day first

    Args:
        date_str: Date string to parse, or None

    Returns:
        datetime.date or None if parsing fails.
    """
    if not date_str or not isinstance(date_str, str):
        return None

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    for fmt in (DATE_FORMAT_AUTHORITY, DATE_FORMAT_PROVIDER):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    try:
        return dateutil_parser.parse(date_str, dayfirst=True).date()
    except (ValueError, OverflowError):
        _LOGGER.debug("Unparseable date string: %s", date_str)
        return None


# ==============================================================================
# Arithmetic
# ==============================================================================


def dt_days_between(start: date, end: date) -> int:
    """Return the whole number of days from start to end (negative if end is earlier).

    Examples:
        dt_days_between(date(2026, 2, 19), date(2026, 2, 23)) → 4
        dt_days_between(date(2026, 2, 19), date(2026, 2, 18)) → -1
    """
    return (end - start).days


def dt_add_days(base: date, days: int) -> date:
    """Return base shifted by a number of calendar days."""
    return base + relativedelta(days=days)


def dt_at_minutes(day: date, minutes: int, tz: ZoneInfo | None = None) -> datetime:
    """Build a timezone-aware local datetime for a clock time on a given day.

    Minutes past 1440 roll into the following day, negative minutes into the
    previous day.

    Args:
        day: Calendar date the clock time belongs to.
        minutes: Minutes since local midnight.
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    midnight = datetime.combine(day, time.min, tzinfo=tz_info)
    return midnight + timedelta(minutes=minutes)
