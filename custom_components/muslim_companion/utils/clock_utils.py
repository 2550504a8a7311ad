# File: utils/clock_utils.py
"""Clock-time utilities for Muslim Companion.

Pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

A clock time is represented internally as minutes since local midnight in
the range [0, 1440) and serialized as a zero-padded 24-hour "HH:MM" string.
Arithmetic that leaves the range wraps modulo 1440.

Functions:
    - to_minutes: Parse "HH:MM" into minutes since midnight
    - to_time_string: Format minutes since midnight as "HH:MM"
    - clean_raw_time: Normalize an upstream time string ("5:20:00 (SGT)" -> "05:20")
    - shortest_angular_difference: Signed shortest distance between two clock times
    - minutes_of_day / seconds_of_day: Position of a time-of-day on the clock
    - format_remaining: Render a duration as "XhYmZs"
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime, time

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants
# ==============================================================================

MINUTES_PER_DAY = 1440
HALF_DAY_MINUTES = 720
SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

# Returned by clean_raw_time for empty input. Callers that need to tell
# "unknown" apart from real midnight must compare against this value.
UNKNOWN_TIME = "00:00"

# Trailing timezone annotation such as " (SGT)" or " (+08)"
_TZ_ANNOTATION_RE = re.compile(r"\s*\([^)]*\)\s*$")

# ASCII digits only; str.isdigit() also accepts superscripts and other scripts
_CLOCK_RE = re.compile(r"(\d{1,2}):(\d{1,2})", re.ASCII)


class ParseError(ValueError):
    """Raised when a time string cannot be parsed.

    Always recoverable: callers substitute a sentinel or a regional default.
    """


# ==============================================================================
# Parsing and Formatting
# ==============================================================================


def to_minutes(value: str) -> int:
    """Convert an "HH:MM" string into minutes since midnight.

    Args:
        value: Time string with exactly two colon-separated integers.

    Returns:
        Minutes since midnight in [0, 1440).

    Raises:
        ParseError: If the string is not "H:M", or hour/minute are out of range.

    Examples:
        to_minutes("05:30") → 330
        to_minutes("5:30") → 330
        to_minutes("24:00") → ParseError
    """
    if not isinstance(value, str):
        raise ParseError(f"Time must be a string, got {type(value).__name__}")

    match = _CLOCK_RE.fullmatch(value.strip())
    if match is None:
        raise ParseError(f"Invalid time format: '{value}' (expected HH:MM)")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if not 0 <= hours <= 23:
        raise ParseError(f"Hour out of range in '{value}'")
    if not 0 <= minutes <= 59:
        raise ParseError(f"Minute out of range in '{value}'")

    return hours * 60 + minutes


def to_time_string(minutes: int) -> str:
    """Format minutes since midnight as a zero-padded "HH:MM" string.

    The value is wrapped modulo 1440 first, so negative values and values
    past midnight land on the same clock face.

    Examples:
        to_time_string(330) → "05:30"
        to_time_string(-10) → "23:50"
        to_time_string(1450) → "00:10"
    """
    hours, mins = divmod(minutes % MINUTES_PER_DAY, 60)
    return f"{hours:02d}:{mins:02d}"


def clean_raw_time(raw: str | None) -> str:
    """Normalize a raw upstream time string into "HH:MM".

    - Strips a trailing parenthesized timezone annotation (" (SGT)")
    - Drops a seconds component ("05:20:00" → "05:20")
    - Zero-pads a single-digit hour ("5:20" → "05:20")

    Args:
        raw: Raw time string as delivered by a provider, or None.

    Returns:
        Normalized "HH:MM" string, or UNKNOWN_TIME for empty input.

    Raises:
        ParseError: If a non-empty value is not a recognizable time.
    """
    if raw is None or not str(raw).strip():
        return UNKNOWN_TIME

    text = _TZ_ANNOTATION_RE.sub("", str(raw)).strip()
    parts = text.split(":")
    if len(parts) == 3:
        parts = parts[:2]

    return to_time_string(to_minutes(":".join(parts)))


def shortest_angular_difference(a: int, b: int) -> int:
    """Return the signed shortest distance from clock time a to clock time b.

    Works like a compass-bearing difference on a 24-hour dial: the result is
    b - a adjusted by whole days until it lies in (-720, 720].

    Examples:
        shortest_angular_difference(1430, 10) → 20
        shortest_angular_difference(10, 1430) → -20
        shortest_angular_difference(0, 720) → 720
    """
    diff = b - a
    while diff > HALF_DAY_MINUTES:
        diff -= MINUTES_PER_DAY
    while diff <= -HALF_DAY_MINUTES:
        diff += MINUTES_PER_DAY
    return diff


def minutes_of_day(value: datetime | time) -> int:
    """Return the whole minutes elapsed since midnight for a time-of-day."""
    return value.hour * 60 + value.minute


def seconds_of_day(value: datetime | time) -> int:
    """Return the whole seconds elapsed since midnight for a time-of-day."""
    return value.hour * SECONDS_PER_HOUR + value.minute * SECONDS_PER_MINUTE + value.second


def format_remaining(total_seconds: int) -> str:
    """Render a non-negative duration as a compact "XhYmZs" string.

    Leading zero-valued units are omitted, as are trailing zero-valued
    units. A zero duration renders as "0s". Negative input is clamped to zero.

    Examples:
        format_remaining(34800) → "9h40m"
        format_remaining(125) → "2m5s"
        format_remaining(3605) → "1h0m5s"
        format_remaining(0) → "0s"
    """
    if total_seconds <= 0:
        return "0s"

    hours, remainder = divmod(int(total_seconds), SECONDS_PER_HOUR)
    minutes, seconds = divmod(remainder, SECONDS_PER_MINUTE)

    parts = [(hours, "h"), (minutes, "m"), (seconds, "s")]
    while parts and parts[0][0] == 0:
        parts.pop(0)
    while parts and parts[-1][0] == 0:
        parts.pop()

    return "".join(f"{value}{unit}" for value, unit in parts)
