"""Countdown Engine - live time remaining until the next daily boundary.

Given two boundaries within a day (first < second, e.g. Imsak and Maghrib)
and the current time, tells which boundary is next and how long remains,
rolling over to tomorrow's first boundary once the second has passed.

Stateless per call. Callers re-evaluate it on a short fixed interval for a
live display.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

from .. import const
from ..type_defs import CountdownTarget
from ..utils.clock_utils import (
    SECONDS_PER_DAY,
    SECONDS_PER_MINUTE,
    format_remaining,
    seconds_of_day,
    to_minutes,
    to_time_string,
)


@dataclass(frozen=True, slots=True)
class CountdownResult:
    """Outcome of one countdown projection."""

    next_target: CountdownTarget
    remaining_seconds: int
    remaining_display: str
    first_boundary_time: str
    second_boundary_time: str
    is_tomorrow: bool = False


class CountdownProjector:
    """Stateless projector for a two-boundary daily countdown.

    Example:
        projector = CountdownProjector()
        result = projector.project(time(20, 0), "05:20", "19:10")
        result.next_target  # CountdownTarget.FIRST (tomorrow)
        result.remaining_display  # "9h20m"
    """

    def project(
        self, now: datetime | time | int, first: str, second: str
    ) -> CountdownResult:
        """Project the countdown for one moment.

        Args:
            now: Current local time, or seconds since midnight.
            first: Earlier boundary of the day ("HH:MM").
            second: Later boundary of the day ("HH:MM").

        Returns:
            CountdownResult for the next boundary.
        """
        now_seconds = (
            seconds_of_day(now) if isinstance(now, (datetime, time)) else int(now)
        )
        first_seconds = to_minutes(first) * SECONDS_PER_MINUTE
        second_seconds = to_minutes(second) * SECONDS_PER_MINUTE

        if first_seconds >= second_seconds:
            const.LOGGER.warning(
                "WARNING: Countdown boundaries out of order (first=%s, second=%s)",
                first,
                second,
            )

        is_tomorrow = False
        if now_seconds < first_seconds:
            target = CountdownTarget.FIRST
            remaining = first_seconds - now_seconds
        elif now_seconds < second_seconds:
            target = CountdownTarget.SECOND
            remaining = second_seconds - now_seconds
        else:
            target = CountdownTarget.FIRST
            remaining = first_seconds + SECONDS_PER_DAY - now_seconds
            is_tomorrow = True

        if remaining < 0:
            const.LOGGER.warning(
                "WARNING: Negative countdown %ss (now=%ss, first=%s, second=%s); "
                "clamping to zero",
                remaining,
                now_seconds,
                first,
                second,
            )
            remaining = 0

        return CountdownResult(
            next_target=target,
            remaining_seconds=remaining,
            remaining_display=format_remaining(remaining),
            first_boundary_time=to_time_string(to_minutes(first)),
            second_boundary_time=to_time_string(to_minutes(second)),
            is_tomorrow=is_tomorrow,
        )
