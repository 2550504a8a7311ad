"""Period Engine - classify a moment of the day into a named prayer period.

All comparisons are on minutes since local midnight. "now" and the boundary
set are assumed to be on the same local clock; no timezone conversion happens
here.

Boundaries use the half-open [start, end) convention throughout: a period
starts exactly at its boundary and ends one minute before the next one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import TYPE_CHECKING

from .. import const
from ..type_defs import PrayerPeriod
from ..utils.clock_utils import (
    MINUTES_PER_DAY,
    minutes_of_day,
    shortest_angular_difference,
    to_minutes,
)

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class PeriodResult:
    """Outcome of classifying one moment.

    Attributes:
        period: The named period, or PrayerPeriod.NONE for the post-sunrise gap
        is_previous_cycle: True after midnight but before dawn, when the night
            period belongs to the previous day's cycle
    """

    period: PrayerPeriod
    is_previous_cycle: bool = False

    @property
    def display_name(self) -> str:
        """Return the user-facing period name."""
        return const.PRAYER_DISPLAY_NAMES[self.period.value]


@dataclass(frozen=True, slots=True)
class NextBoundary:
    """The next boundary strictly after a moment."""

    name: str
    time: str
    minutes_until: int
    is_tomorrow: bool = False


class PeriodDetector:
    """Stateless classifier for the six-boundary prayer day.

    Example:
        detector = PeriodDetector()
        detector.classify(120, boundaries).period  # PrayerPeriod.ISYAK (previous cycle)
    """

    # ────────────────────────────────────────────────────────────────
    # Boundary Set Handling
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def boundary_minutes(boundaries: Mapping[str, str]) -> list[int]:
        """Convert a boundary mapping into minutes in canonical order.

        Raises:
            KeyError: If a boundary is missing.
            ParseError: If a boundary is not "HH:MM".
        """
        return [to_minutes(boundaries[key]) for key in const.BOUNDARY_KEYS]

    @staticmethod
    def normalize(values: list[int]) -> list[int]:
        """Return a non-decreasing copy of a boundary list.

        A set that is not strictly increasing is logged; each boundary that
        falls behind its predecessor is clamped up to it.
        """
        if all(a < b for a, b in zip(values, values[1:])):
            return list(values)

        const.LOGGER.warning(
            "WARNING: Prayer boundaries are not strictly increasing: %s",
            dict(zip(const.BOUNDARY_KEYS, values)),
        )
        clamped: list[int] = []
        for value in values:
            clamped.append(max(value, clamped[-1]) if clamped else value)
        return clamped

    # ────────────────────────────────────────────────────────────────
    # Classification
    # ────────────────────────────────────────────────────────────────

    def classify(
        self, now: int | datetime | time, boundaries: Mapping[str, str]
    ) -> PeriodResult:
        """Classify a moment into exactly one period.

        Rules, first match wins:
            1. Subuh <= now < Syuruk    → Subuh
            2. Zohor <= now < Asar      → Zohor
            3. Asar <= now < Maghrib    → Asar
            4. Maghrib <= now < Isyak   → Maghrib
            5. now >= Isyak             → Isyak
            6. now < Subuh              → Isyak of the previous day's cycle
            7. Syuruk <= now < Zohor    → no active period

        Args:
            now: Minutes since midnight, or a datetime/time on the local clock.
            boundaries: Six "HH:MM" values keyed by const.BOUNDARY_KEYS.
        """
        now_minutes = self._as_minutes(now)
        subuh, syuruk, zohor, asar, maghrib, isyak = self.normalize(
            self.boundary_minutes(boundaries)
        )

        if subuh <= now_minutes < syuruk:
            return PeriodResult(PrayerPeriod.SUBUH)
        if zohor <= now_minutes < asar:
            return PeriodResult(PrayerPeriod.ZOHOR)
        if asar <= now_minutes < maghrib:
            return PeriodResult(PrayerPeriod.ASAR)
        if maghrib <= now_minutes < isyak:
            return PeriodResult(PrayerPeriod.MAGHRIB)
        if now_minutes >= isyak:
            return PeriodResult(PrayerPeriod.ISYAK)
        if now_minutes < subuh:
            return PeriodResult(PrayerPeriod.ISYAK, is_previous_cycle=True)
        return PeriodResult(PrayerPeriod.NONE)

    def next_boundary(
        self,
        now: int | datetime | time,
        boundaries: Mapping[str, str],
        tomorrow_subuh: str | None = None,
    ) -> NextBoundary:
        """Return the first boundary strictly after now.

        After Isyak the answer is tomorrow's Subuh; when tomorrow's value is
        not known, today's Subuh is used as the estimate.
        """
        now_minutes = self._as_minutes(now)
        for key in const.BOUNDARY_KEYS:
            value = to_minutes(boundaries[key])
            if value > now_minutes:
                return NextBoundary(
                    name=key,
                    time=boundaries[key],
                    minutes_until=value - now_minutes,
                )

        subuh_time = tomorrow_subuh or boundaries[const.PRAYER_SUBUH]
        return NextBoundary(
            name=const.PRAYER_SUBUH,
            time=subuh_time,
            minutes_until=to_minutes(subuh_time) + MINUTES_PER_DAY - now_minutes,
            is_tomorrow=True,
        )

    def is_near(
        self,
        now: int | datetime | time,
        boundary: str,
        window_minutes: int = const.PRAYER_TIME_WINDOW_MINUTES,
    ) -> bool:
        """Return True when now is within window_minutes of a boundary.

        Distances wrap around midnight, so 23:55 is near 00:05.
        """
        distance = shortest_angular_difference(
            self._as_minutes(now), to_minutes(boundary)
        )
        return abs(distance) <= window_minutes

    @staticmethod
    def _as_minutes(now: int | datetime | time) -> int:
        if isinstance(now, (datetime, time)):
            return minutes_of_day(now)
        return now % MINUTES_PER_DAY
