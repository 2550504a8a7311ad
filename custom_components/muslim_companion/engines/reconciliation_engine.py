"""Reconciliation Engine - choose one trusted time from two disagreeing sources.

Source A is an astronomical calculation that publishes Imsak directly. Source B
is the local religious authority, which publishes Subuh (dawn) only; Imsak is
derived from it by subtracting a fixed offset. When both are available and
disagree by more than a tolerance, the authority-derived value wins.

Design Principles:
    - Stateless: Every call reconciles from the two values it is given
    - Per-day: Results are never cached across calendar days
    - Total: Missing or malformed inputs degrade to the other source, then to
      a regional default flagged as low confidence
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .. import const
from ..utils.clock_utils import (
    ParseError,
    clean_raw_time,
    shortest_angular_difference,
    to_minutes,
    to_time_string,
)

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import date

    from ..type_defs import BoundaryTimes


# =============================================================================
# RESULT DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True, slots=True)
class ValidationMismatch:
    """Record of the two sources disagreeing beyond tolerance.

    Not an error: it is logged and attached to the reconciled result.

    Attributes:
        calculated: Source A value ("HH:MM")
        authority_dawn: Authority dawn value the derived time came from
        derived: Authority dawn minus the fixed offset
        diff_minutes: Absolute disagreement in minutes
    """

    calculated: str
    authority_dawn: str
    derived: str
    diff_minutes: int


@dataclass(frozen=True, slots=True)
class ReconciledTime:
    """One trusted clock time plus how it was chosen.

    Computed fresh on every query and never persisted.
    """

    value: str
    source: str
    offset_minutes: int
    tolerance_minutes: int
    low_confidence: bool = False
    mismatch: ValidationMismatch | None = None

    @property
    def minutes(self) -> int:
        """Return the value as minutes since midnight."""
        return to_minutes(self.value)


@dataclass(frozen=True, slots=True)
class ReconciledDay:
    """A full day of trusted boundary times.

    Attributes:
        day: Calendar date the times belong to
        imsak: Reconciled pre-dawn time
        boundaries: Six boundary times keyed by const.BOUNDARY_KEYS
        sources: Which source supplied each boundary
        low_confidence: True when any value came from a default
    """

    day: date
    imsak: ReconciledTime
    boundaries: dict[str, str]
    sources: dict[str, str] = field(default_factory=dict)
    low_confidence: bool = False

    @property
    def iftar(self) -> str:
        """Iftar is Maghrib."""
        return self.boundaries[const.PRAYER_MAGHRIB]

    def as_dict(self) -> dict[str, str]:
        """Return imsak plus the six boundaries as one "HH:MM" mapping."""
        return {const.PRAYER_IMSAK: self.imsak.value, **self.boundaries}


# =============================================================================
# TIME RECONCILER
# =============================================================================


class TimeReconciler:
    """Pure logic for reconciling calculated and authority times.

    Example:
        reconciler = TimeReconciler()
        result = reconciler.reconcile("05:25", "05:30")
        # Authority derived 05:20 differs by 5 > 2 minutes
        result.value  # "05:20"
        result.source  # "authority_derived"
    """

    def __init__(
        self,
        offset_minutes: int = const.IMSAK_OFFSET_MINUTES,
        tolerance_minutes: int = const.IMSAK_VALIDATION_THRESHOLD_MINUTES,
        fallback_value: str = const.FALLBACK_TIMES[const.PRAYER_IMSAK],
    ) -> None:
        """Initialize the reconciler.

        Args:
            offset_minutes: Minutes between authority dawn and the target event.
            tolerance_minutes: Largest disagreement that still trusts Source A.
            fallback_value: Regional default when neither source is usable.
        """
        self.offset_minutes = offset_minutes
        self.tolerance_minutes = tolerance_minutes
        self.fallback_value = fallback_value

    # ────────────────────────────────────────────────────────────────
    # Single Event
    # ────────────────────────────────────────────────────────────────

    def reconcile(
        self,
        calculated: str | None,
        authority_dawn: str | None,
        fallback_value: str | None = None,
        fallback_source: str = const.SOURCE_FALLBACK,
    ) -> ReconciledTime:
        """Reconcile a calculated value with an authority-published dawn.

        Args:
            calculated: Source A value, raw or clean, or None if unavailable.
            authority_dawn: Authority dawn value, raw or clean, or None.
            fallback_value: Overrides the regional default for this call.
            fallback_source: Source label used when the fallback is taken.

        Returns:
            ReconciledTime with the chosen value and provenance.
        """
        calculated_minutes = self._parse_optional(calculated, "calculated")
        dawn_minutes = self._parse_optional(authority_dawn, "authority")

        if calculated_minutes is not None and dawn_minutes is not None:
            derived = (dawn_minutes - self.offset_minutes) % 1440
            diff = abs(shortest_angular_difference(calculated_minutes, derived))
            if diff > self.tolerance_minutes:
                mismatch = ValidationMismatch(
                    calculated=to_time_string(calculated_minutes),
                    authority_dawn=to_time_string(dawn_minutes),
                    derived=to_time_string(derived),
                    diff_minutes=diff,
                )
                const.LOGGER.warning(
                    "WARNING: Imsak sources disagree by %s minutes "
                    "(calculated=%s, authority dawn=%s, derived=%s); "
                    "using authority-derived value",
                    diff,
                    mismatch.calculated,
                    mismatch.authority_dawn,
                    mismatch.derived,
                )
                return self._result(
                    derived, const.SOURCE_AUTHORITY_DERIVED, mismatch=mismatch
                )
            return self._result(calculated_minutes, const.SOURCE_CALCULATED)

        if dawn_minutes is not None:
            return self._result(
                dawn_minutes - self.offset_minutes, const.SOURCE_AUTHORITY_DERIVED
            )

        if calculated_minutes is not None:
            return self._result(calculated_minutes, const.SOURCE_CALCULATED)

        fallback = fallback_value or self.fallback_value
        const.LOGGER.debug(
            "DEBUG: No usable imsak source, falling back to %s (%s)",
            fallback,
            fallback_source,
        )
        return self._result(
            to_minutes(fallback), fallback_source, low_confidence=True
        )

    # ────────────────────────────────────────────────────────────────
    # Full Day
    # ────────────────────────────────────────────────────────────────

    def reconcile_day(
        self,
        day: date,
        calculated: Mapping[str, str] | None,
        authority: Mapping[str, str] | None,
        fallback: Mapping[str, str] | None = None,
        fallback_source: str = const.SOURCE_FALLBACK,
    ) -> ReconciledDay:
        """Build a trusted boundary set for one calendar day.

        Imsak goes through reconcile(). Each of the six boundaries prefers the
        authority value, then the calculated value, then the fallback set.

        Args:
            day: Calendar date being resolved.
            calculated: Source A times keyed by boundary name (may include imsak).
            authority: Authority times keyed by boundary name.
            fallback: Default times (last known, or the regional defaults).
            fallback_source: Label recorded for values taken from fallback.
        """
        calculated = calculated or {}
        authority = authority or {}
        fallback_times: BoundaryTimes = dict(fallback or const.FALLBACK_TIMES)

        imsak = self.reconcile(
            calculated.get(const.PRAYER_IMSAK),
            authority.get(const.PRAYER_SUBUH),
            fallback_value=fallback_times.get(const.PRAYER_IMSAK),
            fallback_source=fallback_source,
        )

        boundaries: dict[str, str] = {}
        sources: dict[str, str] = {const.PRAYER_IMSAK: imsak.source}
        low_confidence = imsak.low_confidence

        for key in const.BOUNDARY_KEYS:
            for source, candidates in (
                (const.SOURCE_AUTHORITY, authority),
                (const.SOURCE_CALCULATED, calculated),
            ):
                minutes = self._parse_optional(candidates.get(key), source)
                if minutes is not None:
                    boundaries[key] = to_time_string(minutes)
                    sources[key] = source
                    break
            else:
                boundaries[key] = fallback_times.get(key, const.FALLBACK_TIMES[key])
                sources[key] = fallback_source
                low_confidence = True

        return ReconciledDay(
            day=day,
            imsak=imsak,
            boundaries=boundaries,
            sources=sources,
            low_confidence=low_confidence,
        )

    # ────────────────────────────────────────────────────────────────
    # Helpers
    # ────────────────────────────────────────────────────────────────

    def _result(
        self,
        minutes: int,
        source: str,
        *,
        low_confidence: bool = False,
        mismatch: ValidationMismatch | None = None,
    ) -> ReconciledTime:
        return ReconciledTime(
            value=to_time_string(minutes),
            source=source,
            offset_minutes=self.offset_minutes,
            tolerance_minutes=self.tolerance_minutes,
            low_confidence=low_confidence,
            mismatch=mismatch,
        )

    @staticmethod
    def _parse_optional(raw: str | None, label: str) -> int | None:
        """Parse a raw time, treating empty or malformed input as unavailable."""
        if raw is None or not str(raw).strip():
            return None
        try:
            return to_minutes(clean_raw_time(raw))
        except ParseError as err:
            const.LOGGER.warning(
                "WARNING: Ignoring malformed %s time '%s': %s", label, raw, err
            )
            return None
