"""Statistics Engine - day-sequence aggregation for the tracked window.

Turns sparse ordinal-day logs into counts, streaks and a weighted composite
score. Streaks run over consecutive ORDINAL days, not calendar dates: a day
with no log (or any status other than the success status) breaks a streak.

Design Principles:
    - Stateless: No coordinator reference, operates on passed data structures
    - Read-only: Works on a snapshot, never mutates or persists
    - Exhaustive: Every status vocabulary is matched case by case
"""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from .. import const
from ..type_defs import FastingStatus, QuranStatus, TarawihLocation, TarawihStatus
from ..utils.math_utils import calculate_percentage, clamp, round_half_up, weighted_score

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class AggregateStats:
    """Fully derived statistics for the tracked window. Never persisted."""

    current_day: int
    total_days: int
    days_elapsed: int
    days_remaining: int
    days_fasted: int
    days_missed: int
    days_excused: int
    days_not_logged: int
    qada_days_needed: int
    fasting_streak: int
    longest_fasting_streak: int
    tarawih_completed: int
    tarawih_at_mosque: int
    tarawih_at_home: int
    tarawih_missed: int
    tarawih_streak: int
    longest_tarawih_streak: int
    juz_completed: int
    total_pages_read: int
    quran_progress: int
    overall_score: int

    def as_dict(self) -> dict[str, Any]:
        """Return the stats as a plain dict."""
        return asdict(self)


def get_day_log(logs: Mapping[Any, Any], day: int) -> Mapping[str, Any] | None:
    """Return the log for an ordinal day.

    Stored collections are keyed by str(day) after a JSON round trip;
    in-memory collections may use int keys.
    """
    entry = logs.get(str(day))
    if entry is None:
        entry = logs.get(day)
    return entry


class StatisticsEngine:
    """Aggregates ordinal-day logs into AggregateStats.

    All methods are stateless - they operate on data structures passed as
    arguments. The engine does NOT persist data.

    Example:
        stats = StatisticsEngine()
        fasting_log = {"1": {"status": "fasted"}, "2": {"status": "fasted"}}
        stats.current_streak(fasting_log, 2, "fasted")  # 2
    """

    # ────────────────────────────────────────────────────────────────
    # Generic Sequence Helpers
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def count_by_status(logs: Mapping[Any, Mapping[str, Any]]) -> Counter[str]:
        """Tally present logs by status tag in a single pass."""
        return Counter(
            str(entry.get(const.DATA_LOG_STATUS)) for entry in logs.values()
        )

    @staticmethod
    def current_streak(
        logs: Mapping[Any, Mapping[str, Any]], current_day: int, success: str
    ) -> int:
        """Count consecutive successes ending at current_day.

        Walks backward from current_day to 1 and stops at the first day whose
        status is not success, including days with no log at all.
        """
        streak = 0
        for day in range(current_day, 0, -1):
            entry = get_day_log(logs, day)
            if entry is None or entry.get(const.DATA_LOG_STATUS) != success:
                break
            streak += 1
        return streak

    @staticmethod
    def longest_streak(
        logs: Mapping[Any, Mapping[str, Any]], current_day: int, success: str
    ) -> int:
        """Return the longest run of successes between day 1 and current_day."""
        longest = 0
        running = 0
        for day in range(1, current_day + 1):
            entry = get_day_log(logs, day)
            if entry is not None and entry.get(const.DATA_LOG_STATUS) == success:
                running += 1
                longest = max(longest, running)
            else:
                running = 0
        return longest

    @staticmethod
    def days_remaining(total_days: int, current_day: int) -> int:
        """Return days left in the window, never negative."""
        return max(0, total_days - current_day)

    @staticmethod
    def completion_ratio(completed: int, days_elapsed: int) -> float:
        """Return completed / days_elapsed as a 0-100 percentage."""
        return clamp(calculate_percentage(completed, days_elapsed), 0.0, 100.0)

    # ────────────────────────────────────────────────────────────────
    # Per-Activity Tallies
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def _fasting_counts(logs: Mapping[Any, Mapping[str, Any]]) -> dict[FastingStatus, int]:
        counts = dict.fromkeys(FastingStatus, 0)
        for status, count in StatisticsEngine.count_by_status(logs).items():
            try:
                parsed = FastingStatus(status)
            except ValueError:
                const.LOGGER.warning("WARNING: Unknown fasting status '%s'", status)
                continue
            match parsed:
                case FastingStatus.FASTED:
                    counts[FastingStatus.FASTED] += count
                case FastingStatus.MISSED:
                    counts[FastingStatus.MISSED] += count
                case FastingStatus.EXCUSED:
                    counts[FastingStatus.EXCUSED] += count
                case FastingStatus.NOT_LOGGED:
                    counts[FastingStatus.NOT_LOGGED] += count
        return counts

    @staticmethod
    def _tarawih_counts(logs: Mapping[Any, Mapping[str, Any]]) -> dict[str, int]:
        counts = {"prayed": 0, "mosque": 0, "home": 0, "missed": 0}
        for entry in logs.values():
            try:
                status = TarawihStatus(entry.get(const.DATA_LOG_STATUS))
            except ValueError:
                const.LOGGER.warning(
                    "WARNING: Unknown tarawih status '%s'",
                    entry.get(const.DATA_LOG_STATUS),
                )
                continue
            match status:
                case TarawihStatus.PRAYED:
                    counts["prayed"] += 1
                    location = entry.get(const.DATA_LOG_LOCATION)
                    if location == TarawihLocation.MOSQUE:
                        counts["mosque"] += 1
                    elif location == TarawihLocation.HOME:
                        counts["home"] += 1
                case TarawihStatus.MISSED:
                    counts["missed"] += 1
        return counts

    @staticmethod
    def _quran_counts(logs: Mapping[Any, Mapping[str, Any]]) -> tuple[int, int]:
        completed = 0
        pages = 0
        for entry in logs.values():
            pages += int(entry.get(const.DATA_LOG_PAGES_READ, 0) or 0)
            try:
                status = QuranStatus(entry.get(const.DATA_LOG_STATUS))
            except ValueError:
                const.LOGGER.warning(
                    "WARNING: Unknown quran status '%s'",
                    entry.get(const.DATA_LOG_STATUS),
                )
                continue
            match status:
                case QuranStatus.COMPLETED:
                    completed += 1
                case QuranStatus.IN_PROGRESS:
                    pass
        return completed, pages

    # ────────────────────────────────────────────────────────────────
    # Aggregate
    # ────────────────────────────────────────────────────────────────

    def compute(self, tracker: Mapping[str, Any], current_day: int) -> AggregateStats:
        """Compute AggregateStats for a tracker snapshot.

        Args:
            tracker: Tracker data (window fields plus the three log collections).
            current_day: Current ordinal day (0 before the window starts).

        Returns:
            AggregateStats recomputed from scratch.
        """
        total_days = int(
            tracker.get(const.DATA_TRACKER_TOTAL_DAYS, const.RAMADAN_DEFAULT_TOTAL_DAYS)
        )
        fasting_log = tracker.get(const.DATA_TRACKER_FASTING_LOG, {})
        tarawih_log = tracker.get(const.DATA_TRACKER_TARAWIH_LOG, {})
        quran_log = tracker.get(const.DATA_TRACKER_QURAN_LOG, {})

        fasting = self._fasting_counts(fasting_log)
        tarawih = self._tarawih_counts(tarawih_log)
        juz_completed, total_pages = self._quran_counts(quran_log)

        days_elapsed = max(0, min(current_day, total_days))
        quran_progress = round_half_up(
            calculate_percentage(juz_completed, const.TOTAL_JUZ)
        )

        overall_score = weighted_score(
            [
                self.completion_ratio(fasting[FastingStatus.FASTED], days_elapsed),
                self.completion_ratio(tarawih["prayed"], days_elapsed),
                clamp(float(quran_progress), 0.0, 100.0),
            ],
            [
                const.SCORE_WEIGHT_FASTING,
                const.SCORE_WEIGHT_TARAWIH,
                const.SCORE_WEIGHT_QURAN,
            ],
        )

        return AggregateStats(
            current_day=current_day,
            total_days=total_days,
            days_elapsed=days_elapsed,
            days_remaining=self.days_remaining(total_days, current_day),
            days_fasted=fasting[FastingStatus.FASTED],
            days_missed=fasting[FastingStatus.MISSED],
            days_excused=fasting[FastingStatus.EXCUSED],
            days_not_logged=fasting[FastingStatus.NOT_LOGGED],
            qada_days_needed=fasting[FastingStatus.MISSED],
            fasting_streak=self.current_streak(
                fasting_log, current_day, FastingStatus.FASTED
            ),
            longest_fasting_streak=self.longest_streak(
                fasting_log, current_day, FastingStatus.FASTED
            ),
            tarawih_completed=tarawih["prayed"],
            tarawih_at_mosque=tarawih["mosque"],
            tarawih_at_home=tarawih["home"],
            tarawih_missed=tarawih["missed"],
            tarawih_streak=self.current_streak(
                tarawih_log, current_day, TarawihStatus.PRAYED
            ),
            longest_tarawih_streak=self.longest_streak(
                tarawih_log, current_day, TarawihStatus.PRAYED
            ),
            juz_completed=juz_completed,
            total_pages_read=total_pages,
            quran_progress=quran_progress,
            overall_score=overall_score,
        )

    @staticmethod
    def format_share_summary(stats: AggregateStats, year: int) -> str:
        """Render a plain-text progress summary suitable for sharing."""
        lines = [
            f"Ramadan {year} Progress",
            f"Day {stats.current_day}",
            "",
            f"Fasting: {stats.days_fasted} days",
            f"Tarawih: {stats.tarawih_completed} nights",
            f"Quran: {stats.juz_completed}/{const.TOTAL_JUZ} juz ({stats.quran_progress}%)",
        ]
        if stats.fasting_streak > 0:
            lines.append(f"Streak: {stats.fasting_streak} days")
        lines.extend(["", const.SHARE_SUMMARY_FOOTER])
        return "\n".join(lines)
