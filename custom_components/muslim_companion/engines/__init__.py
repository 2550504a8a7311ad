"""Engine modules for Muslim Companion integration.

Contains specialized computation engines:
- reconciliation_engine: Dual-source Imsak reconciliation
- period_engine: Prayer period classification and next-boundary lookup
- calendar_window_engine: Ramadan window detection with official overrides
- statistics_engine: Streaks, counts and the weighted progress score
- countdown_engine: Two-boundary daily countdown
- schedule_engine: Window schedule and reminder planning
"""

# Use relative imports within package to avoid mypy module resolution issues
from .calendar_window_engine import (
    CalendarWindowDetector,
    HijriDate,
    WindowDetection,
    resolve_hijri_month,
)
from .countdown_engine import CountdownProjector, CountdownResult
from .period_engine import NextBoundary, PeriodDetector, PeriodResult
from .reconciliation_engine import (
    ReconciledDay,
    ReconciledTime,
    TimeReconciler,
    ValidationMismatch,
)
from .schedule_engine import ReminderPlan, ScheduleEngine, WindowDaySchedule
from .statistics_engine import AggregateStats, StatisticsEngine, get_day_log

__all__ = [
    "AggregateStats",
    "CalendarWindowDetector",
    "CountdownProjector",
    "CountdownResult",
    "HijriDate",
    "NextBoundary",
    "PeriodDetector",
    "PeriodResult",
    "ReconciledDay",
    "ReconciledTime",
    "ReminderPlan",
    "ScheduleEngine",
    "StatisticsEngine",
    "TimeReconciler",
    "ValidationMismatch",
    "WindowDaySchedule",
    "WindowDetection",
    "get_day_log",
    "resolve_hijri_month",
]
