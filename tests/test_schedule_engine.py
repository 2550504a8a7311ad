"""Tests for ScheduleEngine.

Tests cover:
- Per-day schedule with independent Imsak reconciliation
- Last-ten-nights and odd-night markers
- Reminder planning per preference, horizon and trigger time
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from custom_components.muslim_companion import const
from custom_components.muslim_companion.engines.schedule_engine import ScheduleEngine

SINGAPORE = ZoneInfo("Asia/Singapore")
START = date(2026, 2, 19)


@pytest.fixture
def engine() -> ScheduleEngine:
    """Return a ScheduleEngine instance."""
    return ScheduleEngine()


@pytest.fixture
def all_prefs() -> dict[str, object]:
    """Return preferences with every reminder enabled."""
    return dict(const.DEFAULT_NOTIFICATION_PREFS)


class TestSpecialNights:
    """Tests for the night markers."""

    @pytest.mark.parametrize(("day", "expected"), [(20, False), (21, True), (30, True)])
    def test_last_ten_nights(self, day: int, expected: bool) -> None:
        """The last ten nights start at night 21."""
        assert ScheduleEngine.is_last_ten_nights(day) is expected

    @pytest.mark.parametrize(
        ("day", "expected"), [(19, False), (21, True), (22, False), (27, True), (29, True)]
    )
    def test_special_night(self, day: int, expected: bool) -> None:
        """Only the odd nights of the last ten."""
        assert ScheduleEngine.is_special_night(day) is expected


class TestBuildSchedule:
    """Tests for build_schedule."""

    def test_full_window(self, engine: ScheduleEngine) -> None:
        """One entry per day with dates counted from the start."""
        schedule = engine.build_schedule(START, 30)

        assert len(schedule) == 30
        assert schedule[0].day == 1
        assert schedule[0].date == START
        assert schedule[-1].date == date(2026, 3, 20)
        assert schedule[20].is_last_ten_nights is True
        assert schedule[26].is_special_night is True

    def test_day_range(self, engine: ScheduleEngine) -> None:
        """first_day and last_day bound the result."""
        schedule = engine.build_schedule(START, 30, first_day=5, last_day=7)

        assert [entry.day for entry in schedule] == [5, 6, 7]

    def test_last_day_capped_at_total(self, engine: ScheduleEngine) -> None:
        """Days past the window are never produced."""
        schedule = engine.build_schedule(START, 29, first_day=28, last_day=40)

        assert [entry.day for entry in schedule] == [28, 29]

    def test_imsak_reconciled_per_day(
        self,
        engine: ScheduleEngine,
        calculated_times: dict[str, str],
        authority_times: dict[str, str],
    ) -> None:
        """Each day uses its own sources; missing days use the fallback."""
        second_day = date(2026, 2, 20)
        schedule = engine.build_schedule(
            START,
            30,
            calculated_by_date={START: calculated_times, second_day: calculated_times},
            authority_by_date={START: authority_times},
            last_day=3,
        )

        assert schedule[0].imsak == "05:20"
        assert schedule[0].imsak_source == const.SOURCE_AUTHORITY_DERIVED
        assert schedule[0].iftar == "19:12"
        assert schedule[1].imsak == "05:25"
        assert schedule[1].imsak_source == const.SOURCE_CALCULATED
        assert schedule[2].imsak_source == const.SOURCE_FALLBACK
        assert schedule[2].low_confidence is True


class TestPlanReminders:
    """Tests for plan_reminders."""

    def test_first_day_reminders(
        self, engine: ScheduleEngine, all_prefs: dict[str, object]
    ) -> None:
        """Suhoor, Iftar and Tarawih for an ordinary day."""
        schedule = engine.build_schedule(START, 30, last_day=1)
        now = datetime(2026, 2, 18, 12, 0, tzinfo=SINGAPORE)

        plans = engine.plan_reminders(
            schedule, 1, 30, all_prefs, now, tz=SINGAPORE, days_ahead=1
        )
        by_kind = {plan.kind: plan for plan in plans}

        assert set(by_kind) == {
            const.REMINDER_SUHOOR,
            const.REMINDER_IFTAR,
            const.REMINDER_TARAWIH,
        }
        assert by_kind[const.REMINDER_SUHOOR].trigger == datetime(
            2026, 2, 19, 4, 35, tzinfo=SINGAPORE
        )
        assert by_kind[const.REMINDER_SUHOOR].message == (
            "45 minutes until Imsak (05:20). Time for Suhoor! "
            "Wa bisawmi ghadin nawaitu min shahri Ramadan"
        )
        assert by_kind[const.REMINDER_IFTAR].trigger == datetime(
            2026, 2, 19, 19, 10, tzinfo=SINGAPORE
        )
        assert by_kind[const.REMINDER_TARAWIH].trigger == datetime(
            2026, 2, 19, 20, 50, tzinfo=SINGAPORE
        )
        assert by_kind[const.REMINDER_TARAWIH].message == (
            "Night 1: Time for Tarawih prayers."
        )

    def test_past_triggers_dropped(
        self, engine: ScheduleEngine, all_prefs: dict[str, object]
    ) -> None:
        """At noon on day 1 only Iftar and Tarawih remain."""
        schedule = engine.build_schedule(START, 30, last_day=1)
        now = datetime(2026, 2, 19, 12, 0, tzinfo=SINGAPORE)

        plans = engine.plan_reminders(
            schedule, 1, 30, all_prefs, now, tz=SINGAPORE, days_ahead=1
        )

        assert [plan.kind for plan in plans] == [
            const.REMINDER_IFTAR,
            const.REMINDER_TARAWIH,
        ]
        assert all(plan.trigger > now for plan in plans)

    def test_disabled_preferences(self, engine: ScheduleEngine) -> None:
        """Disabled reminders are not planned."""
        prefs = dict(
            const.DEFAULT_NOTIFICATION_PREFS,
            suhoor_reminder=False,
            tarawih_reminder=False,
        )
        schedule = engine.build_schedule(START, 30, last_day=1)
        now = datetime(2026, 2, 18, 12, 0, tzinfo=SINGAPORE)

        plans = engine.plan_reminders(
            schedule, 1, 30, prefs, now, tz=SINGAPORE, days_ahead=1
        )

        assert [plan.kind for plan in plans] == [const.REMINDER_IFTAR]

    def test_suhoor_lead_time(self, engine: ScheduleEngine) -> None:
        """The lead time moves the trigger and the message."""
        prefs = dict(const.DEFAULT_NOTIFICATION_PREFS, suhoor_reminder_minutes=60)
        schedule = engine.build_schedule(START, 30, last_day=1)
        now = datetime(2026, 2, 18, 12, 0, tzinfo=SINGAPORE)

        plans = engine.plan_reminders(
            schedule, 1, 30, prefs, now, tz=SINGAPORE, days_ahead=1
        )
        suhoor = next(plan for plan in plans if plan.kind == const.REMINDER_SUHOOR)

        assert suhoor.trigger.hour == 4
        assert suhoor.trigger.minute == 20
        assert suhoor.message.startswith("60 minutes")

    def test_last_ten_nights_and_laylatul_qadr(
        self, engine: ScheduleEngine, all_prefs: dict[str, object]
    ) -> None:
        """Night 21 is emphasized and night 22 gets the plain last-ten reminder."""
        schedule = engine.build_schedule(START, 30, first_day=21, last_day=22)
        now = datetime(2026, 3, 10, 12, 0, tzinfo=SINGAPORE)

        plans = engine.plan_reminders(
            schedule, 21, 30, all_prefs, now, tz=SINGAPORE, days_ahead=2
        )
        night_21 = {plan.kind: plan for plan in plans if plan.day == 21}
        night_22 = {plan.kind: plan for plan in plans if plan.day == 22}

        assert const.REMINDER_LAYLATUL_QADR in night_21
        assert night_21[const.REMINDER_LAYLATUL_QADR].trigger == datetime(
            2026, 3, 11, 19, 15, tzinfo=SINGAPORE
        )
        assert night_21[const.REMINDER_TARAWIH].message == (
            "Night 21: Last 10 nights! Don't miss Tarawih."
        )
        assert const.REMINDER_LAST_TEN in night_22
        assert const.REMINDER_LAYLATUL_QADR not in night_22

    def test_emphasis_disabled(self, engine: ScheduleEngine) -> None:
        """Without emphasis odd nights get the plain last-ten reminder."""
        prefs = dict(const.DEFAULT_NOTIFICATION_PREFS, laylatul_qadr_emphasis=False)
        schedule = engine.build_schedule(START, 30, first_day=27, last_day=27)
        now = datetime(2026, 3, 16, 12, 0, tzinfo=SINGAPORE)

        plans = engine.plan_reminders(
            schedule, 27, 30, prefs, now, tz=SINGAPORE, days_ahead=1
        )

        assert const.REMINDER_LAST_TEN in {plan.kind for plan in plans}
        assert const.REMINDER_LAYLATUL_QADR not in {plan.kind for plan in plans}

    def test_horizon_stops_at_window_end(
        self, engine: ScheduleEngine, all_prefs: dict[str, object]
    ) -> None:
        """Planning from day 29 of 30 covers two days only."""
        schedule = engine.build_schedule(START, 30, first_day=29)
        now = datetime(2026, 3, 18, 12, 0, tzinfo=SINGAPORE)

        plans = engine.plan_reminders(schedule, 29, 30, all_prefs, now, tz=SINGAPORE)

        assert {plan.day for plan in plans} == {29, 30}

    def test_five_day_horizon(
        self, engine: ScheduleEngine, all_prefs: dict[str, object]
    ) -> None:
        """The default horizon is five days including today."""
        schedule = engine.build_schedule(START, 30)
        now = datetime(2026, 2, 18, 12, 0, tzinfo=SINGAPORE)

        plans = engine.plan_reminders(schedule, 1, 30, all_prefs, now, tz=SINGAPORE)

        assert {plan.day for plan in plans} == {1, 2, 3, 4, 5}
        assert len(plans) == 15
        assert max(plan.trigger for plan in plans) - now < timedelta(days=6)
