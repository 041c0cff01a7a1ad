"""
tests/calendar/test_ledger.py

Covers:
  - Regression scenarios for a Mon–Fri schedule in 2024
  - Override precedence (OFF never working, ON always working)
  - Pure weekday counting with no events
  - Mid-year start dates and carried-over history
  - Conservation of the day count
  - Invalid ranges and history counters
  - ScheduleSelection / WorkingDayTotals helpers
"""

import datetime as dt
import logging

import pytest

from salesdesk.calendar import (
    CalendarEvent,
    InvalidRange,
    ScheduleSelection,
    WorkingDayTotals,
    resolve_schedule,
    resolve_working_days,
)


WORKWEEK = {"Mon", "Tue", "Wed", "Thu", "Fri"}
ALL_DAYS = {"Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"}


def ev(title, start, end, id="e"):
    return CalendarEvent(id=id, title=title, start=start, end=end)


def inclusive_days(start, year):
    return (dt.date(year, 12, 31) - start).days + 1


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def baseline():
    """Scenario A: Mon–Fri in 2024, no events, no history."""
    return resolve_working_days(WORKWEEK, 2024, [], 0, 0, dt.date(2024, 1, 1))


# ── Regression scenarios ──────────────────────────────────────────────────────

class TestScenarios:

    def test_workweek_2024(self, baseline):
        # 2024 starts on a Monday and is a leap year: 52 full weeks + Mon, Tue.
        assert baseline == WorkingDayTotals(262, 104)

    def test_single_off_on_monday(self, baseline):
        totals = resolve_working_days(
            WORKWEEK, 2024, [ev("OFF", "2024-06-10", "2024-06-10")], 0, 0, dt.date(2024, 1, 1)
        )
        assert totals.working_days_count == baseline.working_days_count - 1
        assert totals.non_working_days_count == baseline.non_working_days_count + 1

    def test_on_over_weekend(self, baseline):
        totals = resolve_working_days(
            WORKWEEK, 2024, [ev("ON", "2024-06-15", "2024-06-16")], 0, 0, dt.date(2024, 1, 1)
        )
        assert totals.working_days_count == baseline.working_days_count + 2
        assert totals.non_working_days_count == baseline.non_working_days_count - 2

    def test_start_after_year_raises(self):
        with pytest.raises(InvalidRange):
            resolve_working_days(WORKWEEK, 2023, [], 0, 0, dt.date(2024, 7, 1))


# ── Override precedence ───────────────────────────────────────────────────────

class TestPrecedence:

    def test_off_beats_selected_everywhere(self):
        totals = resolve_working_days(
            ALL_DAYS, 2024, [ev("OFF", "2024-01-01", "2025-01-01")], start_date="2024-01-01"
        )
        assert totals == WorkingDayTotals(0, 366)

    def test_on_beats_unselected_everywhere(self):
        totals = resolve_working_days(
            set(), 2024, [ev("ON", "2024-01-01", "2025-01-01")], start_date="2024-01-01"
        )
        assert totals == WorkingDayTotals(366, 0)

    def test_on_on_selected_day_changes_nothing(self, baseline):
        totals = resolve_working_days(
            WORKWEEK, 2024, [ev("ON", "2024-06-10", "2024-06-10")], start_date="2024-01-01"
        )
        assert totals == baseline

    def test_overlap_resolved_by_input_order(self, baseline):
        events = [
            ev("OFF", "2024-06-10", "2024-06-15", id="week"),
            ev("ON", "2024-06-12", "2024-06-12", id="wed"),
        ]
        totals = resolve_working_days(WORKWEEK, 2024, events, start_date="2024-01-01")
        assert totals.working_days_count == baseline.working_days_count - 4

    def test_events_outside_range_ignored(self, baseline):
        events = [
            ev("OFF", "2023-12-29", "2023-12-29"),
            ev("OFF", "2025-01-02", "2025-01-02"),
        ]
        totals = resolve_working_days(WORKWEEK, 2024, events, start_date="2024-01-01")
        assert totals == baseline

    def test_events_before_mid_year_start_ignored(self):
        events = [ev("OFF", "2024-03-04", "2024-03-04")]
        with_event = resolve_working_days(WORKWEEK, 2024, events, start_date="2024-07-01")
        without = resolve_working_days(WORKWEEK, 2024, [], start_date="2024-07-01")
        assert with_event == without

    def test_mapping_events(self, baseline):
        events = [{"id": "1", "title": "OFF", "start": "2024-06-10", "end": "2024-06-10"}]
        totals = resolve_working_days(WORKWEEK, 2024, events, start_date="2024-01-01")
        assert totals.working_days_count == baseline.working_days_count - 1


# ── Pattern fallback ──────────────────────────────────────────────────────────

class TestPatternOnly:

    @pytest.mark.parametrize("year", [2023, 2024, 2025])
    def test_matches_naive_weekday_count(self, year):
        selected = {"Mon", "Wed", "Sat"}
        names = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        day = dt.date(year, 1, 1)
        expected = 0
        while day.year == year:
            expected += names[day.weekday()] in selected
            day += dt.timedelta(days=1)
        totals = resolve_working_days(selected, year, [])
        assert totals.working_days_count == expected

    def test_start_defaults_to_jan1(self, baseline):
        assert resolve_working_days(WORKWEEK, 2024) == baseline

    def test_all_days_selected(self):
        assert resolve_working_days(ALL_DAYS, 2023) == WorkingDayTotals(365, 0)


# ── Mid-year resumption and history ───────────────────────────────────────────

class TestHistory:

    def test_history_added_verbatim(self):
        plain = resolve_working_days(WORKWEEK, 2024, [], 0, 0, "2024-07-01")
        with_history = resolve_working_days(WORKWEEK, 2024, [], 120, 61, "2024-07-01")
        assert with_history.working_days_count == plain.working_days_count + 120
        assert with_history.non_working_days_count == plain.non_working_days_count + 61

    def test_second_half_of_2024(self):
        # 2024-07-01 is a Monday; 184 days to Dec 31 = 26 weeks + Mon, Tue.
        totals = resolve_working_days(WORKWEEK, 2024, [], 0, 0, "2024-07-01")
        assert totals == WorkingDayTotals(132, 52)

    def test_start_on_dec31(self):
        totals = resolve_working_days(WORKWEEK, 2024, [], 10, 5, "2024-12-31")
        assert totals == WorkingDayTotals(11, 5)

    def test_start_time_of_day_is_ignored(self):
        a = resolve_working_days(WORKWEEK, 2024, [], start_date="2024-07-01T18:45:00")
        b = resolve_working_days(WORKWEEK, 2024, [], start_date="2024-07-01")
        assert a == b

    def test_start_date_normalized_in_timezone(self):
        # 2024-07-01T02:00Z is still June 30 in New York.
        ny = resolve_working_days(
            WORKWEEK, 2024, [], start_date="2024-07-01T02:00:00Z", tz="America/New_York"
        )
        assert ny.total == inclusive_days(dt.date(2024, 6, 30), 2024)

    def test_negative_history_raises(self):
        with pytest.raises(ValueError):
            resolve_working_days(WORKWEEK, 2024, [], -1, 0)

    def test_unparseable_start_raises(self):
        with pytest.raises(InvalidRange):
            resolve_working_days(WORKWEEK, 2024, [], start_date="first of july")

    def test_malformed_event_aborts(self):
        with pytest.raises(InvalidRange):
            resolve_working_days(WORKWEEK, 2024, [ev("OFF", "2024-06-10", "garbage")])


# ── Conservation ──────────────────────────────────────────────────────────────

class TestConservation:

    @pytest.mark.parametrize("start", ["2024-01-01", "2024-02-29", "2024-06-10", "2024-12-31"])
    @pytest.mark.parametrize("history", [(0, 0), (17, 4), (200, 100)])
    def test_totals_conserve_days(self, start, history):
        events = [
            ev("OFF", "2024-03-01", "2024-03-08", id="a"),
            ev("ON", "2024-06-15", "2024-06-16", id="b"),
            ev("OFF", "2024-06-16", "2024-06-16", id="c"),
            ev("ON", "2024-12-25", "2024-12-25", id="d"),
        ]
        totals = resolve_working_days(WORKWEEK, 2024, events, *history, start)
        expected = sum(history) + inclusive_days(dt.date.fromisoformat(start), 2024)
        assert totals.total == expected

    def test_deterministic(self):
        events = [ev("OFF", "2024-03-01", "2024-03-08"), ev("ON", "2024-06-15", "2024-06-16")]
        first = resolve_working_days(WORKWEEK, 2024, events, 3, 2, "2024-02-01")
        second = resolve_working_days(WORKWEEK, 2024, list(events), 3, 2, "2024-02-01")
        assert first == second


# ── Selection / totals helpers ────────────────────────────────────────────────

class TestSelection:

    def test_from_flags(self):
        selection = ScheduleSelection.from_flags([True] * 5 + [False] * 2, 10, 3)
        assert selection.selected_days == WORKWEEK
        assert (selection.history_working_days, selection.history_non_working_days) == (10, 3)

    def test_resolve_schedule_matches_resolve_working_days(self):
        selection = ScheduleSelection(WORKWEEK, 5, 2)
        events = [ev("OFF", "2024-06-10", "2024-06-10")]
        assert resolve_schedule(selection, 2024, events, "2024-03-01") == resolve_working_days(
            WORKWEEK, 2024, events, 5, 2, "2024-03-01"
        )

    def test_selection_is_immutable(self):
        selection = ScheduleSelection({"Mon"})
        with pytest.raises(AttributeError):
            selection.history_working_days = 3

    def test_selection_rejects_negative_history(self):
        with pytest.raises(ValueError):
            ScheduleSelection(WORKWEEK, 0, -2)

    def test_totals_to_dict(self, baseline):
        assert baseline.to_dict() == {"workingDaysCount": 262, "nonWorkingDaysCount": 104}

    def test_override_dates_logged_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="salesdesk.calendar.ledger"):
            resolve_working_days(WORKWEEK, 2024, [ev("OFF", "2024-06-10", "2024-06-10")])
        assert "2024-06-10" in caplog.text
