"""
salesdesk.calendar
~~~~~~~~~~~~~~~~~~

Working-day ledger.  A recurring weekday pattern is reconciled against
point-in-time ON/OFF calendar overrides to produce working and non-working
day counts, merged with totals carried over from a prior period.

Basic usage::

    from salesdesk.calendar import resolve_working_days

    weekdays = {"Mon", "Tue", "Wed", "Thu", "Fri"}
    events = [{"id": "1", "title": "OFF", "start": "2024-06-10", "end": "2024-06-10"}]
    totals = resolve_working_days(weekdays, 2024, events)
    totals.working_days_count                     # → 261

Overrides on their own::

    from salesdesk.calendar import build_override_map

    build_override_map(events)                    # → {"2024-06-10": "OFF"}

Events longer than 24 hours treat `end` as exclusive; single-day events
treat it as inclusive.  Later events win where events overlap.

Public API
----------
CalendarEvent          An ON/OFF override window.
ScheduleSelection      Weekday pattern + history counters.
WorkCalendar           Dense pattern/override calendar with range counts.
WorkingDayTotals       Ledger result.
InvalidRange           Raised for bad dates and out-of-year start dates.
"""

from __future__ import annotations

from salesdesk.calendar.calendar import WorkCalendar
from salesdesk.calendar.ledger import (
    ScheduleSelection,
    WorkingDayTotals,
    resolve_schedule,
    resolve_working_days,
)
from salesdesk.calendar.overrides import CalendarEvent, build_override_map
from salesdesk.periods import InvalidRange

__all__ = [
    "CalendarEvent",
    "InvalidRange",
    "ScheduleSelection",
    "WorkCalendar",
    "WorkingDayTotals",
    "build_override_map",
    "resolve_schedule",
    "resolve_working_days",
]
