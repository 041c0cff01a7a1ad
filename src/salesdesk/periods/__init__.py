"""
salesdesk.periods
~~~~~~~~~~~~~~~~~

Calendar-date arithmetic shared by the working-day ledger and the dashboard
views: week and year boundaries, leap years, week counts, and the single
timezone discipline every timestamp goes through before it becomes a date.

Basic usage::

    from salesdesk.periods import week_details, weeks_in_year

    week_details("2024-06-12").range            # → "Jun 10, 2024 - Jun 16, 2024"
    weeks_in_year(2020)                          # → 53

Timestamps are turned into calendar dates in the timezone passed as ``tz=``
(default ``salesdesk.config.DEFAULT_TIMEZONE``)::

    from salesdesk.periods import iso_date

    iso_date("2024-06-10T02:00:00Z", tz="America/New_York")   # → "2024-06-09"

Public API
----------
InvalidRange   Unparseable date input, or a range past its year boundary.
PeriodError    Base exception for this package.
"""

from __future__ import annotations

from salesdesk.periods._exceptions import InvalidRange, PeriodError
from salesdesk.periods.periods import (
    DateLike,
    WeekDetails,
    adjacent_week_date,
    day_of_week,
    days_from_flags,
    flags_from_days,
    is_current_year,
    is_leap_year,
    is_same_date,
    iso_date,
    passed_weeks,
    remaining_weeks,
    report_end_date,
    start_of_week,
    to_date,
    to_datetime,
    week_details,
    week_list,
    weekday_index,
    weeks_in_year,
    year_end,
)
from salesdesk.periods.tz import resolve_tz, today

__all__ = [
    "DateLike",
    "InvalidRange",
    "PeriodError",
    "WeekDetails",
    "adjacent_week_date",
    "day_of_week",
    "days_from_flags",
    "flags_from_days",
    "is_current_year",
    "is_leap_year",
    "is_same_date",
    "iso_date",
    "passed_weeks",
    "remaining_weeks",
    "report_end_date",
    "resolve_tz",
    "start_of_week",
    "to_date",
    "to_datetime",
    "today",
    "week_details",
    "week_list",
    "weekday_index",
    "weeks_in_year",
    "year_end",
]
