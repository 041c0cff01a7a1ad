from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from salesdesk.periods import (
    DateLike,
    InvalidRange,
    days_from_flags,
    to_date,
    weekday_index,
    year_end,
)

from .calendar import WorkCalendar
from .overrides import EventLike, build_override_map

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WorkingDayTotals:
    working_days_count: int
    non_working_days_count: int

    @property
    def total(self) -> int:
        return self.working_days_count + self.non_working_days_count

    def to_dict(self) -> dict[str, int]:
        return {
            "workingDaysCount": self.working_days_count,
            "nonWorkingDaysCount": self.non_working_days_count,
        }


@dataclass(frozen=True, slots=True)
class ScheduleSelection:
    """Recurring weekday pattern plus counters carried over from a prior period."""

    selected_days: frozenset[str]
    history_working_days: int = 0
    history_non_working_days: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "selected_days", frozenset(self.selected_days))
        for name in self.selected_days:
            weekday_index(name)
        _check_history(self.history_working_days, self.history_non_working_days)

    @classmethod
    def from_flags(
        cls,
        flags: Sequence[bool],
        history_working_days: int = 0,
        history_non_working_days: int = 0,
    ) -> "ScheduleSelection":
        """From the stored Mon..Sun boolean array."""
        return cls(days_from_flags(flags), history_working_days, history_non_working_days)


def _check_history(working: int, non_working: int) -> None:
    if working < 0 or non_working < 0:
        raise ValueError(
            f"History counters must be non-negative; got {working}, {non_working}."
        )


def resolve_working_days(
    selected_days: Iterable[str],
    year: int,
    events: Iterable[EventLike] = (),
    history_working_days: int = 0,
    history_non_working_days: int = 0,
    start_date: Optional[DateLike] = None,
    *,
    tz: Optional[str] = None,
) -> WorkingDayTotals:
    """
    Working / non-working day totals from `start_date` through Dec 31 of
    `year`, added to the carried-over history counters.

    A date is working if it has an ON override, or has no override and its
    weekday is selected.  OFF overrides always make it non-working.

    Raises InvalidRange if `start_date` falls after Dec 31 of `year`.
    """
    _check_history(history_working_days, history_non_working_days)

    end = year_end(year)
    start = to_date(start_date, tz) if start_date is not None else dt.date(year, 1, 1)
    if start > end:
        raise InvalidRange(f"Start date {start} is after the end of {year}.")

    overrides = build_override_map(events, tz)
    horizon = (end - start).days + 1

    in_range = {
        day: status for day, status in overrides.items()
        if start.isoformat() <= day <= end.isoformat()
    }
    for day, status in sorted(in_range.items()):
        logger.debug("Date: %s, Override: %s", day, status)

    calendar = WorkCalendar(selected_days, origin=start, horizon=horizon, overrides=in_range)
    working, total = calendar.count(start, end)

    totals = WorkingDayTotals(
        working_days_count=history_working_days + working,
        non_working_days_count=history_non_working_days + (total - working),
    )
    logger.debug(
        "Resolved %s..%s: %d working, %d non-working (%d overrides)",
        start, end, totals.working_days_count, totals.non_working_days_count, len(in_range),
    )
    return totals


def resolve_schedule(
    selection: ScheduleSelection,
    year: int,
    events: Iterable[EventLike] = (),
    start_date: Optional[DateLike] = None,
    *,
    tz: Optional[str] = None,
) -> WorkingDayTotals:
    return resolve_working_days(
        selection.selected_days,
        year,
        events,
        selection.history_working_days,
        selection.history_non_working_days,
        start_date,
        tz=tz,
    )
