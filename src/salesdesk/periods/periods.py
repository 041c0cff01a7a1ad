from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from salesdesk.config import MONTH_ABBR, WEEK_ORDER, WEEKDAY_INDEX

from ._exceptions import InvalidRange, PeriodError
from .tz import resolve_tz
from .tz import today as _today

DateLike = Union[str, dt.date, dt.datetime, int, float]

_ONE_WEEK = dt.timedelta(days=7)


@dataclass(frozen=True, slots=True)
class WeekDetails:
    range: str
    full_week: tuple[str, ...]
    full_week_dates: tuple[str, ...]


# ── normalization ────────────────────────────────────────────────────────

def _parse_iso(text: str) -> dt.date | dt.datetime:
    s = text.strip()
    if s[-1:] in ("Z", "z"):
        s = s[:-1] + "+00:00"
    try:
        if len(s) == 10:
            return dt.date.fromisoformat(s)
        return dt.datetime.fromisoformat(s)
    except ValueError as ex:
        raise InvalidRange(f"Cannot parse {text!r} as an ISO date.") from ex


def to_datetime(value: DateLike, tz: Optional[str] = None) -> dt.datetime:
    """
    Normalize `value` to an aware datetime in `tz`.

    Dates become midnight in `tz`, naive datetimes are read as wall time in
    `tz`, aware datetimes are converted, numbers are epoch milliseconds.
    """
    tzinfo = resolve_tz(tz)
    if isinstance(value, str):
        value = _parse_iso(value)
    if isinstance(value, dt.datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=tzinfo)
        return value.astimezone(tzinfo)
    if isinstance(value, dt.date):
        return dt.datetime(value.year, value.month, value.day, tzinfo=tzinfo)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return dt.datetime.fromtimestamp(value / 1000.0, tz=tzinfo)
        except (OverflowError, OSError, ValueError) as ex:
            raise InvalidRange(f"Epoch milliseconds out of range: {value!r}") from ex
    raise InvalidRange(f"Cannot interpret {value!r} as a date.")


def to_date(value: DateLike, tz: Optional[str] = None) -> dt.date:
    """Calendar date of `value` in `tz`; plain dates pass through untouched."""
    if isinstance(value, str):
        value = _parse_iso(value)
    if isinstance(value, dt.date) and not isinstance(value, dt.datetime):
        return value
    return to_datetime(value, tz).date()


def iso_date(value: DateLike, tz: Optional[str] = None) -> str:
    return to_date(value, tz).isoformat()


# ── weekdays ─────────────────────────────────────────────────────────────

def weekday_index(weekday: str) -> int:
    try:
        return WEEKDAY_INDEX[weekday]
    except KeyError:
        raise PeriodError(f"Unknown weekday {weekday!r}.") from None


def day_of_week(day: dt.date) -> int:
    """Weekday index of `day` with Sunday = 0."""
    return (day.weekday() + 1) % 7


def days_from_flags(flags: Sequence[bool]) -> frozenset[str]:
    """Stored Mon..Sun flag array -> set of selected weekday names."""
    return frozenset(name for name, on in zip(WEEK_ORDER, flags) if on)


def flags_from_days(days: Iterable[str]) -> list[bool]:
    selected = set(days)
    for name in selected:
        weekday_index(name)
    return [name in selected for name in WEEK_ORDER]


# ── weeks ────────────────────────────────────────────────────────────────

def start_of_week(value: DateLike, tz: Optional[str] = None) -> dt.date:
    """Monday of the week containing `value`; Sunday belongs to the week before."""
    day = to_date(value, tz)
    dow = day_of_week(day)
    diff = 6 if dow == 0 else dow - 1
    return day - dt.timedelta(days=diff)


def week_list(value: DateLike, tz: Optional[str] = None) -> list[tuple[str, str]]:
    """Seven ``("Mon 10", "2024-06-10")`` pairs for the week containing `value`."""
    monday = start_of_week(value, tz)
    out: list[tuple[str, str]] = []
    for i, name in enumerate(WEEK_ORDER):
        day = monday + dt.timedelta(days=i)
        out.append((f"{name} {day.day}", day.isoformat()))
    return out


def _range_label(day: dt.date) -> str:
    return f"{MONTH_ABBR[day.month - 1]} {day.day}, {day.year}"


def week_details(value: DateLike, tz: Optional[str] = None) -> WeekDetails:
    days = week_list(value, tz)
    monday = to_date(days[0][1])
    sunday = to_date(days[-1][1])
    return WeekDetails(
        range=f"{_range_label(monday)} - {_range_label(sunday)}",
        full_week=tuple(label for label, _ in days),
        full_week_dates=tuple(iso for _, iso in days),
    )


def adjacent_week_date(
    value: DateLike, direction: str = "next", tz: Optional[str] = None
) -> dt.date:
    day = to_date(value, tz)
    return day + _ONE_WEEK if direction == "next" else day - _ONE_WEEK


def is_same_date(a: DateLike, b: DateLike, tz: Optional[str] = None) -> bool:
    return to_date(a, tz) == to_date(b, tz)


# ── years ────────────────────────────────────────────────────────────────

def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def year_end(year: int) -> dt.date:
    return dt.date(year, 12, 31)


def weeks_in_year(year: int) -> int:
    jan1 = day_of_week(dt.date(year, 1, 1))
    if jan1 == 4 or (jan1 == 3 and is_leap_year(year)):
        return 53
    return 52


def remaining_weeks(from_date: DateLike, tz: Optional[str] = None) -> int:
    """Whole weeks between `from_date` and Dec 31 of its year."""
    day = to_date(from_date, tz)
    return (year_end(day.year) - day).days // 7


def passed_weeks(today: Optional[DateLike] = None, tz: Optional[str] = None) -> int:
    """Weeks of the current year already passed; 1 before the first Thursday."""
    now = to_date(today, tz) if today is not None else _today(tz)
    jan1 = dt.date(now.year, 1, 1)
    days_passed = (now - jan1).days

    start_dow = day_of_week(jan1) or 7
    days_to_first_thursday = (4 - start_dow + 7) % 7
    if days_passed < days_to_first_thursday:
        return 1
    return math.ceil((days_passed + start_dow - 1) / 7) - 1


def is_current_year(
    year: int, today: Optional[DateLike] = None, tz: Optional[str] = None
) -> bool:
    now = to_date(today, tz) if today is not None else _today(tz)
    return year == now.year


def report_end_date(
    year: Optional[int] = None,
    today: Optional[DateLike] = None,
    tz: Optional[str] = None,
) -> str:
    """
    Last day a report for `year` covers.

    Current year: the most recent completed Sunday (a week back if today is
    Sunday).  Past year: Dec 31.  Future year: Jan 1.
    """
    now = to_date(today, tz) if today is not None else _today(tz)
    target = now.year if year is None else year

    if target == now.year:
        dow = day_of_week(now)
        last_sunday = now - dt.timedelta(days=7 if dow == 0 else dow)
        return last_sunday.isoformat()
    if target < now.year:
        return year_end(target).isoformat()
    return dt.date(target, 1, 1).isoformat()
