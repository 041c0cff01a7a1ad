from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from salesdesk.config import PROSPECTED_KEY
from salesdesk.periods import DateLike, InvalidRange, start_of_week, to_date

from .formula import FieldValue, FieldsLike, evaluate_formula, round_half_up
from .parser import Number

_LEADING_FLOAT_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

CellValue = Union[str, bool, None]


@dataclass(frozen=True, slots=True)
class TrackerRow:
    """One business-tracker row: a metric key and its value per ISO date."""

    key: str
    values: Mapping[str, CellValue] = field(default_factory=dict)
    input_type: str = "text"
    formula: str = ""
    label: str = ""

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "TrackerRow":
        return cls(
            key=record["key"],
            values=dict(record.get("values") or {}),
            input_type=record.get("input_type") or record.get("inputType") or "text",
            formula=record.get("formula") or "",
            label=record.get("label") or "",
        )


@dataclass(frozen=True, slots=True)
class WeeklyResults:
    totals: dict[str, str]
    goals: dict[str, Number]


RowLike = Union[TrackerRow, Mapping[str, Any]]


def _as_row(row: RowLike) -> TrackerRow:
    return row if isinstance(row, TrackerRow) else TrackerRow.from_mapping(row)


def parse_number(value: Any) -> float:
    """Leading numeric prefix of a string, the value itself for numbers, else NaN."""
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    m = _LEADING_FLOAT_RE.match(str(value))
    return float(m.group(1)) if m else math.nan


def _cell_number(value: CellValue) -> float:
    if not isinstance(value, str):
        return 0.0
    num = parse_number(value)
    return 0.0 if math.isnan(num) else num


def _date_or_none(key: str, tz: Optional[str]):
    try:
        return to_date(key, tz)
    except InvalidRange:
        return None


def field_value(items: Iterable[Any], field_name: str) -> float:
    """Numeric value of the first item named `field_name`; 0 if absent or not numeric."""
    for item in items:
        if isinstance(item, FieldValue):
            name, value = item.field_name, item.value
        else:
            name, value = item.get("field_name"), item.get("value")
        if name == field_name:
            num = parse_number(value)
            return 0.0 if math.isnan(num) else num
    return 0.0


def remaining_days_to_prospect(
    checked: Optional[Mapping[str, CellValue]],
    working_days: int,
    selected_date: DateLike,
    tz: Optional[str] = None,
) -> int:
    """Working days minus the days already prospected before the selected week."""
    week_start = start_of_week(selected_date, tz)
    done = 0
    for key, status in (checked or {}).items():
        if status is not True:
            continue
        day = _date_or_none(key, tz)
        if day is not None and day < week_start:
            done += 1
    return working_days - done


def sum_from_key(
    rows: Sequence[RowLike],
    key: str,
    selected_date: DateLike,
    checked_key: str = PROSPECTED_KEY,
    tz: Optional[str] = None,
) -> float:
    """
    Sum of the `key` row over prospected dates before the selected week.

    Only dates ticked in the `checked_key` row count, and only non-blank
    numeric cells contribute.
    """
    by_key = {r.key: r for r in map(_as_row, rows)}
    checked = by_key.get(checked_key)
    data = by_key.get(key)
    if checked is None or data is None:
        return 0.0

    week_start = start_of_week(selected_date, tz)
    total = 0.0
    for date_key, value in data.values.items():
        if checked.values.get(date_key) is not True:
            continue
        if not isinstance(value, str) or not value.strip():
            continue
        day = _date_or_none(date_key, tz)
        num = parse_number(value)
        if day is not None and day < week_start and not math.isnan(num):
            total += num
    return total


def weekly_totals(
    rows: Iterable[RowLike], dates: Iterable[str], fields: FieldsLike
) -> WeeklyResults:
    """
    Per-row totals over `dates` plus formula goals.

    Checkbox rows count ticked dates; number and float rows sum to a
    two-decimal string.  Rows with a formula get a goal from `fields`.
    """
    columns = sorted(dates)
    if not isinstance(fields, Mapping):
        fields = list(fields)

    results = WeeklyResults(totals={}, goals={})
    for row in map(_as_row, rows):
        if row.input_type == "checkbox":
            results.totals[row.key] = str(sum(1 for d in columns if row.values.get(d) is True))
        elif row.input_type in ("number", "float"):
            total = sum(_cell_number(row.values.get(d)) for d in columns)
            results.totals[row.key] = f"{round_half_up(total):.2f}"

        if row.formula:
            results.goals[row.key] = evaluate_formula(row.formula, fields)
    return results
