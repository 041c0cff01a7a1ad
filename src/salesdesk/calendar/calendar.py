from __future__ import annotations

import datetime as dt
import logging
from typing import Iterable, Mapping, Optional, Union

import numpy as np

from salesdesk.config import OVERRIDE_ON, OVERRIDE_STATES
from salesdesk.periods import InvalidRange, day_of_week, to_date, weekday_index

logger = logging.getLogger(__name__)

DayKey = Union[str, dt.date]


class WorkCalendar:
    """
    Compiled working-day calendar: dense 0/1 weight + prefix-sum array over
    the days from `origin`.  The weekly pattern is tiled across the horizon
    and ON/OFF overrides are written over it, so an override always wins.
    """

    _DEFAULT_BUFFER: int = 366

    def __init__(
        self,
        pattern: Iterable[str],
        origin: DayKey,
        horizon: Optional[int] = None,
        overrides: Optional[Mapping[DayKey, str]] = None,
    ) -> None:
        self._pattern: frozenset[str] = frozenset(pattern)
        self._np_pattern: np.ndarray = np.zeros(7, dtype=np.int64)
        for name in self._pattern:
            self._np_pattern[weekday_index(name)] = 1

        self._origin: dt.date = to_date(origin)
        self._origin_dow: int = day_of_week(self._origin)

        if horizon is None:
            horizon = self._DEFAULT_BUFFER
        if horizon < 1:
            raise InvalidRange(f"Horizon must be at least one day; got {horizon}.")
        self._horizon: int = horizon

        self._weights: np.ndarray = self._pattern_weights(0, self._horizon)
        self._overrides: dict[dt.date, str] = {}

        if overrides:
            for day, status in overrides.items():
                self._set_override(to_date(day), status)

        self._build_prefix()

    # ── prefix management ────────────────────────────────────────────────

    def _pattern_weights(self, first: int, stop: int) -> np.ndarray:
        offsets = np.arange(first, stop, dtype=np.int64)
        return self._np_pattern[(offsets + self._origin_dow) % 7].copy()

    def _build_prefix(self) -> None:
        self._prefix = np.empty(self._horizon + 1, dtype=np.int64)
        self._prefix[0] = 0
        np.cumsum(self._weights, out=self._prefix[1:])

    def _rebuild_prefix_from(self, day: int) -> None:
        self._prefix[day + 1:] = (
            self._prefix[day] + np.cumsum(self._weights[day:])
        )

    def _extend_to(self, new_horizon: int) -> None:
        self._weights = np.concatenate(
            [self._weights, self._pattern_weights(self._horizon, new_horizon)]
        )
        self._horizon = new_horizon
        self._build_prefix()

    def _offset(self, day: dt.date) -> int:
        return (day - self._origin).days

    # ── override management ──────────────────────────────────────────────

    def _set_override(self, day: dt.date, status: str) -> Optional[int]:
        if status not in OVERRIDE_STATES:
            raise InvalidRange(f"Override must be one of {OVERRIDE_STATES}; got {status!r}.")
        offset = self._offset(day)
        if offset < 0:
            logger.debug("Ignoring override %s before origin %s", day, self._origin)
            return None
        if offset >= self._horizon:
            self._extend_to(offset + 1 + self._DEFAULT_BUFFER)
        self._weights[offset] = 1 if status == OVERRIDE_ON else 0
        self._overrides[day] = status
        return offset

    def add_override(self, day: DayKey, status: str) -> None:
        offset = self._set_override(to_date(day), status)
        if offset is not None:
            self._rebuild_prefix_from(offset)

    def remove_override(self, day: DayKey) -> None:
        d = to_date(day)
        if self._overrides.pop(d, None) is None:
            return
        offset = self._offset(d)
        self._weights[offset] = self._np_pattern[(offset + self._origin_dow) % 7]
        self._rebuild_prefix_from(offset)

    # ── queries ──────────────────────────────────────────────────────────

    def is_working(self, day: DayKey) -> bool:
        d = to_date(day)
        offset = self._offset(d)
        if offset < 0:
            raise InvalidRange(f"{d} is before the calendar origin {self._origin}.")
        if offset >= self._horizon:
            return bool(self._np_pattern[day_of_week(d)])
        return bool(self._weights[offset])

    def count(
        self, start: Optional[DayKey] = None, end: Optional[DayKey] = None
    ) -> tuple[int, int]:
        """
        ``(working, total)`` days in the inclusive range `start`..`end`.

        `start` defaults to the origin, `end` to the last day of the horizon.
        """
        first = self._offset(to_date(start)) if start is not None else 0
        last = self._offset(to_date(end)) if end is not None else self._horizon - 1
        if first < 0:
            raise InvalidRange(f"Range starts before the calendar origin {self._origin}.")
        if last < first:
            raise InvalidRange("Range end is before its start.")
        if last >= self._horizon:
            self._extend_to(last + 1 + self._DEFAULT_BUFFER)

        working = int(self._prefix[last + 1] - self._prefix[first])
        return working, last - first + 1

    # ── properties / repr ────────────────────────────────────────────────

    @property
    def pattern(self) -> frozenset[str]:
        return self._pattern

    @property
    def origin(self) -> dt.date:
        return self._origin

    @property
    def horizon(self) -> int:
        return self._horizon

    @property
    def overrides(self) -> dict[str, str]:
        return {d.isoformat(): s for d, s in sorted(self._overrides.items())}

    def __repr__(self) -> str:
        return (
            f"WorkCalendar(pattern={sorted(self._pattern, key=weekday_index)}, "
            f"origin={self._origin.isoformat()!r}, "
            f"horizon={self._horizon}, "
            f"overrides={len(self._overrides)})"
        )
