from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Union

from salesdesk.config import MULTI_DAY_THRESHOLD, OVERRIDE_OFF, OVERRIDE_ON, OVERRIDE_STATES
from salesdesk.periods import DateLike, InvalidRange, to_datetime

logger = logging.getLogger(__name__)

EventLike = Union["CalendarEvent", Mapping[str, Any]]


def _normalize_title(title: Any) -> str:
    t = str(title).strip().upper() if title is not None else ""
    if t not in OVERRIDE_STATES:
        raise InvalidRange(f"Event title must be one of {OVERRIDE_STATES}; got {title!r}.")
    return t


@dataclass(frozen=True, slots=True)
class CalendarEvent:
    """
    An ON/OFF override window.

    `start`/`end` are any timestamp `to_datetime` accepts.  For spans longer
    than a day `end` is exclusive; a single-day event's `end` is inclusive.
    """

    id: str
    title: str
    start: DateLike
    end: DateLike
    description: str = ""

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "CalendarEvent":
        try:
            return cls(
                id=str(record.get("id", "")),
                title=record["title"],
                start=record["start"],
                end=record["end"],
                description=str(record.get("description") or ""),
            )
        except KeyError as ex:
            raise InvalidRange(f"Calendar event is missing {ex.args[0]!r}.") from ex

    @classmethod
    def from_exception(cls, record: Mapping[str, Any]) -> "CalendarEvent":
        """Build from a stored schedule exception ``{id, from_date, to_date, is_day_on}``."""
        try:
            return cls(
                id=str(record.get("id", "")),
                title=OVERRIDE_ON if record.get("is_day_on") else OVERRIDE_OFF,
                start=record["from_date"],
                end=record["to_date"],
                description=str(record.get("reason") or ""),
            )
        except KeyError as ex:
            raise InvalidRange(f"Schedule exception is missing {ex.args[0]!r}.") from ex

    def to_exception(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "from_date": self.start,
            "to_date": self.end,
            "is_day_on": _normalize_title(self.title) == OVERRIDE_ON,
            "reason": self.description or None,
        }

    def dates(self, tz: Optional[str] = None) -> list[dt.date]:
        """Calendar dates this event overrides, in order."""
        start = to_datetime(self.start, tz)
        end = to_datetime(self.end, tz)
        if end < start:
            raise InvalidRange(f"Event {self.id!r} ends before it starts.")

        first = start.date()
        last = end.date()
        elapsed = end.astimezone(dt.timezone.utc) - start.astimezone(dt.timezone.utc)
        if elapsed > MULTI_DAY_THRESHOLD:
            last -= dt.timedelta(days=1)

        return [first + dt.timedelta(days=i) for i in range((last - first).days + 1)]


def as_event(event: EventLike) -> CalendarEvent:
    if isinstance(event, CalendarEvent):
        return event
    return CalendarEvent.from_mapping(event)


def build_override_map(
    events: Iterable[EventLike], tz: Optional[str] = None
) -> dict[str, str]:
    """
    Expand events into ``{"YYYY-MM-DD": "ON" | "OFF"}``.

    Later events overwrite earlier ones on shared dates.  Each event is
    expanded fully before anything is written, so a malformed event leaves
    no partial range behind.
    """
    overrides: dict[str, str] = {}
    for raw in events:
        event = as_event(raw)
        title = _normalize_title(event.title)
        days = event.dates(tz)
        for day in days:
            overrides[day.isoformat()] = title
    logger.debug("Built override map with %d dates", len(overrides))
    return overrides
