# src/salesdesk/periods/tz.py
from __future__ import annotations

import datetime as dt
import re
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from salesdesk.config import DEFAULT_TIMEZONE

from ._exceptions import InvalidRange

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


def normalize_tz_name(name: Optional[str]) -> str:
    """Normalize a timezone identifier.

    Supported forms:
      - None/"" -> DEFAULT_TIMEZONE
      - "UTC" / "Z" / "GMT" -> "UTC"
      - IANA names, e.g. "America/New_York"
      - Fixed offsets: "+02:00", "+0200", "-05:00"
    """
    if name is None:
        return DEFAULT_TIMEZONE
    s = str(name).strip()
    if not s:
        return DEFAULT_TIMEZONE
    if s.lower() in {"utc", "z", "gmt", "utc0", "utc+0"}:
        return "UTC"
    return s


def resolve_tz(name: Optional[str]) -> dt.tzinfo:
    """Resolve a timezone name into a tzinfo.

    Raises InvalidRange for unknown identifiers.
    """
    tz_name = normalize_tz_name(name)

    if tz_name == "UTC":
        return dt.timezone.utc

    m = _OFFSET_RE.match(tz_name)
    if m:
        sign_s, hh_s, mm_s = m.groups()
        hh = int(hh_s)
        mm = int(mm_s)
        if hh > 23 or mm > 59:
            raise InvalidRange(f"Invalid timezone offset: {tz_name!r}")
        sign = 1 if sign_s == "+" else -1
        return dt.timezone(dt.timedelta(minutes=sign * (hh * 60 + mm)))

    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as ex:
        raise InvalidRange(f"Invalid timezone identifier: {tz_name!r}") from ex


def today(tz: Optional[str] = None) -> dt.date:
    return dt.datetime.now(tz=resolve_tz(tz)).date()
