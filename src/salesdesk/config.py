# src/salesdesk/config.py

from datetime import timedelta
from typing import Dict, Final, Tuple


# ==========================
# Dates and timezones
# ==========================

#: Timezone used to turn timestamps into calendar dates when a caller does not
#: pass ``tz=``.  The machine's local timezone is never used implicitly.
DEFAULT_TIMEZONE: Final[str] = "UTC"

#: Canonical date string format; also the override map key format.
DATE_FORMAT_ISO: Final[str] = "%Y-%m-%d"

#: Weekday name -> index, Sunday = 0.
WEEKDAY_INDEX: Final[Dict[str, int]] = {
    "Sun": 0,
    "Mon": 1,
    "Tue": 2,
    "Wed": 3,
    "Thu": 4,
    "Fri": 5,
    "Sat": 6,
}

#: Display order of a week and of the stored 7-flag weekday array.
WEEK_ORDER: Final[Tuple[str, ...]] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

#: English short month names for week range labels ("Jun 10, 2024").
MONTH_ABBR: Final[Tuple[str, ...]] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


# ==========================
# Schedule overrides
# ==========================

#: An event longer than this is multi-day; its end date is exclusive.
MULTI_DAY_THRESHOLD: Final[timedelta] = timedelta(hours=24)

#: Allowed override titles.
OVERRIDE_ON: Final[str] = "ON"
OVERRIDE_OFF: Final[str] = "OFF"
OVERRIDE_STATES: Final[Tuple[str, str]] = (OVERRIDE_ON, OVERRIDE_OFF)


# ==========================
# Formulas
# ==========================

#: Fractional formula results are rounded (half away from zero) to this many places.
FORMULA_DECIMALS: Final[int] = 2

#: Tracker row whose checked dates mark a day as prospected.
PROSPECTED_KEY: Final[str] = "prospected_today"
