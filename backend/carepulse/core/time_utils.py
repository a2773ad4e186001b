"""
Date/time display helpers.
Produces the en-US renderings used in SMS text and admin listings.
"""
from datetime import date, datetime
from typing import Dict, Optional, Union
from zoneinfo import ZoneInfo

from .config import settings

MONTHS_SHORT = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
WEEKDAYS_SHORT = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def to_display_tz(value: Union[datetime, date, str], tz_name: Optional[str] = None) -> datetime:
    """Parse ``value`` and express it in the display timezone.

    Naive values are taken to already be in the display timezone.
    """
    tz = ZoneInfo(tz_name or settings.DISPLAY_TIMEZONE)
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    elif not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)

    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def _time_12h(dt: datetime) -> str:
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {suffix}"


def format_date_time(value: Union[datetime, date, str], tz_name: Optional[str] = None) -> Dict[str, str]:
    """
    Format a moment four ways:

    - ``date_time``: ``Jun 1, 2024, 10:00 AM``
    - ``date_day``:  ``Sat, 06/01/2024``
    - ``date_only``: ``Jun 1, 2024``
    - ``time_only``: ``10:00 AM``
    """
    dt = to_display_tz(value, tz_name)
    date_only = f"{MONTHS_SHORT[dt.month - 1]} {dt.day}, {dt.year}"
    time_only = _time_12h(dt)
    return {
        "date_time": f"{date_only}, {time_only}",
        "date_day": f"{WEEKDAYS_SHORT[dt.weekday()]}, {dt.month:02d}/{dt.day:02d}/{dt.year}",
        "date_only": date_only,
        "time_only": time_only,
    }
