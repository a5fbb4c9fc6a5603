"""
Time Utilities
Parsing and calendar helpers shared by the scheduling services
"""

import logging
from typing import Optional, Union
from datetime import datetime, date, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


logger = logging.getLogger(__name__)


def ensure_time(val: Union[time, str, None]) -> Optional[time]:
    """Ensure the provided value is a datetime.time.

    Accepts a time object or a string like 'HH:MM' or 'HH:MM:SS'.
    Raises ValueError if it cannot be converted.
    """
    if val is None:
        return None
    if isinstance(val, datetime):
        return val.time()
    if isinstance(val, time):
        return val
    if isinstance(val, str):
        for fmt in ("%H:%M", "%H:%M:%S"):
            try:
                return datetime.strptime(val.strip(), fmt).time()
            except ValueError:
                continue
        raise ValueError(f"Cannot parse scheduled_time string: {val}")
    raise ValueError(f"Unsupported scheduled_time type: {type(val)}")


def ensure_datetime(val: Union[datetime, str, None]) -> Optional[datetime]:
    """Parse an ISO-8601 instant into a naive datetime.

    Offsets are dropped without conversion, so the wall-clock fields (and the
    calendar day) are the ones the client sent.
    """
    if val is None:
        return None
    if isinstance(val, datetime):
        parsed = val
    elif isinstance(val, date):
        parsed = datetime.combine(val, time.min)
    elif isinstance(val, str):
        text = val.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Cannot parse datetime string: {val}")
    else:
        raise ValueError(f"Unsupported datetime type: {type(val)}")

    return parsed.replace(tzinfo=None)


def weekday_index(day: date) -> int:
    """Weekday index with 0 = Sunday .. 6 = Saturday"""
    return day.isoweekday() % 7


def local_today(timezone_name: Optional[str], now: Optional[datetime] = None) -> date:
    """
    Calendar date in the given IANA timezone.

    `now` is a naive UTC instant; defaults to the current time.
    Unknown timezones fall back to UTC.
    """
    try:
        tz = ZoneInfo(timezone_name) if timezone_name else ZoneInfo("UTC")
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone {timezone_name!r}, using UTC")
        tz = ZoneInfo("UTC")

    utc_now = (now or datetime.utcnow()).replace(tzinfo=ZoneInfo("UTC"))
    return utc_now.astimezone(tz).date()
