"""
Localized kick-off time parsing.

The site prints times like ``Start Time: 4/7 - 8:30 PM`` (day/month, 12-hour
clock) in a fixed UTC+06:30 zone and never prints the year.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from .utils import iso_utc, utc_now

DEFAULT_UTC_OFFSET_MINUTES = 6 * 60 + 30
DEFAULT_YEAR_WINDOW_DAYS = 200

START_TIME_RE = re.compile(
    r"(?<!\d)(\d{1,2})\s*/\s*(\d{1,2})\s*-\s*(\d{1,2})\s*:\s*(\d{2})\s*(AM|PM)\b",
    re.IGNORECASE | re.ASCII,
)


def parse_start_time(
    text: Optional[str],
    now: Optional[datetime] = None,
    utc_offset_minutes: int = DEFAULT_UTC_OFFSET_MINUTES,
    year_window_days: int = DEFAULT_YEAR_WINDOW_DAYS,
) -> Optional[datetime]:
    """
    Parse a start-time token into an aware UTC datetime.

    The year comes from ``now`` in the local zone. A candidate more than
    ``year_window_days`` before ``now`` moves to next year, more than that after
    moves to last year. Exactly ``year_window_days`` away is left alone.

    Returns:
        datetime in UTC, or None if the text does not match or is out of range.
    """
    m = START_TIME_RE.search(text or "")
    if not m:
        return None
    day, month, hour12, minute = (int(g, 10) for g in m.groups()[:4])
    meridiem = m.group(5).upper()
    if not (1 <= month <= 12 and 1 <= day <= 31 and 1 <= hour12 <= 12 and 0 <= minute <= 59):
        return None

    hour24 = hour12 % 12
    if meridiem == "PM":
        hour24 += 12

    local_tz = timezone(timedelta(minutes=utc_offset_minutes))
    now = now or utc_now()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    year = now.astimezone(local_tz).year
    window = timedelta(days=year_window_days)

    candidate = _local_instant(year, month, day, hour24, minute, local_tz)
    if candidate is None:
        # e.g. 29/2 outside a leap year; the adjacent year may still be valid
        for alt in (year + 1, year - 1):
            candidate = _local_instant(alt, month, day, hour24, minute, local_tz)
            if candidate is not None and abs(candidate - now) <= window:
                break
        else:
            return None

    if candidate < now - window:
        shifted = _local_instant(candidate.year + 1, month, day, hour24, minute, local_tz)
        candidate = shifted or candidate
    elif candidate > now + window:
        shifted = _local_instant(candidate.year - 1, month, day, hour24, minute, local_tz)
        candidate = shifted or candidate
    return candidate.astimezone(timezone.utc)


def _local_instant(year, month, day, hour, minute, tz) -> Optional[datetime]:
    try:
        return datetime(year, month, day, hour, minute, tzinfo=tz)
    except ValueError:
        return None


def start_time_iso(text: Optional[str], now: Optional[datetime] = None, **kwargs) -> Optional[str]:
    """ISO-8601 UTC string for ``text`` or None."""
    dt = parse_start_time(text, now=now, **kwargs)
    return iso_utc(dt) if dt else None
