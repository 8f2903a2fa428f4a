from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

_COMPACT_DATE = re.compile(r"^(\d{4})(\d{2})(\d{2})$")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_TIME = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_booking_date(value: str) -> date | None:
    """Accept YYYYMMDD or YYYY-MM-DD. Returns None if not a real calendar date."""
    text = str(value or "").strip()
    match = _COMPACT_DATE.match(text) or _ISO_DATE.match(text)
    if not match:
        return None
    year, month, day = (int(g) for g in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_clock_time(value: str) -> tuple[int, int] | None:
    match = _TIME.match(str(value or "").strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour, minute


def format_compact_date(value: date) -> str:
    return value.strftime("%Y%m%d")


def format_clock_time(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def to_epoch_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def from_epoch_ms(ms: int, timezone: ZoneInfo) -> datetime:
    return datetime.fromtimestamp(ms / 1000, timezone)


def local_midnight(day: date, timezone: ZoneInfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone)


def week_start(day: date) -> date:
    # Monday-based week; Sunday counts as day 7.
    return day - timedelta(days=day.isoweekday() - 1)


def month_bounds(day: date) -> tuple[date, date]:
    start = day.replace(day=1)
    if start.month == 12:
        return start, start.replace(year=start.year + 1, month=1)
    return start, start.replace(month=start.month + 1)


def iso_dashed(compact: str) -> str:
    text = str(compact)
    return f"{text[0:4]}-{text[4:6]}-{text[6:8]}"
