from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from zoneinfo import ZoneInfo

from shopdesk.application.exceptions import ValidationError
from shopdesk.application.utils.date_parser import (
    format_clock_time,
    format_compact_date,
    from_epoch_ms,
    parse_booking_date,
    parse_clock_time,
    to_epoch_ms,
)
from shopdesk.domain.entities.shop_settings import ShopSettings


@dataclass(frozen=True)
class TimeSlot:
    date: str  # YYYYMMDD
    start_time: str
    end_time: str
    start_ms: int
    end_ms: int


def total_duration_minutes(services: list[str] | tuple[str, ...], settings: ShopSettings) -> int:
    return sum(settings.duration_for(name) for name in services)


def compute_time_slot(
    booking_date: str,
    start_time: str,
    services: list[str] | tuple[str, ...],
    settings: ShopSettings,
    timezone: ZoneInfo,
) -> TimeSlot:
    """
    Resolve a booking's start/end from the selected services.

    The end is the start plus the sum of configured per-service durations;
    services missing from the configuration contribute zero minutes.
    """
    if not services:
        raise ValidationError("Select at least one service.")

    day = parse_booking_date(booking_date)
    if day is None:
        raise ValidationError(f"Invalid booking date: {booking_date!r}")

    clock = parse_clock_time(start_time)
    if clock is None:
        raise ValidationError(f"Invalid start time: {start_time!r}")

    minutes = total_duration_minutes(services, settings)
    if minutes <= 0:
        raise ValidationError("Selected services have no configured duration.")

    start = datetime.combine(day, time(hour=clock[0], minute=clock[1]), tzinfo=timezone)
    start_ms = to_epoch_ms(start)
    end_ms = start_ms + minutes * 60000
    end = from_epoch_ms(end_ms, timezone)

    return TimeSlot(
        date=format_compact_date(day),
        start_time=format_clock_time(*clock),
        end_time=format_clock_time(end.hour, end.minute),
        start_ms=start_ms,
        end_ms=end_ms,
    )
