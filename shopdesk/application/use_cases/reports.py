from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import Iterable
from zoneinfo import ZoneInfo

from shopdesk.application.utils.date_parser import (
    format_compact_date,
    iso_dashed,
    local_midnight,
    month_bounds,
    to_epoch_ms,
    week_start,
)
from shopdesk.domain.entities.booking import Booking, BookingStatus
from shopdesk.domain.entities.report import RevenueSummary, ServiceShare
from shopdesk.domain.entities.service_catalog import KNOWN_SERVICE_NAMES


def _paid(bookings: Iterable[Booking]) -> list[Booking]:
    return [b for b in bookings if b.status == BookingStatus.paid]


def _window_ms(start: date, end: date, timezone: ZoneInfo) -> tuple[int, int]:
    """Half-open [start, end) expressed in epoch milliseconds."""
    return to_epoch_ms(local_midnight(start, timezone)), to_epoch_ms(local_midnight(end, timezone))


def revenue_between(bookings: Iterable[Booking], start_ms: int, end_ms: int) -> float:
    return sum(b.total_amount for b in _paid(bookings) if start_ms <= b.start_ms < end_ms)


def revenue_summary(bookings: Iterable[Booking], now: datetime, timezone: ZoneInfo) -> RevenueSummary:
    """Paid revenue for the day, the Monday-based week and the calendar month containing `now`."""
    bookings = list(bookings)
    today = now.astimezone(timezone).date()
    monday = week_start(today)
    month_start, next_month = month_bounds(today)

    return RevenueSummary(
        today=revenue_between(bookings, *_window_ms(today, today + timedelta(days=1), timezone)),
        week=revenue_between(bookings, *_window_ms(monday, monday + timedelta(days=7), timezone)),
        month=revenue_between(bookings, *_window_ms(month_start, next_month, timezone)),
    )


def range_revenue(bookings: Iterable[Booking], start: date, end: date, timezone: ZoneInfo) -> float:
    """Paid revenue from the start of `start` through the end of `end`, both inclusive."""
    if end < start:
        return 0
    return revenue_between(bookings, *_window_ms(start, end + timedelta(days=1), timezone))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def service_mix(bookings: Iterable[Booking]) -> list[ServiceShare]:
    """
    Split each paid service amount evenly across the booking's services and
    report every service's share of the total as a whole percentage.

    Percentages are rounded individually, so they need not add up to 100.
    Services that round to 0% are left out.
    """
    revenue: dict[str, float] = {}
    total = 0.0
    for b in _paid(bookings):
        if not b.amount or not b.services:
            continue
        share = b.amount / len(b.services)
        for name in b.services:
            revenue[name] = revenue.get(name, 0.0) + share
            total += share

    ranked = sorted(revenue.items(), key=lambda item: item[1], reverse=True)
    shares = [
        ServiceShare(name=name, value=value, percent=_round_half_up(value / total * 100) if total > 0 else 0)
        for name, value in ranked
    ]
    return [s for s in shares if s.percent > 0]


def service_mix_chart(
    bookings: Iterable[Booking],
    known_services: Iterable[str] = KNOWN_SERVICE_NAMES,
) -> dict[str, int]:
    percents = {s.name: s.percent for s in service_mix(bookings)}
    return {name: percents.get(name, 0) for name in known_services}


def bookings_on(bookings: Iterable[Booking], day: date) -> list[Booking]:
    compact = format_compact_date(day)
    return sorted((b for b in bookings if str(b.date) == compact), key=lambda b: b.start_ms)


def bookings_by_date(bookings: Iterable[Booking]) -> dict[str, list[Booking]]:
    """Group bookings under YYYY-MM-DD keys for the month calendar."""
    grouped: dict[str, list[Booking]] = {}
    for b in bookings:
        grouped.setdefault(iso_dashed(b.date), []).append(b)
    for day_bookings in grouped.values():
        day_bookings.sort(key=lambda b: b.start_ms)
    return grouped
