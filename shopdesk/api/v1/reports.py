from datetime import date, datetime
from typing import Callable
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query

from shopdesk.api.v1.schemas import BookingSchema, RevenueSchema, ServiceMixSchema, ServiceShareSchema
from shopdesk.application.use_cases.reports import (
    bookings_by_date,
    bookings_on,
    range_revenue,
    revenue_summary,
    service_mix,
    service_mix_chart,
)
from shopdesk.application.use_cases.salon_session import SalonUseCase
from shopdesk.application.utils.date_parser import parse_booking_date
from shopdesk.wiring.dependencies import get_clock, get_salon_use_case, get_timezone

router = APIRouter()


def _parse_day(value: str, field: str) -> date:
    day = parse_booking_date(value)
    if day is None:
        raise HTTPException(status_code=400, detail=f"Invalid {field}: {value}")
    return day


@router.get("/revenue", response_model=RevenueSchema)
def revenue(
    start: str | None = Query(None),
    end: str | None = Query(None),
    uc: SalonUseCase = Depends(get_salon_use_case),
    timezone: ZoneInfo = Depends(get_timezone),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    bookings = uc.salon.bookings
    summary = revenue_summary(bookings, clock(), timezone)
    custom = None
    if start is not None and end is not None:
        custom = range_revenue(bookings, _parse_day(start, "start"), _parse_day(end, "end"), timezone)
    return RevenueSchema(today=summary.today, week=summary.week, month=summary.month, range=custom)


@router.get("/service-mix", response_model=ServiceMixSchema)
def service_mix_report(uc: SalonUseCase = Depends(get_salon_use_case)):
    bookings = uc.salon.bookings
    return ServiceMixSchema(
        shares=[ServiceShareSchema(name=s.name, value=s.value, percent=s.percent) for s in service_mix(bookings)],
        chart=service_mix_chart(bookings),
    )


@router.get("/today", response_model=list[BookingSchema])
def today(
    uc: SalonUseCase = Depends(get_salon_use_case),
    timezone: ZoneInfo = Depends(get_timezone),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    day = clock().astimezone(timezone).date()
    return [BookingSchema.from_entity(b) for b in bookings_on(uc.salon.bookings, day)]


@router.get("/calendar", response_model=dict[str, list[BookingSchema]])
def calendar(month: str | None = Query(None, description="YYYY-MM"), uc: SalonUseCase = Depends(get_salon_use_case)):
    grouped = bookings_by_date(uc.salon.bookings)
    if month:
        grouped = {day: items for day, items in grouped.items() if day.startswith(month)}
    return {day: [BookingSchema.from_entity(b) for b in items] for day, items in grouped.items()}
