from __future__ import annotations

from dataclasses import dataclass, replace
from zoneinfo import ZoneInfo

from shopdesk.application.exceptions import (
    BookingNotFoundError,
    InvalidTransitionError,
    ValidationError,
)
from shopdesk.application.use_cases.customer_stats import apply_customer_stats
from shopdesk.application.utils.time_slots import compute_time_slot
from shopdesk.application.utils.validation import parse_amount, parse_optional_amount
from shopdesk.domain.entities.booking import Booking, BookingStatus
from shopdesk.domain.entities.customer import Customer
from shopdesk.domain.entities.shop_settings import ShopSettings
from shopdesk.domain.entities.store_state import SalonState


@dataclass(frozen=True)
class BookingMutation:
    state: SalonState
    booking: Booking


def create_booking(
    state: SalonState,
    customer: Customer,
    booking_date: str,
    start_time: str,
    services: list[str],
    settings: ShopSettings,
    timezone: ZoneInfo,
    now_ms: int,
    notes: str = "",
) -> BookingMutation:
    slot = compute_time_slot(booking_date, start_time, services, settings, timezone)
    booking = Booking(
        id=f"booking-{now_ms}",
        customer_id=customer.id,
        customer_name=customer.name,
        date=slot.date,
        start_time=slot.start_time,
        end_time=slot.end_time,
        start_ms=slot.start_ms,
        end_ms=slot.end_ms,
        services=tuple(services),
        notes=notes or "",
        status=BookingStatus.booked,
        created_at_ms=now_ms,
    )
    return BookingMutation(state=replace(state, bookings=(booking, *state.bookings)), booking=booking)


def modify_booking(
    state: SalonState,
    booking_id: str,
    booking_date: str,
    start_time: str,
    services: list[str],
    settings: ShopSettings,
    timezone: ZoneInfo,
    notes: str | None = None,
) -> BookingMutation:
    """
    Reschedule or change services of an existing booking.

    The status is left as is. The owner's modify counter only moves when the
    booking was Booked before and after the edit; edits to Paid, Canceled or
    NoShow bookings do not count.
    """
    previous = _require_booking(state, booking_id)
    slot = compute_time_slot(booking_date, start_time, services, settings, timezone)

    updated = replace(
        previous,
        date=slot.date,
        start_time=slot.start_time,
        end_time=slot.end_time,
        start_ms=slot.start_ms,
        end_ms=slot.end_ms,
        services=tuple(services),
        notes=previous.notes if notes is None else notes,
    )
    is_modification = previous.status == BookingStatus.booked and updated.status == BookingStatus.booked
    return _commit(state, updated, modified=is_modification)


def cancel_booking(state: SalonState, booking_id: str) -> BookingMutation:
    booking = _require_booked(state, booking_id, "cancel")
    return _commit(state, booking.with_status(BookingStatus.canceled))


def mark_no_show(state: SalonState, booking_id: str) -> BookingMutation:
    booking = _require_booked(state, booking_id, "mark as no-show")
    return _commit(state, booking.with_status(BookingStatus.noshow))


def checkout_booking(
    state: SalonState,
    booking_id: str,
    amount: object,
    product_amount: object = None,
    checkout_notes: str = "",
    product_sales_enabled: bool = True,
) -> BookingMutation:
    service_amount = parse_amount(amount, "Service amount")
    goods_amount = parse_optional_amount(product_amount, "Product amount") if product_sales_enabled else 0.0
    if service_amount < 0 or goods_amount < 0:
        raise ValidationError("Amounts cannot be negative.")

    booking = _require_booked(state, booking_id, "check out")
    paid = replace(
        booking,
        status=BookingStatus.paid,
        amount=service_amount,
        product_amount=goods_amount,
        checkout_notes=checkout_notes or "",
    )
    return _commit(state, paid)


def _commit(state: SalonState, updated: Booking, modified: bool = False) -> BookingMutation:
    bookings = tuple(updated if b.id == updated.id else b for b in state.bookings)
    new_state = apply_customer_stats(replace(state, bookings=bookings), updated.customer_id, modified=modified)
    return BookingMutation(state=new_state, booking=updated)


def _require_booking(state: SalonState, booking_id: str) -> Booking:
    booking = state.find_booking(booking_id)
    if booking is None:
        raise BookingNotFoundError(f"Booking {booking_id} not found.")
    return booking


def _require_booked(state: SalonState, booking_id: str, action: str) -> Booking:
    booking = _require_booking(state, booking_id)
    if booking.status != BookingStatus.booked:
        raise InvalidTransitionError(f"Cannot {action} booking {booking_id} in status {booking.status.value}.")
    return booking
