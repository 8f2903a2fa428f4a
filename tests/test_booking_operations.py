"""
Tests for booking lifecycle operations and their effect on customer statistics.
"""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from shopdesk.application.exceptions import (
    BookingNotFoundError,
    InvalidTransitionError,
    ValidationError,
)
from shopdesk.application.use_cases.booking_operations import (
    cancel_booking,
    checkout_booking,
    create_booking,
    mark_no_show,
    modify_booking,
)
from shopdesk.application.utils.date_parser import to_epoch_ms
from shopdesk.domain.entities.booking import BookingStatus
from shopdesk.domain.entities.customer import Customer
from shopdesk.domain.entities.shop_settings import ShopSettings
from shopdesk.domain.entities.store_state import SalonState

TZ = ZoneInfo("Asia/Taipei")
SETTINGS = ShopSettings()
CUSTOMER = Customer(id="912345678", phone="0912345678", name="Amy")


def _state() -> SalonState:
    return SalonState(customers=(CUSTOMER,))


def _book(state: SalonState, now_ms: int, services=("洗髮", "剪髮"), day="20240805", start="10:00"):
    return create_booking(
        state,
        customer=CUSTOMER,
        booking_date=day,
        start_time=start,
        services=list(services),
        settings=SETTINGS,
        timezone=TZ,
        now_ms=now_ms,
    )


def test_create_booking_end_time_from_service_durations():
    """Wash (30) + cut (60) from 10:00 ends at 11:30."""
    mutation = _book(_state(), now_ms=1)
    booking = mutation.booking

    assert booking.end_time == "11:30"
    assert booking.start_time == "10:00"
    assert booking.date == "20240805"
    assert booking.end_ms - booking.start_ms == 90 * 60000
    assert booking.start_ms == to_epoch_ms(datetime(2024, 8, 5, 10, 0, tzinfo=TZ))
    assert booking.status == BookingStatus.booked
    assert booking.id == "booking-1"
    assert booking.customer_name == "Amy"


def test_create_booking_is_prepended_and_leaves_stats_alone():
    state = _book(_state(), now_ms=1).state
    state = _book(state, now_ms=2, day="20240806").state

    assert [b.id for b in state.bookings] == ["booking-2", "booking-1"]
    customer = state.find_customer(CUSTOMER.id)
    assert customer.stats_visits == 0
    assert customer.stats_modify == 0


def test_create_booking_accepts_dashed_date():
    booking = _book(_state(), now_ms=1, day="2024-08-05").booking
    assert booking.date == "20240805"


def test_booking_crossing_midnight_keeps_exact_duration():
    booking = _book(_state(), now_ms=1, services=("燙髮",), start="23:00").booking
    assert booking.end_time == "02:00"
    assert booking.duration_minutes == 180


def test_create_booking_rejects_empty_services():
    with pytest.raises(ValidationError):
        _book(_state(), now_ms=1, services=())


def test_create_booking_rejects_services_without_duration():
    with pytest.raises(ValidationError):
        _book(_state(), now_ms=1, services=("unknown",))


@pytest.mark.parametrize("day,start", [("20240231", "10:00"), ("2024/08/05", "10:00"), ("20240805", "25:00")])
def test_create_booking_rejects_bad_date_or_time(day, start):
    with pytest.raises(ValidationError):
        _book(_state(), now_ms=1, day=day, start=start)


def test_unconfigured_service_contributes_zero_minutes():
    booking = _book(_state(), now_ms=1, services=("剪髮", "unknown")).booking
    assert booking.end_time == "11:00"


def test_modify_booked_booking_increments_modify_counter():
    state = _book(_state(), now_ms=1).state
    mutation = modify_booking(
        state,
        booking_id="booking-1",
        booking_date="20240806",
        start_time="14:00",
        services=["染髮"],
        settings=SETTINGS,
        timezone=TZ,
    )

    assert mutation.booking.date == "20240806"
    assert mutation.booking.end_time == "16:00"
    assert mutation.booking.status == BookingStatus.booked
    assert mutation.state.find_customer(CUSTOMER.id).stats_modify == 1


def test_modify_keeps_notes_unless_given():
    state = create_booking(
        _state(),
        customer=CUSTOMER,
        booking_date="20240805",
        start_time="10:00",
        services=["剪髮"],
        settings=SETTINGS,
        timezone=TZ,
        now_ms=1,
        notes="short bangs",
    ).state

    kept = modify_booking(state, "booking-1", "20240805", "11:00", ["剪髮"], SETTINGS, TZ)
    assert kept.booking.notes == "short bangs"

    changed = modify_booking(kept.state, "booking-1", "20240805", "11:00", ["剪髮"], SETTINGS, TZ, notes="")
    assert changed.booking.notes == ""


def test_modify_paid_booking_does_not_count_as_modification():
    state = _book(_state(), now_ms=1).state
    state = checkout_booking(state, "booking-1", amount=500).state

    mutation = modify_booking(state, "booking-1", "20240805", "12:00", ["剪髮"], SETTINGS, TZ)

    customer = mutation.state.find_customer(CUSTOMER.id)
    assert mutation.booking.status == BookingStatus.paid
    assert customer.stats_modify == 0
    assert customer.stats_visits == 1


def test_cancel_counts_and_blocks_second_cancel():
    state = _book(_state(), now_ms=1).state
    mutation = cancel_booking(state, "booking-1")

    assert mutation.booking.status == BookingStatus.canceled
    assert mutation.state.find_customer(CUSTOMER.id).stats_cancel == 1

    with pytest.raises(InvalidTransitionError):
        cancel_booking(mutation.state, "booking-1")


def test_no_show_counts():
    state = _book(_state(), now_ms=1).state
    mutation = mark_no_show(state, "booking-1")

    assert mutation.booking.status == BookingStatus.noshow
    assert mutation.state.find_customer(CUSTOMER.id).stats_no_show == 1


def test_checkout_records_amounts_and_visit():
    """Checkout 500 + 200 adds one visit and 700 to the lifetime amount."""
    state = _book(_state(), now_ms=1).state
    mutation = checkout_booking(state, "booking-1", amount="500", product_amount=200, checkout_notes="cash")

    booking = mutation.booking
    customer = mutation.state.find_customer(CUSTOMER.id)
    assert booking.status == BookingStatus.paid
    assert booking.amount == 500
    assert booking.product_amount == 200
    assert booking.checkout_notes == "cash"
    assert customer.stats_visits == 1
    assert customer.stats_amount == 700


def test_checkout_ignores_product_amount_when_product_sales_disabled():
    state = _book(_state(), now_ms=1).state
    mutation = checkout_booking(state, "booking-1", amount=500, product_amount=200, product_sales_enabled=False)
    assert mutation.booking.product_amount == 0
    assert mutation.state.find_customer(CUSTOMER.id).stats_amount == 500


@pytest.mark.parametrize("amount", ["", "abc", None, "nan", -1])
def test_checkout_rejects_bad_amount(amount):
    state = _book(_state(), now_ms=1).state
    with pytest.raises(ValidationError):
        checkout_booking(state, "booking-1", amount=amount)


def test_checkout_of_canceled_booking_is_rejected():
    state = _book(_state(), now_ms=1).state
    state = cancel_booking(state, "booking-1").state
    with pytest.raises(InvalidTransitionError):
        checkout_booking(state, "booking-1", amount=100)


def test_unknown_booking_raises_not_found():
    with pytest.raises(BookingNotFoundError):
        cancel_booking(_state(), "booking-404")


def test_visits_equal_paid_bookings_in_any_order():
    state = _state()
    for ms in range(1, 5):
        state = _book(state, now_ms=ms).state

    state = checkout_booking(state, "booking-3", amount=100).state
    state = cancel_booking(state, "booking-1").state
    state = checkout_booking(state, "booking-4", amount=50, product_amount=25).state
    state = mark_no_show(state, "booking-2").state

    customer = state.find_customer(CUSTOMER.id)
    paid = [b for b in state.bookings if b.status == BookingStatus.paid]
    assert customer.stats_visits == len(paid) == 2
    assert customer.stats_amount == 175
    assert customer.stats_cancel == 1
    assert customer.stats_no_show == 1
