from __future__ import annotations

from dataclasses import replace

from shopdesk.application.exceptions import ValidationError
from shopdesk.application.utils.validation import require_customer_phone
from shopdesk.domain.entities.booking import Booking, BookingStatus
from shopdesk.domain.entities.customer import Customer
from shopdesk.domain.entities.store_state import SalonState


def recompute_customer_stats(
    customer: Customer,
    bookings: list[Booking] | tuple[Booking, ...],
    modified: bool = False,
) -> Customer:
    """
    Re-derive a customer's counters from the full booking collection.

    Visits, lifetime amount, cancel and no-show counts are rebuilt from
    scratch. The modify counter is carried forward and bumped by one only
    when `modified` is set.
    """
    own = [b for b in bookings if b.customer_id == customer.id]
    paid = [b for b in own if b.status == BookingStatus.paid]

    return replace(
        customer,
        stats_visits=len(paid),
        stats_amount=sum(b.total_amount for b in paid),
        stats_cancel=sum(1 for b in own if b.status == BookingStatus.canceled),
        stats_no_show=sum(1 for b in own if b.status == BookingStatus.noshow),
        stats_modify=customer.stats_modify + 1 if modified else customer.stats_modify,
    )


def apply_customer_stats(state: SalonState, customer_id: str, modified: bool = False) -> SalonState:
    customer = state.find_customer(customer_id)
    if customer is None:
        return state
    updated = recompute_customer_stats(customer, state.bookings, modified=modified)
    return replace_customer(state, updated)


def replace_customer(state: SalonState, updated: Customer) -> SalonState:
    return replace(
        state,
        customers=tuple(updated if c.id == updated.id else c for c in state.customers),
    )


def create_customer(
    state: SalonState,
    phone: str,
    name: str,
    now_ms: int,
    birth_month: int | None = None,
    birth_day: int | None = None,
    notes: str = "",
) -> tuple[SalonState, Customer]:
    phone = require_customer_phone(phone)
    name = (name or "").strip()
    if not name:
        raise ValidationError("Customer name is required.")
    if find_customer_by_phone(state, phone) is not None:
        raise ValidationError(f"Customer with phone {phone} already exists.")

    customer = Customer(
        id=Customer.id_from_phone(phone),
        phone=phone,
        name=name,
        birthday=format_birthday(birth_month, birth_day),
        notes=notes or "",
        created_at_ms=now_ms,
    )
    return replace(state, customers=(customer, *state.customers)), customer


def update_customer_profile(
    state: SalonState,
    customer_id: str,
    name: str | None = None,
    birthday: str | None = None,
    notes: str | None = None,
) -> tuple[SalonState, Customer | None]:
    customer = state.find_customer(customer_id)
    if customer is None:
        return state, None

    changes: dict[str, str] = {}
    if name is not None:
        if not name.strip():
            raise ValidationError("Customer name is required.")
        changes["name"] = name.strip()
    if birthday is not None:
        changes["birthday"] = birthday.strip()
    if notes is not None:
        changes["notes"] = notes

    updated = replace(customer, **changes)
    return replace_customer(state, updated), updated


def format_birthday(month: int | None, day: int | None) -> str:
    if not month or not day:
        return ""
    if not 1 <= int(month) <= 12 or not 1 <= int(day) <= 31:
        raise ValidationError("Birthday month/day out of range.")
    return f"{int(month)}/{int(day)}"


def find_customer_by_phone(state: SalonState, phone: str) -> Customer | None:
    return next((c for c in state.customers if c.phone == phone), None)


def search_customers(state: SalonState, term: str = "") -> list[Customer]:
    needle = (term or "").strip().lower()
    matches = [
        c
        for c in state.customers
        if not needle
        or needle in c.name.lower()
        or needle in c.phone
        or (c.notes and needle in c.notes.lower())
    ]
    return sorted(matches, key=lambda c: c.created_at_ms, reverse=True)


def booking_history(state: SalonState, customer_id: str) -> list[Booking]:
    return sorted(state.bookings_for(customer_id), key=lambda b: b.start_ms, reverse=True)
