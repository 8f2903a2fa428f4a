from dataclasses import replace

from fastapi import APIRouter, Depends, HTTPException, Query

from shopdesk.api.v1.schemas import (
    BookingCreateSchema,
    BookingModifySchema,
    BookingMutationResponseSchema,
    BookingSchema,
    CheckoutSchema,
    CustomerCreateSchema,
    CustomerSchema,
    CustomerUpdateSchema,
    ServiceSchema,
    ServiceSelectionSchema,
    ServiceToggleSchema,
    ShopSettingsSchema,
)
from shopdesk.application.use_cases.customer_stats import (
    booking_history,
    find_customer_by_phone,
    search_customers,
)
from shopdesk.application.use_cases.reports import bookings_on
from shopdesk.application.use_cases.salon_session import SalonUseCase
from shopdesk.application.utils.date_parser import parse_booking_date
from shopdesk.application.utils.time_slots import total_duration_minutes
from shopdesk.domain.entities.booking import Booking
from shopdesk.domain.entities.service_catalog import toggle_service
from shopdesk.domain.entities.store_state import AppState
from shopdesk.wiring.dependencies import get_app_state, get_salon_use_case

router = APIRouter()


def _mutation_response(uc: SalonUseCase, booking: Booking) -> BookingMutationResponseSchema:
    customer = uc.salon.find_customer(booking.customer_id)
    return BookingMutationResponseSchema(
        booking=BookingSchema.from_entity(booking),
        customer=CustomerSchema.from_entity(customer) if customer else None,
        synced=uc.last_sync_ok,
    )


@router.get("/settings", response_model=ShopSettingsSchema)
def get_settings(state: AppState = Depends(get_app_state)):
    return ShopSettingsSchema(
        service_durations=dict(state.settings.service_durations),
        product_sales_enabled=state.settings.product_sales_enabled,
    )


@router.put("/settings", response_model=ShopSettingsSchema)
def update_settings(req: ShopSettingsSchema, state: AppState = Depends(get_app_state)):
    if any(minutes < 0 for minutes in req.service_durations.values()):
        raise HTTPException(status_code=400, detail="Durations cannot be negative.")
    state.settings = replace(
        state.settings,
        service_durations=dict(req.service_durations),
        product_sales_enabled=req.product_sales_enabled,
    )
    return req


@router.get("/services", response_model=list[ServiceSchema])
def list_services(state: AppState = Depends(get_app_state)):
    return [
        ServiceSchema(name=name, duration_minutes=minutes)
        for name, minutes in state.settings.service_durations.items()
    ]


@router.post("/services/toggle", response_model=ServiceSelectionSchema)
def toggle(req: ServiceToggleSchema, state: AppState = Depends(get_app_state)):
    selected = toggle_service(req.selected, req.service)
    return ServiceSelectionSchema(selected=selected, total_minutes=total_duration_minutes(selected, state.settings))


@router.get("/customers", response_model=list[CustomerSchema])
def list_customers(q: str = "", uc: SalonUseCase = Depends(get_salon_use_case)):
    return [CustomerSchema.from_entity(c) for c in search_customers(uc.salon, q)]


@router.get("/customers/by-phone/{phone}", response_model=CustomerSchema | None)
def lookup_customer(phone: str, uc: SalonUseCase = Depends(get_salon_use_case)):
    # Unknown phone is a normal answer: the caller offers to create the customer.
    customer = find_customer_by_phone(uc.salon, phone)
    return CustomerSchema.from_entity(customer) if customer else None


@router.post("/customers", response_model=CustomerSchema, status_code=201)
def create_customer(req: CustomerCreateSchema, uc: SalonUseCase = Depends(get_salon_use_case)):
    try:
        customer = uc.add_customer(
            phone=req.phone,
            name=req.name,
            birth_month=req.birth_month,
            birth_day=req.birth_day,
            notes=req.notes,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CustomerSchema.from_entity(customer)


@router.put("/customers/{customer_id}", response_model=CustomerSchema)
def update_customer(customer_id: str, req: CustomerUpdateSchema, uc: SalonUseCase = Depends(get_salon_use_case)):
    try:
        customer = uc.update_customer(customer_id, name=req.name, birthday=req.birthday, notes=req.notes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return CustomerSchema.from_entity(customer)


@router.get("/customers/{customer_id}/bookings", response_model=list[BookingSchema])
def customer_bookings(customer_id: str, uc: SalonUseCase = Depends(get_salon_use_case)):
    return [BookingSchema.from_entity(b) for b in booking_history(uc.salon, customer_id)]


@router.get("/bookings", response_model=list[BookingSchema])
def list_bookings(date: str | None = Query(None), uc: SalonUseCase = Depends(get_salon_use_case)):
    if date is None:
        return [BookingSchema.from_entity(b) for b in uc.salon.bookings]
    day = parse_booking_date(date)
    if day is None:
        raise HTTPException(status_code=400, detail=f"Invalid date: {date}")
    return [BookingSchema.from_entity(b) for b in bookings_on(uc.salon.bookings, day)]


@router.post("/bookings", response_model=BookingMutationResponseSchema, status_code=201)
def create_booking(req: BookingCreateSchema, uc: SalonUseCase = Depends(get_salon_use_case)):
    try:
        booking = uc.create_booking(req.customer_id, req.date, req.start_time, req.services, req.notes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _mutation_response(uc, booking)


@router.put("/bookings/{booking_id}", response_model=BookingMutationResponseSchema)
def modify_booking(booking_id: str, req: BookingModifySchema, uc: SalonUseCase = Depends(get_salon_use_case)):
    try:
        booking = uc.modify_booking(booking_id, req.date, req.start_time, req.services, req.notes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _mutation_response(uc, booking)


@router.post("/bookings/{booking_id}/cancel", response_model=BookingMutationResponseSchema)
def cancel_booking(booking_id: str, uc: SalonUseCase = Depends(get_salon_use_case)):
    try:
        booking = uc.cancel_booking(booking_id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _mutation_response(uc, booking)


@router.post("/bookings/{booking_id}/no-show", response_model=BookingMutationResponseSchema)
def no_show(booking_id: str, uc: SalonUseCase = Depends(get_salon_use_case)):
    try:
        booking = uc.mark_no_show(booking_id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _mutation_response(uc, booking)


@router.post("/bookings/{booking_id}/checkout", response_model=BookingMutationResponseSchema)
def checkout(booking_id: str, req: CheckoutSchema, uc: SalonUseCase = Depends(get_salon_use_case)):
    try:
        booking = uc.checkout(booking_id, req.amount, req.product_amount, req.checkout_notes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _mutation_response(uc, booking)


@router.post("/bookings/reload")
def reload_bookings(uc: SalonUseCase = Depends(get_salon_use_case)) -> dict[str, bool]:
    return {"success": uc.reload()}
