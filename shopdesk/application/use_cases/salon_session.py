from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from shopdesk.application.exceptions import CustomerNotFoundError, GatewayError
from shopdesk.application.ports.persistence import SalonPersistencePort
from shopdesk.application.use_cases import booking_operations, customer_stats
from shopdesk.application.utils.date_parser import to_epoch_ms
from shopdesk.domain.entities.booking import Booking
from shopdesk.domain.entities.customer import Customer
from shopdesk.domain.entities.store_state import AppState, SalonState
from shopdesk.domain.entities.user import User

PersistenceFactory = Callable[[User], "SalonPersistencePort | None"]


class SalonUseCase:
    """
    Applies booking and customer mutations to the session state, then pushes
    the affected collections to the backend.

    Local state is updated first. A failed push is logged and kept in
    `last_sync_ok`; the local change is never rolled back.

    Requests run in a threadpool, so each read-compute-assign-push sequence
    holds `_lock`. Pushes therefore reach the backend in mutation order.
    """

    def __init__(
        self,
        state: AppState,
        persistence_factory: PersistenceFactory,
        timezone: ZoneInfo,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._state = state
        self._persistence_factory = persistence_factory
        self._persistence: SalonPersistencePort | None = None
        self._timezone = timezone
        self._clock = clock or (lambda: datetime.now(timezone))
        self._logger = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self.last_sync_ok: bool | None = None

    @property
    def salon(self) -> SalonState:
        return self._state.salon

    @property
    def current_user(self) -> User | None:
        return self._state.user

    def start_session(self, user: User) -> bool:
        """Bind the user's backend and load customers and bookings. Returns False if loading failed."""
        with self._lock:
            self._state.user = user
            self._persistence = self._persistence_factory(user)
            if self._persistence is None:
                self._logger.info("No salon backend configured for user")
                self._state.salon = SalonState()
                return True
            return self._load()

    def end_session(self) -> None:
        with self._lock:
            self._state.user = None
            self._state.salon = SalonState()
            self._persistence = None

    def reload(self) -> bool:
        with self._lock:
            return self._load()

    def _load(self) -> bool:
        if self._persistence is None:
            return False
        try:
            customers = self._persistence.fetch_customers()
            bookings = self._persistence.fetch_bookings()
        except GatewayError as e:
            self._logger.error("Initial fetch failed", extra={"error": str(e)})
            return False
        self._state.salon = SalonState(customers=tuple(customers), bookings=tuple(bookings))
        self._logger.info("Salon data loaded", extra={"count": len(bookings)})
        return True

    def add_customer(
        self,
        phone: str,
        name: str,
        birth_month: int | None = None,
        birth_day: int | None = None,
        notes: str = "",
    ) -> Customer:
        with self._lock:
            new_state, customer = customer_stats.create_customer(
                self.salon,
                phone=phone,
                name=name,
                now_ms=self._now_ms(),
                birth_month=birth_month,
                birth_day=birth_day,
                notes=notes,
            )
            self._state.salon = new_state
            self._push(customers=True)
            return customer

    def update_customer(
        self,
        customer_id: str,
        name: str | None = None,
        birthday: str | None = None,
        notes: str | None = None,
    ) -> Customer:
        with self._lock:
            new_state, customer = customer_stats.update_customer_profile(
                self.salon, customer_id, name=name, birthday=birthday, notes=notes
            )
            if customer is None:
                raise CustomerNotFoundError(f"Customer {customer_id} not found.")
            self._state.salon = new_state
            self._push(customers=True)
            return customer

    def create_booking(
        self,
        customer_id: str,
        booking_date: str,
        start_time: str,
        services: list[str],
        notes: str = "",
    ) -> Booking:
        with self._lock:
            customer = self.salon.find_customer(customer_id)
            if customer is None:
                raise CustomerNotFoundError(f"Customer {customer_id} not found.")
            mutation = booking_operations.create_booking(
                self.salon,
                customer=customer,
                booking_date=booking_date,
                start_time=start_time,
                services=services,
                settings=self._state.settings,
                timezone=self._timezone,
                now_ms=self._now_ms(),
                notes=notes,
            )
            self._state.salon = mutation.state
            self._logger.info("Booking created", extra={"booking_id": mutation.booking.id, "customer_id": customer_id})
            self._push(bookings=True)
            return mutation.booking

    def modify_booking(
        self,
        booking_id: str,
        booking_date: str,
        start_time: str,
        services: list[str],
        notes: str | None = None,
    ) -> Booking:
        with self._lock:
            mutation = booking_operations.modify_booking(
                self.salon,
                booking_id=booking_id,
                booking_date=booking_date,
                start_time=start_time,
                services=services,
                settings=self._state.settings,
                timezone=self._timezone,
                notes=notes,
            )
            return self._apply(mutation, "Booking modified")

    def cancel_booking(self, booking_id: str) -> Booking:
        with self._lock:
            return self._apply(booking_operations.cancel_booking(self.salon, booking_id), "Booking canceled")

    def mark_no_show(self, booking_id: str) -> Booking:
        with self._lock:
            return self._apply(booking_operations.mark_no_show(self.salon, booking_id), "Booking marked no-show")

    def checkout(
        self,
        booking_id: str,
        amount: object,
        product_amount: object = None,
        checkout_notes: str = "",
    ) -> Booking:
        with self._lock:
            mutation = booking_operations.checkout_booking(
                self.salon,
                booking_id=booking_id,
                amount=amount,
                product_amount=product_amount,
                checkout_notes=checkout_notes,
                product_sales_enabled=self._state.settings.product_sales_enabled,
            )
            return self._apply(mutation, "Booking checked out")

    def _apply(self, mutation: booking_operations.BookingMutation, message: str) -> Booking:
        # Caller holds _lock.
        self._state.salon = mutation.state
        self._logger.info(
            message,
            extra={"booking_id": mutation.booking.id, "customer_id": mutation.booking.customer_id},
        )
        self._push(bookings=True, customers=True)
        return mutation.booking

    def _push(self, bookings: bool = False, customers: bool = False) -> None:
        if self._persistence is None:
            self.last_sync_ok = None
            return
        ok = True
        if bookings:
            ok = self._sync("bookings", lambda: self._persistence.sync_bookings(list(self.salon.bookings))) and ok
        if customers:
            ok = self._sync("customers", lambda: self._persistence.sync_customers(list(self.salon.customers))) and ok
        self.last_sync_ok = ok

    def _sync(self, kind: str, push: Callable[[], None]) -> bool:
        try:
            push()
            return True
        except GatewayError as e:
            self._logger.error("Sync failed", extra={"kind": kind, "error": str(e)})
            return False

    def _now_ms(self) -> int:
        return to_epoch_ms(self._clock())
