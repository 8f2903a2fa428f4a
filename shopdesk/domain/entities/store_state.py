from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from shopdesk.domain.entities.booking import Booking
from shopdesk.domain.entities.customer import Customer
from shopdesk.domain.entities.product import Product
from shopdesk.domain.entities.shop_settings import ShopSettings
from shopdesk.domain.entities.transaction import Transaction
from shopdesk.domain.entities.user import User


@dataclass(frozen=True)
class SalonState:
    """Customers and bookings for one session, newest first."""

    customers: Tuple[Customer, ...] = ()
    bookings: Tuple[Booking, ...] = ()

    def find_booking(self, booking_id: str) -> Booking | None:
        return next((b for b in self.bookings if b.id == booking_id), None)

    def find_customer(self, customer_id: str) -> Customer | None:
        return next((c for c in self.customers if c.id == customer_id), None)

    def bookings_for(self, customer_id: str) -> list[Booking]:
        return [b for b in self.bookings if b.customer_id == customer_id]


@dataclass(frozen=True)
class InventoryState:
    products: dict[str, Product] = field(default_factory=dict)
    transactions: Tuple[Transaction, ...] = ()


@dataclass
class AppState:
    """Session container built once at startup and injected into use cases."""

    settings: ShopSettings = field(default_factory=ShopSettings)
    user: User | None = None
    salon: SalonState = field(default_factory=SalonState)
    inventory: InventoryState = field(default_factory=InventoryState)
