from __future__ import annotations

import logging

from shopdesk.application.ports.auth import AuthPort, AuthResult
from shopdesk.application.ports.inventory_gateway import InventoryGatewayPort
from shopdesk.application.ports.persistence import SalonPersistencePort
from shopdesk.application.ports.session_store import SessionStorePort
from shopdesk.domain.entities.booking import Booking
from shopdesk.domain.entities.customer import Customer
from shopdesk.domain.entities.product import Product
from shopdesk.domain.entities.store_state import InventoryState
from shopdesk.domain.entities.transaction import Transaction
from shopdesk.domain.entities.user import User


class MemorySalonPersistence(SalonPersistencePort):
    def __init__(self) -> None:
        self._customers: list[Customer] = []
        self._bookings: list[Booking] = []
        self.write_count = 0

    def fetch_customers(self) -> list[Customer]:
        return list(self._customers)

    def fetch_bookings(self) -> list[Booking]:
        return list(self._bookings)

    def sync_customers(self, customers: list[Customer]) -> None:
        self._customers = list(customers)
        self.write_count += 1

    def sync_bookings(self, bookings: list[Booking]) -> None:
        self._bookings = list(bookings)
        self.write_count += 1


class MemoryInventoryGateway(InventoryGatewayPort):
    def __init__(self) -> None:
        self._products: dict[str, Product] = {}
        self._transactions: list[Transaction] = []

    def fetch(self) -> InventoryState:
        return InventoryState(products=dict(self._products), transactions=tuple(self._transactions))

    def record(self, products: dict[str, Product], transaction: Transaction) -> None:
        self._products.update(products)
        self._transactions.append(transaction)


class MemoryAuthGateway(AuthPort):
    def __init__(self, sheet_url: str = "memory://local") -> None:
        self._accounts: dict[str, dict[str, str]] = {}
        self._sheet_url = sheet_url
        self._logger = logging.getLogger(__name__)

    def user_exists(self, phone: str) -> bool:
        return phone in self._accounts

    def register(self, phone: str, password: str, name: str) -> AuthResult:
        if phone in self._accounts:
            return AuthResult(success=False, message="Account already registered.")
        self._accounts[phone] = {"password": password, "name": name}
        self._logger.info("Mock account registered")
        return AuthResult(success=True, message="Registered.", user=self._user(phone))

    def login(self, phone: str, password: str) -> AuthResult:
        account = self._accounts.get(phone)
        if account is None or account["password"] != password:
            return AuthResult(success=False, message="Wrong phone or password.")
        return AuthResult(success=True, user=self._user(phone))

    def change_password(self, phone: str, old_password: str, new_password: str) -> AuthResult:
        account = self._accounts.get(phone)
        if account is None or account["password"] != old_password:
            return AuthResult(success=False, message="Old password is incorrect.")
        account["password"] = new_password
        return AuthResult(success=True, message="Password changed.")

    def _user(self, phone: str) -> User:
        return User(phone=phone, name=self._accounts[phone]["name"], sheet_url=self._sheet_url, sheet_id=f"mock-{phone}")


class MemorySessionStore(SessionStorePort):
    def __init__(self) -> None:
        self._user: User | None = None

    def load(self) -> User | None:
        return self._user

    def save(self, user: User) -> None:
        self._user = user

    def clear(self) -> None:
        self._user = None
