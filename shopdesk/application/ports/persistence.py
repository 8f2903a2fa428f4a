from __future__ import annotations

from abc import ABC, abstractmethod

from shopdesk.domain.entities.booking import Booking
from shopdesk.domain.entities.customer import Customer


class SalonPersistencePort(ABC):
    """
    Whole-collection persistence for the salon app.

    Every write replaces the entire remote collection with the one given
    (last writer wins); there is no per-record upsert and no conflict check.
    """

    @abstractmethod
    def fetch_customers(self) -> list[Customer]:
        raise NotImplementedError

    @abstractmethod
    def fetch_bookings(self) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def sync_customers(self, customers: list[Customer]) -> None:
        """Overwrite the remote customer collection. Raises GatewayError on failure."""
        raise NotImplementedError

    @abstractmethod
    def sync_bookings(self, bookings: list[Booking]) -> None:
        """Overwrite the remote booking collection. Raises GatewayError on failure."""
        raise NotImplementedError
