from __future__ import annotations

from abc import ABC, abstractmethod

from shopdesk.domain.entities.product import Product
from shopdesk.domain.entities.store_state import InventoryState
from shopdesk.domain.entities.transaction import Transaction


class InventoryGatewayPort(ABC):
    @abstractmethod
    def fetch(self) -> InventoryState:
        """Load the full product map and transaction log."""
        raise NotImplementedError

    @abstractmethod
    def record(self, products: dict[str, Product], transaction: Transaction) -> None:
        """
        Append one transaction and write back the full product map.
        Raises GatewayError on failure.
        """
        raise NotImplementedError
