from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class TransactionType(str, Enum):
    purchase = "Purchase"
    sale = "Sale"


@dataclass(frozen=True)
class LineItem:
    barcode: str
    name: str
    quantity: int
    unit_price: float
    cost_at_sale: float | None = None  # sales only
    profit: float | None = None  # sales only

    @property
    def amount(self) -> float:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class Transaction:
    id: str
    date: str  # ISO timestamp
    type: TransactionType
    items: Tuple[LineItem, ...]
    total_amount: float
    total_profit: float | None = None
    remarks: str = ""
