from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple


class BookingStatus(str, Enum):
    booked = "booked"
    paid = "paid"
    canceled = "canceled"
    noshow = "noshow"


@dataclass(frozen=True)
class Booking:
    id: str
    customer_id: str
    customer_name: str
    date: str  # YYYYMMDD
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    start_ms: int
    end_ms: int
    services: Tuple[str, ...] = ()
    notes: str = ""
    status: BookingStatus = BookingStatus.booked
    created_at_ms: int = 0
    amount: float | None = None
    product_amount: float | None = None
    checkout_notes: str | None = None

    @property
    def total_amount(self) -> float:
        return (self.amount or 0) + (self.product_amount or 0)

    @property
    def duration_minutes(self) -> int:
        return (self.end_ms - self.start_ms) // 60000

    def with_status(self, status: BookingStatus) -> "Booking":
        return replace(self, status=status)
