from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Customer:
    id: str
    phone: str
    name: str
    birthday: str = ""  # M/D
    notes: str = ""
    stats_visits: int = 0
    stats_amount: float = 0
    stats_cancel: int = 0
    stats_no_show: int = 0
    stats_modify: int = 0
    created_at_ms: int = 0

    @staticmethod
    def id_from_phone(phone: str) -> str:
        return phone[1:]
