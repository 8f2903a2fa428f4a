from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Product:
    barcode: str
    name: str
    quantity: int = 0  # negative when oversold
    weighted_average_cost: float = 0.0
    last_updated: str = ""  # ISO timestamp
