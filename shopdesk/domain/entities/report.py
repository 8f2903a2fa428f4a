from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RevenueSummary:
    today: float
    week: float
    month: float


@dataclass(frozen=True)
class ServiceShare:
    name: str
    value: float
    percent: int


@dataclass(frozen=True)
class ProductProfit:
    barcode: str
    name: str
    quantity_sold: int
    revenue: float
    profit: float


@dataclass(frozen=True)
class SalesSummary:
    revenue: float
    profit: float
    transaction_count: int
