from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Iterable
from zoneinfo import ZoneInfo

from shopdesk.application.exceptions import ValidationError
from shopdesk.domain.entities.product import Product
from shopdesk.domain.entities.report import ProductProfit, SalesSummary
from shopdesk.domain.entities.store_state import InventoryState
from shopdesk.domain.entities.transaction import LineItem, Transaction, TransactionType


@dataclass(frozen=True)
class PurchaseLine:
    barcode: str
    name: str
    quantity: int
    unit_price: float


@dataclass(frozen=True)
class SaleLine:
    barcode: str
    quantity: int
    unit_price: float


@dataclass(frozen=True)
class InventoryMutation:
    state: InventoryState
    transaction: Transaction
    rejected_barcodes: tuple[str, ...] = ()


def weighted_average_cost(quantity: int, cost: float, added_quantity: int, unit_price: float) -> float:
    """(Q*C + q*p) / (Q + q). Falls back to the purchase price when the new quantity is zero."""
    new_quantity = quantity + added_quantity
    if new_quantity == 0:
        return unit_price
    return (quantity * cost + added_quantity * unit_price) / new_quantity


def allocate_local_prices(lines: list[PurchaseLine], local_total: float) -> list[PurchaseLine]:
    """
    Rescale foreign-currency purchase prices so the line amounts add up to
    the operator's local-currency total. Every line gets the same factor.
    """
    foreign_total = sum(line.quantity * line.unit_price for line in lines)
    if foreign_total <= 0:
        raise ValidationError("Foreign-currency total must be greater than zero.")
    if local_total <= 0:
        raise ValidationError("Local-currency total must be greater than zero.")
    factor = local_total / foreign_total
    return [replace(line, unit_price=line.unit_price * factor) for line in lines]


def apply_purchase(
    state: InventoryState,
    lines: list[PurchaseLine],
    now: datetime,
    remarks: str = "",
    local_total: float | None = None,
) -> InventoryMutation:
    """Receive stock. Pass `local_total` when the line prices are in a foreign currency."""
    if not lines:
        raise ValidationError("A purchase needs at least one line.")
    for line in lines:
        if not line.barcode.strip():
            raise ValidationError("Barcode is required.")
        if line.quantity <= 0:
            raise ValidationError(f"Quantity for {line.barcode} must be positive.")
        if line.unit_price < 0:
            raise ValidationError(f"Price for {line.barcode} cannot be negative.")

    if local_total is not None:
        lines = allocate_local_prices(lines, local_total)

    stamp = now.isoformat()
    products = dict(state.products)
    items: list[LineItem] = []
    for line in lines:
        existing = products.get(line.barcode)
        if existing is None:
            products[line.barcode] = Product(
                barcode=line.barcode,
                name=line.name,
                quantity=line.quantity,
                weighted_average_cost=line.unit_price,
                last_updated=stamp,
            )
        else:
            products[line.barcode] = replace(
                existing,
                name=line.name or existing.name,
                quantity=existing.quantity + line.quantity,
                weighted_average_cost=weighted_average_cost(
                    existing.quantity, existing.weighted_average_cost, line.quantity, line.unit_price
                ),
                last_updated=stamp,
            )
        items.append(
            LineItem(
                barcode=line.barcode,
                name=line.name or products[line.barcode].name,
                quantity=line.quantity,
                unit_price=line.unit_price,
            )
        )

    transaction = Transaction(
        id=_transaction_id(now),
        date=stamp,
        type=TransactionType.purchase,
        items=tuple(items),
        total_amount=sum(item.amount for item in items),
        remarks=remarks or "",
    )
    return InventoryMutation(
        state=InventoryState(products=products, transactions=(*state.transactions, transaction)),
        transaction=transaction,
    )


def build_sale_item(products: dict[str, Product], line: SaleLine) -> LineItem | None:
    """Price a sale line at the current cost basis. Unknown barcodes yield None."""
    product = products.get(line.barcode)
    if product is None:
        return None
    cost = product.weighted_average_cost
    return LineItem(
        barcode=product.barcode,
        name=product.name,
        quantity=line.quantity,
        unit_price=line.unit_price,
        cost_at_sale=cost,
        profit=line.quantity * (line.unit_price - cost),
    )


def apply_sale(
    state: InventoryState,
    lines: list[SaleLine],
    now: datetime,
    remarks: str = "",
) -> InventoryMutation:
    """
    Sell stock. Quantities may go negative; there is no stock-out check.
    Lines for unknown barcodes are dropped and reported in `rejected_barcodes`.
    """
    for line in lines:
        if line.quantity <= 0:
            raise ValidationError(f"Quantity for {line.barcode} must be positive.")
        if line.unit_price < 0:
            raise ValidationError(f"Price for {line.barcode} cannot be negative.")

    stamp = now.isoformat()
    products = dict(state.products)
    items: list[LineItem] = []
    rejected: list[str] = []
    for line in lines:
        item = build_sale_item(products, line)
        if item is None:
            rejected.append(line.barcode)
            continue
        product = products[line.barcode]
        products[line.barcode] = replace(product, quantity=product.quantity - line.quantity, last_updated=stamp)
        items.append(item)

    if not items:
        raise ValidationError("No sellable lines: every barcode is unknown.")

    transaction = Transaction(
        id=_transaction_id(now),
        date=stamp,
        type=TransactionType.sale,
        items=tuple(items),
        total_amount=sum(item.amount for item in items),
        total_profit=sum(item.profit or 0 for item in items),
        remarks=remarks or "",
    )
    return InventoryMutation(
        state=InventoryState(products=products, transactions=(*state.transactions, transaction)),
        transaction=transaction,
        rejected_barcodes=tuple(rejected),
    )


def product_profit(transactions: Iterable[Transaction]) -> list[ProductProfit]:
    """Cumulative realised profit per product across all sales, best first."""
    rollup: dict[str, dict] = {}
    for tx in transactions:
        if tx.type != TransactionType.sale:
            continue
        for item in tx.items:
            entry = rollup.setdefault(item.barcode, {"name": item.name, "qty": 0, "revenue": 0.0, "profit": 0.0})
            entry["qty"] += item.quantity
            entry["revenue"] += item.amount
            entry["profit"] += item.profit or 0

    result = [
        ProductProfit(
            barcode=barcode,
            name=entry["name"],
            quantity_sold=entry["qty"],
            revenue=entry["revenue"],
            profit=entry["profit"],
        )
        for barcode, entry in rollup.items()
    ]
    return sorted(result, key=lambda p: p.profit, reverse=True)


def sales_summary(transactions: Iterable[Transaction], start: date, end: date, timezone: ZoneInfo) -> SalesSummary:
    """Sales revenue and profit for transactions dated within [start, end], inclusive."""
    lower = datetime.combine(start, datetime.min.time(), tzinfo=timezone)
    upper = datetime.combine(end + timedelta(days=1), datetime.min.time(), tzinfo=timezone)

    revenue = 0.0
    profit = 0.0
    count = 0
    for tx in transactions:
        if tx.type != TransactionType.sale:
            continue
        stamp = _parse_stamp(tx.date, timezone)
        if stamp is None or not lower <= stamp < upper:
            continue
        revenue += tx.total_amount
        profit += tx.total_profit or 0
        count += 1
    return SalesSummary(revenue=revenue, profit=profit, transaction_count=count)


def _parse_stamp(value: str, timezone: ZoneInfo) -> datetime | None:
    try:
        stamp = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone)
    return stamp


def _transaction_id(now: datetime) -> str:
    return f"tx-{int(now.timestamp() * 1000)}"
