"""
Record <-> sheet-row conversion for the Apps Script backend.

Google Sheets coerces strings that look like numbers or dates ("0912345678",
"20240805", "10:00"). Every string is therefore written with a leading `'`
marker and the marker is stripped again on read.
"""

from __future__ import annotations

from typing import Any

from shopdesk.domain.entities.booking import Booking, BookingStatus
from shopdesk.domain.entities.customer import Customer
from shopdesk.domain.entities.product import Product
from shopdesk.domain.entities.transaction import LineItem, Transaction, TransactionType
from shopdesk.domain.entities.user import User

TEXT_MARKER = "'"


def force_text(value: Any) -> str:
    if value is None:
        return ""
    text = str(value)
    if text.startswith(TEXT_MARKER):
        text = text[1:]
    return f"{TEXT_MARKER}{text}"


def clean_text(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        return str(value)
    return value[1:] if value.startswith(TEXT_MARKER) else value


def to_number(value: Any) -> float:
    """Number(x) || 0: blanks, garbage and NaN become 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = float(clean_text(value) if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return 0
    if number != number:
        return 0
    return int(number) if number.is_integer() else number


def mark_strings(record: dict[str, Any]) -> dict[str, Any]:
    return {k: force_text(v) if isinstance(v, str) else v for k, v in record.items()}


def strip_strings(record: dict[str, Any]) -> dict[str, Any]:
    return {k: clean_text(v) if isinstance(v, str) else v for k, v in record.items()}


def encode_booking(booking: Booking) -> dict[str, Any]:
    return mark_strings(
        {
            "id": booking.id,
            "customerId": booking.customer_id,
            "customerName": booking.customer_name,
            "date": booking.date,
            "startTime": booking.start_time,
            "endTime": booking.end_time,
            "startMs": booking.start_ms,
            "endMs": booking.end_ms,
            "services": list(booking.services),
            "notes": booking.notes,
            "status": booking.status.value,
            "createdAtMs": booking.created_at_ms,
            "amount": booking.amount,
            "productAmount": booking.product_amount,
            "checkoutNotes": booking.checkout_notes,
        }
    )


def decode_booking(raw: dict[str, Any]) -> Booking:
    data = strip_strings(raw)
    services = data.get("services")
    if isinstance(services, str):
        services = [s for s in services.split(",") if s]
    elif not isinstance(services, list):
        services = []

    try:
        status = BookingStatus(str(data.get("status") or "booked").lower())
    except ValueError:
        status = BookingStatus.booked

    return Booking(
        id=str(data.get("id", "")),
        customer_id=str(data.get("customerId", "")),
        customer_name=str(data.get("customerName", "")),
        date=str(data.get("date", "")),
        start_time=str(data.get("startTime", "")),
        end_time=str(data.get("endTime", "")),
        start_ms=int(to_number(data.get("startMs"))),
        end_ms=int(to_number(data.get("endMs"))),
        services=tuple(clean_text(s) for s in services),
        notes=str(data.get("notes") or ""),
        status=status,
        created_at_ms=int(to_number(data.get("createdAtMs"))),
        amount=to_number(data.get("amount")),
        product_amount=to_number(data.get("productAmount")),
        checkout_notes=data.get("checkoutNotes") or None,
    )


def encode_customer(customer: Customer) -> dict[str, Any]:
    return mark_strings(
        {
            "id": customer.id,
            "phone": customer.phone,
            "name": customer.name,
            "birthday": customer.birthday,
            "notes": customer.notes,
            "statsVisits": customer.stats_visits,
            "statsAmount": customer.stats_amount,
            "statsCancel": customer.stats_cancel,
            "statsNoShow": customer.stats_no_show,
            "statsModify": customer.stats_modify,
            "createdAtMs": customer.created_at_ms,
        }
    )


def decode_customer(raw: dict[str, Any]) -> Customer:
    data = strip_strings(raw)
    return Customer(
        id=str(data.get("id", "")),
        phone=str(data.get("phone", "")).strip(),
        name=str(data.get("name", "")),
        birthday=str(data.get("birthday") or ""),
        notes=str(data.get("notes") or ""),
        stats_visits=int(to_number(data.get("statsVisits"))),
        stats_amount=to_number(data.get("statsAmount")),
        stats_cancel=int(to_number(data.get("statsCancel"))),
        stats_no_show=int(to_number(data.get("statsNoShow"))),
        stats_modify=int(to_number(data.get("statsModify"))),
        created_at_ms=int(to_number(data.get("createdAtMs"))),
    )


def decode_user(raw: dict[str, Any] | None) -> User | None:
    if not raw:
        return None
    sheet_id = raw.get("sheetId") or raw.get("spreadsheetId") or raw.get("SpreadsheetId")
    sheet_url = raw.get("googleSheetUrl") or raw.get("googleSheetURL") or raw.get("url")
    return User(
        phone=clean_text(raw.get("phone")).strip(),
        name=clean_text(raw.get("name")),
        sheet_url=sheet_url or None,
        sheet_id=clean_text(str(sheet_id)).strip() if sheet_id else None,
    )


def encode_product(product: Product) -> dict[str, Any]:
    return {
        "barcode": product.barcode,
        "name": product.name,
        "quantity": product.quantity,
        "weightedAverageCost": product.weighted_average_cost,
        "lastUpdated": product.last_updated,
    }


def decode_product(raw: dict[str, Any]) -> Product:
    return Product(
        barcode=clean_text(str(raw.get("barcode", ""))),
        name=clean_text(raw.get("name")),
        quantity=int(to_number(raw.get("quantity"))),
        weighted_average_cost=float(to_number(raw.get("weightedAverageCost"))),
        last_updated=str(raw.get("lastUpdated") or ""),
    )


def encode_line_item(item: LineItem) -> dict[str, Any]:
    data: dict[str, Any] = {
        "barcode": item.barcode,
        "name": item.name,
        "quantity": item.quantity,
        "price": item.unit_price,
    }
    if item.cost_at_sale is not None:
        data["costAtSale"] = item.cost_at_sale
    if item.profit is not None:
        data["profit"] = item.profit
    return data


def decode_line_item(raw: dict[str, Any]) -> LineItem:
    return LineItem(
        barcode=clean_text(str(raw.get("barcode", ""))),
        name=clean_text(raw.get("name")),
        quantity=int(to_number(raw.get("quantity"))),
        unit_price=float(to_number(raw.get("price"))),
        cost_at_sale=float(to_number(raw["costAtSale"])) if raw.get("costAtSale") is not None else None,
        profit=float(to_number(raw["profit"])) if raw.get("profit") is not None else None,
    )


def encode_transaction(tx: Transaction) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": tx.id,
        "date": tx.date,
        "type": tx.type.value,
        "items": [encode_line_item(i) for i in tx.items],
        "totalAmount": tx.total_amount,
        "remarks": tx.remarks,
    }
    if tx.total_profit is not None:
        data["totalProfit"] = tx.total_profit
    return data


def decode_transaction(raw: dict[str, Any]) -> Transaction:
    items = raw.get("items") or []
    try:
        tx_type = TransactionType(str(raw.get("type")))
    except ValueError:
        tx_type = TransactionType.purchase
    total_profit = raw.get("totalProfit")
    return Transaction(
        id=str(raw.get("id", "")),
        date=str(raw.get("date") or ""),
        type=tx_type,
        items=tuple(decode_line_item(i) for i in items if isinstance(i, dict)),
        total_amount=float(to_number(raw.get("totalAmount"))),
        total_profit=float(to_number(total_profit)) if total_profit not in (None, "") else None,
        remarks=str(raw.get("remarks") or ""),
    )
