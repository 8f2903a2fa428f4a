from __future__ import annotations

import logging
from typing import Any, Callable

from shopdesk.application.exceptions import GatewayError
from shopdesk.application.ports.persistence import SalonPersistencePort
from shopdesk.domain.entities.booking import Booking
from shopdesk.domain.entities.customer import Customer
from shopdesk.infrastructure.sheets.apps_script_client import AppsScriptClient
from shopdesk.infrastructure.sheets.codec import (
    decode_booking,
    decode_customer,
    encode_booking,
    encode_customer,
)


class SheetsSalonPersistence(SalonPersistencePort):
    """Reads and overwrites the `customers` / `bookings` tabs of one spreadsheet."""

    def __init__(self, client: AppsScriptClient, sheet_id: str) -> None:
        if not sheet_id:
            raise ValueError("Sync denied: missing sheet id")
        self._client = client
        self._sheet_id = str(sheet_id).strip()
        self._logger = logging.getLogger(__name__)

    def fetch_customers(self) -> list[Customer]:
        return self._read("customers", decode_customer)

    def fetch_bookings(self) -> list[Booking]:
        return self._read("bookings", decode_booking)

    def sync_customers(self, customers: list[Customer]) -> None:
        self._write("customers", [encode_customer(c) for c in customers])

    def sync_bookings(self, bookings: list[Booking]) -> None:
        self._write("bookings", [encode_booking(b) for b in bookings])

    def _read(self, kind: str, decode: Callable[[dict[str, Any]], Any]) -> list:
        data = self._client.post(
            {"action": "sync", "sheetId": self._sheet_id, "operation": "read", "type": kind}
        )
        if not data.get("success"):
            raise GatewayError(data.get("message") or f"Read of {kind} failed")
        rows = data.get("data")
        if not isinstance(rows, list):
            return []
        return [decode(row) for row in rows if isinstance(row, dict)]

    def _write(self, kind: str, rows: list[dict[str, Any]]) -> None:
        data = self._client.post(
            {
                "action": "sync",
                "sheetId": self._sheet_id,
                "operation": "write",
                "type": kind,
                "data": rows,
            }
        )
        if not data.get("success"):
            raise GatewayError(data.get("message") or f"Write of {kind} failed")
        self._logger.info("Collection synced", extra={"kind": kind, "count": len(rows)})

