from __future__ import annotations

import logging

from shopdesk.application.exceptions import GatewayError
from shopdesk.application.ports.inventory_gateway import InventoryGatewayPort
from shopdesk.domain.entities.product import Product
from shopdesk.domain.entities.store_state import InventoryState
from shopdesk.domain.entities.transaction import Transaction
from shopdesk.infrastructure.sheets.apps_script_client import AppsScriptClient
from shopdesk.infrastructure.sheets.codec import (
    decode_product,
    decode_transaction,
    encode_product,
    encode_transaction,
)


class SheetsInventoryGateway(InventoryGatewayPort):
    """
    Inventory Apps Script: GET returns `{"products": {barcode: ...}, "transactions": [...]}`;
    POST appends the transaction row and upserts every product row.
    """

    def __init__(self, client: AppsScriptClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    def fetch(self) -> InventoryState:
        data = self._client.get()
        raw_products = data.get("products") or {}
        raw_transactions = data.get("transactions") or []
        if not isinstance(raw_products, dict) or not isinstance(raw_transactions, list):
            raise GatewayError("Inventory backend returned an unexpected shape")

        products: dict[str, Product] = {}
        for raw in raw_products.values():
            if isinstance(raw, dict):
                product = decode_product(raw)
                products[product.barcode] = product

        transactions = tuple(decode_transaction(t) for t in raw_transactions if isinstance(t, dict))
        return InventoryState(products=products, transactions=transactions)

    def record(self, products: dict[str, Product], transaction: Transaction) -> None:
        data = self._client.post(
            {
                "products": {barcode: encode_product(p) for barcode, p in products.items()},
                "transaction": encode_transaction(transaction),
            }
        )
        if data.get("status") != "success":
            raise GatewayError(str(data.get("message") or "Inventory write failed"))
        self._logger.info("Transaction recorded", extra={"kind": transaction.type.value, "count": len(products)})
