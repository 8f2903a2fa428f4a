from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from shopdesk.application.exceptions import GatewayError
from shopdesk.application.ports.inventory_gateway import InventoryGatewayPort
from shopdesk.application.use_cases.inventory import (
    InventoryMutation,
    PurchaseLine,
    SaleLine,
    apply_purchase,
    apply_sale,
)
from shopdesk.domain.entities.store_state import AppState, InventoryState


class InventoryUseCase:
    def __init__(
        self,
        state: AppState,
        gateway: InventoryGatewayPort,
        timezone: ZoneInfo,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._state = state
        self._gateway = gateway
        self._clock = clock or (lambda: datetime.now(timezone))
        self._logger = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self.last_sync_ok: bool | None = None

    @property
    def inventory(self) -> InventoryState:
        return self._state.inventory

    def load(self) -> bool:
        with self._lock:
            try:
                self._state.inventory = self._gateway.fetch()
            except GatewayError as e:
                self._logger.error("Inventory fetch failed", extra={"error": str(e)})
                return False
            self._logger.info("Inventory loaded", extra={"count": len(self._state.inventory.products)})
            return True

    def purchase(
        self,
        lines: list[PurchaseLine],
        remarks: str = "",
        local_total: float | None = None,
    ) -> InventoryMutation:
        with self._lock:
            mutation = apply_purchase(self.inventory, lines, now=self._clock(), remarks=remarks, local_total=local_total)
            return self._commit(mutation)

    def sale(self, lines: list[SaleLine], remarks: str = "") -> InventoryMutation:
        with self._lock:
            mutation = apply_sale(self.inventory, lines, now=self._clock(), remarks=remarks)
            for barcode in mutation.rejected_barcodes:
                self._logger.warning("Sale line rejected: unknown product", extra={"barcode": barcode})
            return self._commit(mutation)

    def _commit(self, mutation: InventoryMutation) -> InventoryMutation:
        # Caller holds _lock.
        self._state.inventory = mutation.state
        try:
            self._gateway.record(dict(mutation.state.products), mutation.transaction)
            self.last_sync_ok = True
        except GatewayError as e:
            self._logger.error("Inventory sync failed", extra={"kind": mutation.transaction.type.value, "error": str(e)})
            self.last_sync_ok = False
        return mutation
