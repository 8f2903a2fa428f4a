from __future__ import annotations

from dataclasses import dataclass, field

from shopdesk.domain.entities.service_catalog import DEFAULT_SERVICES


def _default_durations() -> dict[str, int]:
    return {s.name: s.duration_minutes for s in DEFAULT_SERVICES}


@dataclass(frozen=True)
class ShopSettings:
    service_durations: dict[str, int] = field(default_factory=_default_durations)
    product_sales_enabled: bool = True

    def duration_for(self, service_name: str) -> int:
        return int(self.service_durations.get(service_name, 0) or 0)
