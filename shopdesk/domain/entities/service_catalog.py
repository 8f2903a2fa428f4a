from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceDefinition:
    name: str
    duration_minutes: int


DEFAULT_SERVICES: tuple[ServiceDefinition, ...] = (
    ServiceDefinition("洗髮", 30),
    ServiceDefinition("剪髮", 60),
    ServiceDefinition("染髮", 120),
    ServiceDefinition("燙髮", 180),
    ServiceDefinition("護髮", 60),
    ServiceDefinition("頭皮保養", 90),
    ServiceDefinition("其他", 30),
)

KNOWN_SERVICE_NAMES: tuple[str, ...] = tuple(s.name for s in DEFAULT_SERVICES)

WASH_SERVICE = "洗髮"
# A wash-only visit excludes the main services and vice versa.
MAIN_SERVICES: frozenset[str] = frozenset({"剪髮", "染髮", "燙髮", "護髮", "頭皮保養"})


def toggle_service(selected: list[str], service_name: str) -> list[str]:
    """Return the selection after the operator taps `service_name`."""
    if service_name in selected:
        return [s for s in selected if s != service_name]

    if service_name == WASH_SERVICE:
        return [WASH_SERVICE] + [s for s in selected if s not in MAIN_SERVICES]

    if service_name in MAIN_SERVICES:
        return [s for s in selected if s != WASH_SERVICE] + [service_name]

    return [*selected, service_name]
