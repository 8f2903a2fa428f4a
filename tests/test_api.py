"""
HTTP-level tests against in-memory backends.
"""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

from shopdesk.application.use_cases.auth import AuthUseCase
from shopdesk.application.use_cases.expand_idea import ExpandIdeaUseCase
from shopdesk.application.use_cases.inventory_session import InventoryUseCase
from shopdesk.application.use_cases.salon_session import SalonUseCase
from shopdesk.domain.entities.store_state import AppState
from shopdesk.domain.entities.user import User
from shopdesk.infrastructure.llm.mock_content import MockContentGenerator
from shopdesk.infrastructure.store.memory_store import (
    MemoryAuthGateway,
    MemoryInventoryGateway,
    MemorySalonPersistence,
    MemorySessionStore,
)
from shopdesk.main import app
from shopdesk.wiring import dependencies

TZ = ZoneInfo("Asia/Taipei")
NOW = datetime(2024, 8, 7, 15, 0, tzinfo=TZ)


@pytest.fixture
def client():
    state = AppState()
    backend = MemorySalonPersistence()
    clock = lambda: NOW
    salon = SalonUseCase(state, persistence_factory=lambda user: backend, timezone=TZ, clock=clock)
    auth = AuthUseCase(auth=MemoryAuthGateway(), sessions=MemorySessionStore(), salon=salon)
    inventory = InventoryUseCase(state, MemoryInventoryGateway(), timezone=TZ, clock=clock)

    app.dependency_overrides = {
        dependencies.get_app_state: lambda: state,
        dependencies.get_salon_use_case: lambda: salon,
        dependencies.get_auth_use_case: lambda: auth,
        dependencies.get_inventory_use_case: lambda: inventory,
        dependencies.get_expand_idea_use_case: lambda: ExpandIdeaUseCase(MockContentGenerator()),
        dependencies.get_timezone: lambda: TZ,
        dependencies.get_clock: lambda: clock,
    }
    yield TestClient(app)
    app.dependency_overrides = {}


def _login(client: TestClient) -> None:
    resp = client.post(
        "/api/v1/auth/register",
        json={"phone": "0212345678", "password": "Secret1", "confirm_password": "Secret1", "name": "Salon"},
    )
    assert resp.status_code == 200
    assert resp.json()["success"] is True


def _customer(client: TestClient) -> dict:
    resp = client.post("/api/v1/customers", json={"phone": "0912345678", "name": "Amy", "birth_month": 8, "birth_day": 5})
    assert resp.status_code == 201
    return resp.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_auth_flow(client):
    assert client.post("/api/v1/auth/check", json={"phone": "0212345678"}).json()["is_available"] is True
    assert client.get("/api/v1/auth/me").status_code == 401

    _login(client)
    assert client.get("/api/v1/auth/me").json()["phone"] == "0212345678"

    resp = client.post("/api/v1/auth/register", json={"phone": "123", "password": "x", "confirm_password": "x", "name": "n"})
    assert resp.status_code == 400

    client.post("/api/v1/auth/logout")
    assert client.get("/api/v1/auth/me").status_code == 401


def test_password_rules(client):
    body = client.post("/api/v1/auth/password-rules", json={"password": "abcdef"}).json()
    assert body["lower"] is True
    assert body["upper"] is False
    assert body["valid"] is False


def test_booking_lifecycle_over_http(client):
    _login(client)
    customer = _customer(client)
    assert customer["id"] == "912345678"
    assert customer["birthday"] == "8/5"

    resp = client.post(
        "/api/v1/bookings",
        json={"customer_id": "912345678", "date": "20240807", "start_time": "10:00", "services": ["洗髮", "剪髮"]},
    )
    assert resp.status_code == 201
    booking = resp.json()["booking"]
    assert booking["end_time"] == "11:30"
    assert resp.json()["synced"] is True

    resp = client.post(f"/api/v1/bookings/{booking['id']}/checkout", json={"amount": "500", "product_amount": 200})
    assert resp.status_code == 200
    assert resp.json()["customer"]["stats_amount"] == 700
    assert resp.json()["customer"]["stats_visits"] == 1

    assert client.post(f"/api/v1/bookings/{booking['id']}/cancel").status_code == 409
    assert client.post("/api/v1/bookings/booking-404/cancel").status_code == 404

    revenue = client.get("/api/v1/reports/revenue").json()
    assert (revenue["today"], revenue["week"], revenue["month"]) == (700, 700, 700)
    assert revenue["range"] is None

    mix = client.get("/api/v1/reports/service-mix").json()
    assert mix["chart"]["洗髮"] == 50
    assert mix["chart"]["染髮"] == 0

    assert [b["id"] for b in client.get("/api/v1/reports/today").json()] == [booking["id"]]
    assert list(client.get("/api/v1/reports/calendar", params={"month": "2024-08"}).json()) == ["2024-08-07"]
    assert [b["id"] for b in client.get(f"/api/v1/customers/912345678/bookings").json()] == [booking["id"]]


def test_booking_validation_errors(client):
    _login(client)
    _customer(client)

    resp = client.post(
        "/api/v1/bookings",
        json={"customer_id": "912345678", "date": "20240807", "start_time": "10:00", "services": []},
    )
    assert resp.status_code == 400

    resp = client.post(
        "/api/v1/bookings",
        json={"customer_id": "nobody", "date": "20240807", "start_time": "10:00", "services": ["剪髮"]},
    )
    assert resp.status_code == 404

    assert client.get("/api/v1/bookings", params={"date": "not-a-date"}).status_code == 400


def test_customer_lookup_and_duplicate(client):
    _login(client)
    _customer(client)

    assert client.get("/api/v1/customers/by-phone/0912345678").json()["name"] == "Amy"
    assert client.get("/api/v1/customers/by-phone/0900000000").json() is None
    assert client.post("/api/v1/customers", json={"phone": "0912345678", "name": "Dup"}).status_code == 400
    assert client.put("/api/v1/customers/404", json={"name": "X"}).status_code == 404
    assert client.put("/api/v1/customers/912345678", json={"notes": "vip"}).json()["notes"] == "vip"
    assert [c["name"] for c in client.get("/api/v1/customers", params={"q": "vip"}).json()] == ["Amy"]


def test_settings_and_service_toggle(client):
    resp = client.put("/api/v1/settings", json={"service_durations": {"剪髮": 45}, "product_sales_enabled": False})
    assert resp.status_code == 200
    assert client.get("/api/v1/settings").json()["product_sales_enabled"] is False
    assert client.get("/api/v1/services").json() == [{"name": "剪髮", "duration_minutes": 45}]

    toggled = client.post("/api/v1/services/toggle", json={"selected": ["剪髮"], "service": "洗髮"}).json()
    assert toggled["selected"] == ["洗髮"]

    assert client.put("/api/v1/settings", json={"service_durations": {"剪髮": -1}}).status_code == 400


def test_inventory_over_http(client):
    resp = client.post(
        "/api/v1/inventory/purchases",
        json={"lines": [{"barcode": "A1", "name": "Shampoo", "quantity": 10, "unit_price": 100}]},
    )
    assert resp.status_code == 201
    client.post(
        "/api/v1/inventory/purchases",
        json={"lines": [{"barcode": "A1", "quantity": 10, "unit_price": 200}]},
    )
    assert client.get("/api/v1/inventory/products/A1").json()["weighted_average_cost"] == 150

    resp = client.post(
        "/api/v1/inventory/sales",
        json={"lines": [{"barcode": "A1", "quantity": 25, "unit_price": 200}, {"barcode": "ZZ", "quantity": 1, "unit_price": 1}]},
    )
    body = resp.json()
    assert resp.status_code == 201
    assert body["rejected_barcodes"] == ["ZZ"]
    assert body["products"][0]["quantity"] == -5
    assert body["transaction"]["total_profit"] == 1250

    profit = client.get("/api/v1/inventory/profit").json()
    assert profit[0]["profit"] == 1250
    summary = client.get("/api/v1/inventory/sales-summary", params={"start": "20240807", "end": "2024-08-07"}).json()
    assert summary["transaction_count"] == 1
    assert len(client.get("/api/v1/inventory/transactions").json()) == 3

    assert client.get("/api/v1/inventory/products/ZZ").status_code == 404
    assert client.post("/api/v1/inventory/sales", json={"lines": [{"barcode": "ZZ", "quantity": 1, "unit_price": 1}]}).status_code == 400
    assert client.post("/api/v1/inventory/purchases", json={"lines": []}).status_code == 422


def test_assistant_routes(client):
    assert client.post("/api/v1/assistant/expand", json={"seed": "balayage"}).json()["title"]
    assert client.post("/api/v1/assistant/expand", json={"seed": " "}).status_code == 400
    assert client.post("/api/v1/assistant/image", json={"prompt": "braid"}).json()["data_url"].startswith("data:image/png")
    assert client.post("/api/v1/assistant/speech", json={"text": "hi"}).json()["audio_base64"] == "aGk="


def test_lifespan_runs_startup(monkeypatch):
    calls = []
    monkeypatch.setattr("shopdesk.main.startup", lambda: calls.append("startup"))
    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
    assert calls == ["startup"]


def test_memory_salon_backend_is_cached_per_process():
    dependencies.get_memory_salon_persistence.cache_clear()
    user = User(phone="0212345678", name="Salon", sheet_url="memory://local", sheet_id="s1")

    first = dependencies.build_salon_persistence(user)
    assert isinstance(first, MemorySalonPersistence)
    assert dependencies.build_salon_persistence(user) is first
    assert dependencies.build_salon_persistence(User(phone="0212345678", name="Salon")) is None

    dependencies.get_memory_salon_persistence.cache_clear()
    assert dependencies.build_salon_persistence(user) is not first
