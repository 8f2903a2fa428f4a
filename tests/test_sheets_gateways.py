from __future__ import annotations

import json

import httpx
import pytest

from shopdesk.application.exceptions import GatewayError
from shopdesk.domain.entities.customer import Customer
from shopdesk.domain.entities.product import Product
from shopdesk.domain.entities.transaction import LineItem, Transaction, TransactionType
from shopdesk.infrastructure.sheets.apps_script_client import AppsScriptClient
from shopdesk.infrastructure.sheets.auth_gateway import SheetsAuthGateway
from shopdesk.infrastructure.sheets.inventory_gateway import SheetsInventoryGateway
from shopdesk.infrastructure.sheets.salon_gateway import SheetsSalonPersistence

URL = "https://script.example.com/exec"


def _client(responder, captured: list) -> AppsScriptClient:
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return responder(request)

    return AppsScriptClient(URL, client=httpx.Client(transport=httpx.MockTransport(handler)))


def _body(request: httpx.Request) -> dict:
    return json.loads(request.content.decode("utf-8"))


def test_salon_read_sends_sync_action_as_plain_text():
    captured: list = []
    client = _client(
        lambda r: httpx.Response(200, json={"success": True, "data": [{"id": "'912345678", "phone": "'0912345678", "name": "Amy"}]}),
        captured,
    )

    customers = SheetsSalonPersistence(client, " sheet-1 ").fetch_customers()

    assert customers[0].phone == "0912345678"
    request = captured[0]
    assert request.method == "POST"
    assert request.headers["content-type"].startswith("text/plain")
    assert _body(request) == {"action": "sync", "sheetId": "sheet-1", "operation": "read", "type": "customers"}


def test_salon_write_sends_marked_rows():
    captured: list = []
    client = _client(lambda r: httpx.Response(200, json={"success": True}), captured)

    SheetsSalonPersistence(client, "sheet-1").sync_customers([Customer(id="912345678", phone="0912345678", name="Amy")])

    body = _body(captured[0])
    assert body["operation"] == "write"
    assert body["type"] == "customers"
    assert body["data"][0]["phone"] == "'0912345678"


def test_salon_backend_refusal_raises_gateway_error():
    client = _client(lambda r: httpx.Response(200, json={"success": False, "message": "sheet locked"}), [])
    with pytest.raises(GatewayError, match="sheet locked"):
        SheetsSalonPersistence(client, "sheet-1").fetch_bookings()


def test_salon_persistence_requires_sheet_id():
    with pytest.raises(ValueError):
        SheetsSalonPersistence(_client(lambda r: httpx.Response(200, json={}), []), "")


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="boom"),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json=["not", "an", "object"]),
    ],
)
def test_transport_failures_become_gateway_errors(response):
    client = _client(lambda r: response, [])
    with pytest.raises(GatewayError):
        client.post({"action": "check_user"})


def test_login_sends_marked_phone_and_raw_password():
    captured: list = []
    client = _client(
        lambda r: httpx.Response(
            200,
            json={
                "success": True,
                "user": {"phone": "'0212345678", "name": "'Salon", "sheetId": "abc", "googleSheetUrl": "https://sheet"},
            },
        ),
        captured,
    )

    result = SheetsAuthGateway(client).login("0212345678", "Secret1")

    body = _body(captured[0])
    assert body == {"action": "login", "phone": "'0212345678", "password": "Secret1"}
    assert result.success
    assert result.user.phone == "0212345678"
    assert result.user.sheet_id == "abc"


def test_register_marks_every_field():
    captured: list = []
    client = _client(lambda r: httpx.Response(200, json={"success": False, "message": "exists"}), captured)

    result = SheetsAuthGateway(client).register("0212345678", "Secret1", "Salon")

    assert _body(captured[0]) == {
        "action": "register",
        "phone": "'0212345678",
        "password": "'Secret1",
        "name": "'Salon",
    }
    assert not result.success
    assert result.message == "exists"
    assert result.user is None


def test_change_password_marks_only_new_password():
    captured: list = []
    client = _client(lambda r: httpx.Response(200, json={"success": True}), captured)

    SheetsAuthGateway(client).change_password("0212345678", "Old1pass", "New1pass")

    body = _body(captured[0])
    assert body["oldPassword"] == "Old1pass"
    assert body["newPassword"] == "'New1pass"


def test_user_exists_requires_boolean_answer():
    assert SheetsAuthGateway(_client(lambda r: httpx.Response(200, json={"success": True, "exists": True}), [])).user_exists("0212345678")
    with pytest.raises(GatewayError):
        SheetsAuthGateway(_client(lambda r: httpx.Response(200, json={"success": True}), [])).user_exists("0212345678")


def test_inventory_fetch_uses_get_and_decodes_maps():
    captured: list = []
    payload = {
        "products": {"A1": {"barcode": "A1", "name": "Shampoo", "quantity": 3, "weightedAverageCost": 100}},
        "transactions": [{"id": "tx-1", "type": "Sale", "items": [], "totalAmount": 0, "totalProfit": 0}],
    }
    client = _client(lambda r: httpx.Response(200, json=payload), captured)

    state = SheetsInventoryGateway(client).fetch()

    assert captured[0].method == "GET"
    assert state.products["A1"].quantity == 3
    assert state.transactions[0].type == TransactionType.sale


def test_inventory_record_posts_products_and_transaction():
    captured: list = []
    client = _client(lambda r: httpx.Response(200, json={"status": "success"}), captured)
    tx = Transaction(
        id="tx-1",
        date="2024-08-05T10:00:00+08:00",
        type=TransactionType.purchase,
        items=(LineItem("A1", "Shampoo", 10, 100),),
        total_amount=1000,
    )

    SheetsInventoryGateway(client).record({"A1": Product("A1", "Shampoo", 10, 100)}, tx)

    body = _body(captured[0])
    assert body["products"]["A1"]["weightedAverageCost"] == 100
    assert body["transaction"]["type"] == "Purchase"
    assert "totalProfit" not in body["transaction"]


def test_inventory_record_failure_raises():
    client = _client(lambda r: httpx.Response(200, json={"status": "error", "message": "quota"}), [])
    tx = Transaction(id="tx-1", date="", type=TransactionType.sale, items=(), total_amount=0)
    with pytest.raises(GatewayError, match="quota"):
        SheetsInventoryGateway(client).record({}, tx)
