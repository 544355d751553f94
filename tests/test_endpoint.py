"""
Tests for the spreadsheet endpoint (`api/main.py`, `api/routers/actions.py`).

Covers contract rules:
- CORS is open to any origin for GET, POST and OPTIONS.
- Read actions work over GET; write actions over GET are rejected with 400.
- POST bodies are parsed as JSON whatever their Content-Type.
- Unknown actions answer {"error": "Invalid action"}.
- A failing handler answers 500 with {"error": "Failed to <action>: ..."}.
- A remote store pointed at the endpoint returns exactly what the mock store does.
"""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from api import __version__
from api.main import build_backend, create_app
from domain.actions import Action
from repositories.client import Settings
from repositories.mock_store import MockStore
from repositories.remote_store import RemoteStore
from services.api_facade import ApiFacade
from services.sheet_service import SheetBackend


@pytest.fixture
def client(sheet_backend: SheetBackend) -> TestClient:
    with TestClient(create_app(backend=sheet_backend)) as test_client:
        yield test_client


def test_health_check(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "version": __version__,
        "service": "vyapar-spreadsheet-api",
        "sheets_backend": "custom",
    }


def test_read_action_over_get(client: TestClient) -> None:
    for path in ("/", "/exec"):
        response = client.get(path, params={"action": "getProducts"})
        assert response.status_code == 200
        assert response.json() == {"products": []}


def test_cors_headers_on_simple_request(client: TestClient) -> None:
    response = client.get("/", params={"action": "getSales"}, headers={"Origin": "http://localhost:5173"})

    assert response.headers["access-control-allow-origin"] == "*"


def test_cors_preflight(client: TestClient) -> None:
    response = client.options(
        "/exec",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]


def test_unknown_action_is_rejected(client: TestClient) -> None:
    assert client.get("/", params={"action": "dropTables"}).json() == {"error": "Invalid action"}
    assert client.get("/").json() == {"error": "Invalid action"}
    response = client.post("/", json={"action": "dropTables", "data": {}})
    assert response.status_code == 200
    assert response.json() == {"error": "Invalid action"}


def test_write_action_over_get_is_rejected(client: TestClient) -> None:
    response = client.get("/", params={"action": "addProduct"})

    assert response.status_code == 400
    assert "error" in response.json()


def test_text_plain_body_is_parsed_as_json(client: TestClient) -> None:
    body = {"action": "addCustomer", "data": {"name": "Neha Traders", "phone": "9000000000"}}

    response = client.post("/exec", content=json.dumps(body), headers={"Content-Type": "text/plain"})

    assert response.status_code == 200
    assert response.json()["message"] == "Customer added successfully"
    assert client.get("/", params={"action": "getCustomers"}).json()["customers"][0]["name"] == "Neha Traders"


def test_action_from_query_when_body_has_none(client: TestClient) -> None:
    response = client.post("/?action=addProduct", json={"data": {"name": "Dome Camera", "price": 1800, "stock": 2}})

    assert response.json()["message"] == "Product added successfully"


def test_delete_accepts_top_level_id(client: TestClient) -> None:
    product_id = client.post("/", json={"action": "addProduct", "data": {"name": "x", "price": 1, "stock": 1}}).json()["id"]

    response = client.post("/", json={"action": "deleteProduct", "id": int(product_id)})

    assert response.json() == {"message": "Product deleted successfully"}
    assert client.get("/", params={"action": "getProducts"}).json() == {"products": []}


def test_malformed_body_is_a_bad_request(client: TestClient) -> None:
    response = client.post("/", content="{not json", headers={"Content-Type": "text/plain"})

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid request body")


def test_handler_failure_answers_500(client: TestClient) -> None:
    response = client.post("/", json={"action": "addSale", "data": {"customer_id": "1", "status": "refunded"}})

    assert response.status_code == 500
    assert response.json()["error"].startswith("Failed to addSale: ")


def test_remote_store_over_endpoint_matches_mock_store(client: TestClient, empty_store: MockStore) -> None:
    remote = RemoteStore("http://testserver/exec", client=client)
    customer_id = remote.execute(Action.ADD_CUSTOMER, {"name": "Neha Traders", "phone": "9000000000"})["id"]
    empty_store.execute(Action.ADD_CUSTOMER, {"name": "Neha Traders", "phone": "9000000000"})

    sale = {"invoice_number": "INV-400500", "customer_id": customer_id, "customer_name": "Neha Traders",
            "items": [{"product_name": "Dome Camera", "quantity": 1, "price": 1800.5, "total": 1800.5}],
            "subtotal": 1800.5, "tax": 324.09, "total": 2124.59, "status": "completed", "date": "2025-01-10"}
    assert remote.execute(Action.ADD_SALE, sale) == empty_store.execute(Action.ADD_SALE, sale)

    for action in (Action.GET_PRODUCTS, Action.GET_CUSTOMERS, Action.GET_SALES):
        assert remote.execute(action) == empty_store.execute(action)


def test_facade_against_endpoint_returns_remote_answers(client: TestClient, mock_store: MockStore) -> None:
    facade = ApiFacade(mock=mock_store, remote=RemoteStore("http://testserver/", client=client))

    assert facade.get_products() == {"products": []}
    assert facade.delete_customer("1") == {"error": "Customer not found"}


def test_build_backend_rejects_unknown_storage() -> None:
    assert isinstance(build_backend(Settings(sheets_backend="memory")), SheetBackend)
    with pytest.raises(RuntimeError, match="VYAPAR_SHEETS_BACKEND"):
        build_backend(Settings(sheets_backend="excel"))
    with pytest.raises(RuntimeError, match="GOOGLE_SA_JSON"):
        build_backend(Settings(sheets_backend="gspread"))
