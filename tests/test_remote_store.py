"""
Tests for `repositories/remote_store.py` and `services/api_facade.py`.

Covers contract rules:
- Reads are GET ?action=<name>; writes are POST ?action=<name> with {action, data}.
- Transport failures, non-2xx answers and non-JSON bodies raise RemoteStoreError.
- An {error} body is an answer, returned unchanged and never replaced by mock data.
- On a transport failure the facade logs a warning and answers from the mock store.
- In use-mock mode the remote is never contacted.
- Closing the facade closes an HTTP client its remote store built, never a borrowed one.
"""

from __future__ import annotations

import json
import logging
from typing import List

import httpx
import pytest

from domain.actions import Action
from repositories.client import Settings
from repositories.mock_store import MockStore
from repositories.remote_store import RemoteStore, RemoteStoreError
from services.api_facade import ApiFacade

URL = "https://script.example.test/macros/s/abc/exec"


def _store(handler) -> RemoteStore:
    return RemoteStore(URL, client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_read_is_sent_as_get_with_action_query() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"products": []})

    assert _store(handler).execute(Action.GET_PRODUCTS) == {"products": []}
    assert seen[0].method == "GET"
    assert seen[0].url.params["action"] == "getProducts"
    assert seen[0].url.path == "/macros/s/abc/exec"


def test_write_is_sent_as_post_with_action_envelope() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "1", "message": "Product added successfully"})

    data = {"name": "Dome Camera", "category": "Cameras", "price": 1800, "stock": 20}
    result = _store(handler).execute(Action.ADD_PRODUCT, data)

    assert result["id"] == "1"
    assert seen[0].method == "POST"
    assert seen[0].url.params["action"] == "addProduct"
    assert json.loads(seen[0].content) == {"action": "addProduct", "data": data}


def test_redirects_are_followed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "script.example.test":
            return httpx.Response(302, headers={"Location": "https://content.example.test/echo?x=1"})
        return httpx.Response(200, json={"sales": []})

    client = httpx.Client(transport=httpx.MockTransport(handler), follow_redirects=True)
    assert RemoteStore(URL, client=client).execute(Action.GET_SALES) == {"sales": []}


def test_error_body_is_returned_unchanged() -> None:
    store = _store(lambda request: httpx.Response(200, json={"error": "Product not found"}))

    assert store.execute(Action.DELETE_PRODUCT, {"id": "9"}) == {"error": "Product not found"}


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "boom"}),
        httpx.Response(404, text="Not Found"),
        httpx.Response(200, text="<html>Sign in</html>"),
        httpx.Response(200, json=["not", "an", "object"]),
    ],
)
def test_bad_answers_raise(response: httpx.Response) -> None:
    store = _store(lambda request: response)

    with pytest.raises(RemoteStoreError) as excinfo:
        store.execute(Action.GET_PRODUCTS)
    assert excinfo.value.action == Action.GET_PRODUCTS


def test_network_failure_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RemoteStoreError, match="request failed"):
        _store(handler).execute(Action.GET_CUSTOMERS)


def test_missing_url_is_a_configuration_error() -> None:
    with pytest.raises(RuntimeError, match="VYAPAR_API_URL"):
        RemoteStore("")


def test_store_closes_only_its_own_client() -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})))
    with RemoteStore(URL, client=client):
        pass
    assert not client.is_closed

    owned = RemoteStore(URL)
    owned.close()
    assert owned._client.is_closed


def test_facade_falls_back_to_mock_on_server_error(mock_store: MockStore, caplog) -> None:
    remote = _store(lambda request: httpx.Response(500))
    facade = ApiFacade(mock=mock_store, remote=remote)

    with caplog.at_level(logging.WARNING, logger="services.api_facade"):
        result = facade.get_products()

    assert result == mock_store.execute(Action.GET_PRODUCTS)
    record = next(r for r in caplog.records if r.name == "services.api_facade")
    assert "returning mock data for getProducts" in record.getMessage()
    assert record.status_code == 500
    assert record.fallback == "mock"


def test_facade_fallback_writes_go_to_mock(mock_store: MockStore) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    facade = ApiFacade(mock=mock_store, remote=_store(handler))

    result = facade.add_customer({"name": "Neha Traders", "phone": "9000000000"})

    assert result["message"] == "Customer added successfully"
    assert result["id"] in [c["id"] for c in mock_store.execute(Action.GET_CUSTOMERS)["customers"]]


def test_facade_passes_error_payload_through(mock_store: MockStore) -> None:
    remote = _store(lambda request: httpx.Response(200, json={"error": "Customer not found"}))
    facade = ApiFacade(mock=mock_store, remote=remote)

    assert facade.update_customer({"id": "1", "name": "x", "phone": "y"}) == {"error": "Customer not found"}
    # the mock was not touched
    assert mock_store.execute(Action.GET_CUSTOMERS)["customers"][0]["name"] == "Rahul Security Systems"


def test_facade_use_mock_never_contacts_remote(mock_store: MockStore) -> None:
    calls: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"sales": []})

    facade = ApiFacade(mock=mock_store, remote=_store(handler), use_mock=True)

    assert len(facade.get_sales()["sales"]) == 3
    assert calls == []


def test_facade_delete_sends_id_payload(mock_store: MockStore) -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"message": "Product deleted successfully"})

    ApiFacade(mock=mock_store, remote=_store(handler)).delete_product("7")

    assert json.loads(seen[0].content) == {"action": "deleteProduct", "data": {"id": "7"}}


def test_facade_from_settings(mock_store: MockStore) -> None:
    remote = ApiFacade.from_settings(Settings(api_url=URL), mock=mock_store)
    assert isinstance(remote.remote, RemoteStore)
    assert remote.use_mock is False

    mocked = ApiFacade.from_settings(Settings(api_url=URL, use_mock=True), mock=mock_store)
    assert mocked.remote is None
    assert mocked.use_mock is True

    unconfigured = ApiFacade.from_settings(Settings(), mock=mock_store)
    assert unconfigured.remote is None
    assert unconfigured.get_products() == mock_store.execute(Action.GET_PRODUCTS)


def test_facade_closes_the_client_it_built(mock_store: MockStore) -> None:
    with ApiFacade.from_settings(Settings(api_url=URL, timeout=5.0), mock=mock_store) as facade:
        client = facade.remote._client
        assert client.timeout == httpx.Timeout(5.0)
        assert not client.is_closed

    assert client.is_closed


def test_facade_leaves_a_borrowed_client_open(mock_store: MockStore) -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})))
    facade = ApiFacade(mock=mock_store, remote=RemoteStore(URL, client=client))

    facade.close()
    ApiFacade(mock=mock_store).close()

    assert not client.is_closed
    client.close()
