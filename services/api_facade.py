"""
API facade over the mock and remote stores.

One method per entity operation. Every method returns a JSON-shaped dict:
either a success payload (`{products|customers|sales: [...]}`,
`{id, message}`, `{message}`) or an error payload (`{error}`).

Dispatch:
- use-mock mode (or no remote configured): the mock store answers.
- otherwise the remote store is tried once; if it fails at the transport
  level the failure is logged and the mock store answers instead. No retry.

The fallback is silent in the returned payload: only the log tells a remote
answer from a mock one.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from domain.actions import Action
from repositories.action_store import Store
from repositories.client import Settings
from repositories.mock_store import MockStore
from repositories.records import Record
from repositories.remote_store import RemoteStore, RemoteStoreError

logger = logging.getLogger(__name__)


class ApiFacade:
    """
    Single dispatch point for entity operations.

    Args:
        mock: the mock store; also the fallback for remote failures
        remote: the remote store, or None to run on the mock store only
        use_mock: answer every call from the mock store even if a remote is set
    """

    def __init__(self, mock: MockStore, remote: Optional[Store] = None, use_mock: bool = False) -> None:
        self.mock = mock
        self.remote = remote
        self.use_mock = use_mock

    @classmethod
    def from_settings(cls, settings: Settings, mock: Optional[MockStore] = None) -> "ApiFacade":
        """Build a facade wired the way the environment asks for."""
        mock = mock or MockStore()
        remote = None
        if settings.remote_enabled:
            remote = RemoteStore(settings.api_url, timeout=settings.timeout)
        return cls(mock=mock, remote=remote, use_mock=settings.use_mock)

    def close(self) -> None:
        """Release the remote store's HTTP client, if it holds one."""
        close = getattr(self.remote, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "ApiFacade":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def request(self, action: Action, data: Optional[Mapping[str, Any]] = None) -> Record:
        if self.use_mock or self.remote is None:
            logger.debug(f"Using mock data for {action.value}")
            return self.mock.execute(action, data)

        try:
            return self.remote.execute(action, data)
        except RemoteStoreError as e:
            logger.warning(
                f"API request failed, returning mock data for {action.value}: {e}",
                extra={
                    "action": action.value,
                    "status_code": e.status_code,
                    "fallback": "mock",
                },
            )
            return self.mock.execute(action, data)

    # Products
    def get_products(self) -> Record:
        return self.request(Action.GET_PRODUCTS)

    def add_product(self, data: Mapping[str, Any]) -> Record:
        return self.request(Action.ADD_PRODUCT, data)

    def update_product(self, data: Mapping[str, Any]) -> Record:
        return self.request(Action.UPDATE_PRODUCT, data)

    def delete_product(self, product_id: str) -> Record:
        return self.request(Action.DELETE_PRODUCT, {"id": product_id})

    # Customers
    def get_customers(self) -> Record:
        return self.request(Action.GET_CUSTOMERS)

    def add_customer(self, data: Mapping[str, Any]) -> Record:
        return self.request(Action.ADD_CUSTOMER, data)

    def update_customer(self, data: Mapping[str, Any]) -> Record:
        return self.request(Action.UPDATE_CUSTOMER, data)

    def delete_customer(self, customer_id: str) -> Record:
        return self.request(Action.DELETE_CUSTOMER, {"id": customer_id})

    # Sales
    def get_sales(self) -> Record:
        return self.request(Action.GET_SALES)

    def add_sale(self, data: Mapping[str, Any]) -> Record:
        return self.request(Action.ADD_SALE, data)

    # Sync
    def sync_all(self, data: Mapping[str, Any]) -> Record:
        return self.request(Action.SYNC_ALL, data)


__all__ = ["ApiFacade"]
