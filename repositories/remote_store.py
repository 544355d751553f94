"""
Remote store adapter for the spreadsheet endpoint.

Encodes one action into one HTTP request against the configured URL:
- reads (no payload):  GET  {url}?action=<name>
- writes (payload):    POST {url}?action=<name>  with JSON body {action, data}

Transport problems (network errors, timeouts, non-2xx status, a body that is
not a JSON object) raise `RemoteStoreError`. A JSON `{error}` body is an
application answer and is returned unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from domain.actions import Action
from repositories.records import Record

logger = logging.getLogger(__name__)


class RemoteStoreError(Exception):
    """Raised when the remote endpoint cannot be reached or answers badly."""

    def __init__(self, action: Action, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"{action.value}: {message}")
        self.action = action
        self.status_code = status_code


class RemoteStore:
    """
    HTTP adapter speaking the action protocol.

    Args:
        url: endpoint URL (query string is added per request)
        client: the httpx client to send requests with; the store does not
            close a client it was given
    """

    store_name = "remote store"

    def __init__(self, url: str, client: Optional[httpx.Client] = None, timeout: float = 30.0) -> None:
        if not url:
            raise RuntimeError(
                "Missing environment variable: VYAPAR_API_URL. "
                "Set VYAPAR_API_URL to the spreadsheet endpoint deployment URL."
            )
        self.url = url
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "RemoteStore":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def execute(self, action: Action, data: Optional[Mapping[str, Any]] = None) -> Record:
        params = {"action": action.value}

        try:
            if data is None:
                response = self._client.get(self.url, params=params)
            else:
                response = self._client.post(
                    self.url,
                    params=params,
                    json={"action": action.value, "data": dict(data)},
                )
        except httpx.HTTPError as e:
            raise RemoteStoreError(action, f"request failed: {e}") from e

        if not response.is_success:
            raise RemoteStoreError(
                action,
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise RemoteStoreError(action, "response is not valid JSON", response.status_code) from e

        if not isinstance(body, dict):
            raise RemoteStoreError(action, "response is not a JSON object", response.status_code)

        if "error" in body:
            logger.info(f"Remote store answered {action.value} with an error: {body['error']}")
        return body


__all__ = ["RemoteStore", "RemoteStoreError"]
