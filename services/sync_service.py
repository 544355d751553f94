"""
Offline cache and bulk synchronization.

`LocalCache` keeps the last fetched copy of each collection as JSON files so
the application can show data while offline. `SyncService` moves data in
bulk between the API facade and that cache:

- fetch_all: read products, customers and sales, then cache them
- push_all: send a syncAll bag and stamp the last-sync time

Fetches are numbered. A fetch that finishes after a newer one has already
been cached does not overwrite the newer snapshot.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Tuple

from domain.customer import Customer
from domain.product import Product
from domain.sale import SaleRecord
from domain.time import parse_utc_datetime, to_iso_utc, utc_now
from repositories.records import (
    Record,
    record_to_customer,
    record_to_product,
    record_to_sale,
)
from services.api_facade import ApiFacade

logger = logging.getLogger(__name__)

_COLLECTIONS = ("products", "customers", "sales")
_LAST_SYNC_FILE = "vyapar_last_sync.json"


class SyncError(Exception):
    """Raised when a bulk push is rejected."""


@dataclass(frozen=True, slots=True)
class SyncSnapshot:
    """One fetched copy of the three collections, as wire records."""
    products: List[Record] = field(default_factory=list)
    customers: List[Record] = field(default_factory=list)
    sales: List[Record] = field(default_factory=list)

    def to_entities(self) -> Tuple[List[Product], List[Customer], List[SaleRecord]]:
        return (
            [record_to_product(row) for row in self.products],
            [record_to_customer(row) for row in self.customers],
            [record_to_sale(row) for row in self.sales],
        )


class LocalCache:
    """
    JSON-file cache, one file per collection.

    Unreadable files are logged and read as empty; failed writes are logged
    and otherwise ignored, so a broken cache never stops the application.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def _path(self, name: str) -> Path:
        return self.directory / f"vyapar_{name}.json"

    def read(self, name: str) -> List[Record]:
        path = self._path(name)
        if not path.exists():
            return []
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading local {name}: {e}")
            return []
        return data if isinstance(data, list) else []

    def write(self, name: str, records: List[Record]) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with self._path(name).open("w", encoding="utf-8") as f:
                json.dump(records, f)
        except (OSError, TypeError) as e:
            logger.error(f"Error saving local {name}: {e}")

    def snapshot(self) -> SyncSnapshot:
        return SyncSnapshot(**{name: self.read(name) for name in _COLLECTIONS})

    def store(self, snapshot: SyncSnapshot) -> None:
        for name in _COLLECTIONS:
            self.write(name, getattr(snapshot, name))

    def clear_all(self) -> None:
        for name in _COLLECTIONS:
            try:
                self._path(name).unlink(missing_ok=True)
            except OSError as e:
                logger.error(f"Error clearing local {name}: {e}")

    def last_sync(self) -> Optional[datetime]:
        path = self.directory / _LAST_SYNC_FILE
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                return parse_utc_datetime(json.load(f)["last_sync"])
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Error reading last sync time: {e}")
            return None

    def stamp_sync(self, when: datetime) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with (self.directory / _LAST_SYNC_FILE).open("w", encoding="utf-8") as f:
                json.dump({"last_sync": to_iso_utc(when, name="last_sync")}, f)
        except OSError as e:
            logger.error(f"Error updating sync timestamp: {e}")


class SyncService:
    """
    Bulk fetch/push between the API facade and the local cache.

    Args:
        api: facade to read from and push through
        cache: where fetched snapshots are kept
        clock: callable returning the current UTC time
    """

    def __init__(self, api: ApiFacade, cache: LocalCache, clock: Callable[[], datetime] = utc_now) -> None:
        self.api = api
        self.cache = cache
        self._now = clock
        self._issued = 0
        self._applied = 0

    def begin_fetch(self) -> int:
        """Reserve the sequence number for a new fetch."""
        self._issued += 1
        return self._issued

    def store_snapshot(self, sequence: int, snapshot: SyncSnapshot) -> bool:
        """
        Cache a fetched snapshot unless a newer fetch was cached already.

        Returns:
            True if the snapshot was written
        """
        if sequence <= self._applied:
            logger.info(
                f"Discarding stale fetch #{sequence}; fetch #{self._applied} is already cached"
            )
            return False
        self.cache.store(snapshot)
        self._applied = sequence
        return True

    def fetch_all(self) -> SyncSnapshot:
        """
        Read the three collections through the facade and cache them.

        A collection whose answer is an error payload comes back empty.
        """
        sequence = self.begin_fetch()
        responses = {
            "products": self.api.get_products(),
            "customers": self.api.get_customers(),
            "sales": self.api.get_sales(),
        }

        collections = {}
        for name, response in responses.items():
            if "error" in response:
                logger.warning(f"Fetching {name} failed: {response['error']}")
            collections[name] = list(response.get(name) or [])

        snapshot = SyncSnapshot(**collections)
        self.store_snapshot(sequence, snapshot)
        return snapshot

    def push_all(self, data: Mapping[str, Any]) -> Record:
        """
        Replace the remote collections with `data` via syncAll.

        Raises:
            SyncError: if the store answers with an error payload
        """
        response = self.api.sync_all(data)
        if "error" in response:
            raise SyncError(response["error"])
        self.cache.stamp_sync(self._now())
        return response

    def last_sync(self) -> Optional[datetime]:
        return self.cache.last_sync()


__all__ = ["LocalCache", "SyncError", "SyncService", "SyncSnapshot"]
