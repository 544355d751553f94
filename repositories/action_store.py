"""
Action-dispatch store contract.

A store answers one action with one JSON-shaped record. The local mock, the
HTTP adapter and the spreadsheet backend all satisfy `Store`; the two local
ones share `ActionDispatcher`, which routes each action through a handler
table that must cover the whole vocabulary.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence

from domain.actions import Action, require_complete_handlers
from repositories.records import Record, with_created_date

logger = logging.getLogger(__name__)

Handler = Callable[[Mapping[str, Any]], Record]

# Collections accepted by syncAll, in the order they are applied.
SYNC_COLLECTIONS: Sequence[str] = ("products", "customers", "sales")


class Store(Protocol):
    def execute(self, action: Action, data: Optional[Mapping[str, Any]] = None) -> Record:
        ...


class ActionDispatcher:
    """Base for stores that answer actions in-process."""

    store_name = "store"

    def __init__(self) -> None:
        self._handlers: Dict[Action, Handler] = self._handler_table()
        require_complete_handlers(type(self).__name__, self._handlers)

    def _handler_table(self) -> Dict[Action, Handler]:
        raise NotImplementedError

    def execute(self, action: Action, data: Optional[Mapping[str, Any]] = None) -> Record:
        logger.debug(f"{self.store_name} handling {action.value}")
        return self._handlers[action](data or {})


def find_index(ids: List[str], entity_id: Any) -> Optional[int]:
    """Position of `entity_id` among `ids`, compared as strings."""
    wanted = str(entity_id) if entity_id is not None else None
    for index, current in enumerate(ids):
        if current == wanted:
            return index
    return None


def sync_rows(data: Mapping[str, Any], collection: str) -> Optional[List[Mapping[str, Any]]]:
    """Rows supplied for one collection in a syncAll bag, or None if absent."""
    if collection not in data or data[collection] is None:
        return None
    return list(data[collection])


def parse_sync_rows(
    data: Mapping[str, Any],
    collection: str,
    parse: Callable[[Mapping[str, Any]], Any],
    now: datetime,
) -> Optional[List[Any]]:
    """
    Entities for one collection in a syncAll bag, or None if absent.

    Rows without a created_date get `now`. Raises whatever `parse` raises on
    a malformed row, before any store state is touched.
    """
    rows = sync_rows(data, collection)
    if rows is None:
        return None
    return [parse(with_created_date(row, now)) for row in rows]


__all__ = [
    "ActionDispatcher",
    "Handler",
    "SYNC_COLLECTIONS",
    "Store",
    "find_index",
    "parse_sync_rows",
    "sync_rows",
]
