"""
Domain: the action vocabulary shared by every store.

The local mock store, the HTTP adapter and the spreadsheet backend all speak
exactly these actions with the same payload shapes, which is what makes them
interchangeable.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Mapping, Optional


class Action(str, Enum):
    GET_PRODUCTS = "getProducts"
    ADD_PRODUCT = "addProduct"
    UPDATE_PRODUCT = "updateProduct"
    DELETE_PRODUCT = "deleteProduct"
    GET_CUSTOMERS = "getCustomers"
    ADD_CUSTOMER = "addCustomer"
    UPDATE_CUSTOMER = "updateCustomer"
    DELETE_CUSTOMER = "deleteCustomer"
    GET_SALES = "getSales"
    ADD_SALE = "addSale"
    SYNC_ALL = "syncAll"

    @property
    def is_read(self) -> bool:
        """Reads carry no payload and travel as GET requests."""
        return self in _READ_ACTIONS

    @classmethod
    def parse(cls, name: Optional[str]) -> Optional["Action"]:
        """Resolve an action name, or None if it is not part of the vocabulary."""
        try:
            return cls(name)
        except ValueError:
            return None


_READ_ACTIONS = frozenset({Action.GET_PRODUCTS, Action.GET_CUSTOMERS, Action.GET_SALES})


def require_complete_handlers(owner: str, handlers: Mapping[Action, Callable]) -> None:
    """
    Fail fast when a store's handler table does not cover the vocabulary.

    Raises:
        RuntimeError: naming the missing actions
    """
    missing = [action.value for action in Action if action not in handlers]
    if missing:
        raise RuntimeError(f"{owner} has no handler for: {', '.join(missing)}")


__all__ = ["Action", "require_complete_handlers"]
