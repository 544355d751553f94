"""
In-memory mock store.

Stands in for the remote spreadsheet endpoint when remote calls are disabled
or fail. It speaks the same actions and returns the same record shapes as the
spreadsheet backend; the only difference is that nothing is persisted.

Each instance owns its collections. Construct one per process (or per test)
and hand it to the API facade.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from domain.actions import Action
from domain.aggregates import PurchaseAttribution, attribute_sale
from domain.customer import Customer
from domain.product import Product
from domain.sale import SaleRecord
from domain.time import IdGenerator, utc_now
from repositories.action_store import (
    ActionDispatcher,
    Handler,
    find_index,
    parse_sync_rows,
)
from repositories.records import (
    Record,
    customer_to_record,
    new_customer,
    new_product,
    new_sale,
    product_to_record,
    record_to_customer,
    record_to_product,
    record_to_sale,
    sale_to_record,
    to_decimal,
    to_int,
)
from repositories.sample_data import sample_customers, sample_products, sample_sales

logger = logging.getLogger(__name__)


class MockStore(ActionDispatcher):
    """
    Mock store seeded with sample rows.

    Args:
        seed: load the sample products, customers and sales (default True)
        id_generator: callable minting new entity ids
        clock: callable returning the current UTC time
    """

    store_name = "mock store"

    def __init__(
        self,
        *,
        seed: bool = True,
        id_generator: Optional[Callable[[], str]] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._products: List[Product] = []
        self._customers: List[Customer] = []
        self._sales: List[SaleRecord] = []
        self._new_id = id_generator or IdGenerator()
        self._now = clock
        super().__init__()
        if seed:
            self.load_sample_data()

    def _handler_table(self) -> Dict[Action, Handler]:
        return {
            Action.GET_PRODUCTS: self._get_products,
            Action.ADD_PRODUCT: self._add_product,
            Action.UPDATE_PRODUCT: self._update_product,
            Action.DELETE_PRODUCT: self._delete_product,
            Action.GET_CUSTOMERS: self._get_customers,
            Action.ADD_CUSTOMER: self._add_customer,
            Action.UPDATE_CUSTOMER: self._update_customer,
            Action.DELETE_CUSTOMER: self._delete_customer,
            Action.GET_SALES: self._get_sales,
            Action.ADD_SALE: self._add_sale,
            Action.SYNC_ALL: self._sync_all,
        }

    def load_sample_data(self) -> None:
        self._products = [record_to_product(row) for row in sample_products()]
        self._customers = [record_to_customer(row) for row in sample_customers()]
        self._sales = [record_to_sale(row) for row in sample_sales()]

    @property
    def products(self) -> Tuple[Product, ...]:
        return tuple(self._products)

    @property
    def customers(self) -> Tuple[Customer, ...]:
        return tuple(self._customers)

    @property
    def sales(self) -> Tuple[SaleRecord, ...]:
        return tuple(self._sales)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def _product_index(self, product_id: Any) -> Optional[int]:
        return find_index([p.product_id for p in self._products], product_id)

    def _get_products(self, data: Mapping[str, Any]) -> Record:
        return {"products": [product_to_record(p) for p in self._products]}

    def _add_product(self, data: Mapping[str, Any]) -> Record:
        product = new_product(data, self._new_id(), self._now())
        self._products.append(product)
        return {"id": product.product_id, "message": "Product added successfully"}

    def _update_product(self, data: Mapping[str, Any]) -> Record:
        index = self._product_index(data.get("id"))
        if index is None:
            return {"error": "Product not found"}

        self._products[index] = self._products[index].with_details(
            name=str(data.get("name") or ""),
            category=str(data.get("category") or ""),
            price=to_decimal(data.get("price")),
            stock=to_int(data.get("stock")),
            updated_at=self._now(),
        )
        return {"message": "Product updated successfully"}

    def _delete_product(self, data: Mapping[str, Any]) -> Record:
        index = self._product_index(data.get("id"))
        if index is None:
            return {"error": "Product not found"}
        del self._products[index]
        return {"message": "Product deleted successfully"}

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def _customer_index(self, customer_id: Any) -> Optional[int]:
        return find_index([c.customer_id for c in self._customers], customer_id)

    def _get_customers(self, data: Mapping[str, Any]) -> Record:
        return {"customers": [customer_to_record(c) for c in self._customers]}

    def _add_customer(self, data: Mapping[str, Any]) -> Record:
        customer = new_customer(data, self._new_id(), self._now())
        self._customers.append(customer)
        return {"id": customer.customer_id, "message": "Customer added successfully"}

    def _update_customer(self, data: Mapping[str, Any]) -> Record:
        index = self._customer_index(data.get("id"))
        if index is None:
            return {"error": "Customer not found"}

        email = data.get("email")
        self._customers[index] = self._customers[index].with_contact(
            name=str(data.get("name") or ""),
            phone=str(data.get("phone") or ""),
            email=str(email) if email else None,
        )
        return {"message": "Customer updated successfully"}

    def _delete_customer(self, data: Mapping[str, Any]) -> Record:
        index = self._customer_index(data.get("id"))
        if index is None:
            return {"error": "Customer not found"}
        del self._customers[index]
        return {"message": "Customer deleted successfully"}

    # ------------------------------------------------------------------
    # Sales
    # ------------------------------------------------------------------

    def _get_sales(self, data: Mapping[str, Any]) -> Record:
        return {"sales": [sale_to_record(s) for s in self._sales]}

    def _add_sale(self, data: Mapping[str, Any]) -> Record:
        sale = new_sale(data, self._new_id(), self._now())
        self._sales.append(sale)

        attribution = self._attribute(sale)
        result: Record = {"id": sale.sale_id, "message": "Sale added successfully"}
        if attribution.warning:
            result["warning"] = attribution.warning
        return result

    def _attribute(self, sale: SaleRecord) -> PurchaseAttribution:
        """Apply the customer aggregate update for a freshly recorded sale."""
        index = self._customer_index(sale.customer_id)
        customer = self._customers[index] if index is not None else None

        attribution = attribute_sale(customer, sale)
        if attribution.applied and index is not None:
            self._customers[index] = attribution.customer
        else:
            logger.warning(
                attribution.warning,
                extra={
                    "sale_id": sale.sale_id,
                    "customer_id": sale.customer_id,
                    "amount": str(sale.total),
                },
            )
        return attribution

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    def _sync_all(self, data: Mapping[str, Any]) -> Record:
        """
        Replace every collection present in the bag with the rows given.

        Ids, timestamps and customer totals are kept as supplied; imported
        sales do not touch customer totals. Absent collections are left alone.
        Every supplied collection is parsed before any is replaced, so a bad
        row leaves the store as it was.
        """
        now = self._now()
        products = parse_sync_rows(data, "products", record_to_product, now)
        customers = parse_sync_rows(data, "customers", record_to_customer, now)
        sales = parse_sync_rows(data, "sales", record_to_sale, now)

        if products is not None:
            self._products = products
        if customers is not None:
            self._customers = customers
        if sales is not None:
            self._sales = sales

        return {"message": "All data synced successfully"}


__all__ = ["MockStore"]
