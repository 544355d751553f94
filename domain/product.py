"""
Domain: Products (inventory items).

A product carries its current catalogue price and stock level. Sales never
reference the live product: they snapshot its name and price at sale time,
so later price changes do not rewrite history.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from .time import require_utc_timestamp, utc_now


class ProductCategory(str, Enum):
    CAMERAS = "Cameras"
    DVR_NVR = "DVR/NVR"
    CABLES = "Cables"
    POWER_SUPPLY = "Power Supply"
    MONITORS = "Monitors"
    ACCESSORIES = "Accessories"
    IP_CAMERAS = "IP Cameras"
    WIRELESS_SYSTEMS = "Wireless Systems"
    STORAGE_DEVICES = "Storage Devices"

    @classmethod
    def is_known(cls, value: str) -> bool:
        return value in {member.value for member in cls}


@dataclass(frozen=True, slots=True)
class Product:
    """
    Inventory item.

    `category` is kept as the raw string the caller supplied; use
    `ProductCategory.is_known` to check it against the fixed set.
    """

    product_id: str
    name: str
    category: str
    price: Decimal
    stock: int
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        require_utc_timestamp("updated_at", self.updated_at)
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not be earlier than created_at")

    def with_details(
        self,
        name: str,
        category: str,
        price: Decimal,
        stock: int,
        updated_at: Optional[datetime] = None,
    ) -> "Product":
        """Return a copy with every mutable field replaced; id and created_at are kept."""

        stamp = updated_at or utc_now()
        if stamp < self.created_at:
            stamp = self.created_at
        return replace(
            self,
            name=name,
            category=category,
            price=price,
            stock=stock,
            updated_at=stamp,
        )

    def is_low_stock(self, threshold: int = 10) -> bool:
        return self.stock < threshold
