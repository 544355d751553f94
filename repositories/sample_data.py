"""
Seed rows for the mock store.

A CCTV/security equipment shop: eight products, three customers and one
invoice per customer. Stored as wire records so they load through the same
codec as remote data. The seeded totals are historical sample figures and
are not derived from the seeded sales.
"""

from __future__ import annotations

from typing import List

from repositories.records import Record

_SEED_DATE = "2024-01-01"


def sample_products() -> List[Record]:
    rows = [
        ("1", "HD CCTV Camera", "Cameras", 2500, 25),
        ("2", "4 Channel DVR", "DVR/NVR", 3500, 15),
        ("3", "CCTV Cable (100m)", "Cables", 800, 50),
        ("4", "Power Supply 12V", "Power Supply", 450, 30),
        ("5", "Dome Camera", "Cameras", 1800, 20),
        ("6", "8 Channel NVR", "DVR/NVR", 5500, 10),
        ("7", "BNC Connector (Pack of 10)", "Accessories", 150, 100),
        ("8", 'CCTV Monitor 19"', "Monitors", 12000, 8),
    ]
    return [
        {
            "id": product_id,
            "name": name,
            "category": category,
            "price": price,
            "stock": stock,
            "created_date": _SEED_DATE,
            "updated_date": _SEED_DATE,
        }
        for product_id, name, category, price, stock in rows
    ]


def sample_customers() -> List[Record]:
    return [
        {
            "id": "1",
            "name": "Rahul Security Systems",
            "phone": "9876543210",
            "email": "rahul@security.com",
            "total_purchases": 25000,
            "last_purchase": "2024-01-15",
            "created_date": _SEED_DATE,
        },
        {
            "id": "2",
            "name": "Priya Home Security",
            "phone": "9876543211",
            "email": "priya@home.com",
            "total_purchases": 15000,
            "last_purchase": "2024-01-14",
            "created_date": _SEED_DATE,
        },
        {
            "id": "3",
            "name": "Amit Office Solutions",
            "phone": "9876543212",
            "email": "amit@office.com",
            "total_purchases": 45000,
            "last_purchase": "2024-01-13",
            "created_date": _SEED_DATE,
        },
    ]


def _item(name: str, quantity: int, price: int) -> Record:
    return {"product_name": name, "quantity": quantity, "price": price, "total": quantity * price}


def sample_sales() -> List[Record]:
    return [
        {
            "id": "1",
            "invoice_number": "CCTV001",
            "customer_id": "1",
            "customer_name": "Rahul Security Systems",
            "items": [
                _item("HD CCTV Camera", 4, 2500),
                _item("4 Channel DVR", 1, 3500),
            ],
            "subtotal": 13500,
            "tax": 1350,
            "total": 14850,
            "status": "completed",
            "date": "2024-01-15",
            "created_date": "2024-01-15",
        },
        {
            "id": "2",
            "invoice_number": "CCTV002",
            "customer_id": "2",
            "customer_name": "Priya Home Security",
            "items": [
                _item("Dome Camera", 2, 1800),
                _item("CCTV Cable (100m)", 1, 800),
                _item("Power Supply 12V", 2, 450),
            ],
            "subtotal": 5300,
            "tax": 530,
            "total": 5830,
            "status": "completed",
            "date": "2024-01-14",
            "created_date": "2024-01-14",
        },
        {
            "id": "3",
            "invoice_number": "CCTV003",
            "customer_id": "3",
            "customer_name": "Amit Office Solutions",
            "items": [
                _item("8 Channel NVR", 1, 5500),
                _item("HD CCTV Camera", 8, 2500),
                _item('CCTV Monitor 19"', 1, 12000),
            ],
            "subtotal": 37500,
            "tax": 3750,
            "total": 41250,
            "status": "completed",
            "date": "2024-01-13",
            "created_date": "2024-01-13",
        },
    ]


__all__ = ["sample_customers", "sample_products", "sample_sales"]
