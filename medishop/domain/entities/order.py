from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Literal


OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]

ORDER_STATUSES: tuple[str, ...] = ("pending", "processing", "shipped", "delivered", "cancelled")


@dataclass(frozen=True)
class OrderItem:
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal


@dataclass(frozen=True)
class OrderCustomer:
    first_name: str
    last_name: str
    email: str


@dataclass(frozen=True)
class Order:
    id: str
    order_number: str
    user_id: str
    items: list[OrderItem]
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal
    status: OrderStatus
    payment_method: str | None
    shipping_address: dict | None
    notes: str | None
    cancelled_at: datetime | None
    cancellation_reason: str | None
    delivered_at: datetime | None
    created_at: datetime
    updated_at: datetime
    customer: OrderCustomer | None = None
