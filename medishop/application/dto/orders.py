from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from medishop.domain.entities.order import Order


@dataclass(frozen=True)
class CreateOrderInput:
    user_id: str
    shipping_address: dict | None
    payment_method: str | None
    notes: str | None


@dataclass(frozen=True)
class CreateOrderOutput:
    id: str
    order_number: str
    total: Decimal
    status: str


@dataclass(frozen=True)
class ListOrdersInput:
    user_id: str | None
    page: int = 1
    limit: int = 10


@dataclass(frozen=True)
class PaginationOutput:
    current_page: int
    total_pages: int
    total_orders: int
    has_next: bool
    has_prev: bool


@dataclass(frozen=True)
class OrderPageOutput:
    orders: list[Order]
    pagination: PaginationOutput


@dataclass(frozen=True)
class CancelOrderInput:
    user_id: str
    order_id: str
    reason: str | None


@dataclass(frozen=True)
class UpdateOrderStatusInput:
    order_id: str
    status: str
