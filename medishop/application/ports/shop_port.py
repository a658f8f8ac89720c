from __future__ import annotations

from datetime import datetime
from typing import Callable, Protocol, TypeVar

from medishop.domain.entities.cart import Cart, CartItem
from medishop.domain.entities.order import Order
from medishop.domain.entities.product import Product


TShopResult = TypeVar("TShopResult")


class ShopPort(Protocol):
    def execute_in_transaction(self, fn: Callable[[ShopPort], TShopResult]) -> TShopResult:
        ...

    def get_product(self, *, product_id: str) -> Product | None:
        ...

    def decrement_stock_if_available(self, *, product_id: str, quantity: int) -> bool:
        """Atomically take ``quantity`` units; False when stock is short."""
        ...

    def increment_stock(self, *, product_id: str, quantity: int) -> None:
        ...

    def get_cart(self, *, user_id: str) -> Cart | None:
        ...

    def save_cart_item(self, *, user_id: str, item: CartItem, now: datetime) -> None:
        ...

    def clear_cart(self, *, user_id: str) -> None:
        ...

    def create_order(self, *, order: Order) -> Order:
        ...

    def get_order(self, *, order_id: str, user_id: str | None = None) -> Order | None:
        ...

    def list_orders(self, *, user_id: str | None, offset: int, limit: int) -> list[Order]:
        ...

    def count_orders(self, *, user_id: str | None) -> int:
        ...

    def mark_order_cancelled(
        self,
        *,
        order_id: str,
        reason: str | None,
        now: datetime,
    ) -> bool:
        """Move a pending order to cancelled; False if it was no longer pending."""
        ...

    def update_order_status(
        self,
        *,
        order_id: str,
        status: str,
        delivered_at: datetime | None,
        now: datetime,
    ) -> None:
        ...
