from __future__ import annotations

from medishop.application.ports.shop_port import ShopPort
from medishop.domain.entities.order import Order
from medishop.domain.exceptions import OrderNotFoundError


class GetOrderUseCase:
    def __init__(self, *, shop_port: ShopPort):
        self._shop_port = shop_port

    def execute(self, *, user_id: str, order_id: str) -> Order:
        order = self._shop_port.get_order(order_id=order_id, user_id=user_id)
        if order is None:
            raise OrderNotFoundError("Order not found")
        return order
