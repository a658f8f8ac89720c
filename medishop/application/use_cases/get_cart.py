from __future__ import annotations

from medishop.application.ports.shop_port import ShopPort
from medishop.domain.entities.cart import Cart


class GetCartUseCase:
    def __init__(self, *, shop_port: ShopPort):
        self._shop_port = shop_port

    def execute(self, *, user_id: str) -> Cart:
        cart = self._shop_port.get_cart(user_id=user_id)
        return cart if cart is not None else Cart(user_id=user_id, items=[])
