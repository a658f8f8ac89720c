from __future__ import annotations

from medishop.application.dto.cart import AddCartItemInput
from medishop.application.ports.shop_port import ShopPort
from medishop.domain.entities.cart import Cart, CartItem
from medishop.domain.exceptions import (
    InsufficientStockError,
    InvalidQuantityError,
    ProductNotFoundError,
)

from .auth_common import utcnow


class AddCartItemUseCase:
    """Add a product to the caller's cart at its current price.

    Adding a product already in the cart merges the quantities and refreshes
    the captured price.
    """

    def __init__(self, *, shop_port: ShopPort):
        self._shop_port = shop_port

    def execute(self, command: AddCartItemInput) -> Cart:
        if command.quantity <= 0:
            raise InvalidQuantityError("Quantity must be at least 1.")

        def _tx(port: ShopPort) -> Cart:
            product = port.get_product(product_id=command.product_id)
            if product is None:
                raise ProductNotFoundError("Product not found")

            cart = port.get_cart(user_id=command.user_id)
            existing = 0
            if cart is not None:
                existing = sum(
                    item.quantity for item in cart.items if item.product_id == product.id
                )
            quantity = existing + command.quantity
            if quantity > product.stock:
                raise InsufficientStockError(product.name)

            port.save_cart_item(
                user_id=command.user_id,
                item=CartItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=quantity,
                    unit_price=product.price,
                ),
                now=utcnow(),
            )
            return port.get_cart(user_id=command.user_id) or Cart(user_id=command.user_id, items=[])

        return self._shop_port.execute_in_transaction(_tx)
