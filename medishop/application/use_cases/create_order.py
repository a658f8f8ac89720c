from __future__ import annotations

import logging
import secrets
from datetime import datetime
from uuid import uuid4

from medishop.application.dto.orders import CreateOrderInput, CreateOrderOutput
from medishop.application.ports.shop_port import ShopPort
from medishop.domain.entities.cart import CartItem
from medishop.domain.entities.order import Order
from medishop.domain.exceptions import EmptyCartError, InsufficientStockError
from medishop.domain.services.order_pricing import (
    OrderPricingPolicy,
    build_order_items,
    compute_order_totals,
)

from .auth_common import utcnow


logger = logging.getLogger(__name__)


def generate_order_number(now: datetime) -> str:
    return f"ORD-{now:%Y%m%d}-{secrets.token_hex(4).upper()}"


class CreateOrderUseCase:
    """Turn the caller's cart into a pending order.

    Stock is checked up front so the first short item is reported by name,
    then reserved with a conditional decrement so two concurrent checkouts
    cannot both take the last unit. Reservations taken before a failure are
    released again before the error propagates.
    """

    def __init__(self, *, shop_port: ShopPort, pricing_policy: OrderPricingPolicy):
        self._shop_port = shop_port
        self._pricing_policy = pricing_policy

    def execute(self, command: CreateOrderInput) -> CreateOrderOutput:
        order = self._shop_port.execute_in_transaction(lambda port: self._create(port, command))
        logger.info("Order %s created for user %s", order.order_number, order.user_id)
        return CreateOrderOutput(
            id=order.id,
            order_number=order.order_number,
            total=order.total,
            status=order.status,
        )

    def _create(self, port: ShopPort, command: CreateOrderInput) -> Order:
        cart = port.get_cart(user_id=command.user_id)
        if cart is None or cart.is_empty:
            raise EmptyCartError("Cart is empty")

        for item in cart.items:
            product = port.get_product(product_id=item.product_id)
            if product is None:
                raise InsufficientStockError(item.product_name)
            if product.stock < item.quantity:
                raise InsufficientStockError(product.name)

        items = build_order_items(cart.items)
        totals = compute_order_totals(items=items, policy=self._pricing_policy)

        self._reserve_stock(port, cart.items)

        now = utcnow()
        order = port.create_order(
            order=Order(
                id=str(uuid4()),
                order_number=generate_order_number(now),
                user_id=command.user_id,
                items=items,
                subtotal=totals.subtotal,
                tax=totals.tax,
                shipping=totals.shipping,
                total=totals.total,
                status="pending",
                payment_method=command.payment_method,
                shipping_address=command.shipping_address,
                notes=command.notes,
                cancelled_at=None,
                cancellation_reason=None,
                delivered_at=None,
                created_at=now,
                updated_at=now,
            )
        )
        port.clear_cart(user_id=command.user_id)
        return order

    def _reserve_stock(self, port: ShopPort, cart_items: list[CartItem]) -> None:
        reserved: list[CartItem] = []
        for item in cart_items:
            if not port.decrement_stock_if_available(product_id=item.product_id, quantity=item.quantity):
                for taken in reserved:
                    port.increment_stock(product_id=taken.product_id, quantity=taken.quantity)
                raise InsufficientStockError(item.product_name)
            reserved.append(item)
