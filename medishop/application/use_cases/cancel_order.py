from __future__ import annotations

import logging

from medishop.application.dto.orders import CancelOrderInput
from medishop.application.ports.shop_port import ShopPort
from medishop.domain.entities.order import Order
from medishop.domain.exceptions import InvalidStatusTransitionError, OrderNotFoundError
from medishop.domain.services.order_status import ensure_cancellable

from .auth_common import utcnow


logger = logging.getLogger(__name__)


class CancelOrderUseCase:
    def __init__(self, *, shop_port: ShopPort):
        self._shop_port = shop_port

    def execute(self, command: CancelOrderInput) -> None:
        def _tx(port: ShopPort) -> Order:
            order = port.get_order(order_id=command.order_id, user_id=command.user_id)
            if order is None:
                raise OrderNotFoundError("Order not found")
            ensure_cancellable(order.status)

            # Guarded update so a concurrent cancel cannot restore stock twice.
            if not port.mark_order_cancelled(order_id=order.id, reason=command.reason, now=utcnow()):
                raise InvalidStatusTransitionError("Only pending orders can be cancelled")

            for item in order.items:
                port.increment_stock(product_id=item.product_id, quantity=item.quantity)
            return order

        order = self._shop_port.execute_in_transaction(_tx)
        logger.info("Order %s cancelled by user %s", order.order_number, command.user_id)
