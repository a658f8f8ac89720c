from __future__ import annotations

import logging

from medishop.application.dto.orders import UpdateOrderStatusInput
from medishop.application.ports.shop_port import ShopPort
from medishop.domain.exceptions import OrderNotFoundError
from medishop.domain.services.order_status import OrderStatusPolicy

from .auth_common import utcnow


logger = logging.getLogger(__name__)


class UpdateOrderStatusUseCase:
    def __init__(self, *, shop_port: ShopPort, status_policy: OrderStatusPolicy):
        self._shop_port = shop_port
        self._status_policy = status_policy

    def execute(self, command: UpdateOrderStatusInput) -> None:
        order = self._shop_port.get_order(order_id=command.order_id)
        if order is None:
            raise OrderNotFoundError("Order not found")

        self._status_policy.check(current=order.status, target=command.status)

        now = utcnow()
        self._shop_port.update_order_status(
            order_id=order.id,
            status=command.status,
            delivered_at=now if command.status == "delivered" else None,
            now=now,
        )
        logger.info("Order %s moved from %s to %s", order.order_number, order.status, command.status)
