from __future__ import annotations

import math

from medishop.application.dto.orders import ListOrdersInput, OrderPageOutput, PaginationOutput
from medishop.application.ports.shop_port import ShopPort


class ListOrdersUseCase:
    """Page through orders, newest first.

    ``user_id=None`` lists every order and is reserved for administrators.
    """

    def __init__(self, *, shop_port: ShopPort):
        self._shop_port = shop_port

    def execute(self, command: ListOrdersInput) -> OrderPageOutput:
        page = command.page if command.page > 0 else 1
        limit = command.limit if command.limit > 0 else 10
        offset = (page - 1) * limit

        orders = self._shop_port.list_orders(user_id=command.user_id, offset=offset, limit=limit)
        total_orders = self._shop_port.count_orders(user_id=command.user_id)

        return OrderPageOutput(
            orders=orders,
            pagination=PaginationOutput(
                current_page=page,
                total_pages=math.ceil(total_orders / limit),
                total_orders=total_orders,
                has_next=page * limit < total_orders,
                has_prev=page > 1,
            ),
        )
