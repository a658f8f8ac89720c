from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, TypeVar

from sqlalchemy import bindparam, text

from medishop.application.ports.shop_port import ShopPort
from medishop.domain.entities.cart import Cart, CartItem
from medishop.domain.entities.order import Order
from medishop.infrastructure.db.mappers.shop_mapper import (
    map_row_to_cart_item,
    map_row_to_product,
    map_rows_to_order,
)


TResult = TypeVar("TResult")

_ORDER_COLUMNS = """
    o.id, o.order_number, o.user_id, o.subtotal, o.tax, o.shipping, o.total, o.status, o.payment_method,
    o.shipping_address, o.notes, o.cancelled_at, o.cancellation_reason, o.delivered_at, o.created_at,
    o.updated_at
"""


class SqlShopRepository(ShopPort):
    """Cart, stock and order persistence.

    Outside ``execute_in_transaction`` every call runs on its own connection.
    Inside it, the repository handed to the callback shares one transaction
    that is rolled back if the callback raises.
    """

    def __init__(self, engine, *, connection=None):
        self._engine = engine
        self._connection = connection

    def execute_in_transaction(self, fn: Callable[[ShopPort], TResult]) -> TResult:
        if self._connection is not None:
            return fn(self)
        with self._engine.begin() as conn:
            return fn(SqlShopRepository(self._engine, connection=conn))

    @contextmanager
    def _reading(self):
        if self._connection is not None:
            yield self._connection
            return
        with self._engine.connect() as conn:
            yield conn

    @contextmanager
    def _writing(self):
        if self._connection is not None:
            yield self._connection
            return
        with self._engine.begin() as conn:
            yield conn

    def get_product(self, *, product_id: str):
        sql = """
            SELECT id, name, price, stock
            FROM public.products
            WHERE id = :product_id
            LIMIT 1
        """
        with self._reading() as conn:
            row = conn.execute(text(sql), {"product_id": product_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_product(row)

    def decrement_stock_if_available(self, *, product_id: str, quantity: int) -> bool:
        sql = """
            UPDATE public.products
            SET stock = stock - :quantity,
                updated_at = now()
            WHERE id = :product_id
              AND stock >= :quantity
            RETURNING id
        """
        with self._writing() as conn:
            row = conn.execute(text(sql), {"product_id": product_id, "quantity": quantity}).first()
        return row is not None

    def increment_stock(self, *, product_id: str, quantity: int) -> None:
        sql = """
            UPDATE public.products
            SET stock = stock + :quantity,
                updated_at = now()
            WHERE id = :product_id
        """
        with self._writing() as conn:
            conn.execute(text(sql), {"product_id": product_id, "quantity": quantity})

    def get_cart(self, *, user_id: str):
        sql = """
            SELECT c.product_id, p.name AS product_name, c.quantity, c.unit_price
            FROM public.cart_items c
            JOIN public.products p
              ON p.id = c.product_id
            WHERE c.user_id = :user_id
            ORDER BY c.added_at, c.product_id
        """
        with self._reading() as conn:
            rows = conn.execute(text(sql), {"user_id": user_id}).mappings().all()
        if not rows:
            return None
        return Cart(user_id=user_id, items=[map_row_to_cart_item(row) for row in rows])

    def save_cart_item(self, *, user_id: str, item: CartItem, now: datetime) -> None:
        sql = """
            INSERT INTO public.cart_items (user_id, product_id, quantity, unit_price, added_at)
            VALUES (:user_id, :product_id, :quantity, :unit_price, :now)
            ON CONFLICT (user_id, product_id) DO UPDATE
            SET quantity = EXCLUDED.quantity,
                unit_price = EXCLUDED.unit_price
        """
        with self._writing() as conn:
            conn.execute(
                text(sql),
                {
                    "user_id": user_id,
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "now": now,
                },
            )

    def clear_cart(self, *, user_id: str) -> None:
        sql = """
            DELETE FROM public.cart_items
            WHERE user_id = :user_id
        """
        with self._writing() as conn:
            conn.execute(text(sql), {"user_id": user_id})

    def create_order(self, *, order: Order) -> Order:
        order_sql = """
            INSERT INTO public.orders (
                id, order_number, user_id, subtotal, tax, shipping, total, status, payment_method,
                shipping_address, notes, created_at, updated_at
            ) VALUES (
                :id, :order_number, :user_id, :subtotal, :tax, :shipping, :total, :status, :payment_method,
                CAST(:shipping_address AS jsonb), :notes, :created_at, :updated_at
            )
        """
        item_sql = """
            INSERT INTO public.order_items (
                order_id, position, product_id, product_name, quantity, unit_price, line_total
            ) VALUES (
                :order_id, :position, :product_id, :product_name, :quantity, :unit_price, :line_total
            )
        """
        with self._writing() as conn:
            conn.execute(
                text(order_sql),
                {
                    "id": order.id,
                    "order_number": order.order_number,
                    "user_id": order.user_id,
                    "subtotal": order.subtotal,
                    "tax": order.tax,
                    "shipping": order.shipping,
                    "total": order.total,
                    "status": order.status,
                    "payment_method": order.payment_method,
                    "shipping_address": (
                        json.dumps(order.shipping_address) if order.shipping_address is not None else None
                    ),
                    "notes": order.notes,
                    "created_at": order.created_at,
                    "updated_at": order.updated_at,
                },
            )
            conn.execute(
                text(item_sql),
                [
                    {
                        "order_id": order.id,
                        "position": position,
                        "product_id": item.product_id,
                        "product_name": item.product_name,
                        "quantity": item.quantity,
                        "unit_price": item.unit_price,
                        "line_total": item.line_total,
                    }
                    for position, item in enumerate(order.items)
                ],
            )
        return order

    def get_order(self, *, order_id: str, user_id: str | None = None):
        sql = f"""
            SELECT {_ORDER_COLUMNS}
            FROM public.orders o
            WHERE o.id = :order_id
              AND (CAST(:user_id AS uuid) IS NULL OR o.user_id = CAST(:user_id AS uuid))
            LIMIT 1
        """
        with self._reading() as conn:
            row = conn.execute(text(sql), {"order_id": order_id, "user_id": user_id}).mappings().first()
            if row is None:
                return None
            items = self._load_items(conn, [row["id"]])
        return map_rows_to_order(row, items.get(str(row["id"]), []))

    def list_orders(self, *, user_id: str | None, offset: int, limit: int):
        sql = f"""
            SELECT {_ORDER_COLUMNS},
                   u.first_name AS customer_first_name,
                   u.last_name AS customer_last_name,
                   u.email AS customer_email
            FROM public.orders o
            LEFT JOIN public.users u
              ON u.id = o.user_id
            WHERE CAST(:user_id AS uuid) IS NULL OR o.user_id = CAST(:user_id AS uuid)
            ORDER BY o.created_at DESC
            OFFSET :offset
            LIMIT :limit
        """
        with self._reading() as conn:
            rows = conn.execute(
                text(sql),
                {"user_id": user_id, "offset": offset, "limit": limit},
            ).mappings().all()
            items = self._load_items(conn, [row["id"] for row in rows])
        # Customer details only go out on the all-orders listing.
        with_customer = user_id is None
        return [
            map_rows_to_order(row, items.get(str(row["id"]), []), with_customer=with_customer)
            for row in rows
        ]

    def count_orders(self, *, user_id: str | None) -> int:
        sql = """
            SELECT count(*)
            FROM public.orders
            WHERE CAST(:user_id AS uuid) IS NULL OR user_id = CAST(:user_id AS uuid)
        """
        with self._reading() as conn:
            return int(conn.execute(text(sql), {"user_id": user_id}).scalar_one())

    def mark_order_cancelled(self, *, order_id: str, reason: str | None, now: datetime) -> bool:
        sql = """
            UPDATE public.orders
            SET status = 'cancelled',
                cancelled_at = :now,
                cancellation_reason = :reason,
                updated_at = :now
            WHERE id = :order_id
              AND status = 'pending'
            RETURNING id
        """
        with self._writing() as conn:
            row = conn.execute(text(sql), {"order_id": order_id, "reason": reason, "now": now}).first()
        return row is not None

    def update_order_status(
        self,
        *,
        order_id: str,
        status: str,
        delivered_at: datetime | None,
        now: datetime,
    ) -> None:
        sql = """
            UPDATE public.orders
            SET status = :status,
                delivered_at = COALESCE(:delivered_at, delivered_at),
                updated_at = :now
            WHERE id = :order_id
        """
        with self._writing() as conn:
            conn.execute(
                text(sql),
                {
                    "order_id": order_id,
                    "status": status,
                    "delivered_at": delivered_at,
                    "now": now,
                },
            )

    @staticmethod
    def _load_items(conn, order_ids: list) -> dict[str, list]:
        if not order_ids:
            return {}
        sql = text(
            """
            SELECT order_id, product_id, product_name, quantity, unit_price, line_total
            FROM public.order_items
            WHERE order_id IN :order_ids
            ORDER BY order_id, position
            """
        ).bindparams(bindparam("order_ids", expanding=True))
        grouped: dict[str, list] = {}
        for row in conn.execute(sql, {"order_ids": order_ids}).mappings().all():
            grouped.setdefault(str(row["order_id"]), []).append(row)
        return grouped
