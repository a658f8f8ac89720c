from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Sequence

from medishop.domain.entities.cart import CartItem
from medishop.domain.entities.order import Order, OrderCustomer, OrderItem
from medishop.domain.entities.product import Product


def _as_str(value: Any) -> str:
    return str(value)


def _as_decimal(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def map_row_to_product(row: Mapping[str, Any]) -> Product:
    return Product(
        id=_as_str(row["id"]),
        name=row["name"],
        price=_as_decimal(row["price"]),
        stock=int(row["stock"]),
    )


def map_row_to_cart_item(row: Mapping[str, Any]) -> CartItem:
    return CartItem(
        product_id=_as_str(row["product_id"]),
        product_name=row["product_name"],
        quantity=int(row["quantity"]),
        unit_price=_as_decimal(row["unit_price"]),
    )


def map_row_to_order_item(row: Mapping[str, Any]) -> OrderItem:
    return OrderItem(
        product_id=_as_str(row["product_id"]),
        product_name=row["product_name"],
        quantity=int(row["quantity"]),
        unit_price=_as_decimal(row["unit_price"]),
        line_total=_as_decimal(row["line_total"]),
    )


def map_row_to_order_customer(row: Mapping[str, Any]) -> OrderCustomer | None:
    if row.get("customer_email") is None:
        return None
    return OrderCustomer(
        first_name=row["customer_first_name"],
        last_name=row["customer_last_name"],
        email=row["customer_email"],
    )


def map_rows_to_order(
    row: Mapping[str, Any],
    item_rows: Sequence[Mapping[str, Any]],
    *,
    with_customer: bool = False,
) -> Order:
    return Order(
        id=_as_str(row["id"]),
        order_number=row["order_number"],
        user_id=_as_str(row["user_id"]),
        items=[map_row_to_order_item(item) for item in item_rows],
        subtotal=_as_decimal(row["subtotal"]),
        tax=_as_decimal(row["tax"]),
        shipping=_as_decimal(row["shipping"]),
        total=_as_decimal(row["total"]),
        status=row["status"],
        payment_method=row.get("payment_method"),
        shipping_address=row.get("shipping_address"),
        notes=row.get("notes"),
        cancelled_at=row.get("cancelled_at"),
        cancellation_reason=row.get("cancellation_reason"),
        delivered_at=row.get("delivered_at"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        customer=map_row_to_order_customer(row) if with_customer else None,
    )
