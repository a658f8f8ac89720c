from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from medishop.domain.entities.cart import CartItem
from medishop.domain.entities.order import OrderItem, OrderTotals


@dataclass(frozen=True)
class OrderPricingPolicy:
    tax_rate: Decimal = Decimal("0.10")
    free_shipping_threshold: Decimal = Decimal("100")
    flat_shipping: Decimal = Decimal("10")

    def shipping_for(self, subtotal: Decimal) -> Decimal:
        # Free shipping only strictly above the threshold.
        if subtotal > self.free_shipping_threshold:
            return Decimal("0")
        return self.flat_shipping


def build_order_items(cart_items: list[CartItem]) -> list[OrderItem]:
    return [
        OrderItem(
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price=item.unit_price,
            line_total=item.unit_price * item.quantity,
        )
        for item in cart_items
    ]


def compute_order_totals(*, items: list[OrderItem], policy: OrderPricingPolicy) -> OrderTotals:
    subtotal = sum((item.line_total for item in items), Decimal("0"))
    tax = subtotal * policy.tax_rate
    shipping = policy.shipping_for(subtotal)
    return OrderTotals(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        total=subtotal + tax + shipping,
    )
