from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from medishop.domain.entities.cart import Cart


class AddCartItemRequest(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1, le=1000)


class CartItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class CartResponse(BaseModel):
    success: bool = True
    items: list[CartItemResponse]
    total_items: int
    total_amount: Decimal

    @classmethod
    def from_cart(cls, cart: Cart) -> CartResponse:
        return cls(
            items=[
                CartItemResponse(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    line_total=item.unit_price * item.quantity,
                )
                for item in cart.items
            ],
            total_items=cart.total_items,
            total_amount=cart.total_amount,
        )
