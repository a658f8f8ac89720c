from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from medishop.application.dto.orders import PaginationOutput
from medishop.domain.entities.order import Order


class ShippingAddress(BaseModel):
    street: str | None = Field(default=None, max_length=200)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    zip_code: str | None = Field(default=None, max_length=20)
    country: str | None = Field(default=None, max_length=100)


class CreateOrderRequest(BaseModel):
    shipping_address: ShippingAddress | None = None
    payment_method: str | None = Field(default=None, max_length=50)
    notes: str | None = Field(default=None, max_length=1000)


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


class UpdateOrderStatusRequest(BaseModel):
    status: Literal["pending", "processing", "shipped", "delivered", "cancelled"]


class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class CustomerResponse(BaseModel):
    first_name: str
    last_name: str
    email: str


class OrderResponse(BaseModel):
    id: str
    order_number: str
    user_id: str
    items: list[OrderItemResponse]
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal
    status: str
    payment_method: str | None
    shipping_address: dict | None
    notes: str | None
    cancelled_at: datetime | None
    cancellation_reason: str | None
    delivered_at: datetime | None
    created_at: datetime
    updated_at: datetime
    customer: CustomerResponse | None = None

    @classmethod
    def from_order(cls, order: Order) -> OrderResponse:
        return cls(
            id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            items=[
                OrderItemResponse(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    line_total=item.line_total,
                )
                for item in order.items
            ],
            subtotal=order.subtotal,
            tax=order.tax,
            shipping=order.shipping,
            total=order.total,
            status=order.status,
            payment_method=order.payment_method,
            shipping_address=order.shipping_address,
            notes=order.notes,
            cancelled_at=order.cancelled_at,
            cancellation_reason=order.cancellation_reason,
            delivered_at=order.delivered_at,
            created_at=order.created_at,
            updated_at=order.updated_at,
            customer=(
                CustomerResponse(
                    first_name=order.customer.first_name,
                    last_name=order.customer.last_name,
                    email=order.customer.email,
                )
                if order.customer is not None
                else None
            ),
        )


class PaginationResponse(BaseModel):
    current_page: int
    total_pages: int
    total_orders: int
    has_next: bool
    has_prev: bool

    @classmethod
    def from_output(cls, output: PaginationOutput) -> PaginationResponse:
        return cls(
            current_page=output.current_page,
            total_pages=output.total_pages,
            total_orders=output.total_orders,
            has_next=output.has_next,
            has_prev=output.has_prev,
        )


class OrderListResponse(BaseModel):
    success: bool = True
    orders: list[OrderResponse]
    pagination: PaginationResponse


class OrderDetailResponse(BaseModel):
    success: bool = True
    order: OrderResponse


class OrderSummaryResponse(BaseModel):
    id: str
    order_number: str
    total: Decimal
    status: str


class CreateOrderResponse(BaseModel):
    success: bool = True
    message: str = "Order created successfully"
    order: OrderSummaryResponse
