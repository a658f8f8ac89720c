from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from medishop.api.deps import (
    admin_only,
    get_cancel_order_use_case,
    get_create_order_use_case,
    get_get_order_use_case,
    get_list_orders_use_case,
    get_update_order_status_use_case,
    require_verified_session,
)
from medishop.api.schemas.common import MessageResponse
from medishop.api.schemas.orders import (
    CancelOrderRequest,
    CreateOrderRequest,
    CreateOrderResponse,
    OrderDetailResponse,
    OrderListResponse,
    OrderResponse,
    OrderSummaryResponse,
    PaginationResponse,
    UpdateOrderStatusRequest,
)
from medishop.application.dto.orders import (
    CancelOrderInput,
    CreateOrderInput,
    ListOrdersInput,
    UpdateOrderStatusInput,
)
from medishop.application.use_cases.cancel_order import CancelOrderUseCase
from medishop.application.use_cases.create_order import CreateOrderUseCase
from medishop.application.use_cases.get_order import GetOrderUseCase
from medishop.application.use_cases.list_orders import ListOrdersUseCase
from medishop.application.use_cases.update_order_status import UpdateOrderStatusUseCase
from medishop.domain.entities.user import User
from medishop.domain.exceptions import DomainConflictError, OrderNotFoundError


router = APIRouter()


@router.get("/orders", response_model=OrderListResponse)
def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(require_verified_session),
    use_case: ListOrdersUseCase = Depends(get_list_orders_use_case),
):
    output = use_case.execute(ListOrdersInput(user_id=current_user.id, page=page, limit=limit))
    return OrderListResponse(
        orders=[OrderResponse.from_order(order) for order in output.orders],
        pagination=PaginationResponse.from_output(output.pagination),
    )


@router.get("/orders/admin/all", response_model=OrderListResponse)
def list_all_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    _admin: User = Depends(admin_only),
    use_case: ListOrdersUseCase = Depends(get_list_orders_use_case),
):
    output = use_case.execute(ListOrdersInput(user_id=None, page=page, limit=limit))
    return OrderListResponse(
        orders=[OrderResponse.from_order(order) for order in output.orders],
        pagination=PaginationResponse.from_output(output.pagination),
    )


@router.get("/orders/{order_id}", response_model=OrderDetailResponse)
def get_order(
    order_id: UUID,
    current_user: User = Depends(require_verified_session),
    use_case: GetOrderUseCase = Depends(get_get_order_use_case),
):
    try:
        order = use_case.execute(user_id=current_user.id, order_id=str(order_id))
    except OrderNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return OrderDetailResponse(order=OrderResponse.from_order(order))


@router.post("/orders", response_model=CreateOrderResponse, status_code=201)
def create_order(
    req: CreateOrderRequest,
    current_user: User = Depends(require_verified_session),
    use_case: CreateOrderUseCase = Depends(get_create_order_use_case),
):
    try:
        output = use_case.execute(
            CreateOrderInput(
                user_id=current_user.id,
                shipping_address=(
                    req.shipping_address.model_dump(exclude_none=True) if req.shipping_address else None
                ),
                payment_method=req.payment_method,
                notes=req.notes,
            )
        )
    except DomainConflictError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return CreateOrderResponse(
        order=OrderSummaryResponse(
            id=output.id,
            order_number=output.order_number,
            total=output.total,
            status=output.status,
        )
    )


@router.put("/orders/{order_id}/cancel", response_model=MessageResponse)
def cancel_order(
    order_id: UUID,
    req: CancelOrderRequest | None = None,
    current_user: User = Depends(require_verified_session),
    use_case: CancelOrderUseCase = Depends(get_cancel_order_use_case),
):
    try:
        use_case.execute(
            CancelOrderInput(
                user_id=current_user.id,
                order_id=str(order_id),
                reason=req.reason if req else None,
            )
        )
    except OrderNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except DomainConflictError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return MessageResponse(message="Order cancelled successfully")


@router.put("/orders/{order_id}/status", response_model=MessageResponse)
def update_order_status(
    order_id: UUID,
    req: UpdateOrderStatusRequest,
    _admin: User = Depends(admin_only),
    use_case: UpdateOrderStatusUseCase = Depends(get_update_order_status_use_case),
):
    try:
        use_case.execute(UpdateOrderStatusInput(order_id=str(order_id), status=req.status))
    except OrderNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except DomainConflictError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return MessageResponse(message="Order status updated successfully")
