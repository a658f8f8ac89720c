from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from medishop.api.deps import get_add_cart_item_use_case, get_get_cart_use_case, get_session_user
from medishop.api.schemas.cart import AddCartItemRequest, CartResponse
from medishop.application.dto.cart import AddCartItemInput
from medishop.application.use_cases.add_cart_item import AddCartItemUseCase
from medishop.application.use_cases.get_cart import GetCartUseCase
from medishop.domain.entities.user import User
from medishop.domain.exceptions import DomainConflictError, ProductNotFoundError


router = APIRouter()


@router.get("/cart", response_model=CartResponse)
def get_cart(
    current_user: User = Depends(get_session_user),
    use_case: GetCartUseCase = Depends(get_get_cart_use_case),
):
    return CartResponse.from_cart(use_case.execute(user_id=current_user.id))


@router.post("/cart/items", response_model=CartResponse, status_code=201)
def add_cart_item(
    req: AddCartItemRequest,
    current_user: User = Depends(get_session_user),
    use_case: AddCartItemUseCase = Depends(get_add_cart_item_use_case),
):
    try:
        cart = use_case.execute(
            AddCartItemInput(
                user_id=current_user.id,
                product_id=req.product_id,
                quantity=req.quantity,
            )
        )
    except ProductNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except DomainConflictError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return CartResponse.from_cart(cart)
