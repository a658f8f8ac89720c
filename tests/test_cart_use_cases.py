from __future__ import annotations

from decimal import Decimal

import pytest

from medishop.application.dto.cart import AddCartItemInput
from medishop.application.use_cases.add_cart_item import AddCartItemUseCase
from medishop.application.use_cases.get_cart import GetCartUseCase
from medishop.domain.exceptions import (
    InsufficientStockError,
    InvalidQuantityError,
    ProductNotFoundError,
)


@pytest.fixture
def add_item(shop_port) -> AddCartItemUseCase:
    return AddCartItemUseCase(shop_port=shop_port)


def test_empty_cart_for_new_user(shop_port):
    cart = GetCartUseCase(shop_port=shop_port).execute(user_id="user-1")

    assert cart.is_empty
    assert cart.total_items == 0
    assert cart.total_amount == Decimal("0")


def test_add_item_captures_current_price(add_item, shop_port):
    shop_port.add_product("p1", "Bandage", "4.25", stock=10)

    cart = add_item.execute(AddCartItemInput(user_id="user-1", product_id="p1", quantity=2))

    assert len(cart.items) == 1
    assert cart.items[0].unit_price == Decimal("4.25")
    assert cart.total_amount == Decimal("8.50")


def test_adding_same_product_merges_quantity(add_item, shop_port):
    shop_port.add_product("p1", "Bandage", "4.00", stock=10)

    add_item.execute(AddCartItemInput(user_id="user-1", product_id="p1", quantity=2))
    cart = add_item.execute(AddCartItemInput(user_id="user-1", product_id="p1", quantity=3))

    assert [(item.product_id, item.quantity) for item in cart.items] == [("p1", 5)]
    assert cart.total_items == 5


def test_merged_quantity_cannot_exceed_stock(add_item, shop_port):
    shop_port.add_product("p1", "Bandage", "4.00", stock=4)
    add_item.execute(AddCartItemInput(user_id="user-1", product_id="p1", quantity=3))

    with pytest.raises(InsufficientStockError, match="Bandage"):
        add_item.execute(AddCartItemInput(user_id="user-1", product_id="p1", quantity=2))


def test_unknown_product(add_item):
    with pytest.raises(ProductNotFoundError):
        add_item.execute(AddCartItemInput(user_id="user-1", product_id="missing", quantity=1))


@pytest.mark.parametrize("quantity", [0, -1])
def test_non_positive_quantity(add_item, shop_port, quantity):
    shop_port.add_product("p1", "Bandage", "4.00", stock=4)

    with pytest.raises(InvalidQuantityError):
        add_item.execute(AddCartItemInput(user_id="user-1", product_id="p1", quantity=quantity))
