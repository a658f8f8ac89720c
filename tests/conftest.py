from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from medishop.domain.entities.cart import Cart, CartItem
from medishop.domain.entities.order import Order, OrderCustomer
from medishop.domain.entities.product import Product
from medishop.domain.entities.user import User, UserCredentials, WebSession
from medishop.infrastructure.security.token_service import JwtTokenService


class FakeIdentityPort:
    def __init__(self):
        self.users: dict[str, User] = {}
        self.password_hashes: dict[str, str] = {}
        self.failed_attempts: dict[str, int] = {}
        self.last_login: dict[str, datetime] = {}

    def add(self, user: User, password_hash: str = "hashed::secret") -> User:
        self.users[user.id] = user
        self.password_hashes[user.id] = password_hash
        self.failed_attempts.setdefault(user.id, 0)
        return user

    def get_user_by_id(self, *, user_id: str) -> User | None:
        return self.users.get(user_id)

    def get_credentials_by_email(self, *, email: str) -> UserCredentials | None:
        for user in self.users.values():
            if user.email.lower() == email.lower():
                return UserCredentials(
                    user=user,
                    password_hash=self.password_hashes[user.id],
                    failed_login_attempts=self.failed_attempts.get(user.id, 0),
                )
        return None

    def record_failed_login(self, *, user_id: str, failed_attempts: int, locked_until: datetime | None) -> None:
        self.failed_attempts[user_id] = failed_attempts
        if locked_until is not None:
            self.users[user_id] = replace(self.users[user_id], locked_until=locked_until)

    def record_successful_login(self, *, user_id: str, now: datetime, password_hash: str | None = None) -> None:
        self.failed_attempts[user_id] = 0
        if password_hash is not None:
            self.password_hashes[user_id] = password_hash
        self.last_login[user_id] = now
        self.users[user_id] = replace(self.users[user_id], locked_until=None)

    def create_user(
        self,
        *,
        user_id: str,
        first_name: str,
        last_name: str,
        email: str,
        role: str,
        password_hash: str,
        email_verified: bool,
        created_at: datetime,
    ) -> User:
        user = User(
            id=user_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            role=role,
            email_verified=email_verified,
            is_active=True,
            locked_until=None,
            created_at=created_at,
        )
        return self.add(user, password_hash=password_hash)


class FakeSessionPort:
    def __init__(self):
        self.sessions: dict[str, WebSession] = {}

    def get_session(self, *, session_id: str) -> WebSession | None:
        return self.sessions.get(session_id)

    def bind_session(self, *, session_id: str, user_id: str, expires_at: datetime, now: datetime) -> WebSession:
        existing = self.sessions.get(session_id)
        session = WebSession(
            id=session_id,
            user_id=user_id,
            expires_at=expires_at,
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        self.sessions[session_id] = session
        return session

    def delete_session(self, *, session_id: str) -> None:
        self.sessions.pop(session_id, None)


class FakePasswordHasher:
    def hash(self, plain_password: str) -> str:
        return f"hashed::{plain_password}"

    def verify(self, plain_password: str, password_hash: str) -> bool:
        return password_hash in (f"hashed::{plain_password}", f"legacy::{plain_password}")

    def needs_rehash(self, password_hash: str) -> bool:
        return password_hash.startswith("legacy::")


class InMemoryShopPort:
    """Shop port backed by dicts; stock changes are atomic under a lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self.products: dict[str, Product] = {}
        self.carts: dict[str, list[CartItem]] = {}
        self.orders: dict[str, Order] = {}
        self.customers: dict[str, OrderCustomer] = {}

    def add_product(self, product_id: str, name: str, price: str, stock: int) -> Product:
        product = Product(id=product_id, name=name, price=Decimal(price), stock=stock)
        self.products[product_id] = product
        return product

    def put_in_cart(self, user_id: str, product_id: str, quantity: int, unit_price: str | None = None) -> None:
        product = self.products[product_id]
        price = Decimal(unit_price) if unit_price is not None else product.price
        self.carts.setdefault(user_id, []).append(
            CartItem(product_id=product_id, product_name=product.name, quantity=quantity, unit_price=price)
        )

    def stock_of(self, product_id: str) -> int:
        return self.products[product_id].stock

    def execute_in_transaction(self, fn):
        return fn(self)

    def get_product(self, *, product_id: str) -> Product | None:
        return self.products.get(product_id)

    def decrement_stock_if_available(self, *, product_id: str, quantity: int) -> bool:
        with self._lock:
            product = self.products.get(product_id)
            if product is None or product.stock < quantity:
                return False
            self.products[product_id] = replace(product, stock=product.stock - quantity)
            return True

    def increment_stock(self, *, product_id: str, quantity: int) -> None:
        with self._lock:
            product = self.products[product_id]
            self.products[product_id] = replace(product, stock=product.stock + quantity)

    def get_cart(self, *, user_id: str) -> Cart | None:
        items = self.carts.get(user_id)
        if not items:
            return None
        return Cart(user_id=user_id, items=list(items))

    def save_cart_item(self, *, user_id: str, item: CartItem, now: datetime) -> None:
        items = [existing for existing in self.carts.get(user_id, []) if existing.product_id != item.product_id]
        items.append(item)
        self.carts[user_id] = items

    def clear_cart(self, *, user_id: str) -> None:
        self.carts[user_id] = []

    def create_order(self, *, order: Order) -> Order:
        self.orders[order.id] = order
        return order

    def get_order(self, *, order_id: str, user_id: str | None = None) -> Order | None:
        order = self.orders.get(order_id)
        if order is None or (user_id is not None and order.user_id != user_id):
            return None
        return order

    def list_orders(self, *, user_id: str | None, offset: int, limit: int) -> list[Order]:
        orders = [o for o in self.orders.values() if user_id is None or o.user_id == user_id]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        page = orders[offset:offset + limit]
        if user_id is None:
            page = [replace(o, customer=self.customers.get(o.user_id)) for o in page]
        return page

    def count_orders(self, *, user_id: str | None) -> int:
        return sum(1 for o in self.orders.values() if user_id is None or o.user_id == user_id)

    def mark_order_cancelled(self, *, order_id: str, reason: str | None, now: datetime) -> bool:
        with self._lock:
            order = self.orders[order_id]
            if order.status != "pending":
                return False
            self.orders[order_id] = replace(
                order,
                status="cancelled",
                cancelled_at=now,
                cancellation_reason=reason,
                updated_at=now,
            )
            return True

    def update_order_status(self, *, order_id: str, status: str, delivered_at: datetime | None, now: datetime) -> None:
        order = self.orders[order_id]
        self.orders[order_id] = replace(
            order,
            status=status,
            delivered_at=delivered_at or order.delivered_at,
            updated_at=now,
        )


def build_user(
    user_id: str = "user-1",
    *,
    role: str = "patient",
    email: str | None = None,
    email_verified: bool = True,
    is_active: bool = True,
    locked_until: datetime | None = None,
) -> User:
    return User(
        id=user_id,
        first_name="Alice",
        last_name="Smith",
        email=email or f"{user_id}@example.com",
        role=role,
        email_verified=email_verified,
        is_active=is_active,
        locked_until=locked_until,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def make_user():
    return build_user


@pytest.fixture
def identity_port() -> FakeIdentityPort:
    return FakeIdentityPort()


@pytest.fixture
def session_port() -> FakeSessionPort:
    return FakeSessionPort()


@pytest.fixture
def password_hasher() -> FakePasswordHasher:
    return FakePasswordHasher()


@pytest.fixture
def token_service() -> JwtTokenService:
    return JwtTokenService(jwt_secret="test-secret", access_ttl_minutes=15, session_ttl_hours=24)


@pytest.fixture
def shop_port() -> InMemoryShopPort:
    return InMemoryShopPort()
