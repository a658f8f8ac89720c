from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache

from fastapi import Depends, Header, HTTPException, Request, Response

from medishop.application.dto.auth import ResolveSessionInput
from medishop.application.use_cases.add_cart_item import AddCartItemUseCase
from medishop.application.use_cases.auth_common import extract_bearer_token
from medishop.application.use_cases.cancel_order import CancelOrderUseCase
from medishop.application.use_cases.create_order import CreateOrderUseCase
from medishop.application.use_cases.get_cart import GetCartUseCase
from medishop.application.use_cases.get_order import GetOrderUseCase
from medishop.application.use_cases.list_orders import ListOrdersUseCase
from medishop.application.use_cases.login_local import LoginLocalUseCase
from medishop.application.use_cases.logout_session import LogoutSessionUseCase
from medishop.application.use_cases.resolve_session import (
    ResolveSessionUseCase,
    build_resolve_session_use_case,
)
from medishop.application.use_cases.update_order_status import UpdateOrderStatusUseCase
from medishop.application.use_cases.verify_access_token import VerifyAccessTokenUseCase
from medishop.domain.entities.user import User
from medishop.domain.exceptions import (
    AccountLockedError,
    AuthenticationError,
    AuthorizationError,
    UserInactiveError,
)
from medishop.domain.services.authorization import (
    ADMIN_ONLY,
    ADMIN_OR_DOCTOR,
    DOCTOR_ONLY,
    PATIENT_ONLY,
    authorize,
    ensure_verified_session,
)
from medishop.domain.services.order_pricing import OrderPricingPolicy
from medishop.domain.services.order_status import OrderStatusPolicy
from medishop.infrastructure.db.engine import get_engine
from medishop.infrastructure.db.repositories.accounts_repository import SqlAccountsRepository
from medishop.infrastructure.db.repositories.shop_repository import SqlShopRepository
from medishop.infrastructure.security.password_hasher import PasswordHasher
from medishop.infrastructure.security.token_service import JwtTokenService
from medishop.shared.config import get_settings


def _get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    return get_engine(settings.postgres_dsn)


@lru_cache(maxsize=1)
def _get_password_hasher() -> PasswordHasher:
    return PasswordHasher()


@lru_cache(maxsize=1)
def _get_token_service() -> JwtTokenService:
    settings = get_settings()
    if not settings.jwt_secret:
        raise HTTPException(status_code=500, detail="JWT_SECRET is required.")
    return JwtTokenService(
        jwt_secret=settings.jwt_secret,
        access_ttl_minutes=settings.jwt_access_ttl_minutes,
        session_ttl_hours=settings.session_ttl_hours,
    )


@lru_cache(maxsize=1)
def _get_status_policy() -> OrderStatusPolicy:
    return OrderStatusPolicy.from_mapping(get_settings().order_status_transitions)


def _get_accounts_repository() -> SqlAccountsRepository:
    return SqlAccountsRepository(_get_db_engine())


def _get_shop_repository() -> SqlShopRepository:
    return SqlShopRepository(_get_db_engine())


def get_verify_access_token_use_case() -> VerifyAccessTokenUseCase:
    return VerifyAccessTokenUseCase(
        identity_port=_get_accounts_repository(),
        token_port=_get_token_service(),
    )


def get_resolve_session_use_case() -> ResolveSessionUseCase:
    accounts = _get_accounts_repository()
    return build_resolve_session_use_case(
        identity_port=accounts,
        session_port=accounts,
        token_port=_get_token_service(),
    )


def get_login_local_use_case() -> LoginLocalUseCase:
    settings = get_settings()
    accounts = _get_accounts_repository()
    return LoginLocalUseCase(
        identity_port=accounts,
        session_port=accounts,
        password_hasher=_get_password_hasher(),
        token_port=_get_token_service(),
        max_failed_attempts=settings.login_max_failed_attempts,
        lock_minutes=settings.login_lock_minutes,
    )


def get_logout_session_use_case() -> LogoutSessionUseCase:
    return LogoutSessionUseCase(
        session_port=_get_accounts_repository(),
        token_port=_get_token_service(),
    )


def get_get_cart_use_case() -> GetCartUseCase:
    return GetCartUseCase(shop_port=_get_shop_repository())


def get_add_cart_item_use_case() -> AddCartItemUseCase:
    return AddCartItemUseCase(shop_port=_get_shop_repository())


def get_create_order_use_case() -> CreateOrderUseCase:
    settings = get_settings()
    return CreateOrderUseCase(
        shop_port=_get_shop_repository(),
        pricing_policy=OrderPricingPolicy(
            tax_rate=settings.order_tax_rate,
            free_shipping_threshold=settings.order_free_shipping_threshold,
            flat_shipping=settings.order_flat_shipping,
        ),
    )


def get_list_orders_use_case() -> ListOrdersUseCase:
    return ListOrdersUseCase(shop_port=_get_shop_repository())


def get_get_order_use_case() -> GetOrderUseCase:
    return GetOrderUseCase(shop_port=_get_shop_repository())


def get_cancel_order_use_case() -> CancelOrderUseCase:
    return CancelOrderUseCase(shop_port=_get_shop_repository())


def get_update_order_status_use_case() -> UpdateOrderStatusUseCase:
    return UpdateOrderStatusUseCase(
        shop_port=_get_shop_repository(),
        status_policy=_get_status_policy(),
    )


def set_session_cookie(response: Response, session_token: str, expires_at: datetime) -> None:
    settings = get_settings()
    max_age = max(int((expires_at - datetime.now(timezone.utc)).total_seconds()), 0)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_token,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
        max_age=max_age,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=get_settings().session_cookie_name, path="/")


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(get_settings().session_cookie_name)


def get_token_user(
    authorization: str | None = Header(default=None),
    use_case: VerifyAccessTokenUseCase = Depends(get_verify_access_token_use_case),
) -> User:
    try:
        return use_case.execute(extract_bearer_token(authorization))
    except AccountLockedError as exc:
        raise HTTPException(status_code=423, detail=str(exc)) from exc
    except UserInactiveError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc


def _resolve(
    *,
    response: Response,
    session_token: str | None,
    authorization: str | None,
    use_case: ResolveSessionUseCase,
    optional: bool,
) -> User | None:
    try:
        output = use_case.execute(
            ResolveSessionInput(
                session_token=session_token,
                bearer_token=extract_bearer_token(authorization),
            ),
            optional=optional,
        )
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    if output.session_issued and output.session_token and output.session_expires_at:
        set_session_cookie(response, output.session_token, output.session_expires_at)
    return output.user


def get_session_user(
    response: Response,
    session_token: str | None = Depends(get_session_token),
    authorization: str | None = Header(default=None),
    use_case: ResolveSessionUseCase = Depends(get_resolve_session_use_case),
) -> User:
    return _resolve(
        response=response,
        session_token=session_token,
        authorization=authorization,
        use_case=use_case,
        optional=False,
    )


def get_optional_session_user(
    response: Response,
    session_token: str | None = Depends(get_session_token),
    authorization: str | None = Header(default=None),
    use_case: ResolveSessionUseCase = Depends(get_resolve_session_use_case),
) -> User | None:
    return _resolve(
        response=response,
        session_token=session_token,
        authorization=authorization,
        use_case=use_case,
        optional=True,
    )


def require_roles(roles: frozenset[str], *, identity=get_token_user):
    def _dependency(user: User = Depends(identity)) -> User:
        try:
            return authorize(user, roles)
        except AuthenticationError as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        except AuthorizationError as exc:
            raise HTTPException(status_code=403, detail=str(exc)) from exc

    return _dependency


admin_only = require_roles(ADMIN_ONLY)
doctor_only = require_roles(DOCTOR_ONLY)
patient_only = require_roles(PATIENT_ONLY)
admin_or_doctor = require_roles(ADMIN_OR_DOCTOR)


def require_verified_session(user: User = Depends(get_token_user)) -> User:
    try:
        return ensure_verified_session(user)
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except AuthorizationError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
