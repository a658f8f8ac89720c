from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class AuthenticationError(DomainError):
    """The caller could not be identified."""


class MissingTokenError(AuthenticationError):
    """No bearer token was supplied."""


class InvalidTokenError(AuthenticationError):
    """Token signature or structure is invalid."""


class TokenExpiredError(AuthenticationError):
    """Token is past its expiry."""


class UnknownIdentityError(AuthenticationError):
    """Token subject no longer resolves to a stored user."""


class NotAuthenticatedError(AuthenticationError):
    """Neither a session nor a token identified the caller."""


class InvalidCredentialsError(AuthenticationError):
    """Email or password did not match."""


class AccountLockedError(DomainError):
    """Account is temporarily locked after repeated failed logins."""


class AuthorizationError(DomainError):
    """Identity is known but not allowed."""


class ForbiddenError(AuthorizationError):
    """Role is not in the required role set."""


class UserInactiveError(AuthorizationError):
    """User account is disabled."""


class EmailNotVerifiedError(AuthorizationError):
    """Patient must verify the email address first."""


class NotFoundError(DomainError):
    """Requested resource does not exist or is not visible to the caller."""


class OrderNotFoundError(NotFoundError):
    """Order does not exist or belongs to another user."""


class ProductNotFoundError(NotFoundError):
    """Product does not exist."""


class DomainConflictError(DomainError):
    """Request conflicts with the current state."""


class EmptyCartError(DomainConflictError):
    """Cart has no items."""


class InsufficientStockError(DomainConflictError):
    def __init__(self, product_name: str):
        super().__init__(f"Insufficient stock for {product_name}")
        self.product_name = product_name


class InvalidStatusTransitionError(DomainConflictError):
    """Order status change is not allowed from the current status."""


class InvalidQuantityError(DomainConflictError):
    """Quantity must be a positive integer."""
