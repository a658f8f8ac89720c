from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AddCartItemInput:
    user_id: str
    product_id: str
    quantity: int
