from __future__ import annotations

from dataclasses import dataclass, field

from medishop.domain.entities.order import ORDER_STATUSES
from medishop.domain.exceptions import InvalidStatusTransitionError


@dataclass(frozen=True)
class OrderStatusPolicy:
    """Which status changes an administrator may apply.

    An empty ``transitions`` map means any known status may be set from any
    other status, which is how administrators have always been able to
    correct orders. A non-empty map restricts each current status to the
    listed targets; statuses missing from the map accept no changes.
    """

    transitions: dict[str, frozenset[str]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: dict[str, list[str]]) -> OrderStatusPolicy:
        transitions: dict[str, frozenset[str]] = {}
        for source, targets in mapping.items():
            _ensure_known(source)
            for target in targets:
                _ensure_known(target)
            transitions[source] = frozenset(targets)
        return cls(transitions=transitions)

    @property
    def is_unrestricted(self) -> bool:
        return not self.transitions

    def check(self, *, current: str, target: str) -> None:
        if target not in ORDER_STATUSES:
            raise InvalidStatusTransitionError(f"Unknown order status '{target}'.")
        if self.is_unrestricted:
            return
        if target not in self.transitions.get(current, frozenset()):
            raise InvalidStatusTransitionError(
                f"Cannot change order status from '{current}' to '{target}'."
            )


def ensure_cancellable(status: str) -> None:
    if status != "pending":
        raise InvalidStatusTransitionError("Only pending orders can be cancelled")


def _ensure_known(status: str) -> None:
    if status not in ORDER_STATUSES:
        raise ValueError(f"Unknown order status '{status}' in transition map.")
