"""Order status machine: normalization and per-role transition rules.

Who may move an order where:

    BUYER   PLACED → CANCELLED, own orders only
    SELLER  any → PENDING/CONFIRMED/SHIPPED/DELIVERED/CANCELLED, own orders only
    ADMIN   any → PENDING/CONFIRMED/SHIPPED/DELIVERED/CANCELLED

PLACED is the initial status and can never be set explicitly. Assigning a
delivery partner bypasses these rules and forces CONFIRMED.
"""

from enum import Enum

from protean.exceptions import ValidationError

from marketplace.shared.errors import UnauthorizedTransition


class OrderStatus(Enum):
    PLACED = "PLACED"
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class ActorRole(Enum):
    BUYER = "BUYER"
    SELLER = "SELLER"
    ADMIN = "ADMIN"


_ALIASES = {"COMPLETED": OrderStatus.DELIVERED}

_SETTABLE = frozenset(status for status in OrderStatus if status != OrderStatus.PLACED)


def normalize_status(value) -> OrderStatus:
    """Parse a client-supplied status, case-insensitive and trimmed."""
    key = str(value or "").strip().upper()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return OrderStatus(key)
    except ValueError:
        raise ValidationError({"status": [f"Invalid order status: {value}"]})


def normalize_role(value) -> ActorRole:
    key = str(value or "").strip().upper()
    try:
        return ActorRole(key)
    except ValueError:
        raise ValidationError({"role": [f"Invalid actor role: {value}"]})


class OrderStatusMachine:
    """Decides whether an actor may move an order from one status to another."""

    def is_allowed(self, role: ActorRole, current: OrderStatus, target: OrderStatus, owns_order: bool) -> bool:
        if target not in _SETTABLE:
            return False
        if role == ActorRole.ADMIN:
            return True
        if role == ActorRole.SELLER:
            return owns_order
        if role == ActorRole.BUYER:
            return owns_order and current == OrderStatus.PLACED and target == OrderStatus.CANCELLED
        return False

    def assert_allowed(self, role: ActorRole, current: OrderStatus, target: OrderStatus, owns_order: bool) -> None:
        if not self.is_allowed(role, current, target, owns_order):
            raise UnauthorizedTransition(
                f"{role.value.title()} cannot change order status from {current.value} to {target.value}",
            )
