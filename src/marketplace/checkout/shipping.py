"""Shipping fee policies: pluggable per-seller-group shipping computation.

The active policy is a process-wide singleton chosen by the SHIPPING_POLICY
environment variable (``tiered`` by default, ``free`` for promotions) and can
be replaced programmatically with ``use_shipping_policy``.
"""

import os
from abc import ABC, abstractmethod

FREE_SHIPPING_THRESHOLD = 2000
BULK_ITEM_COUNT = 5
SMALL_ORDER_THRESHOLD = 500
SMALL_ORDER_FEE = 80.0
STANDARD_FEE = 100.0


class ShippingPolicy(ABC):
    """Abstract shipping fee strategy."""

    name = ""

    @abstractmethod
    def shipping(self, item_count: int, subtotal: float) -> float:
        """Fee charged for one seller group.

        ``item_count`` is the number of line items in the group, not the
        summed quantity.
        """
        ...


class TieredShippingPolicy(ShippingPolicy):
    """Default fee table.

    Single line: 80 below 500, 100 up to 2000, free above 2000.
    Several lines: free above 2000 only with five or more lines, else 100.
    """

    name = "tiered"

    def shipping(self, item_count: int, subtotal: float) -> float:
        if item_count == 1:
            if subtotal < SMALL_ORDER_THRESHOLD:
                return SMALL_ORDER_FEE
            if subtotal <= FREE_SHIPPING_THRESHOLD:
                return STANDARD_FEE
            return 0.0

        if subtotal > FREE_SHIPPING_THRESHOLD and item_count >= BULK_ITEM_COUNT:
            return 0.0
        return STANDARD_FEE


class FreeShippingPolicy(ShippingPolicy):
    name = "free"

    def shipping(self, item_count: int, subtotal: float) -> float:
        return 0.0


_POLICIES = {
    TieredShippingPolicy.name: TieredShippingPolicy,
    FreeShippingPolicy.name: FreeShippingPolicy,
}

_policy_instance: ShippingPolicy | None = None


def get_shipping_policy() -> ShippingPolicy:
    """Return the configured shipping policy (singleton)."""
    global _policy_instance
    if _policy_instance is None:
        name = os.environ.get("SHIPPING_POLICY", TieredShippingPolicy.name).strip().lower()
        policy_cls = _POLICIES.get(name)
        if policy_cls is None:
            raise ValueError(f"Unknown shipping policy: {name}")
        _policy_instance = policy_cls()
    return _policy_instance


def use_shipping_policy(policy: ShippingPolicy) -> None:
    """Install ``policy`` as the active shipping policy."""
    global _policy_instance
    _policy_instance = policy


def reset_shipping_policy():
    """Reset the shipping policy singleton (useful for testing)."""
    global _policy_instance
    _policy_instance = None
