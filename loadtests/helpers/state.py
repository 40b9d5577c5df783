"""Per-user state tracking for Locust load test scenarios."""

from dataclasses import dataclass, field


@dataclass
class MarketplaceState:
    """Parties and catalogue created by one simulated user."""

    buyer_id: str | None = None
    seller_ids: list[str] = field(default_factory=list)
    partner_ids: list[str] = field(default_factory=list)
    product_ids: list[str] = field(default_factory=list)
    order_ids: list[str] = field(default_factory=list)
