"""Marketplace bounded context: multi-seller checkout, payouts and fulfillment.

Splits buyer carts into per-seller orders, allocates shipping and coupon
discounts across sellers, snapshots platform commission and seller earnings,
and governs the order lifecycle up to delivery-partner assignment.
"""

from protean.domain import Domain

from marketplace.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
marketplace = Domain(name="marketplace")
