"""AssignDeliveryPartner command + handler: pincode-matched partner assignment.

A partner may only pick up orders from sellers in their own pincode. The
seller's pincode comes from the structured profile field, falling back to
the first six-digit token in the seller's address; the partner's comes from
the profile only. On any failure the order is left untouched.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.accounts.account import Account
from marketplace.domain import marketplace
from marketplace.order.order import Order
from marketplace.shared.errors import (
    InvalidPartner,
    PartnerPincodeUnknown,
    PincodeMismatch,
    SellerPincodeUnknown,
)

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class AssignDeliveryPartner:
    """Assign a partner to an order, or clear the assignment when ``partner_id`` is empty."""

    order_id = Identifier(required=True)
    partner_id = Identifier()


def _load_account(account_id):
    try:
        return current_domain.repository_for(Account).get(account_id)
    except ObjectNotFoundError:
        return None


def resolve_matching_pincode(order: Order, partner_id) -> str:
    """Validate ``partner_id`` for ``order`` and return the shared pincode."""
    partner = _load_account(partner_id)
    if partner is None or not partner.is_delivery_partner:
        raise InvalidPartner(f"Delivery partner {partner_id} not found")

    seller = _load_account(order.seller_id)
    seller_pincode = seller.resolve_pincode(allow_address_fallback=True) if seller else None
    if not seller_pincode:
        raise SellerPincodeUnknown("Seller pincode could not be determined")

    partner_pincode = partner.resolve_pincode()
    if not partner_pincode:
        raise PartnerPincodeUnknown("Delivery partner pincode is not set")

    if seller_pincode.strip() != partner_pincode.strip():
        raise PincodeMismatch(seller_pincode.strip(), partner_pincode.strip())

    return seller_pincode.strip()


@marketplace.command_handler(part_of=Order)
class AssignDeliveryPartnerHandler:
    @handle(AssignDeliveryPartner)
    def assign_delivery_partner(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if not command.partner_id:
            order.unassign_delivery_partner()
            repo.add(order)
            logger.info("Delivery partner unassigned", order_id=str(order.id))
            return order

        pincode = resolve_matching_pincode(order, command.partner_id)
        order.assign_delivery_partner(command.partner_id, pincode)
        repo.add(order)

        logger.info(
            "Delivery partner assigned",
            order_id=str(order.id),
            delivery_partner_id=str(command.partner_id),
            pincode=pincode,
        )
        return order
