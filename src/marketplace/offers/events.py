"""Domain events for the Offer aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Offer")
class OfferCreated:
    """A new coupon code was published."""

    __version__ = 1

    offer_id = Identifier(required=True)
    code = String(required=True)
    discount_type = String(required=True)
    discount_value = Float(required=True)
    created_at = DateTime(required=True)


@marketplace.event(part_of="Offer")
class OfferRedeemed:
    """A buyer's checkout used the coupon."""

    __version__ = 1

    offer_id = Identifier(required=True)
    code = String(required=True)
    buyer_id = Identifier(required=True)
    original_amount = Float(required=True)
    discount_amount = Float(required=True)
    final_amount = Float(required=True)
    applied_at = DateTime(required=True)


@marketplace.event(part_of="Offer")
class OfferDeactivated:
    """The coupon can no longer be applied to new checkouts."""

    __version__ = 1

    offer_id = Identifier(required=True)
    code = String(required=True)
    deactivated_at = DateTime(required=True)
