"""Offer aggregate (CQRS): coupon codes and their redemption history.

An offer is redeemable while it is active and not past its expiry date. The
discount it grants is either a flat amount or a percentage of the eligible
cart value; eligibility may be narrowed to a set of categories. Every
redemption is appended to the offer's usage history and never edited.

Deactivating or expiring an offer only stops new redemptions; orders that
already carry the code keep it.
"""

import json
import math
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, String, Text

from marketplace.domain import marketplace
from marketplace.offers.events import OfferDeactivated, OfferRedeemed
from marketplace.shared.errors import CouponNotApplicable


class DiscountType(Enum):
    FLAT = "FLAT"
    PERCENTAGE = "PERCENTAGE"


def normalize_code(code):
    return (code or "").strip().upper()


@marketplace.entity(part_of="Offer")
class OfferRedemption:
    """One use of the offer at checkout."""

    buyer_id = Identifier(required=True)
    original_amount = Float(required=True)
    discount_amount = Float(required=True)
    final_amount = Float(required=True)
    order_ids = Text()  # JSON list of the orders the discount was spread over
    applied_at = DateTime(required=True)


@marketplace.aggregate
class Offer:
    code = String(required=True, max_length=50, unique=True)
    tagline = String(required=True, max_length=255)
    provider = String(max_length=100, default="MARKETPLACE OFFER")
    discount_type = String(choices=DiscountType, default=DiscountType.FLAT.value)
    discount_value = Float(required=True, min_value=0.0)
    min_cart_amount = Float(default=0.0, min_value=0.0)
    expiry_date = DateTime()
    applicable_categories = Text()  # JSON list of category ids; empty means all
    is_active = Boolean(default=True)
    redemptions = HasMany(OfferRedemption)
    created_at = DateTime()

    @classmethod
    def create(
        cls,
        code,
        tagline,
        discount_value,
        discount_type=DiscountType.FLAT.value,
        min_cart_amount=0.0,
        expiry_date=None,
        applicable_categories=None,
    ):
        if discount_type == DiscountType.PERCENTAGE.value and discount_value > 100:
            raise ValidationError({"discount_value": ["Percentage discount cannot exceed 100"]})

        return cls(
            code=normalize_code(code),
            tagline=tagline,
            discount_type=discount_type,
            discount_value=discount_value,
            min_cart_amount=min_cart_amount or 0.0,
            expiry_date=expiry_date,
            applicable_categories=json.dumps([str(c) for c in (applicable_categories or [])]),
            is_active=True,
            created_at=datetime.now(UTC),
        )

    @property
    def eligible_categories(self):
        """Category ids the offer is restricted to, or None when unrestricted."""
        categories = json.loads(self.applicable_categories) if self.applicable_categories else []
        return set(categories) or None

    def is_expired(self, now=None):
        if self.expiry_date is None:
            return False
        now = now or datetime.now(UTC)
        expiry = self.expiry_date
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=UTC)
        return now > expiry

    def assert_redeemable(self, cart_amount, now=None):
        if not self.is_active:
            raise CouponNotApplicable(f"Coupon {self.code} is no longer active")
        if self.is_expired(now):
            raise CouponNotApplicable(f"Coupon {self.code} has expired")
        if cart_amount < (self.min_cart_amount or 0.0):
            raise CouponNotApplicable(
                f"Coupon {self.code} requires a minimum cart amount of {self.min_cart_amount:g}",
            )

    def discount_for(self, eligible_amount):
        """Maximum discount this offer grants on ``eligible_amount``."""
        if self.discount_type == DiscountType.PERCENTAGE.value:
            return float(math.floor(eligible_amount * self.discount_value / 100))
        return float(min(self.discount_value, eligible_amount))

    def record_redemption(self, buyer_id, original_amount, discount_amount, order_ids):
        now = datetime.now(UTC)
        final_amount = original_amount - discount_amount
        self.add_redemptions(
            OfferRedemption(
                buyer_id=buyer_id,
                original_amount=original_amount,
                discount_amount=discount_amount,
                final_amount=final_amount,
                order_ids=json.dumps(order_ids),
                applied_at=now,
            )
        )

        self.raise_(
            OfferRedeemed(
                offer_id=str(self.id),
                code=self.code,
                buyer_id=str(buyer_id),
                original_amount=original_amount,
                discount_amount=discount_amount,
                final_amount=final_amount,
                applied_at=now,
            )
        )

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"is_active": ["Offer is already inactive"]})

        self.is_active = False
        self.raise_(
            OfferDeactivated(
                offer_id=str(self.id),
                code=self.code,
                deactivated_at=datetime.now(UTC),
            )
        )
