"""Tests for the Offer aggregate: redeemability, discount caps and history."""

import json
from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError

from marketplace.offers.events import OfferDeactivated, OfferRedeemed
from marketplace.offers.offer import DiscountType, Offer
from marketplace.shared.errors import CouponNotApplicable


def _offer(**overrides):
    params = dict(code=" save100 ", tagline="Flat 100 off", discount_value=100.0)
    params.update(overrides)
    return Offer.create(**params)


class TestOfferCreation:
    def test_code_is_normalized(self):
        assert _offer().code == "SAVE100"

    def test_percentage_above_hundred_rejected(self):
        with pytest.raises(ValidationError):
            _offer(discount_type=DiscountType.PERCENTAGE.value, discount_value=120.0)

    def test_unrestricted_has_no_categories(self):
        assert _offer().eligible_categories is None

    def test_restricted_categories(self):
        offer = _offer(applicable_categories=["books", "toys"])
        assert offer.eligible_categories == {"books", "toys"}


class TestRedeemability:
    def test_active_offer_is_redeemable(self):
        _offer().assert_redeemable(500.0)

    def test_inactive(self):
        offer = _offer()
        offer.is_active = False
        with pytest.raises(CouponNotApplicable, match="no longer active"):
            offer.assert_redeemable(500.0)

    def test_expired(self):
        offer = _offer(expiry_date=datetime.now(UTC) - timedelta(days=1))
        with pytest.raises(CouponNotApplicable, match="expired"):
            offer.assert_redeemable(500.0)

    def test_future_expiry_is_fine(self):
        offer = _offer(expiry_date=datetime.now(UTC) + timedelta(days=1))
        assert not offer.is_expired()

    def test_below_minimum_cart(self):
        offer = _offer(min_cart_amount=1000.0)
        with pytest.raises(CouponNotApplicable, match="minimum cart amount of 1000"):
            offer.assert_redeemable(999.0)


class TestDiscountFor:
    def test_flat(self):
        assert _offer(discount_value=100.0).discount_for(600.0) == 100.0

    def test_flat_capped_by_eligible_amount(self):
        assert _offer(discount_value=100.0).discount_for(60.0) == 60.0

    def test_percentage_floored(self):
        offer = _offer(discount_type=DiscountType.PERCENTAGE.value, discount_value=15.0)
        assert offer.discount_for(333.0) == 49.0


class TestRedemptionHistory:
    def test_record_redemption(self):
        offer = _offer()
        offer.record_redemption(
            buyer_id="buyer-1",
            original_amount=680.0,
            discount_amount=100.0,
            order_ids=["o1", "o2"],
        )

        assert len(offer.redemptions) == 1
        redemption = offer.redemptions[0]
        assert redemption.final_amount == 580.0
        assert json.loads(redemption.order_ids) == ["o1", "o2"]
        assert isinstance(offer._events[-1], OfferRedeemed)

    def test_deactivate(self):
        offer = _offer()
        offer.deactivate()
        assert offer.is_active is False
        assert isinstance(offer._events[-1], OfferDeactivated)

    def test_deactivate_twice_rejected(self):
        offer = _offer()
        offer.deactivate()
        with pytest.raises(ValidationError):
            offer.deactivate()
