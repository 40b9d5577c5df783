"""Checkout: cart splitting, shipping, discount allocation and financial snapshots."""

import json
from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from marketplace.analytics.seller_analytics import SellerAnalytics
from marketplace.catalogue.product import Product
from marketplace.checkout.splitting import GroupLine, SellerGroup
from marketplace.offers.offer import Offer
from marketplace.order.order import Order
from marketplace.shared.errors import CouponNotApplicable, InsufficientStock, ProductNotFound


def _orders(ids):
    repo = current_domain.repository_for(Order)
    return [repo.get(order_id) for order_id in ids]


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).stock


def _order_count():
    return len(current_domain.repository_for(Order).find_all())


class TestSingleSellerCheckout:
    def test_single_item_order(self, seller, list_product, place_order):
        product_id = list_product(seller, price=300.0, commission_percent=10.0)

        [order] = _orders(place_order([(product_id, 1)]))

        assert order.subtotal == 300.0
        assert order.shipping_charge == 80.0
        assert order.discount_amount == 0.0
        assert order.total_amount == 380.0
        assert order.order_status == "PLACED"
        assert order.payment_status == "PENDING"

    def test_financial_snapshot(self, seller, list_product, place_order):
        product_id = list_product(seller, price=300.0, commission_percent=10.0)
        [order_id] = place_order([(product_id, 1)])

        analytics = current_domain.repository_for(SellerAnalytics).find_by_order(order_id)
        assert analytics is not None
        assert analytics.platform_commission == 30.0
        assert analytics.total_commission_percentage == 10.0
        assert analytics.delivery_partner_fee == 64.0
        assert analytics.seller_earning == 270.0
        assert analytics.platform_commission_status == "PENDING"
        assert analytics.delivery_partner_fee_status == "PENDING"

    def test_stock_decremented(self, seller, list_product, place_order):
        product_id = list_product(seller, stock=5)
        place_order([(product_id, 3)])
        assert _stock(product_id) == 2

    def test_repeated_cart_lines_decrement_once_per_unit(self, seller, list_product, place_order):
        product_id = list_product(seller, stock=5)
        place_order([(product_id, 2), (product_id, 1)])
        assert _stock(product_id) == 2

    def test_online_payment_is_paid(self, seller, list_product, place_order):
        product_id = list_product(seller)
        [order] = _orders(place_order([(product_id, 1)], payment_mode="online"))
        assert order.payment_mode == "ONLINE"
        assert order.payment_status == "PAID"

    def test_free_shipping_for_large_multi_item_cart(self, seller, list_product, place_order):
        lines = [(list_product(seller, price=500.0, title=f"Item {n}"), 1) for n in range(5)]
        [order] = _orders(place_order(lines))
        assert order.subtotal == 2500.0
        assert order.shipping_charge == 0.0

    def test_order_placed_event_stored(self, seller, list_product, place_order):
        product_id = list_product(seller)
        [order_id] = place_order([(product_id, 1)])

        messages = current_domain.event_store.store.read("marketplace::order")
        placed = [
            m
            for m in messages
            if m.metadata and m.metadata.headers and m.metadata.headers.type == "Marketplace.OrderPlaced.v1"
        ]
        assert len(placed) == 1
        assert placed[0].data["order_id"] == order_id
        assert json.loads(placed[0].data["items"]) == [
            {"product_id": product_id, "title": "Steel Bottle", "quantity": 1, "unit_price": 300.0, "category_id": None}
        ]


class TestMultiSellerCheckout:
    def test_one_order_per_seller(self, register_account, list_product, place_order):
        seller_a = register_account(role="SELLER", name="A", mobile="1", pincode="560001")
        seller_b = register_account(role="SELLER", name="B", mobile="2", pincode="560002")
        p1 = list_product(seller_a, price=300.0)
        p2 = list_product(seller_b, price=200.0)

        orders = _orders(place_order([(p1, 1), (p2, 1)]))

        assert [str(o.seller_id) for o in orders] == [seller_a, seller_b]
        assert {str(o.buyer_id) for o in orders} == {"buyer-001"}
        assert [o.shipping_charge for o in orders] == [80.0, 80.0]

    def test_flat_coupon_allocated_proportionally(self, register_account, list_product, place_order, create_offer):
        seller_a = register_account(role="SELLER", name="A", mobile="1", pincode="560001")
        seller_b = register_account(role="SELLER", name="B", mobile="2", pincode="560002")
        p1 = list_product(seller_a, price=300.0)
        p2 = list_product(seller_b, price=100.0)
        create_offer(code="SAVE100", discount_value=100.0)

        a, b = _orders(place_order([(p1, 1), (p2, 1)], coupon_code="save100"))

        assert (a.discount_amount, b.discount_amount) == (75.0, 25.0)
        assert (a.total_amount, b.total_amount) == (305.0, 155.0)
        assert a.coupon_code == "SAVE100"
        assert a.discount_remark == "Coupon SAVE100 applied"

        analytics = current_domain.repository_for(SellerAnalytics).find_by_order(str(a.id))
        assert analytics.seller_earning == 305.0 - 30.0 - 80.0

    def test_redemption_recorded(self, seller, list_product, place_order, create_offer):
        product_id = list_product(seller, price=300.0)
        create_offer(code="SAVE100", discount_value=100.0)

        order_ids = place_order([(product_id, 1)], buyer_id="buyer-042", coupon_code="SAVE100")

        offer = current_domain.repository_for(Offer).find_by_code("SAVE100")
        assert len(offer.redemptions) == 1
        redemption = offer.redemptions[0]
        assert str(redemption.buyer_id) == "buyer-042"
        assert redemption.original_amount == 380.0
        assert redemption.discount_amount == 100.0
        assert redemption.final_amount == 280.0
        assert order_ids[0] in redemption.order_ids

    def test_client_discount_honoured_below_cap(self, seller, list_product, place_order, create_offer):
        product_id = list_product(seller, price=300.0)
        create_offer(code="SAVE100", discount_value=100.0)

        [order] = _orders(place_order([(product_id, 1)], coupon_code="SAVE100", discount=40.0))
        assert order.discount_amount == 40.0

    def test_client_discount_capped_by_offer(self, seller, list_product, place_order, create_offer):
        product_id = list_product(seller, price=300.0)
        create_offer(code="SAVE100", discount_value=100.0)

        [order] = _orders(place_order([(product_id, 1)], coupon_code="SAVE100", discount=250.0))
        assert order.discount_amount == 100.0

    def test_percentage_coupon_on_restricted_category(self, register_account, list_product, place_order, create_offer):
        seller_a = register_account(role="SELLER", name="A", mobile="1", pincode="560001")
        seller_b = register_account(role="SELLER", name="B", mobile="2", pincode="560002")
        book = list_product(seller_a, price=400.0, category_id="books")
        toy = list_product(seller_b, price=600.0, category_id="toys")
        create_offer(code="BOOKS10", discount_type="PERCENTAGE", discount_value=10.0, categories=["books"])

        a, b = _orders(place_order([(book, 1), (toy, 1)], coupon_code="BOOKS10"))

        assert a.discount_amount == 40.0
        assert b.discount_amount == 0.0
        assert b.discount_remark is None
        assert b.coupon_code is None


class TestCheckoutFailures:
    def test_insufficient_stock_creates_nothing(self, seller, list_product, place_order):
        plenty = list_product(seller, stock=10)
        scarce = list_product(seller, stock=1, title="Rare Vase")

        with pytest.raises(InsufficientStock) as exc:
            place_order([(plenty, 2), (scarce, 2)])

        assert exc.value.to_dict()["invalidProductId"] == scarce
        assert _order_count() == 0
        assert _stock(plenty) == 10

    def test_unknown_product(self, seller, list_product, place_order):
        product_id = list_product(seller)
        with pytest.raises(ProductNotFound):
            place_order([(product_id, 1), ("does-not-exist", 1)])
        assert _order_count() == 0

    def test_invalid_payment_mode(self, seller, list_product, place_order):
        product_id = list_product(seller)
        with pytest.raises(ValidationError) as exc:
            place_order([(product_id, 1)], payment_mode="BARTER")
        assert "payment_mode" in exc.value.messages

    def test_unknown_coupon(self, seller, list_product, place_order):
        product_id = list_product(seller)
        with pytest.raises(CouponNotApplicable):
            place_order([(product_id, 1)], coupon_code="NOPE")
        assert _order_count() == 0

    def test_coupon_without_eligible_items(self, seller, list_product, place_order, create_offer):
        product_id = list_product(seller, category_id="toys")
        create_offer(code="BOOKS10", discount_type="PERCENTAGE", discount_value=10.0, categories=["books"])

        with pytest.raises(CouponNotApplicable):
            place_order([(product_id, 2)], coupon_code="BOOKS10")

        assert _order_count() == 0
        assert _stock(product_id) == 10

    def test_expired_coupon(self, seller, list_product, place_order, create_offer):
        product_id = list_product(seller)
        create_offer(code="OLD", expiry_date=datetime.now(UTC) - timedelta(days=2))

        with pytest.raises(CouponNotApplicable, match="expired"):
            place_order([(product_id, 1)], coupon_code="OLD")

    def test_cart_below_minimum(self, seller, list_product, place_order, create_offer):
        product_id = list_product(seller, price=300.0)
        create_offer(code="BIGSPEND", min_cart_amount=1000.0)

        with pytest.raises(CouponNotApplicable, match="minimum cart amount"):
            place_order([(product_id, 1)], coupon_code="BIGSPEND")


def _split_from_stale_read(cart_lines, product_repo):
    """Group the cart as if stock had been checked against an earlier read."""
    groups = {}
    for entry in cart_lines:
        product = product_repo.get(entry["product_id"])
        seller_id = str(product.seller_id)
        group = groups.setdefault(seller_id, SellerGroup(seller_id=seller_id))
        group.add(
            GroupLine(
                product_id=str(product.id),
                title=product.title,
                quantity=entry["quantity"],
                unit_price=product.price,
                commission_percent=product.commission_percent or 0.0,
            )
        )
    return list(groups.values())


class TestStockChangedDuringCheckout:
    @pytest.fixture(autouse=True)
    def stale_split(self, monkeypatch):
        monkeypatch.setattr("marketplace.checkout.placement.split_cart", _split_from_stale_read)

    def test_decrement_refuses_to_oversell(self, seller, list_product, place_order):
        product_id = list_product(seller, stock=2, title="Rare Vase")

        with pytest.raises(InsufficientStock) as exc:
            place_order([(product_id, 3)])

        assert exc.value.to_dict()["invalidProductId"] == product_id
        assert exc.value.to_dict()["availableStock"] == 2
        assert _stock(product_id) == 2

    def test_other_sellers_orders_roll_back(self, seller, register_account, list_product, place_order):
        other = register_account(role="SELLER", name="Meera", mobile="9833333333", pincode="560002")
        plenty = list_product(seller, stock=10)
        scarce = list_product(other, stock=2, title="Rare Vase")

        with pytest.raises(InsufficientStock):
            place_order([(plenty, 1), (scarce, 3)])

        assert _order_count() == 0
        assert current_domain.repository_for(SellerAnalytics)._dao.query.all().items == []
        assert _stock(plenty) == 10
        assert _stock(scarce) == 2

    def test_no_order_events_recorded(self, seller, list_product, place_order):
        product_id = list_product(seller, stock=1)

        with pytest.raises(InsufficientStock):
            place_order([(product_id, 2)])

        messages = current_domain.event_store.store.read("marketplace::order")
        assert not [
            m
            for m in messages
            if m.metadata and m.metadata.headers and m.metadata.headers.type == "Marketplace.OrderPlaced.v1"
        ]
