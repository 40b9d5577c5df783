"""Tests for the Order aggregate: placement, status changes and partner assignment."""

import pytest
from protean.exceptions import ValidationError

from marketplace.checkout.splitting import GroupLine
from marketplace.order.events import (
    DeliveryPartnerAssigned,
    DeliveryPartnerUnassigned,
    OrderPlaced,
    OrderStatusChanged,
)
from marketplace.order.order import DeliveryAddress, Order, PaymentStatus
from marketplace.order.status import OrderStatus


def _address():
    return DeliveryAddress(
        full_address="14 Park Street",
        city="Kolkata",
        state="West Bengal",
        pincode="700016",
        mobile="9830000000",
    )


def _place(payment_mode="COD", discount=0.0, coupon_code=None, lines=None):
    lines = lines or [
        GroupLine(product_id="p1", title="Kettle", quantity=1, unit_price=300.0, commission_percent=10.0)
    ]
    return Order.place(
        buyer_id="buyer-1",
        seller_id="seller-1",
        lines=lines,
        shipping_charge=80.0,
        payment_mode=payment_mode,
        address=_address(),
        discount_amount=discount,
        coupon_code=coupon_code,
        discount_remark=f"Coupon {coupon_code} applied" if coupon_code and discount else None,
    )


class TestOrderPlacement:
    def test_totals(self):
        order = _place()
        assert order.subtotal == 300.0
        assert order.shipping_charge == 80.0
        assert order.total_amount == 380.0

    def test_starts_placed(self):
        assert _place().order_status == OrderStatus.PLACED.value

    def test_cod_payment_pending(self):
        assert _place("COD").payment_status == PaymentStatus.PENDING.value

    def test_online_payment_paid(self):
        assert _place("ONLINE").payment_status == PaymentStatus.PAID.value

    def test_discount_reduces_total(self):
        order = _place(discount=50.0, coupon_code="SAVE50")
        assert order.total_amount == 330.0
        assert order.coupon_code == "SAVE50"
        assert order.discount_remark == "Coupon SAVE50 applied"

    def test_coupon_not_recorded_without_discount(self):
        order = _place(discount=0.0, coupon_code="SAVE50")
        assert order.coupon_code is None

    def test_items_snapshot(self):
        order = _place()
        assert len(order.items) == 1
        assert order.items[0].title == "Kettle"
        assert order.items[0].commission_percent == 10.0

    def test_requires_items(self):
        with pytest.raises(ValidationError) as exc:
            Order.place(
                buyer_id="b",
                seller_id="s",
                lines=[],
                shipping_charge=0.0,
                payment_mode="COD",
                address=_address(),
            )
        assert "items" in exc.value.messages

    def test_raises_order_placed(self):
        order = _place()
        events = [e for e in order._events if isinstance(e, OrderPlaced)]
        assert len(events) == 1
        assert events[0].total_amount == 380.0
        assert events[0].item_count == 1


class TestStatusChanges:
    def test_change_status_raises_event(self):
        order = _place()
        order._events.clear()
        order.change_status(OrderStatus.SHIPPED, changed_by="SELLER")

        assert order.order_status == OrderStatus.SHIPPED.value
        event = order._events[-1]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "PLACED"
        assert event.new_status == "SHIPPED"

    def test_same_status_is_a_no_op(self):
        order = _place()
        order._events.clear()
        order.change_status(OrderStatus.PLACED)
        assert order._events == []


class TestDeliveryPartnerAssignment:
    def test_assignment_forces_confirmed(self):
        order = _place()
        order.change_status(OrderStatus.SHIPPED)
        order.assign_delivery_partner("partner-1", "700016")

        assert order.order_status == OrderStatus.CONFIRMED.value
        assert str(order.delivery_partner_id) == "partner-1"
        assert any(isinstance(e, DeliveryPartnerAssigned) for e in order._events)

    def test_unassign_keeps_status(self):
        order = _place()
        order.assign_delivery_partner("partner-1", "700016")
        order.unassign_delivery_partner()

        assert order.delivery_partner_id is None
        assert order.order_status == OrderStatus.CONFIRMED.value
        assert isinstance(order._events[-1], DeliveryPartnerUnassigned)

    def test_unassign_without_partner_is_a_no_op(self):
        order = _place()
        order._events.clear()
        order.unassign_delivery_partner()
        assert order._events == []
