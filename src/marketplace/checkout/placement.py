"""PlaceOrder command + handler: turn a buyer's cart into per-seller orders.

Pipeline: split the cart by seller → shipping per group → resolve and
allocate any coupon discount → commission and earnings per group → one
Order and one analytics snapshot per group → decrement stock → record the
coupon redemption.

Everything is validated before anything is written, and the handler runs in
a single unit of work: either every seller's order is created, with its
snapshot, stock movement and redemption, or nothing is.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.analytics.recorder import get_analytics_recorder
from marketplace.catalogue.product import Product
from marketplace.checkout.commission import compute_earnings
from marketplace.checkout.discounts import allocate_discount, global_eligible_subtotal
from marketplace.checkout.shipping import get_shipping_policy
from marketplace.checkout.splitting import split_cart
from marketplace.domain import marketplace
from marketplace.offers.offer import Offer, normalize_code
from marketplace.order.order import DeliveryAddress, Order, PaymentMode
from marketplace.shared.errors import CouponNotApplicable

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class PlaceOrder:
    buyer_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of {"product_id", "quantity"}
    address = Text(required=True)  # JSON object of DeliveryAddress fields
    payment_mode = String(required=True, max_length=10)
    coupon_code = String(max_length=50)
    discount = Float(default=0.0, min_value=0.0)


def _resolve_offer(code, cart_amount):
    offer = current_domain.repository_for(Offer).find_by_code(code)
    if offer is None:
        raise CouponNotApplicable(f"Coupon {normalize_code(code)} is not valid")
    offer.assert_redeemable(cart_amount)
    return offer


@marketplace.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        payment_mode = command.payment_mode.strip().upper()
        if payment_mode not in {mode.value for mode in PaymentMode}:
            raise ValidationError({"payment_mode": [f"Invalid payment mode: {command.payment_mode}"]})

        address = DeliveryAddress(**json.loads(command.address))
        product_repo = current_domain.repository_for(Product)

        # 1. Validate and group the cart
        groups = split_cart(json.loads(command.items), product_repo)

        # 2. Shipping per seller group
        policy = get_shipping_policy()
        shipping = {group.seller_id: policy.shipping(group.item_count, group.subtotal) for group in groups}

        # 3. Coupon resolution and discount allocation
        offer = None
        code = None
        categories = None
        total_discount = command.discount or 0.0
        if command.coupon_code and command.coupon_code.strip():
            offer = _resolve_offer(command.coupon_code, sum(group.subtotal for group in groups))
            code = offer.code
            categories = offer.eligible_categories
            cap = offer.discount_for(global_eligible_subtotal(groups, categories))
            total_discount = min(total_discount, cap) if total_discount > 0 else cap
            if total_discount <= 0:
                raise CouponNotApplicable(f"Coupon {code} is not applicable to any item in the cart")

        allocations = {
            allocation.seller_id: allocation
            for allocation in allocate_discount(groups, shipping, total_discount, categories=categories, code=code)
        }

        # 4. Orders and financial snapshots
        order_repo = current_domain.repository_for(Order)
        recorder = get_analytics_recorder()
        orders = []
        for group in groups:
            allocation = allocations[group.seller_id]
            breakdown = compute_earnings(group, shipping[group.seller_id], allocation.discount)
            order = Order.place(
                buyer_id=command.buyer_id,
                seller_id=group.seller_id,
                lines=group.lines,
                shipping_charge=shipping[group.seller_id],
                payment_mode=payment_mode,
                address=address,
                discount_amount=allocation.discount,
                coupon_code=code,
                discount_remark=allocation.remark,
            )
            order_repo.add(order)
            recorder.record(str(order.id), group.seller_id, breakdown)
            orders.append(order)

        # 5. Stock leaves the shelf only once the orders exist
        quantities = {}
        for group in groups:
            for line in group.lines:
                quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity

        for product_id, quantity in quantities.items():
            product = product_repo.get(product_id)
            product.decrement_stock(quantity)
            product_repo.add(product)

        # 6. Coupon usage history
        if offer is not None:
            original_amount = sum(group.subtotal + shipping[group.seller_id] for group in groups)
            offer.record_redemption(
                buyer_id=command.buyer_id,
                original_amount=original_amount,
                discount_amount=sum(order.discount_amount for order in orders),
                order_ids=[str(order.id) for order in orders],
            )
            current_domain.repository_for(Offer).add(offer)

        logger.info(
            "Checkout completed",
            buyer_id=str(command.buyer_id),
            order_count=len(orders),
            coupon_code=code,
            total_discount=sum(order.discount_amount for order in orders),
        )
        return [str(order.id) for order in orders]
