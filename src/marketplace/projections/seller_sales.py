"""Seller sales projection: per-seller sales summary for the seller dashboard.

Counts orders and revenue as they are placed (item revenue is price times
quantity before shipping and discounts), and moves an order's total
out of net revenue while it sits in CANCELLED. Keyed by seller id.
"""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.events import OrderPlaced, OrderStatusChanged
from marketplace.order.order import Order
from marketplace.order.status import OrderStatus


@marketplace.projection
class SellerSales:
    seller_id = Identifier(identifier=True, required=True)
    total_orders = Integer(default=0)
    cancelled_orders = Integer(default=0)
    delivered_orders = Integer(default=0)
    item_revenue = Float(default=0.0)
    gross_revenue = Float(default=0.0)
    net_revenue = Float(default=0.0)
    total_discount = Float(default=0.0)
    last_order_at = DateTime()


def _get_or_create(seller_id):
    repo = current_domain.repository_for(SellerSales)
    try:
        return repo.get(seller_id)
    except ObjectNotFoundError:
        return SellerSales(
            seller_id=seller_id,
            total_orders=0,
            cancelled_orders=0,
            delivered_orders=0,
            item_revenue=0.0,
            gross_revenue=0.0,
            net_revenue=0.0,
            total_discount=0.0,
        )


@marketplace.projector(projector_for=SellerSales, aggregates=[Order])
class SellerSalesProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        record = _get_or_create(str(event.seller_id))
        record.total_orders = (record.total_orders or 0) + 1
        record.item_revenue = (record.item_revenue or 0.0) + event.subtotal
        record.gross_revenue = (record.gross_revenue or 0.0) + event.total_amount
        record.net_revenue = (record.net_revenue or 0.0) + event.total_amount
        record.total_discount = (record.total_discount or 0.0) + (event.discount_amount or 0.0)
        record.last_order_at = event.placed_at
        current_domain.repository_for(SellerSales).add(record)

    @on(OrderStatusChanged)
    def on_order_status_changed(self, event):
        record = _get_or_create(str(event.seller_id))
        amount = event.total_amount or 0.0

        if event.new_status == OrderStatus.CANCELLED.value:
            record.cancelled_orders = (record.cancelled_orders or 0) + 1
            record.net_revenue = (record.net_revenue or 0.0) - amount
        elif event.previous_status == OrderStatus.CANCELLED.value:
            record.cancelled_orders = max((record.cancelled_orders or 0) - 1, 0)
            record.net_revenue = (record.net_revenue or 0.0) + amount

        if event.new_status == OrderStatus.DELIVERED.value:
            record.delivered_orders = (record.delivered_orders or 0) + 1
        elif event.previous_status == OrderStatus.DELIVERED.value:
            record.delivered_orders = max((record.delivered_orders or 0) - 1, 0)

        current_domain.repository_for(SellerSales).add(record)
