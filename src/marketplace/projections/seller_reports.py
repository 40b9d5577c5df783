"""Seller report projections: the sales graph, best sellers and category mix.

All three are fed by OrderPlaced alone and count what was ordered, cancelled
orders included. Revenue here is item revenue (price times quantity), without
shipping or discounts. Rows are keyed by ``<seller_id>:<bucket>``.
"""

import json

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.events import OrderPlaced
from marketplace.order.order import Order

UNCATEGORIZED = "uncategorized"


@marketplace.projection
class SellerDailySales:
    key = String(identifier=True, required=True, max_length=100)
    seller_id = Identifier(required=True)
    date = String(required=True, max_length=10)  # YYYY-MM-DD
    orders = Integer(default=0)
    revenue = Float(default=0.0)


@marketplace.projection
class SellerProductSales:
    key = String(identifier=True, required=True, max_length=100)
    seller_id = Identifier(required=True)
    product_id = Identifier(required=True)
    title = String(max_length=255)
    quantity_sold = Integer(default=0)
    revenue = Float(default=0.0)


@marketplace.projection
class SellerCategorySales:
    key = String(identifier=True, required=True, max_length=100)
    seller_id = Identifier(required=True)
    category_id = String(required=True, max_length=50)
    quantity_sold = Integer(default=0)
    revenue = Float(default=0.0)


def order_items(event):
    return json.loads(event.items) if isinstance(event.items, str) else []


def category_of(item):
    return item.get("category_id") or UNCATEGORIZED


def _load(projection, key, **defaults):
    try:
        return current_domain.repository_for(projection).get(key)
    except ObjectNotFoundError:
        return projection(key=key, **defaults)


def for_seller(projection, seller_id):
    """Every row of ``projection`` that belongs to ``seller_id``."""
    return current_domain.repository_for(projection)._dao.query.filter(seller_id=seller_id).all().items


def totals_by(items, bucket):
    """Sum quantity and item revenue per bucket; a product may appear on several lines."""
    totals = {}
    for item in items:
        quantity, revenue = totals.get(bucket(item), (0, 0.0))
        totals[bucket(item)] = (quantity + item["quantity"], revenue + item["unit_price"] * item["quantity"])
    return totals


@marketplace.projector(projector_for=SellerDailySales, aggregates=[Order])
class SellerDailySalesProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        seller_id = str(event.seller_id)
        date_key = event.placed_at.date().isoformat()
        record = _load(
            SellerDailySales, f"{seller_id}:{date_key}", seller_id=seller_id, date=date_key, orders=0, revenue=0.0
        )
        record.orders = (record.orders or 0) + 1
        record.revenue = (record.revenue or 0.0) + (event.subtotal or 0.0)
        current_domain.repository_for(SellerDailySales).add(record)


@marketplace.projector(projector_for=SellerProductSales, aggregates=[Order])
class SellerProductSalesProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        seller_id = str(event.seller_id)
        items = order_items(event)
        titles = {item["product_id"]: item.get("title") for item in items}

        repo = current_domain.repository_for(SellerProductSales)
        for product_id, (quantity, revenue) in totals_by(items, lambda item: item["product_id"]).items():
            record = _load(
                SellerProductSales,
                f"{seller_id}:{product_id}",
                seller_id=seller_id,
                product_id=product_id,
                quantity_sold=0,
                revenue=0.0,
            )
            record.title = titles[product_id] or record.title
            record.quantity_sold = (record.quantity_sold or 0) + quantity
            record.revenue = (record.revenue or 0.0) + revenue
            repo.add(record)


@marketplace.projector(projector_for=SellerCategorySales, aggregates=[Order])
class SellerCategorySalesProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        seller_id = str(event.seller_id)
        repo = current_domain.repository_for(SellerCategorySales)
        for category_id, (quantity, revenue) in totals_by(order_items(event), category_of).items():
            record = _load(
                SellerCategorySales,
                f"{seller_id}:{category_id}",
                seller_id=seller_id,
                category_id=category_id,
                quantity_sold=0,
                revenue=0.0,
            )
            record.quantity_sold = (record.quantity_sold or 0) + quantity
            record.revenue = (record.revenue or 0.0) + revenue
            repo.add(record)
