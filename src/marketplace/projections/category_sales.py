"""Platform-wide category sales for the admin dashboard. Keyed by category id."""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Integer, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.events import OrderPlaced
from marketplace.order.order import Order
from marketplace.projections.seller_reports import category_of, order_items, totals_by


@marketplace.projection
class CategorySales:
    category_id = String(identifier=True, required=True, max_length=50)
    orders = Integer(default=0)
    quantity_sold = Integer(default=0)
    revenue = Float(default=0.0)


@marketplace.projector(projector_for=CategorySales, aggregates=[Order])
class CategorySalesProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        repo = current_domain.repository_for(CategorySales)
        for category_id, (quantity, revenue) in totals_by(order_items(event), category_of).items():
            try:
                record = repo.get(category_id)
            except ObjectNotFoundError:
                record = CategorySales(category_id=category_id, orders=0, quantity_sold=0, revenue=0.0)

            record.orders = (record.orders or 0) + 1
            record.quantity_sold = (record.quantity_sold or 0) + quantity
            record.revenue = (record.revenue or 0.0) + revenue
            repo.add(record)
