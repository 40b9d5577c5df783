"""Product aggregate (CQRS): the slice of the seller catalogue checkout reads.

Catalogue CRUD lives elsewhere; the marketplace only needs the commercial
facts of a product (price, stock, commission rate, category, owning seller)
and a guarded way to take stock out once an order is placed.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace
from marketplace.shared.errors import InsufficientStock


@marketplace.aggregate
class Product:
    seller_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0)
    commission_percent = Float(default=0.0, min_value=0.0, max_value=100.0)
    category_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @classmethod
    def create(cls, seller_id, title, price, stock=0, commission_percent=0.0, category_id=None):
        now = datetime.now(UTC)
        return cls(
            seller_id=seller_id,
            title=title,
            price=price,
            stock=stock,
            commission_percent=commission_percent,
            category_id=category_id,
            created_at=now,
            updated_at=now,
        )

    def has_stock_for(self, quantity):
        return (self.stock or 0) >= quantity

    def decrement_stock(self, quantity):
        """Take ``quantity`` units out of stock, refusing to go below zero."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if not self.has_stock_for(quantity):
            raise InsufficientStock(self.id, self.title, self.stock or 0)

        self.stock = self.stock - quantity
        self.updated_at = datetime.now(UTC)

    def restock(self, quantity):
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        self.stock = (self.stock or 0) + quantity
        self.updated_at = datetime.now(UTC)
