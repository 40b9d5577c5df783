"""Cart splitting: resolve cart lines against the catalogue and group them by seller.

Each resulting group becomes exactly one order. Groups keep the order in
which their seller was first seen in the cart, and lines keep cart order
within a group.
"""

from dataclasses import dataclass, field

from protean.exceptions import ObjectNotFoundError, ValidationError

from marketplace.shared.errors import InsufficientStock, ProductNotFound


@dataclass(frozen=True)
class GroupLine:
    product_id: str
    title: str
    quantity: int
    unit_price: float
    commission_percent: float
    category_id: str | None = None

    @property
    def amount(self) -> float:
        return self.unit_price * self.quantity

    @property
    def commission(self) -> float:
        return self.amount * self.commission_percent / 100


@dataclass
class SellerGroup:
    seller_id: str
    lines: list[GroupLine] = field(default_factory=list)
    subtotal: float = 0.0
    raw_commission: float = 0.0

    @property
    def item_count(self) -> int:
        return len(self.lines)

    def add(self, line: GroupLine) -> None:
        self.lines.append(line)
        self.subtotal += line.amount
        self.raw_commission += line.commission

    def eligible_subtotal(self, categories: set[str] | None) -> float:
        """Value of the lines a coupon restricted to ``categories`` applies to."""
        if categories is None:
            return self.subtotal
        return sum(line.amount for line in self.lines if line.category_id in categories)


def split_cart(cart_lines, product_repo) -> list[SellerGroup]:
    """Split ``cart_lines`` (dicts with ``product_id`` and ``quantity``) into seller groups.

    Raises ``ProductNotFound``, ``ValidationError`` for a quantity below one,
    or ``InsufficientStock``. Any failure aborts the whole cart.
    """
    if not cart_lines:
        raise ValidationError({"items": ["Cart is empty"]})

    groups: dict[str, SellerGroup] = {}
    for entry in cart_lines:
        product_id = entry.get("product_id")
        quantity = entry.get("quantity")

        try:
            product = product_repo.get(product_id)
        except ObjectNotFoundError:
            raise ProductNotFound(product_id)

        if not isinstance(quantity, int) or quantity < 1:
            raise ValidationError({"quantity": [f"Quantity for {product.title} must be at least 1"]})
        if not product.has_stock_for(quantity):
            raise InsufficientStock(product.id, product.title, product.stock)

        seller_id = str(product.seller_id)
        group = groups.setdefault(seller_id, SellerGroup(seller_id=seller_id))
        group.add(
            GroupLine(
                product_id=str(product.id),
                title=product.title,
                quantity=quantity,
                unit_price=product.price,
                commission_percent=product.commission_percent or 0.0,
                category_id=str(product.category_id) if product.category_id else None,
            )
        )

    return list(groups.values())
