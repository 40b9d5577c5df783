"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """One seller's portion of a checkout was created."""

    __version__ = 1

    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    item_count = Integer(required=True)
    items = Text(required=True)  # JSON: list of {product_id, title, quantity, unit_price, category_id}
    subtotal = Float(required=True)
    shipping_charge = Float(required=True)
    discount_amount = Float(default=0.0)
    total_amount = Float(required=True)
    coupon_code = String()
    payment_mode = String(required=True)
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = String()
    total_amount = Float()
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class DeliveryPartnerAssigned:
    """A delivery partner serving the seller's pincode will pick up the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    delivery_partner_id = Identifier(required=True)
    pincode = String(required=True)
    assigned_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class DeliveryPartnerUnassigned:
    __version__ = 1

    order_id = Identifier(required=True)
    delivery_partner_id = Identifier(required=True)
    unassigned_at = DateTime(required=True)
