"""Order aggregate (CQRS): one seller's share of a buyer's checkout.

A checkout spanning several sellers produces one Order per seller. Each order
snapshots its line items, the address, and the money: subtotal, shipping,
the slice of any coupon discount it received, and the resulting total.

Status lifecycle (see ``order.status`` for who may do what):
    PLACED → PENDING / CONFIRMED / SHIPPED / DELIVERED / CANCELLED
Assigning a delivery partner forces CONFIRMED.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from marketplace.domain import marketplace
from marketplace.order.events import (
    DeliveryPartnerAssigned,
    DeliveryPartnerUnassigned,
    OrderPlaced,
    OrderStatusChanged,
)
from marketplace.order.status import OrderStatus


class PaymentMode(Enum):
    COD = "COD"
    ONLINE = "ONLINE"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="Order")
class DeliveryAddress:
    """Where the buyer wants this order delivered, frozen at checkout."""

    full_address = Text(required=True)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    pincode = String(required=True, max_length=10)
    mobile = String(required=True, max_length=20)
    latitude = Float()
    longitude = Float()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@marketplace.entity(part_of="Order")
class OrderItem:
    """A product line at the price and commission rate in force at checkout."""

    product_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    commission_percent = Float(default=0.0)
    category_id = Identifier()

    @property
    def line_total(self):
        return self.unit_price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Order:
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    delivery_partner_id = Identifier()
    items = HasMany(OrderItem)
    subtotal = Float(default=0.0)
    shipping_charge = Float(default=0.0)
    discount_amount = Float(default=0.0)
    coupon_code = String(max_length=50)
    discount_remark = String(max_length=255)
    total_amount = Float(default=0.0)
    order_status = String(choices=OrderStatus, default=OrderStatus.PLACED.value)
    payment_mode = String(choices=PaymentMode, required=True)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    address = ValueObject(DeliveryAddress)
    placed_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def discount_cannot_exceed_order_value(self):
        if (self.discount_amount or 0.0) > (self.subtotal or 0.0) + (self.shipping_charge or 0.0):
            raise ValidationError({"discount_amount": ["Discount cannot exceed subtotal plus shipping"]})

    @classmethod
    def place(
        cls,
        buyer_id,
        seller_id,
        lines,
        shipping_charge,
        payment_mode,
        address,
        discount_amount=0.0,
        coupon_code=None,
        discount_remark=None,
    ):
        """Create an order for one seller group.

        ``lines`` are the group's line snapshots (``product_id``, ``title``,
        ``quantity``, ``unit_price``, ``commission_percent``, ``category_id``).
        """
        if not lines:
            raise ValidationError({"items": ["An order must contain at least one item"]})

        now = datetime.now(UTC)
        items = [
            OrderItem(
                product_id=line.product_id,
                title=line.title,
                quantity=line.quantity,
                unit_price=line.unit_price,
                commission_percent=line.commission_percent,
                category_id=line.category_id,
            )
            for line in lines
        ]
        subtotal = sum(item.line_total for item in items)
        total_amount = subtotal + shipping_charge - discount_amount
        payment_status = PaymentStatus.PAID.value if payment_mode == PaymentMode.ONLINE.value else PaymentStatus.PENDING.value

        order = cls(
            buyer_id=buyer_id,
            seller_id=seller_id,
            items=items,
            subtotal=subtotal,
            shipping_charge=shipping_charge,
            discount_amount=discount_amount,
            coupon_code=coupon_code if discount_amount > 0 else None,
            discount_remark=discount_remark,
            total_amount=total_amount,
            order_status=OrderStatus.PLACED.value,
            payment_mode=payment_mode,
            payment_status=payment_status,
            address=address,
            placed_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                buyer_id=str(buyer_id),
                seller_id=str(seller_id),
                item_count=len(items),
                items=json.dumps(
                    [
                        {
                            "product_id": str(item.product_id),
                            "title": item.title,
                            "quantity": item.quantity,
                            "unit_price": item.unit_price,
                            "category_id": str(item.category_id) if item.category_id else None,
                        }
                        for item in items
                    ]
                ),
                subtotal=subtotal,
                shipping_charge=shipping_charge,
                discount_amount=discount_amount,
                total_amount=total_amount,
                coupon_code=order.coupon_code,
                payment_mode=payment_mode,
                placed_at=now,
            )
        )

        return order

    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.order_status)

    def change_status(self, target: OrderStatus, changed_by=None):
        """Move to ``target``. Permission checks happen in the status machine."""
        previous = self.order_status
        if previous == target.value:
            return

        now = datetime.now(UTC)
        self.order_status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                seller_id=str(self.seller_id),
                previous_status=previous,
                new_status=target.value,
                changed_by=changed_by,
                total_amount=self.total_amount,
                changed_at=now,
            )
        )

    def assign_delivery_partner(self, partner_id, pincode):
        self.delivery_partner_id = partner_id
        self.change_status(OrderStatus.CONFIRMED, changed_by="ASSIGNMENT")

        self.raise_(
            DeliveryPartnerAssigned(
                order_id=str(self.id),
                seller_id=str(self.seller_id),
                buyer_id=str(self.buyer_id),
                delivery_partner_id=str(partner_id),
                pincode=pincode,
                assigned_at=self.updated_at or datetime.now(UTC),
            )
        )

    def unassign_delivery_partner(self):
        """Clear the partner; status is left as it is."""
        previous = self.delivery_partner_id
        if previous is None:
            return

        now = datetime.now(UTC)
        self.delivery_partner_id = None
        self.updated_at = now

        self.raise_(
            DeliveryPartnerUnassigned(
                order_id=str(self.id),
                delivery_partner_id=str(previous),
                unassigned_at=now,
            )
        )
