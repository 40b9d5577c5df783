"""Order → response DTO mapping, one shape per actor role."""

from protean.utils.globals import current_domain

from marketplace.analytics.seller_analytics import SellerAnalytics
from marketplace.api.schemas import (
    AdminOrderResponse,
    BuyerOrderResponse,
    DeliveryAddressResponse,
    OrderItemResponse,
    SellerOrderItemResponse,
    SellerOrderResponse,
)
from marketplace.order.status import ActorRole


def _address(order):
    if order.address is None:
        return None
    address = order.address
    return DeliveryAddressResponse(
        full_address=address.full_address,
        city=address.city,
        state=address.state,
        pincode=address.pincode,
        mobile=address.mobile,
        latitude=address.latitude,
        longitude=address.longitude,
    )


def _common(order) -> dict:
    return {
        "order_id": str(order.id),
        "buyer_id": str(order.buyer_id),
        "seller_id": str(order.seller_id),
        "delivery_partner_id": str(order.delivery_partner_id) if order.delivery_partner_id else None,
        "subtotal": order.subtotal,
        "shipping_charge": order.shipping_charge,
        "discount_amount": order.discount_amount,
        "coupon_code": order.coupon_code,
        "discount_remark": order.discount_remark,
        "total_amount": order.total_amount,
        "order_status": order.order_status,
        "payment_mode": order.payment_mode,
        "payment_status": order.payment_status,
        "address": _address(order),
        "placed_at": order.placed_at,
        "updated_at": order.updated_at,
    }


def buyer_view(order) -> BuyerOrderResponse:
    items = [
        OrderItemResponse(
            product_id=str(item.product_id),
            title=item.title,
            quantity=item.quantity,
            unit_price=item.unit_price,
        )
        for item in order.items
    ]
    return BuyerOrderResponse(items=items, **_common(order))


def _seller_fields(order, analytics) -> dict:
    fields = _common(order)
    fields["items"] = [
        SellerOrderItemResponse(
            product_id=str(item.product_id),
            title=item.title,
            quantity=item.quantity,
            unit_price=item.unit_price,
            commission_percent=item.commission_percent or 0.0,
        )
        for item in order.items
    ]
    if analytics is not None:
        fields.update(
            platform_commission=analytics.platform_commission,
            total_commission_percentage=analytics.total_commission_percentage,
            seller_earning=analytics.seller_earning,
            delivery_partner_fee=analytics.delivery_partner_fee,
        )
    return fields


def seller_view(order, analytics=None) -> SellerOrderResponse:
    return SellerOrderResponse(**_seller_fields(order, analytics))


def admin_view(order, analytics=None) -> AdminOrderResponse:
    fields = _seller_fields(order, analytics)
    if analytics is not None:
        fields.update(
            analytics_id=str(analytics.id),
            platform_commission_status=analytics.platform_commission_status,
            delivery_partner_fee_status=analytics.delivery_partner_fee_status,
        )
    return AdminOrderResponse(**fields)


def present_order(order, role: ActorRole):
    """Render ``order`` in the shape ``role`` is allowed to see."""
    if role == ActorRole.BUYER:
        return buyer_view(order)

    analytics = current_domain.repository_for(SellerAnalytics).find_by_order(str(order.id))
    if role == ActorRole.SELLER:
        return seller_view(order, analytics)
    return admin_view(order, analytics)
