"""Domain events for the SellerAnalytics aggregate."""

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="SellerAnalytics")
class SettlementStatusChanged:
    __version__ = 1

    analytics_id = Identifier(required=True)
    order_id = Identifier(required=True)
    platform_commission_status = String(required=True)
    delivery_partner_fee_status = String(required=True)
    changed_at = DateTime(required=True)
