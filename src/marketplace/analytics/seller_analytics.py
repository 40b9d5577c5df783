"""SellerAnalytics aggregate (CQRS): the financial snapshot of one order.

Written once at checkout next to its order, then only touched by settlement
updates (platform commission collected, delivery fee paid out) and removed
only by an explicit admin purge.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Float, Identifier, String

from marketplace.analytics.events import SettlementStatusChanged
from marketplace.domain import marketplace


class SettlementStatus(Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


@marketplace.aggregate
class SellerAnalytics:
    order_id = Identifier(required=True, unique=True)
    seller_id = Identifier(required=True)
    platform_commission = Float(default=0.0)
    total_commission_percentage = Float(default=0.0)
    seller_earning = Float(default=0.0)
    delivery_partner_fee = Float(default=0.0)
    platform_commission_status = String(choices=SettlementStatus, default=SettlementStatus.PENDING.value)
    delivery_partner_fee_status = String(choices=SettlementStatus, default=SettlementStatus.PENDING.value)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def snapshot(cls, order_id, seller_id, breakdown):
        now = datetime.now(UTC)
        return cls(
            order_id=order_id,
            seller_id=seller_id,
            platform_commission=breakdown.platform_commission,
            total_commission_percentage=breakdown.total_commission_percentage,
            seller_earning=breakdown.seller_earning,
            delivery_partner_fee=breakdown.delivery_partner_fee,
            platform_commission_status=SettlementStatus.PENDING.value,
            delivery_partner_fee_status=SettlementStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )

    def update_settlement(self, platform_commission_status=None, delivery_partner_fee_status=None):
        """Set either settlement flag; a None argument leaves that flag alone."""
        if platform_commission_status is not None:
            self.platform_commission_status = SettlementStatus(platform_commission_status.upper()).value
        if delivery_partner_fee_status is not None:
            self.delivery_partner_fee_status = SettlementStatus(delivery_partner_fee_status.upper()).value

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            SettlementStatusChanged(
                analytics_id=str(self.id),
                order_id=str(self.order_id),
                platform_commission_status=self.platform_commission_status,
                delivery_partner_fee_status=self.delivery_partner_fee_status,
                changed_at=now,
            )
        )
