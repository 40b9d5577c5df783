"""Commission and payout computation for one seller group."""

from dataclasses import dataclass

DELIVERY_PARTNER_SHARE = 0.8


@dataclass(frozen=True)
class EarningsBreakdown:
    platform_commission: float
    total_commission_percentage: float
    delivery_partner_fee: float
    final_total: float
    seller_earning: float


def compute_earnings(group, shipping_charge: float, discount: float) -> EarningsBreakdown:
    """Split a group's final total between platform, delivery partner and seller.

    ``total_commission_percentage`` is the plain sum of the lines' commission
    percentages; reporting downstream depends on that value as is.
    """
    platform_commission = sum(line.commission for line in group.lines)
    final_total = group.subtotal + shipping_charge - discount
    return EarningsBreakdown(
        platform_commission=platform_commission,
        total_commission_percentage=sum(line.commission_percent for line in group.lines),
        delivery_partner_fee=shipping_charge * DELIVERY_PARTNER_SHARE,
        final_total=final_total,
        seller_earning=final_total - platform_commission - shipping_charge,
    )
