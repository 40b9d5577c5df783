"""Proportional discount allocation across seller groups.

The requested discount is spread over the groups in proportion to each
group's eligible subtotal, rounded down per group and clamped so a group
never receives more than its own subtotal plus shipping. The rounding
residual is dropped: the allocations never add up to more than requested.
"""

import math
from dataclasses import dataclass

from marketplace.shared.errors import CouponNotApplicable

DEFAULT_REMARK = "Discount applied"


@dataclass(frozen=True)
class Allocation:
    seller_id: str
    discount: float
    remark: str | None = None


def coupon_remark(code: str | None) -> str:
    return f"Coupon {code} applied" if code else DEFAULT_REMARK


def global_eligible_subtotal(groups, categories=None) -> float:
    return sum(group.eligible_subtotal(categories) for group in groups)


def allocate_discount(groups, shipping_charges, total_discount, categories=None, code=None):
    """Allocate ``total_discount`` over ``groups``.

    ``shipping_charges`` maps seller id to that group's shipping fee.
    ``categories`` restricts eligibility to lines in those categories; None
    means every line is eligible. Returns one ``Allocation`` per group in
    group order.
    """
    if not total_discount or total_discount <= 0:
        return [Allocation(seller_id=group.seller_id, discount=0.0) for group in groups]

    eligible = {group.seller_id: group.eligible_subtotal(categories) for group in groups}
    global_eligible = sum(eligible.values())
    if global_eligible <= 0:
        raise CouponNotApplicable(
            f"Coupon {code} is not applicable to any item in the cart" if code else "No eligible items for discount",
        )

    remark = coupon_remark(code)
    allocations = []
    for group in groups:
        share = math.floor(total_discount * eligible[group.seller_id] / global_eligible)
        ceiling = group.subtotal + shipping_charges.get(group.seller_id, 0.0)
        discount = float(max(0, min(share, ceiling)))
        allocations.append(
            Allocation(
                seller_id=group.seller_id,
                discount=discount,
                remark=remark if discount > 0 else None,
            )
        )

    return allocations
