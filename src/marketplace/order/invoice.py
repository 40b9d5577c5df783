"""Plain-text invoice rendering for a single order."""

from marketplace.order.order import Order

_WIDTH = 64


def _money(amount) -> str:
    return f"{amount or 0.0:,.2f}"


def _row(label, value) -> str:
    return f"{label:<{_WIDTH - 16}}{value:>16}"


def render_invoice(order: Order, seller_name: str | None = None) -> str:
    placed_at = order.placed_at.strftime("%d %b %Y %H:%M") if order.placed_at else "-"
    lines = [
        "TAX INVOICE".center(_WIDTH),
        "=" * _WIDTH,
        f"Order ID:      {order.id}",
        f"Date:          {placed_at}",
        f"Payment Mode:  {order.payment_mode}",
        f"Payment:       {order.payment_status}",
        f"Status:        {order.order_status}",
        f"Seller:        {seller_name or order.seller_id}",
    ]

    if order.address:
        address = order.address
        lines.append(f"Ship To:       {address.full_address}, {address.city}, {address.state} {address.pincode}")

    lines += ["-" * _WIDTH, f"{'Item':<32}{'Qty':>6}{'Price':>12}{'Amount':>14}", "-" * _WIDTH]
    for item in order.items:
        lines.append(f"{item.title[:31]:<32}{item.quantity:>6}{_money(item.unit_price):>12}{_money(item.line_total):>14}")

    lines += [
        "-" * _WIDTH,
        _row("Subtotal", _money(order.subtotal)),
        _row("Shipping", _money(order.shipping_charge)),
        _row("Discount", "-" + _money(order.discount_amount)),
    ]
    if order.discount_remark:
        lines.append(f"  ({order.discount_remark})")
    lines += ["=" * _WIDTH, _row("Total", _money(order.total_amount)), ""]

    return "\n".join(lines)
