"""Repository for the Order aggregate: role-scoped listings."""

from marketplace.domain import marketplace
from marketplace.order.order import Order


def _newest_first(orders):
    return sorted(orders, key=lambda order: order.placed_at, reverse=True)


@marketplace.repository(part_of=Order)
class OrderRepository:
    def find_for_buyer(self, buyer_id) -> list[Order]:
        return _newest_first(self._dao.query.filter(buyer_id=buyer_id).all().items)

    def find_for_seller(self, seller_id) -> list[Order]:
        return _newest_first(self._dao.query.filter(seller_id=seller_id).all().items)

    def find_all(self) -> list[Order]:
        return _newest_first(self._dao.query.all().items)
