"""Repository for the SellerAnalytics aggregate."""

from marketplace.analytics.seller_analytics import SellerAnalytics
from marketplace.domain import marketplace


@marketplace.repository(part_of=SellerAnalytics)
class SellerAnalyticsRepository:
    def find_by_order(self, order_id) -> SellerAnalytics | None:
        records = self._dao.query.filter(order_id=order_id).all().items
        return records[0] if records else None
