"""Settlement updates and admin purge for seller analytics."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.analytics.seller_analytics import SellerAnalytics, SettlementStatus
from marketplace.domain import marketplace

logger = structlog.get_logger(__name__)

_STATUSES = {status.value for status in SettlementStatus}


@marketplace.command(part_of="SellerAnalytics")
class UpdateSettlementStatus:
    analytics_id = Identifier(required=True)
    platform_commission_status = String(max_length=20)
    delivery_partner_fee_status = String(max_length=20)


@marketplace.command(part_of="SellerAnalytics")
class PurgeSellerAnalytics:
    analytics_id = Identifier(required=True)


@marketplace.command_handler(part_of=SellerAnalytics)
class SettlementHandler:
    @handle(UpdateSettlementStatus)
    def update_settlement_status(self, command):
        requested = {
            "platform_commission_status": command.platform_commission_status,
            "delivery_partner_fee_status": command.delivery_partner_fee_status,
        }
        errors = {
            name: [f"Invalid settlement status: {value}"]
            for name, value in requested.items()
            if value is not None and value.upper() not in _STATUSES
        }
        if errors:
            raise ValidationError(errors)
        if all(value is None for value in requested.values()):
            raise ValidationError({"status": ["Provide at least one settlement status"]})

        repo = current_domain.repository_for(SellerAnalytics)
        analytics = repo.get(command.analytics_id)
        analytics.update_settlement(**requested)
        repo.add(analytics)
        return analytics

    @handle(PurgeSellerAnalytics)
    def purge_seller_analytics(self, command):
        repo = current_domain.repository_for(SellerAnalytics)
        analytics = repo.get(command.analytics_id)
        repo._dao.delete(analytics)
        logger.info("Seller analytics purged", analytics_id=str(command.analytics_id))
