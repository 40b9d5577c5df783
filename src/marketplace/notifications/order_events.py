"""Order event handler: notifies both parties when a delivery partner is assigned.

The partner gets pickup instructions by SMS; the seller gets a push
confirming who is coming. Failures here are logged and swallowed: the
assignment has already been committed and stands regardless.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.accounts.account import Account
from marketplace.domain import marketplace
from marketplace.notifications.notification import Notification, NotificationType
from marketplace.notifications.templates import get_template
from marketplace.order.events import DeliveryPartnerAssigned

logger = structlog.get_logger(__name__)


def _find_account(account_id):
    try:
        return current_domain.repository_for(Account).get(account_id)
    except ObjectNotFoundError:
        return None


def queue_notification(recipient, notification_type, context, order_id):
    template_cls = get_template(notification_type)
    rendered = template_cls.render(context)
    notification = Notification.create(
        recipient_id=str(recipient.id),
        recipient_contact=recipient.mobile,
        notification_type=notification_type,
        channel=template_cls.channel,
        subject=rendered.get("subject"),
        body=rendered["body"],
        order_id=order_id,
    )
    current_domain.repository_for(Notification).add(notification)
    return str(notification.id)


@marketplace.event_handler(part_of=Notification, stream_category="marketplace::order")
class OrderEventsHandler:
    @handle(DeliveryPartnerAssigned)
    def on_delivery_partner_assigned(self, event: DeliveryPartnerAssigned) -> None:
        partner = _find_account(event.delivery_partner_id)
        seller = _find_account(event.seller_id)
        if partner is None or seller is None:
            logger.warning(
                "Assignment notifications skipped, party not found",
                order_id=str(event.order_id),
                partner_found=partner is not None,
                seller_found=seller is not None,
            )
            return

        context = {
            "order_id": str(event.order_id),
            "pincode": event.pincode,
            "seller_name": seller.display_name,
            "seller_mobile": seller.mobile,
            "seller_address": seller.address,
            "partner_name": partner.name,
            "partner_mobile": partner.mobile,
        }

        try:
            notification_ids = [
                queue_notification(partner, NotificationType.PARTNER_PICKUP.value, context, event.order_id),
                queue_notification(seller, NotificationType.SELLER_ASSIGNMENT.value, context, event.order_id),
            ]
        except Exception as e:
            logger.error(
                "Failed to queue assignment notifications",
                order_id=str(event.order_id),
                error=str(e),
            )
            return

        logger.info(
            "Assignment notifications queued",
            order_id=str(event.order_id),
            notification_ids=notification_ids,
        )
