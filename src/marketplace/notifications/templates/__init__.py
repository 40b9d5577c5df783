"""Template registry: maps NotificationType to template classes.

Each template knows its channel and how to render content from the
assignment context.
"""

from marketplace.notifications.notification import NotificationType
from marketplace.notifications.templates.partner_pickup import PartnerPickupTemplate
from marketplace.notifications.templates.seller_assignment import SellerAssignmentTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.PARTNER_PICKUP.value: PartnerPickupTemplate,
    NotificationType.SELLER_ASSIGNMENT.value: SellerAssignmentTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
