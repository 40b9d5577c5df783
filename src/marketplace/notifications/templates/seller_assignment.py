"""Assignment confirmation: pushed to the seller once a partner is on the way."""

from marketplace.notifications.notification import NotificationChannel, NotificationType


class SellerAssignmentTemplate:
    notification_type = NotificationType.SELLER_ASSIGNMENT.value
    channel = NotificationChannel.PUSH.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        partner_name = context.get("partner_name", "A delivery partner")
        partner_mobile = context.get("partner_mobile", "N/A")
        return {
            "subject": "Delivery Partner Assigned",
            "body": (
                f"{partner_name} ({partner_mobile}) will pick up order #{order_id}. "
                "Please keep the package ready."
            ),
        }
