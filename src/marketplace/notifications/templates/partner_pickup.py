"""Pickup instructions: sent by SMS to the assigned delivery partner."""

from marketplace.notifications.notification import NotificationChannel, NotificationType


class PartnerPickupTemplate:
    notification_type = NotificationType.PARTNER_PICKUP.value
    channel = NotificationChannel.SMS.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        seller_name = context.get("seller_name", "the seller")
        seller_mobile = context.get("seller_mobile", "N/A")
        pickup_address = context.get("seller_address") or f"pincode {context.get('pincode', 'N/A')}"
        return {
            "subject": "New Pickup Assigned",
            "body": (
                f"New pickup for order #{order_id}.\n"
                f"Collect from {seller_name}, {pickup_address}.\n"
                f"Seller contact: {seller_mobile}"
            ),
        }
