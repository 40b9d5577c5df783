"""Notification aggregate (CQRS): one outbound message and its delivery lifecycle.

Notifications are created reactively from order events (delivery partner
assignment) and dispatched through channel adapters (SMS, push). A failed
dispatch is recorded on the notification and never undoes the business
change that triggered it.

State Machine:
    PENDING → SENT
    PENDING → FAILED → (retry) → PENDING
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from marketplace.domain import marketplace
from marketplace.notifications.events import (
    NotificationCreated,
    NotificationFailed,
    NotificationRetried,
    NotificationSent,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class NotificationType(Enum):
    PARTNER_PICKUP = "PartnerPickup"
    SELLER_ASSIGNMENT = "SellerAssignment"


class NotificationChannel(Enum):
    SMS = "SMS"
    PUSH = "Push"


class NotificationStatus(Enum):
    PENDING = "Pending"
    SENT = "Sent"
    FAILED = "Failed"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    NotificationStatus.PENDING: {NotificationStatus.SENT, NotificationStatus.FAILED},
    NotificationStatus.FAILED: {NotificationStatus.PENDING},  # Via retry
    NotificationStatus.SENT: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Notification:
    """A single message to a seller or delivery partner about an order."""

    recipient_id = Identifier(required=True)
    recipient_contact = String(max_length=200)  # mobile number or device token
    notification_type = String(choices=NotificationType, required=True)
    channel = String(choices=NotificationChannel, required=True)
    subject = String(max_length=500)
    body = Text(required=True)
    order_id = Identifier()
    status = String(choices=NotificationStatus, default=NotificationStatus.PENDING.value)
    sent_at = DateTime()
    failure_reason = String(max_length=500)
    retry_count = Integer(default=0)
    max_retries = Integer(default=3)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(
        cls,
        recipient_id,
        notification_type,
        channel,
        body,
        subject=None,
        recipient_contact=None,
        order_id=None,
        max_retries=3,
    ):
        """Create a new notification in PENDING status."""
        now = datetime.now(UTC)

        notification = cls(
            recipient_id=recipient_id,
            recipient_contact=recipient_contact,
            notification_type=notification_type,
            channel=channel,
            subject=subject,
            body=body,
            order_id=order_id,
            status=NotificationStatus.PENDING.value,
            retry_count=0,
            max_retries=max_retries,
            created_at=now,
            updated_at=now,
        )

        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                recipient_id=str(recipient_id),
                notification_type=notification_type,
                channel=channel,
                order_id=str(order_id) if order_id else None,
                created_at=now,
            )
        )

        return notification

    def _assert_can_transition(self, target_status):
        current = NotificationStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def mark_sent(self, sent_at=None):
        self._assert_can_transition(NotificationStatus.SENT)

        now = sent_at or datetime.now(UTC)
        self.status = NotificationStatus.SENT.value
        self.sent_at = now
        self.updated_at = now

        self.raise_(
            NotificationSent(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                channel=self.channel,
                sent_at=now,
            )
        )

    def mark_failed(self, reason):
        self._assert_can_transition(NotificationStatus.FAILED)

        now = datetime.now(UTC)
        self.status = NotificationStatus.FAILED.value
        self.failure_reason = reason
        self.retry_count = self.retry_count + 1
        self.updated_at = now

        self.raise_(
            NotificationFailed(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                channel=self.channel,
                reason=reason,
                retry_count=self.retry_count,
                failed_at=now,
            )
        )

    def retry(self):
        """Queue a failed notification for another dispatch attempt."""
        if NotificationStatus(self.status) != NotificationStatus.FAILED:
            raise ValidationError({"status": ["Only failed notifications can be retried"]})
        if self.retry_count >= self.max_retries:
            raise ValidationError({"retry_count": ["Maximum retry attempts exceeded"]})

        now = datetime.now(UTC)
        self.status = NotificationStatus.PENDING.value
        self.failure_reason = None
        self.updated_at = now

        self.raise_(
            NotificationRetried(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                channel=self.channel,
                retry_count=self.retry_count,
                retried_at=now,
            )
        )
