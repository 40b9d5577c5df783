"""Internal dispatch handler: sends notifications via channel adapters.

Reacts to NotificationCreated and NotificationRetried and dispatches via the
channel adapter. The notification ends up SENT or FAILED; dispatch errors
are recorded, logged, and never raised.
"""

import structlog
from protean import handle
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.notifications.channel import get_channel
from marketplace.notifications.events import NotificationCreated, NotificationRetried
from marketplace.notifications.notification import (
    Notification,
    NotificationChannel,
    NotificationStatus,
)

logger = structlog.get_logger(__name__)


@marketplace.event_handler(part_of=Notification)
class NotificationDispatcher:
    @handle(NotificationCreated)
    def on_notification_created(self, event: NotificationCreated) -> None:
        self._dispatch(event.notification_id)

    @handle(NotificationRetried)
    def on_notification_retried(self, event: NotificationRetried) -> None:
        self._dispatch(event.notification_id)

    def _dispatch(self, notification_id):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(notification_id)

        if NotificationStatus(notification.status) != NotificationStatus.PENDING:
            logger.info(
                "Notification not in PENDING status, skipping dispatch",
                notification_id=str(notification_id),
                status=notification.status,
            )
            return

        try:
            adapter = get_channel(notification.channel)
            result = _dispatch_via_channel(adapter, notification)

            if result.get("status") == "sent":
                notification.mark_sent()
            else:
                notification.mark_failed(result.get("error", "Unknown dispatch error"))
                logger.warning(
                    "Notification rejected by channel",
                    notification_id=str(notification.id),
                    channel=notification.channel,
                    error=notification.failure_reason,
                )
        except Exception as e:
            notification.mark_failed(str(e))
            logger.error(
                "Notification dispatch failed",
                notification_id=str(notification.id),
                error=str(e),
            )

        repo.add(notification)


def _dispatch_via_channel(adapter, notification: Notification) -> dict:
    """Route dispatch to the correct adapter method based on channel."""
    channel = notification.channel
    recipient = notification.recipient_contact or str(notification.recipient_id)

    if channel == NotificationChannel.SMS.value:
        return adapter.send(to=recipient, body=notification.body)
    elif channel == NotificationChannel.PUSH.value:
        return adapter.send(
            device_token=recipient,
            title=notification.subject or "",
            body=notification.body,
            data={"order_id": str(notification.order_id)} if notification.order_id else None,
        )
    else:
        return {"status": "failed", "error": f"Unknown channel: {channel}"}
