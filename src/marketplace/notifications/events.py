"""Domain events for the Notification aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Notification")
class NotificationCreated:
    """A notification was created and queued for dispatch."""

    __version__ = 1

    notification_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    notification_type = String(required=True)
    channel = String(required=True)
    order_id = Identifier()
    created_at = DateTime(required=True)


@marketplace.event(part_of="Notification")
class NotificationSent:
    __version__ = 1

    notification_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    channel = String(required=True)
    sent_at = DateTime(required=True)


@marketplace.event(part_of="Notification")
class NotificationFailed:
    """The channel adapter refused or errored on the message."""

    __version__ = 1

    notification_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    channel = String(required=True)
    reason = String(required=True)
    retry_count = Integer(required=True)
    failed_at = DateTime(required=True)


@marketplace.event(part_of="Notification")
class NotificationRetried:
    """A failed notification was put back in the dispatch queue."""

    __version__ = 1

    notification_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    channel = String(required=True)
    retry_count = Integer(required=True)
    retried_at = DateTime(required=True)
