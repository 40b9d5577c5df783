"""RetryNotification command + handler: retry a failed notification."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.notifications.notification import Notification


@marketplace.command(part_of="Notification")
class RetryNotification:
    notification_id = Identifier(required=True)


@marketplace.command_handler(part_of=Notification)
class RetryNotificationHandler:
    @handle(RetryNotification)
    def retry_notification(self, command: RetryNotification):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        notification.retry()
        repo.add(notification)
        return notification
