import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from marketplace.notifications.channel import get_channel
from marketplace.notifications.notification import Notification
from marketplace.notifications.retry import RetryNotification
from marketplace.order.assignment import AssignDeliveryPartner


@pytest.fixture
def failed_pickup_sms(seller, register_account, list_product, place_order):
    partner_id = register_account(role="DELIVERY_PARTNER", name="Ravi", mobile="9822222222", pincode="560001")
    [order_id] = place_order([(list_product(seller), 1)])

    sms = get_channel("SMS")
    sms.configure(should_succeed=False)
    current_domain.process(AssignDeliveryPartner(order_id=order_id, partner_id=partner_id), asynchronous=False)
    sms.configure(should_succeed=True)

    repo = current_domain.repository_for(Notification)
    [notification] = repo._dao.query.filter(order_id=order_id, notification_type="PartnerPickup").all().items
    return str(notification.id)


class TestRetryNotification:
    def test_retry_resends(self, failed_pickup_sms):
        current_domain.process(RetryNotification(notification_id=failed_pickup_sms), asynchronous=False)

        notification = current_domain.repository_for(Notification).get(failed_pickup_sms)
        assert notification.status == "Sent"
        assert notification.retry_count == 1
        assert len(get_channel("SMS").sent_messages) == 1

    def test_retry_sent_notification_rejected(self, failed_pickup_sms):
        current_domain.process(RetryNotification(notification_id=failed_pickup_sms), asynchronous=False)

        with pytest.raises(ValidationError):
            current_domain.process(RetryNotification(notification_id=failed_pickup_sms), asynchronous=False)
