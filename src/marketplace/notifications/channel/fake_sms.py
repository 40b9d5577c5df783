"""Fake SMS adapter: keeps outgoing texts in memory."""

from uuid import uuid4

from marketplace.notifications.channel.sms_port import SMSPort


class FakeSMSAdapter(SMSPort):
    def __init__(self):
        self.sent_messages: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "SMS gateway unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "SMS gateway unavailable"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(self, to: str, body: str) -> dict:
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"sms-{uuid4().hex[:12]}"
        self.sent_messages.append({"message_id": message_id, "to": to, "body": body})
        return {"message_id": message_id, "status": "sent"}
