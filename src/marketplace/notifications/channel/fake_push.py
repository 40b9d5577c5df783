"""Fake push adapter: keeps outgoing pushes in memory."""

from uuid import uuid4

from marketplace.notifications.channel.push_port import PushPort


class FakePushAdapter(PushPort):
    def __init__(self):
        self.sent_pushes: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Push service unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Push service unavailable"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(self, device_token: str, title: str, body: str, data: dict | None = None) -> dict:
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"push-{uuid4().hex[:12]}"
        self.sent_pushes.append(
            {
                "message_id": message_id,
                "device_token": device_token,
                "title": title,
                "body": body,
                "data": data,
            }
        )
        return {"message_id": message_id, "status": "sent"}
