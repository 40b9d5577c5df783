"""Channel adapter registry: pluggable notification dispatch channels.

Provides singleton access to channel adapters. Fake adapters are the
default; SMS_ADAPTER and PUSH_ADAPTER select others once a real gateway
is wired in.
"""

import os

from marketplace.notifications.notification import NotificationChannel

_channel_instances: dict[str, object] = {}


def get_channel(channel_type: str):
    """Return the configured channel adapter (singleton per channel type).

    Args:
        channel_type: One of NotificationChannel enum values ("SMS", "Push")
    """
    if channel_type not in _channel_instances:
        if channel_type == NotificationChannel.SMS.value:
            adapter = os.environ.get("SMS_ADAPTER", "fake")
            if adapter != "fake":
                raise ValueError(f"Unknown SMS adapter: {adapter}")
            from marketplace.notifications.channel.fake_sms import FakeSMSAdapter

            _channel_instances[channel_type] = FakeSMSAdapter()
        elif channel_type == NotificationChannel.PUSH.value:
            adapter = os.environ.get("PUSH_ADAPTER", "fake")
            if adapter != "fake":
                raise ValueError(f"Unknown push adapter: {adapter}")
            from marketplace.notifications.channel.fake_push import FakePushAdapter

            _channel_instances[channel_type] = FakePushAdapter()
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
