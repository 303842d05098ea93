"""
Notification Channels - 推送渠道
"""

from lph.business.notification.channels.base import (
    NotificationChannel,
    SendResult,
    SendStatus,
)
from lph.business.notification.channels.telegram import (
    TelegramChannel,
    TelegramConfig,
    split_long_message,
)

__all__ = [
    "NotificationChannel",
    "SendResult",
    "SendStatus",
    "TelegramChannel",
    "TelegramConfig",
    "split_long_message",
]
