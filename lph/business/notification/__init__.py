"""
Notification - 消息推送

- channels: 推送渠道 (Telegram)
- formatters: 消息格式化器
- dispatcher: 消息调度器
"""

from lph.business.notification.channels.base import NotificationChannel, SendResult, SendStatus
from lph.business.notification.dispatcher import MessageDispatcher

__all__ = ["NotificationChannel", "SendResult", "SendStatus", "MessageDispatcher"]
