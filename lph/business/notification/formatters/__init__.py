"""
Message Formatters - 消息格式化器
"""

from lph.business.notification.formatters.snapshot_formatter import SnapshotFormatter

__all__ = ["SnapshotFormatter"]
