"""
Message Dispatcher - 消息调度器

负责：
- 预警去重：同一预警持续存在时，dedup_window 内只推送一次
- 预警重置：预警条件消失后，下次触发立即推送
- 静默时段控制
- 推送成功后更新 PriorState
"""

import logging
from datetime import datetime, time, timedelta
from typing import Optional

from lph.business.config.notification_config import NotificationConfig
from lph.business.monitoring.models import NotificationEvent, PriorState
from lph.business.notification.channels.base import NotificationChannel, SendResult, SendStatus
from lph.business.notification.formatters.snapshot_formatter import SnapshotFormatter

logger = logging.getLogger(__name__)


class MessageDispatcher:
    """消息调度器

    Usage:
        dispatcher = MessageDispatcher(TelegramChannel.from_env(), NotificationConfig.load())
        results = dispatcher.dispatch(events)
    """

    def __init__(
        self,
        channel: NotificationChannel,
        config: Optional[NotificationConfig] = None,
        state: Optional[PriorState] = None,
        base_label: str = "BASE",
    ) -> None:
        """初始化消息调度器

        Args:
            channel: 通知渠道
            config: 通知配置，默认从 YAML 加载
            state: 推送状态，默认新建
            base_label: 消息中 BASE 资产的显示名
        """
        self.channel = channel
        self.config = config or NotificationConfig.load()
        self.state = state or PriorState()
        self.base_label = base_label

        self.formatter = SnapshotFormatter(
            self.config.templates,
            drawdown_mode=self.config.policy.drawdown_mode,
        )

        self._dedup_window = timedelta(seconds=self.config.dedup_window)
        silent = self.config.silent_hours
        self._silent_enabled = silent.enabled
        self._silent_start = self._parse_time(silent.start)
        self._silent_end = self._parse_time(silent.end)

    def _parse_time(self, time_str: str) -> time:
        """解析 HH:MM"""
        hour, minute = time_str.split(":")
        return time(int(hour), int(minute))

    def _is_silent_period(self, now: datetime) -> bool:
        """检查是否在静默时段"""
        if not self._silent_enabled:
            return False

        current = now.time()

        # 处理跨午夜的情况
        if self._silent_start > self._silent_end:
            # 例如 23:00 - 07:00
            return current >= self._silent_start or current <= self._silent_end
        return self._silent_start <= current <= self._silent_end

    def _is_duplicate(self, event: NotificationEvent, now: datetime) -> bool:
        """持续中的预警在去重窗口内视为重复"""
        if not event.kind.is_alert:
            return False
        sent_at = self.state.active_alerts.get(event.kind)
        return sent_at is not None and now - sent_at < self._dedup_window

    def _rearm_alerts(self, events: list[NotificationEvent]) -> None:
        """清除本周期未再触发的预警"""
        firing = {e.kind for e in events if e.kind.is_alert}
        for kind in list(self.state.active_alerts):
            if kind not in firing:
                logger.info(f"Alert cleared: {kind.value}")
                del self.state.active_alerts[kind]

    def _mark_sent(self, event: NotificationEvent, now: datetime) -> None:
        if event.kind.is_alert:
            self.state.active_alerts[event.kind] = now
        else:
            self.state.periodic_sent_at = now

    def dispatch(
        self,
        events: list[NotificationEvent],
        now: Optional[datetime] = None,
        force: bool = False,
    ) -> list[SendResult]:
        """推送本周期的通知事件

        Args:
            events: policy.evaluate 的输出
            now: 当前时间
            force: 忽略静默时段和去重

        Returns:
            每个事件对应一个 SendResult
        """
        now = now or datetime.now()
        self._rearm_alerts(events)

        if not force and self._is_silent_period(now):
            logger.debug(f"Silent period, {len(events)} event(s) dropped")
            return [
                SendResult(status=SendStatus.SILENCED, error="In silent period")
                for _ in events
            ]

        results: list[SendResult] = []
        for event in events:
            if not force and self._is_duplicate(event, now):
                results.append(
                    SendResult(status=SendStatus.DEDUPLICATED, error="Duplicate alert")
                )
                continue

            title, content = self.formatter.format_event(event, self.base_label)
            send_result = self.channel.send(title, content)

            if send_result.is_success:
                self._mark_sent(event, now)
            else:
                logger.warning(
                    f"Failed to send {event.kind.value} via {self.channel.name}: {send_result.error}"
                )
            results.append(send_result)

        return results

    def send_text(
        self,
        title: str,
        content: str,
        now: Optional[datetime] = None,
        force: bool = False,
    ) -> SendResult:
        """发送文本消息

        Args:
            title: 标题
            content: 内容
            now: 当前时间，用于判断静默时段
            force: 是否忽略静默时段

        Returns:
            SendResult
        """
        now = now or datetime.now()
        if not force and self._is_silent_period(now):
            return SendResult(status=SendStatus.SILENCED, error="In silent period")
        return self.channel.send(title, content)
