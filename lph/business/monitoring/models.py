"""
Monitoring Models - 监控系统数据模型

定义监控系统的核心数据结构：
- NotificationKind: 通知类型（定期/敞口预警/回撤预警）
- NotificationEvent: 通知事件
- PriorState: 调用方持有的推送状态（上次推送时间、回撤参考值）
- TickResult: 单次监控周期结果
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from lph.engine.models import HedgeAction, MonitoringSnapshot


class NotificationKind(str, Enum):
    """通知类型"""

    PERIODIC = "periodic"  # 定期状态推送
    EXPOSURE_ALERT = "exposure_alert"  # 敞口偏离预警
    DRAWDOWN_ALERT = "drawdown_alert"  # 回撤预警

    @property
    def is_alert(self) -> bool:
        return self != NotificationKind.PERIODIC


@dataclass(frozen=True)
class NotificationEvent:
    """通知事件

    携带完整快照，格式化时无需再查询数据源。
    """

    kind: NotificationKind
    snapshot: MonitoringSnapshot

    # 触发值和阈值（定期推送为 None）
    breached_value: Optional[Decimal] = None
    threshold: Optional[Decimal] = None


@dataclass
class PriorState:
    """推送状态

    由调用方（MessageDispatcher）持有并在推送成功后更新；
    policy.evaluate 只读取，不修改。
    """

    # 上次定期推送时间
    periodic_sent_at: Optional[datetime] = None

    # 回撤参考值（USDT）
    reference_value: Optional[Decimal] = None

    # True: 参考值随总价值创新高上移（高水位）；False: 固定参考值
    track_high_water: bool = True

    # 正在持续的预警及其上次推送时间（用于去重）
    active_alerts: dict[NotificationKind, datetime] = field(default_factory=dict)

    def update_reference(self, total_value_usdt: Decimal) -> None:
        """更新回撤参考值"""
        if self.reference_value is None:
            self.reference_value = total_value_usdt
        elif self.track_high_water and total_value_usdt > self.reference_value:
            self.reference_value = total_value_usdt


@dataclass
class TickResult:
    """单次监控周期结果

    snapshot 为 None 表示本周期被跳过（数据获取失败或快照校验失败），
    此时不会产生决策和通知。
    """

    timestamp: datetime = field(default_factory=datetime.now)
    snapshot: Optional[MonitoringSnapshot] = None
    action: HedgeAction = field(default_factory=HedgeAction.none)
    events: list[NotificationEvent] = field(default_factory=list)

    # 下单结果（未执行时为 None）
    order: Optional[dict] = None

    # 跳过原因
    error: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.snapshot is None

    @property
    def summary(self) -> dict:
        """周期摘要"""
        return {
            "timestamp": self.timestamp.isoformat(),
            "skipped": self.skipped,
            "error": self.error,
            "block_number": self.snapshot.block_number if self.snapshot else None,
            "base_delta": str(self.snapshot.base_delta) if self.snapshot else None,
            "base_delta_ratio": str(self.snapshot.base_delta_ratio) if self.snapshot else None,
            "action": self.action.action_type.value,
            "quantity": self.action.quantity,
            "events": [e.kind.value for e in self.events],
        }
