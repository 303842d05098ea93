"""
Hedge Monitoring - 对冲监控

- data_bridge: 数据源 → 持仓模型
- policy: 通知触发策略
- pipeline: 监控主循环 (HedgeMonitor)，需显式导入
"""

from lph.business.monitoring.data_bridge import HedgeDataBridge
from lph.business.monitoring.models import (
    NotificationEvent,
    NotificationKind,
    PriorState,
    TickResult,
)
from lph.business.monitoring.policy import calc_drawdown, evaluate

__all__ = [
    "HedgeDataBridge",
    "NotificationEvent",
    "NotificationKind",
    "PriorState",
    "TickResult",
    "calc_drawdown",
    "evaluate",
]
