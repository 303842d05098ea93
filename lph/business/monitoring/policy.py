"""
Notification Policy - 通知策略

根据快照判断本周期需要推送哪些消息。三个触发条件相互独立，可同时触发：

1. PERIODIC: 无历史状态，或距上次定期推送 >= min_interval
2. EXPOSURE_ALERT: abs(base_delta_ratio) > deviation_threshold
3. DRAWDOWN_ALERT: 总价值相对参考值的回撤 > drawdown_threshold

纯函数：给定 last 和 now，结果确定。持续预警的去重由调用方负责。
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from lph.business.config.notification_config import DrawdownMode, NotificationPolicy
from lph.business.monitoring.models import NotificationEvent, NotificationKind, PriorState
from lph.engine.models import MonitoringSnapshot


def calc_drawdown(
    total_value_usdt: Decimal,
    reference_value: Decimal,
    mode: DrawdownMode,
) -> Optional[Decimal]:
    """计算回撤

    Args:
        total_value_usdt: 当前总价值
        reference_value: 参考值
        mode: ABSOLUTE 返回 USDT 差值，PERCENT 返回比例

    Returns:
        回撤值（上涨时为负）；PERCENT 模式下参考值非正时返回 None
    """
    drop = reference_value - total_value_usdt
    if mode == DrawdownMode.ABSOLUTE:
        return drop
    if reference_value <= 0:
        return None
    return drop / reference_value


def evaluate(
    snapshot: MonitoringSnapshot,
    policy: NotificationPolicy,
    last: Optional[PriorState] = None,
    now: Optional[datetime] = None,
) -> list[NotificationEvent]:
    """评估快照，返回本周期的通知事件

    Args:
        snapshot: 本周期快照
        policy: 通知策略
        last: 调用方持有的推送状态，None 表示首次
        now: 当前时间，默认 datetime.now()

    Returns:
        通知事件列表，顺序为 PERIODIC, EXPOSURE_ALERT, DRAWDOWN_ALERT
    """
    now = now or datetime.now()
    events: list[NotificationEvent] = []

    # 1. 定期推送
    if last is None or last.periodic_sent_at is None or now - last.periodic_sent_at >= policy.min_interval:
        events.append(NotificationEvent(kind=NotificationKind.PERIODIC, snapshot=snapshot))

    # 2. 敞口偏离
    deviation = abs(snapshot.base_delta_ratio)
    if deviation > policy.deviation_threshold:
        events.append(
            NotificationEvent(
                kind=NotificationKind.EXPOSURE_ALERT,
                snapshot=snapshot,
                breached_value=deviation,
                threshold=policy.deviation_threshold,
            )
        )

    # 3. 回撤（需要参考值）
    if policy.drawdown_threshold is not None and last is not None and last.reference_value is not None:
        drawdown = calc_drawdown(snapshot.total_value_usdt, last.reference_value, policy.drawdown_mode)
        if drawdown is not None and drawdown > policy.drawdown_threshold:
            events.append(
                NotificationEvent(
                    kind=NotificationKind.DRAWDOWN_ALERT,
                    snapshot=snapshot,
                    breached_value=drawdown,
                    threshold=policy.drawdown_threshold,
                )
            )

    return events
