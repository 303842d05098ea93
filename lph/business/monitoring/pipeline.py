"""
Hedge Monitor - 对冲监控主流程

单个监控周期：
1. 数据获取: HedgeDataBridge → AmmHolding + FuturesHolding
2. 快照计算: build_snapshot → MonitoringSnapshot
3. 对冲决策: decide → HedgeAction
4. 下单执行: HedgeExecutor（可选），实盘下单后推送订单消息（dry-run 只记日志）
5. 通知评估: evaluate → NotificationEvent
6. 消息推送: MessageDispatcher（可选），无事件的周期也经过分发器以重置已消失的预警

数据获取或快照校验失败时本周期跳过，不产生决策，也不推送。
"""

import logging
import time
from datetime import datetime
from typing import Callable, Optional

import requests

from lph.business.config.hedge_config import HedgeConfig
from lph.business.config.notification_config import NotificationConfig
from lph.business.monitoring.data_bridge import HedgeDataBridge
from lph.business.monitoring.models import PriorState, TickResult
from lph.business.monitoring.policy import evaluate
from lph.business.notification.dispatcher import MessageDispatcher
from lph.business.trading.executor import HedgeExecutor
from lph.data.providers.base import ProviderError
from lph.engine.models import MonitoringSnapshot
from lph.engine.position.hedge import decide
from lph.engine.position.snapshot import SnapshotError, build_snapshot

logger = logging.getLogger(__name__)

# 视为“本周期跳过”的异常
SKIPPABLE_ERRORS = (SnapshotError, ProviderError, requests.RequestException)


class HedgeMonitor:
    """对冲监控器

    Usage:
        monitor = HedgeMonitor(config, bridge, executor=executor, dispatcher=dispatcher)
        result = monitor.run_once()
        monitor.run_forever(interval=90)
    """

    def __init__(
        self,
        config: HedgeConfig,
        bridge: HedgeDataBridge,
        executor: Optional[HedgeExecutor] = None,
        dispatcher: Optional[MessageDispatcher] = None,
        notification_config: Optional[NotificationConfig] = None,
        state: Optional[PriorState] = None,
    ) -> None:
        """初始化监控器

        Args:
            config: 对冲配置
            bridge: 数据桥接
            executor: 下单执行器，None 表示只监控不下单
            dispatcher: 消息分发器，None 表示不推送
            notification_config: 通知配置，默认取 dispatcher 的配置
            state: 推送状态，默认取 dispatcher 的状态
        """
        self.config = config
        self.bridge = bridge
        self.executor = executor
        self.dispatcher = dispatcher

        if notification_config is None:
            notification_config = dispatcher.config if dispatcher else NotificationConfig()
        self.notification_config = notification_config

        if state is None:
            state = dispatcher.state if dispatcher else PriorState()
        self.state = state

    def snapshot(self) -> MonitoringSnapshot:
        """获取当前快照

        Raises:
            SnapshotError: 持仓数据无效
            ProviderError: 数据源读取失败
        """
        amm, fut = self.bridge.fetch()
        return build_snapshot(amm, fut)

    def run_once(self, now: Optional[datetime] = None) -> TickResult:
        """执行一个监控周期

        Args:
            now: 周期时间，默认 datetime.now()

        Returns:
            TickResult；被跳过的周期 snapshot 为 None、error 为原因
        """
        now = now or datetime.now()
        result = TickResult(timestamp=now)

        try:
            snapshot = self.snapshot()
        except SKIPPABLE_ERRORS as e:
            logger.warning(f"Tick skipped: {type(e).__name__}: {e}")
            result.error = f"{type(e).__name__}: {e}"
            return result

        result.snapshot = snapshot
        logger.info(
            f"Block {snapshot.block_number}: delta={snapshot.base_delta} "
            f"ratio={snapshot.base_delta_ratio} total={snapshot.total_value_usdt} USDT"
        )

        # 对冲决策
        result.action = decide(
            snapshot,
            self.config.base_delta_ratio_threshold,
            self.config.base_delta_threshold,
        )
        if not result.action.is_none:
            logger.info(f"Hedge decision: {result.action}")
            if self.executor is not None:
                try:
                    result.order = self.executor.execute(result.action)
                except (ProviderError, requests.RequestException) as e:
                    logger.error(f"Order failed: {e}")
                    result.error = f"order failed: {e}"

            if result.order and not result.order.get("dry_run") and self.dispatcher is not None:
                title, content = self.dispatcher.formatter.format_action(result.action, result.order)
                self.dispatcher.send_text(title, content, now=now)

        # 通知
        result.events = evaluate(snapshot, self.notification_config.policy, self.state, now)
        if self.dispatcher is not None:
            self.dispatcher.dispatch(result.events, now)

        self.state.update_reference(snapshot.total_value_usdt)
        logger.debug(f"Tick summary: {result.summary}")
        return result

    def run_forever(
        self,
        interval: Optional[int] = None,
        max_ticks: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """按固定间隔循环执行

        Args:
            interval: 轮询间隔（秒），默认取配置
            max_ticks: 最大周期数，None 表示无限
            sleep: 休眠函数（测试时替换）
        """
        interval = interval if interval is not None else self.config.poll_interval
        ticks = 0
        logger.info(f"Monitoring {self.config.symbol} every {interval}s")

        while max_ticks is None or ticks < max_ticks:
            try:
                self.run_once()
            except Exception:
                logger.exception("Unexpected error in monitor tick")
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            sleep(interval)
