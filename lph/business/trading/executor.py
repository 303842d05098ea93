"""
Hedge Executor - 对冲下单执行

将 HedgeAction 转换为交易所限价单：
- OPEN_SELL  → SELL 限价单 @ 卖一价（加空）
- CLOSE_SELL → BUY reduceOnly 限价单 @ 买一价（减空）

减空必须是买单；卖单 + reduceOnly 只能平多，对空头无效。
"""

import logging
from typing import Any, Optional

from lph.data.providers.binance_provider import BinancePerpsClient
from lph.engine.models import HedgeAction, HedgeActionType

logger = logging.getLogger(__name__)

# action -> (side, reduce_only)
ORDER_SIDES: dict[HedgeActionType, tuple[str, bool]] = {
    HedgeActionType.OPEN_SELL: ("SELL", False),
    HedgeActionType.CLOSE_SELL: ("BUY", True),
}


class HedgeExecutor:
    """对冲执行器

    Usage:
        executor = HedgeExecutor(client, dry_run=False)
        order = executor.execute(action)
    """

    def __init__(self, client: BinancePerpsClient, dry_run: bool = True) -> None:
        """初始化执行器

        Args:
            client: Binance 合约客户端
            dry_run: True 时只记录日志不下单
        """
        self.client = client
        self.dry_run = dry_run

    def execute(self, action: HedgeAction) -> Optional[dict[str, Any]]:
        """执行对冲动作

        Args:
            action: 决策引擎输出

        Returns:
            订单回报；NONE 动作返回 None；dry-run 返回模拟订单描述

        Raises:
            BinanceAPIError: 下单失败
        """
        if action.is_none:
            return None

        side, reduce_only = ORDER_SIDES[action.action_type]

        if self.dry_run:
            logger.info(
                f"[DRY RUN] {action.action_type.value}: {side} {action.symbol} "
                f"qty={action.quantity} reduce_only={reduce_only}"
            )
            return {
                "dry_run": True,
                "symbol": action.symbol,
                "side": side,
                "quantity": action.quantity,
                "reduceOnly": reduce_only,
            }

        logger.info(f"Executing {action}")
        if action.action_type == HedgeActionType.OPEN_SELL:
            order = self.client.open_short(action.symbol, action.quantity)
        else:
            order = self.client.close_short(action.symbol, action.quantity)

        logger.info(f"Order placed: id={order.get('orderId')} status={order.get('status')}")
        return order
