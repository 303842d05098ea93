"""
Trading - 对冲下单

HedgeAction → 交易所限价单
"""

from lph.business.trading.executor import ORDER_SIDES, HedgeExecutor

__all__ = ["ORDER_SIDES", "HedgeExecutor"]
