"""
Data Bridge - 数据桥接

从两个数据源读取原始数据，转换为 engine 层的持仓模型：
- AMM: 读取所有 LP 仓位 → 匹配 BASE/USDT 仓位 → AmmHolding
- 合约: 读取持仓 → FuturesHolding

只做数据获取与转换，不做阈值判断。
"""

import logging

from lph.business.config.hedge_config import HedgeConfig
from lph.data.models import AmmHolding, FuturesHolding
from lph.data.providers.base import AmmPositionSource, FuturesPositionSource
from lph.engine.position.snapshot import build_amm_holding, find_matching_position

logger = logging.getLogger(__name__)


class HedgeDataBridge:
    """对冲数据桥接

    Usage:
        bridge = HedgeDataBridge(amm_source, futures_source, config)
        amm, fut = bridge.fetch()
    """

    def __init__(
        self,
        amm_source: AmmPositionSource,
        futures_source: FuturesPositionSource,
        config: HedgeConfig,
    ) -> None:
        self.amm_source = amm_source
        self.futures_source = futures_source
        self.config = config

    def fetch_amm_holding(self) -> AmmHolding:
        """读取 BASE/USDT LP 仓位

        Raises:
            PositionNotFoundError: 没有匹配的 LP 仓位
            InvalidHolding: 仓位数据无法转换
        """
        block_number = self.amm_source.get_block_number()
        positions = self.amm_source.list_positions(self.config.owner, block_number)
        position = find_matching_position(
            positions,
            self.config.base_token_address,
            self.config.usdt_token_address,
        )
        holding = build_amm_holding(
            position,
            self.config.base_token_address,
            self.config.usdt_token_address,
            block_number,
            self.config.token_decimals,
            symbol=self.config.symbol,
        )
        logger.debug(
            f"AMM position #{position.token_id} @ block {block_number}: "
            f"base={holding.base_amount} usdt={holding.usdt_amount} "
            f"fees=({holding.collectable_base}, {holding.collectable_usdt})"
        )
        return holding

    def fetch_futures_holding(self) -> FuturesHolding:
        """读取合约持仓

        Raises:
            PositionNotFoundError: 交易所无该合约持仓记录
        """
        return self.futures_source.get_holding(self.config.symbol)

    def fetch(self) -> tuple[AmmHolding, FuturesHolding]:
        """读取本周期的两个持仓"""
        return self.fetch_amm_holding(), self.fetch_futures_holding()
