"""Tests for HedgeDataBridge"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from lph.business.config.hedge_config import HedgeConfig
from lph.business.monitoring.data_bridge import HedgeDataBridge
from lph.data.models import FuturesHolding, RawLpPosition
from lph.data.providers.base import PositionNotFoundError

OWNER = "0x1111111111111111111111111111111111111111"
WBNB = "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c"
USDT = "0x55d398326f99059fF775485246999027B3197955"
CAKE = "0x0E09FaBB73Bd3Ade0a17ECC321fD13a19e81cE82"


@pytest.fixture
def config():
    return HedgeConfig(owner=OWNER, base_token_address=WBNB, usdt_token_address=USDT)


@pytest.fixture
def amm_source():
    source = MagicMock()
    source.get_block_number.return_value = 777
    source.list_positions.return_value = [
        RawLpPosition(token_id=1, token0=CAKE, token1=USDT, withdrawable_amount0=10**18),
        RawLpPosition(
            token_id=2,
            token0=USDT,
            token1=WBNB,
            liquidity=1,
            withdrawable_amount0=6000 * 10**18,
            withdrawable_amount1=10 * 10**18,
            collectable_amount1=10**17,
        ),
    ]
    return source


@pytest.fixture
def futures_source():
    source = MagicMock()
    source.get_holding.return_value = FuturesHolding(
        "BNBUSDT", Decimal("-10"), Decimal("0"), Decimal("600")
    )
    return source


class TestHedgeDataBridge:
    """Tests for HedgeDataBridge"""

    def test_fetch_amm_holding(self, amm_source, futures_source, config):
        bridge = HedgeDataBridge(amm_source, futures_source, config)

        holding = bridge.fetch_amm_holding()

        amm_source.list_positions.assert_called_once_with(OWNER, 777)
        assert holding.base_amount == Decimal("10")
        assert holding.usdt_amount == Decimal("6000")
        assert holding.collectable_base == Decimal("0.1")
        assert holding.block_number == 777
        assert holding.symbol == "BNBUSDT"

    def test_no_matching_position(self, amm_source, futures_source, config):
        amm_source.list_positions.return_value = amm_source.list_positions.return_value[:1]
        bridge = HedgeDataBridge(amm_source, futures_source, config)

        with pytest.raises(PositionNotFoundError):
            bridge.fetch_amm_holding()

    def test_fetch(self, amm_source, futures_source, config):
        bridge = HedgeDataBridge(amm_source, futures_source, config)

        amm, fut = bridge.fetch()

        futures_source.get_holding.assert_called_once_with("BNBUSDT")
        assert amm.base_amount == Decimal("10")
        assert fut.position_amt == Decimal("-10")
