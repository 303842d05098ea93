"""Position sources for the AMM and futures venues."""

from lph.data.providers.base import (
    AmmPositionSource,
    FuturesPositionSource,
    PositionNotFoundError,
    ProviderError,
)
from lph.data.providers.binance_provider import BinanceAPIError, BinanceConfig, BinancePerpsClient
from lph.data.providers.uniswap_provider import UniswapV3PositionManager

__all__ = [
    "AmmPositionSource",
    "FuturesPositionSource",
    "PositionNotFoundError",
    "ProviderError",
    "BinanceAPIError",
    "BinanceConfig",
    "BinancePerpsClient",
    "UniswapV3PositionManager",
]
