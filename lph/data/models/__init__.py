"""Data models for venue positions and market data."""

from lph.data.models.holding import AmmHolding, FuturesHolding, RawLpPosition
from lph.data.models.market import BookTicker, FundingRate

__all__ = [
    "AmmHolding",
    "FuturesHolding",
    "RawLpPosition",
    "BookTicker",
    "FundingRate",
]
