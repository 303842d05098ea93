"""Market data models from the futures exchange."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal


@dataclass(frozen=True)
class FundingRate:
    """One funding rate settlement.

    Attributes:
        symbol: Futures symbol.
        funding_time: Settlement time in milliseconds since epoch.
        funding_rate: Funding rate for the period (e.g., 0.0001 = 0.01%).
        mark_price: Mark price at settlement, if reported.
    """

    symbol: str
    funding_time: int
    funding_rate: Decimal
    mark_price: Decimal | None = None

    @property
    def funding_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.funding_time / 1000, tz=timezone.utc)


@dataclass(frozen=True)
class BookTicker:
    """Best bid/ask from the order book."""

    symbol: str
    bid_price: Decimal
    bid_qty: Decimal
    ask_price: Decimal
    ask_qty: Decimal
