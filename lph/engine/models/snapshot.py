"""Monitoring snapshot model.

One immutable record per tick, merging the AMM holding and the futures
position. Every valuation field is derivable from the amount fields plus
``base_price_usdt``; the snapshot carries no hidden state.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

# Lower bound of the delta ratio denominator
BASE_REFERENCE_EPSILON = Decimal("1e-8")


@dataclass(frozen=True)
class MonitoringSnapshot:
    """Exposure and valuation of the hedged LP position at one tick.

    Attributes:
        block_number: Block at which the AMM position was read.
        symbol: Futures symbol.
        amm_base_amount: BASE withdrawable from the LP position.
        amm_usdt_amount: USDT withdrawable from the LP position.
        amm_collectable_base: Uncollected BASE fees.
        amm_collectable_usdt: Uncollected USDT fees.
        amm_collectable_value_usdt: Collectable fees valued in USDT.
        futures_position: Signed futures position in BASE (negative = short).
        unrealized_pnl: Unrealized PnL of the futures position in USDT.
        futures_timestamp: Futures update time (ms since epoch).
        base_price_usdt: Mark price of BASE in USDT.
        base_delta: Net BASE exposure (amm_base_amount + futures_position).
        base_delta_ratio: base_delta / base_reference.
        amm_total_value_usdt: LP position value in USDT.
        total_value_usdt: LP position value plus futures unrealized PnL.
    """

    block_number: int
    symbol: str
    amm_base_amount: Decimal
    amm_usdt_amount: Decimal
    amm_collectable_base: Decimal
    amm_collectable_usdt: Decimal
    amm_collectable_value_usdt: Decimal
    futures_position: Decimal
    unrealized_pnl: Decimal
    futures_timestamp: int
    base_price_usdt: Decimal
    base_delta: Decimal
    base_delta_ratio: Decimal
    amm_total_value_usdt: Decimal
    total_value_usdt: Decimal

    @property
    def base_reference(self) -> Decimal:
        """Denominator of base_delta_ratio, never below BASE_REFERENCE_EPSILON."""
        return max(abs(self.amm_base_amount), abs(self.futures_position), BASE_REFERENCE_EPSILON)

    @property
    def is_hedged(self) -> bool:
        return self.base_delta == 0

    @property
    def futures_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.futures_timestamp / 1000, tz=timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly dict; decimals are rendered as strings."""
        return {
            key: str(value) if isinstance(value, Decimal) else value
            for key, value in asdict(self).items()
        }
