"""Position holding models for the AMM and futures venues.

All quantities are ``Decimal``. On-chain integer amounts are converted to
decimals by the AMM source before a holding is constructed, so downstream
consumers never see raw token units.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class RawLpPosition:
    """One Uniswap V3 LP position as read from the position manager.

    Attributes:
        token_id: Position NFT token ID.
        token0: Address of token0 in the pool.
        token1: Address of token1 in the pool.
        liquidity: Current liquidity of the position.
        withdrawable_amount0: token0 returned if all liquidity is removed (raw units).
        withdrawable_amount1: token1 returned if all liquidity is removed (raw units).
        collectable_amount0: Uncollected token0 fees (raw units).
        collectable_amount1: Uncollected token1 fees (raw units).
    """

    token_id: int
    token0: str
    token1: str
    liquidity: int = 0
    withdrawable_amount0: int = 0
    withdrawable_amount1: int = 0
    collectable_amount0: int = 0
    collectable_amount1: int = 0


@dataclass(frozen=True)
class AmmHolding:
    """BASE/USDT amounts held in the AMM position at one block.

    Attributes:
        base_amount: BASE withdrawable from the position.
        usdt_amount: USDT withdrawable from the position.
        collectable_base: Uncollected BASE fees.
        collectable_usdt: Uncollected USDT fees.
        block_number: Block at which the position was read.
        symbol: Futures symbol of the pair (e.g., "BNBUSDT"); empty if unknown.
    """

    base_amount: Decimal
    usdt_amount: Decimal
    collectable_base: Decimal = Decimal("0")
    collectable_usdt: Decimal = Decimal("0")
    block_number: int = 0
    symbol: str = ""

    def invalid_fields(self) -> list[str]:
        """Names of fields that violate the non-negativity invariant."""
        bad = []
        for name in ("base_amount", "usdt_amount", "collectable_base", "collectable_usdt"):
            value = getattr(self, name)
            if not value.is_finite() or value < 0:
                bad.append(name)
        if self.block_number < 0:
            bad.append("block_number")
        return bad


@dataclass(frozen=True)
class FuturesHolding:
    """Perpetual futures position for one symbol.

    Attributes:
        symbol: Futures symbol (e.g., "BNBUSDT").
        position_amt: Signed position size in BASE (negative = short).
        unrealized_pnl: Unrealized PnL in USDT.
        mark_price: Mark price of BASE in USDT.
        update_time: Exchange update time in milliseconds since epoch.
    """

    symbol: str
    position_amt: Decimal
    unrealized_pnl: Decimal
    mark_price: Decimal
    update_time: int = 0

    def invalid_fields(self) -> list[str]:
        """Names of fields that are not finite numbers."""
        return [
            name
            for name in ("position_amt", "unrealized_pnl", "mark_price")
            if not getattr(self, name).is_finite()
        ]
