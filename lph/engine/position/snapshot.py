"""Snapshot builder.

Merges one AMM holding and one futures holding into a MonitoringSnapshot.

    base_delta       = amm_base_amount + futures_position
    base_reference   = max(|amm_base_amount|, |futures_position|, 1e-8)
    base_delta_ratio = base_delta / base_reference
    amm_total_value  = amm_base_amount * mark_price + amm_usdt_amount
    collectable      = collectable_base * mark_price + collectable_usdt
    total_value      = amm_total_value + unrealized_pnl

All arithmetic is Decimal so threshold comparisons downstream are exact.
"""

from __future__ import annotations

from collections.abc import Iterable

from lph.data.models import AmmHolding, FuturesHolding, RawLpPosition
from lph.data.providers.base import PositionNotFoundError
from lph.data.utils import UNISWAP_TOKEN_DECIMALS, to_decimal
from lph.engine.models.snapshot import BASE_REFERENCE_EPSILON, MonitoringSnapshot
from lph.engine.position.token_mapping import UnsupportedPair, is_pair, map_token_amounts


class SnapshotError(Exception):
    """A snapshot could not be built; the tick must be skipped."""

    pass


class MissingMarkPrice(SnapshotError):
    """Futures holding has no usable (strictly positive) mark price."""

    pass


class InvalidHolding(SnapshotError):
    """A holding violates its own invariants (sign, finiteness, pair)."""

    pass


def find_matching_position(
    positions: Iterable[RawLpPosition],
    base_token: str,
    usdt_token: str,
) -> RawLpPosition:
    """Find the first position whose pool is the BASE/USDT pair.

    Raises:
        PositionNotFoundError: If no position matches.
    """
    for position in positions:
        if is_pair(position.token0, position.token1, base_token, usdt_token):
            return position
    raise PositionNotFoundError(
        f"No matching Uniswap position found for base_token={base_token} and usdt_token={usdt_token}"
    )


def build_amm_holding(
    position: RawLpPosition,
    base_token: str,
    usdt_token: str,
    block_number: int,
    decimals: int = UNISWAP_TOKEN_DECIMALS,
    symbol: str = "",
) -> AmmHolding:
    """Convert a raw LP position into a decimal BASE/USDT holding.

    Raises:
        InvalidHolding: If the position's pool is not the BASE/USDT pair.
    """
    withdrawable = map_token_amounts(
        position.token0,
        position.token1,
        (position.withdrawable_amount0, position.withdrawable_amount1),
        base_token,
        usdt_token,
    )
    collectable = map_token_amounts(
        position.token0,
        position.token1,
        (position.collectable_amount0, position.collectable_amount1),
        base_token,
        usdt_token,
    )
    if isinstance(withdrawable, UnsupportedPair) or isinstance(collectable, UnsupportedPair):
        raise InvalidHolding(
            f"Position {position.token_id} pair ({position.token0}, {position.token1}) "
            f"is not BASE/USDT ({base_token}, {usdt_token})"
        )

    try:
        return AmmHolding(
            base_amount=to_decimal(withdrawable.base, decimals),
            usdt_amount=to_decimal(withdrawable.usdt, decimals),
            collectable_base=to_decimal(collectable.base, decimals),
            collectable_usdt=to_decimal(collectable.usdt, decimals),
            block_number=block_number,
            symbol=symbol,
        )
    except ValueError as e:
        raise InvalidHolding(f"Position {position.token_id}: {e}") from e


def build_snapshot(amm: AmmHolding, fut: FuturesHolding) -> MonitoringSnapshot:
    """Build the monitoring snapshot for one tick.

    Args:
        amm: AMM holding (non-negative amounts).
        fut: Futures holding for the hedged symbol.

    Returns:
        Fully populated MonitoringSnapshot.

    Raises:
        InvalidHolding: If either holding fails its invariants or the
            two holdings are for different symbols.
        MissingMarkPrice: If the mark price is not strictly positive.
    """
    bad_amm = amm.invalid_fields()
    if bad_amm:
        raise InvalidHolding(f"AMM holding has negative or non-finite fields: {', '.join(bad_amm)}")

    bad_fut = fut.invalid_fields()
    if bad_fut:
        raise InvalidHolding(f"Futures holding has non-finite fields: {', '.join(bad_fut)}")

    if amm.symbol and amm.symbol != fut.symbol:
        raise InvalidHolding(f"AMM holding is for {amm.symbol}, futures holding is for {fut.symbol}")

    if fut.mark_price <= 0:
        raise MissingMarkPrice(f"Mark price for {fut.symbol} must be positive, got {fut.mark_price}")

    price = fut.mark_price

    base_delta = amm.base_amount + fut.position_amt
    base_reference = max(abs(amm.base_amount), abs(fut.position_amt), BASE_REFERENCE_EPSILON)
    base_delta_ratio = base_delta / base_reference

    amm_total_value_usdt = amm.base_amount * price + amm.usdt_amount
    amm_collectable_value_usdt = amm.collectable_base * price + amm.collectable_usdt
    total_value_usdt = amm_total_value_usdt + fut.unrealized_pnl

    return MonitoringSnapshot(
        block_number=amm.block_number,
        symbol=fut.symbol,
        amm_base_amount=amm.base_amount,
        amm_usdt_amount=amm.usdt_amount,
        amm_collectable_base=amm.collectable_base,
        amm_collectable_usdt=amm.collectable_usdt,
        amm_collectable_value_usdt=amm_collectable_value_usdt,
        futures_position=fut.position_amt,
        unrealized_pnl=fut.unrealized_pnl,
        futures_timestamp=fut.update_time,
        base_price_usdt=price,
        base_delta=base_delta,
        base_delta_ratio=base_delta_ratio,
        amm_total_value_usdt=amm_total_value_usdt,
        total_value_usdt=total_value_usdt,
    )
