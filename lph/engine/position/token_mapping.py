"""Token order normalization.

A pool stores its tokens as (token0, token1) sorted by address, so whether
BASE is token0 or token1 depends on the chain. The mapping is done here, once,
by address comparison.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class MappedAmounts:
    """Amounts reordered as (BASE, USDT)."""

    base: int
    usdt: int


@dataclass(frozen=True)
class UnsupportedPair:
    """The pool's token pair is not the configured BASE/USDT pair."""

    token0: str
    token1: str


TokenMappingResult = Union[MappedAmounts, UnsupportedPair]


def _same_address(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def is_pair(token0: str, token1: str, base_token: str, usdt_token: str) -> bool:
    """Whether (token0, token1) is the BASE/USDT pair in either order."""
    return (_same_address(token0, base_token) and _same_address(token1, usdt_token)) or (
        _same_address(token0, usdt_token) and _same_address(token1, base_token)
    )


def map_token_amounts(
    token0: str,
    token1: str,
    amounts: tuple[int, int],
    base_token: str,
    usdt_token: str,
) -> TokenMappingResult:
    """Map (amount0, amount1) to (BASE, USDT).

    Args:
        token0: Pool token0 address.
        token1: Pool token1 address.
        amounts: (amount0, amount1) in pool order.
        base_token: BASE token address.
        usdt_token: USDT token address.

    Returns:
        MappedAmounts, or UnsupportedPair if the pool is not BASE/USDT.
    """
    if not is_pair(token0, token1, base_token, usdt_token) or _same_address(base_token, usdt_token):
        return UnsupportedPair(token0=token0, token1=token1)

    amount0, amount1 = amounts
    if _same_address(token0, base_token):
        return MappedAmounts(base=amount0, usdt=amount1)
    return MappedAmounts(base=amount1, usdt=amount0)
