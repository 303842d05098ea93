"""On-chain unit conversion.

Token amounts are read as integers scaled by ``10 ** decimals``. Conversion
goes straight to ``Decimal`` so no binary rounding enters the snapshot.
"""

from decimal import Decimal

# Both pool tokens are treated as 18-decimal tokens.
UNISWAP_TOKEN_DECIMALS = 18


def to_decimal(raw: int, decimals: int = UNISWAP_TOKEN_DECIMALS) -> Decimal:
    """Convert a raw integer token amount to a decimal value.

    Args:
        raw: Amount in the token's smallest unit.
        decimals: Number of fractional digits of the token.

    Returns:
        Exact decimal amount, e.g. ``to_decimal(1500000000000000000) == Decimal("1.5")``.

    Raises:
        ValueError: If ``raw`` or ``decimals`` is negative.
    """
    if raw < 0:
        raise ValueError(f"Token amount must be non-negative, got {raw}")
    if decimals < 0:
        raise ValueError(f"Token decimals must be non-negative, got {decimals}")
    return Decimal(int(raw)).scaleb(-decimals)
