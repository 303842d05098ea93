"""Data layer utilities."""

from lph.data.utils.units import UNISWAP_TOKEN_DECIMALS, to_decimal

__all__ = ["UNISWAP_TOKEN_DECIMALS", "to_decimal"]
