"""Exposure reconciliation between the LP position and the futures hedge."""

from lph.engine.position.hedge import decide, format_quantity, round_to_step, should_hedge
from lph.engine.position.snapshot import (
    InvalidHolding,
    MissingMarkPrice,
    SnapshotError,
    build_amm_holding,
    build_snapshot,
    find_matching_position,
)
from lph.engine.position.token_mapping import MappedAmounts, UnsupportedPair, map_token_amounts

__all__ = [
    "decide",
    "format_quantity",
    "round_to_step",
    "should_hedge",
    "InvalidHolding",
    "MissingMarkPrice",
    "SnapshotError",
    "build_amm_holding",
    "build_snapshot",
    "find_matching_position",
    "MappedAmounts",
    "UnsupportedPair",
    "map_token_amounts",
]
