"""Hedge action model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class HedgeActionType(str, Enum):
    """Hedge adjustment direction."""

    NONE = "none"
    OPEN_SELL = "open_sell"  # on-chain BASE exceeds the short: increase the short
    CLOSE_SELL = "close_sell"  # short exceeds on-chain BASE: reduce the short


@dataclass(frozen=True)
class HedgeAction:
    """Decision produced for one snapshot.

    Attributes:
        action_type: Direction of the adjustment.
        symbol: Futures symbol (None for NONE).
        quantity: Order quantity as a decimal string rounded to the step size
            (None for NONE).
    """

    action_type: HedgeActionType = HedgeActionType.NONE
    symbol: str | None = None
    quantity: str | None = None

    @classmethod
    def none(cls) -> "HedgeAction":
        return cls()

    @classmethod
    def open_sell(cls, symbol: str, quantity: str) -> "HedgeAction":
        return cls(HedgeActionType.OPEN_SELL, symbol, quantity)

    @classmethod
    def close_sell(cls, symbol: str, quantity: str) -> "HedgeAction":
        return cls(HedgeActionType.CLOSE_SELL, symbol, quantity)

    @property
    def is_none(self) -> bool:
        return self.action_type == HedgeActionType.NONE

    def __str__(self) -> str:
        if self.is_none:
            return "HedgeAction(NONE)"
        return f"HedgeAction({self.action_type.value} {self.symbol} qty={self.quantity})"
