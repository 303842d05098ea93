"""Hedge decision engine.

Given one snapshot and thresholds (n, m):

    trigger   : |base_delta_ratio| > n  and  |base_delta| > m   (both strict)
    quantity  : |base_delta| rounded half-up to a multiple of m
    direction : base_delta > 0 -> OPEN_SELL, base_delta < 0 -> CLOSE_SELL

``m`` is both the minimum absolute imbalance and the order step size. The
decision has no memory; a minimum re-trigger interval is the caller's job.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from lph.engine.models.hedge import HedgeAction
from lph.engine.models.snapshot import MonitoringSnapshot


def _as_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so 0.05 becomes Decimal("0.05"), not its binary expansion
    return Decimal(str(value))


def round_to_step(value: Decimal, step: Decimal) -> Decimal:
    """Round ``value`` to the nearest multiple of ``step`` (ties away from zero).

    Non-positive steps leave the value unchanged.
    """
    if step <= 0:
        return value
    steps = (value / step).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return steps * step


def quantity_precision(step: Decimal) -> int:
    """Fractional digits implied by a step size (1 -> 0, 0.01 -> 2, 0.25 -> 2)."""
    if step <= 0 or step >= 1:
        return 0
    return max(0, -step.normalize().as_tuple().exponent)


def format_quantity(quantity: Decimal, step: Decimal) -> str:
    """Render an order quantity with the step's precision."""
    if step <= 0:
        return format(quantity.normalize(), "f")
    places = quantity_precision(step)
    return format(quantity.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP), "f")


def should_hedge(snapshot: MonitoringSnapshot, n: Decimal, m: Decimal) -> bool:
    """Whether both trigger thresholds are strictly exceeded."""
    return abs(snapshot.base_delta_ratio) > n and abs(snapshot.base_delta) > m


def decide(
    snapshot: MonitoringSnapshot,
    n: Decimal | int | float | str,
    m: Decimal | int | float | str,
) -> HedgeAction:
    """Decide the hedge adjustment for one snapshot.

    Args:
        snapshot: Snapshot of the current tick.
        n: Threshold on |base_delta_ratio|.
        m: Threshold on |base_delta|, also the quantity step size.

    Returns:
        HedgeAction; NONE when not triggered or when base_delta is zero.
    """
    n = _as_decimal(n)
    m = _as_decimal(m)

    if not should_hedge(snapshot, n, m):
        return HedgeAction.none()

    value = snapshot.base_delta
    if value == 0:
        return HedgeAction.none()

    quantity = format_quantity(round_to_step(abs(value), m), m)

    if value > 0:
        return HedgeAction.open_sell(snapshot.symbol, quantity)
    return HedgeAction.close_sell(snapshot.symbol, quantity)
