#!/usr/bin/env python3
"""Hedge Engine Demo.

Runs the snapshot builder, hedge decision and notification policy on
offline sample holdings. No RPC or exchange access is needed.
"""

import argparse
import logging
from datetime import datetime, timedelta
from decimal import Decimal

from lph.business.config.notification_config import NotificationPolicy
from lph.business.monitoring.models import PriorState
from lph.business.monitoring.policy import evaluate
from lph.business.notification.formatters.snapshot_formatter import SnapshotFormatter
from lph.data.models import AmmHolding, FuturesHolding
from lph.engine.position import SnapshotError, build_snapshot, decide

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# (label, amm BASE, futures position, mark price)
SCENARIOS = [
    ("hedged", "10", "-10", "600"),
    ("long imbalance", "12", "-10", "600"),
    ("short imbalance", "8", "-10", "600"),
    ("no mark price", "10", "-10", "0"),
]


def make_holdings(amm_base: str, futures_position: str, mark_price: str):
    amm = AmmHolding(
        base_amount=Decimal(amm_base),
        usdt_amount=Decimal("6000"),
        collectable_base=Decimal("0.02"),
        collectable_usdt=Decimal("4.5"),
        block_number=45_000_000,
    )
    fut = FuturesHolding(
        symbol="BNBUSDT",
        position_amt=Decimal(futures_position),
        unrealized_pnl=Decimal("-8.25"),
        mark_price=Decimal(mark_price),
        update_time=1_717_243_200_000,
    )
    return amm, fut


def demo_decisions(n: Decimal, m: Decimal):
    """Demonstrate snapshot building and hedge decisions."""
    logger.info("=" * 60)
    logger.info(f"Hedge Decisions (n={n}, m={m})")
    logger.info("=" * 60)

    for label, amm_base, fut_pos, mark in SCENARIOS:
        try:
            snapshot = build_snapshot(*make_holdings(amm_base, fut_pos, mark))
        except SnapshotError as e:
            logger.info(f"[{label}] tick skipped: {type(e).__name__}: {e}")
            continue

        action = decide(snapshot, n, m)
        logger.info(
            f"[{label}] delta={snapshot.base_delta} ratio={snapshot.base_delta_ratio:.4f} "
            f"total={snapshot.total_value_usdt} -> {action}"
        )


def demo_notifications():
    """Demonstrate the notification policy over a few ticks."""
    logger.info("\n" + "=" * 60)
    logger.info("Notification Policy")
    logger.info("=" * 60)

    policy = NotificationPolicy(drawdown_threshold=Decimal("0.05"))
    state = PriorState()
    now = datetime(2024, 6, 1, 12, 0)
    formatter = SnapshotFormatter()

    for minutes, mark in [(0, "600"), (3, "560"), (12, "520")]:
        tick = now + timedelta(minutes=minutes)
        snapshot = build_snapshot(*make_holdings("12", "-10", mark))
        events = evaluate(snapshot, policy, state, tick)
        logger.info(f"{tick:%H:%M} mark={mark}: {[e.kind.value for e in events] or 'none'}")
        for event in events:
            if event.kind.is_alert:
                title, content = formatter.format_event(event, "BNB")
                logger.info(f"   {title}: {content.splitlines()[0]}")
        if any(not e.kind.is_alert for e in events):
            state.periodic_sent_at = tick
        state.update_reference(snapshot.total_value_usdt)


def main():
    """Run all demos."""
    parser = argparse.ArgumentParser(description="Hedge Engine Demo")
    parser.add_argument(
        "--module",
        choices=["decisions", "notifications", "all"],
        default="all",
        help="Which module to demo",
    )
    parser.add_argument("-n", default="0.05", help="base_delta_ratio threshold")
    parser.add_argument("-m", default="1", help="base_delta threshold / step size")
    args = parser.parse_args()

    logger.info("LP Hedge - Engine Demo")

    if args.module in ("decisions", "all"):
        demo_decisions(Decimal(args.n), Decimal(args.m))

    if args.module in ("notifications", "all"):
        demo_notifications()

    logger.info("\n" + "=" * 60)
    logger.info("Demo completed!")


if __name__ == "__main__":
    main()
