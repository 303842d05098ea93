"""Tests for notification policy"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from lph.business.config.notification_config import DrawdownMode, NotificationPolicy
from lph.business.monitoring.models import NotificationKind, PriorState
from lph.business.monitoring.policy import calc_drawdown, evaluate
from lph.data.models import AmmHolding, FuturesHolding
from lph.engine.position.snapshot import build_snapshot

NOW = datetime(2024, 6, 1, 12, 0, 0)


def make_snapshot(amm_base="10", futures_position="-10", usdt="6000", mark="600", pnl="0"):
    return build_snapshot(
        AmmHolding(base_amount=Decimal(amm_base), usdt_amount=Decimal(usdt), block_number=1),
        FuturesHolding("BNBUSDT", Decimal(futures_position), Decimal(pnl), Decimal(mark)),
    )


@pytest.fixture
def policy():
    return NotificationPolicy(
        min_interval=timedelta(minutes=10),
        deviation_threshold=Decimal("0.1"),
        drawdown_threshold=Decimal("0.05"),
    )


def kinds(events):
    return [e.kind for e in events]


class TestPeriodic:
    """Tests for periodic notifications"""

    def test_first_run_always_periodic(self, policy):
        assert kinds(evaluate(make_snapshot(), policy, None, NOW)) == [NotificationKind.PERIODIC]

    def test_within_interval(self, policy):
        last = PriorState(periodic_sent_at=NOW - timedelta(minutes=9, seconds=59))

        assert evaluate(make_snapshot(), policy, last, NOW) == []

    def test_interval_boundary_is_inclusive(self, policy):
        last = PriorState(periodic_sent_at=NOW - timedelta(minutes=10))

        assert kinds(evaluate(make_snapshot(), policy, last, NOW)) == [NotificationKind.PERIODIC]


class TestExposureAlert:
    """Tests for exposure alerts"""

    def test_long_deviation(self, policy):
        last = PriorState(periodic_sent_at=NOW)
        events = evaluate(make_snapshot("12", "-10"), policy, last, NOW)

        assert kinds(events) == [NotificationKind.EXPOSURE_ALERT]
        assert events[0].breached_value == Decimal("2") / Decimal("12")
        assert events[0].threshold == Decimal("0.1")

    def test_short_deviation_uses_magnitude(self, policy):
        last = PriorState(periodic_sent_at=NOW)
        events = evaluate(make_snapshot("8", "-10"), policy, last, NOW)

        assert kinds(events) == [NotificationKind.EXPOSURE_ALERT]
        assert events[0].breached_value == Decimal("0.2")

    def test_threshold_is_strict(self, policy):
        last = PriorState(periodic_sent_at=NOW)

        # ratio exactly 0.1
        assert evaluate(make_snapshot("10", "-9"), policy, last, NOW) == []


class TestDrawdownAlert:
    """Tests for drawdown alerts"""

    def test_percent_drawdown(self, policy):
        # total = 10 * 600 + 6000 = 12000, reference 13000 -> 7.7% drawdown
        last = PriorState(periodic_sent_at=NOW, reference_value=Decimal("13000"))
        events = evaluate(make_snapshot(), policy, last, NOW)

        assert kinds(events) == [NotificationKind.DRAWDOWN_ALERT]
        assert events[0].breached_value == Decimal("1000") / Decimal("13000")

    def test_small_drawdown(self, policy):
        last = PriorState(periodic_sent_at=NOW, reference_value=Decimal("12500"))

        assert evaluate(make_snapshot(), policy, last, NOW) == []

    def test_unrealized_pnl_counts(self, policy):
        last = PriorState(periodic_sent_at=NOW, reference_value=Decimal("12000"))

        events = evaluate(make_snapshot(pnl="-700"), policy, last, NOW)

        assert kinds(events) == [NotificationKind.DRAWDOWN_ALERT]

    def test_no_reference(self, policy):
        last = PriorState(periodic_sent_at=NOW)

        assert evaluate(make_snapshot(pnl="-5000"), policy, last, NOW) == []

    def test_disabled(self):
        policy = NotificationPolicy(drawdown_threshold=None)
        last = PriorState(periodic_sent_at=NOW, reference_value=Decimal("100000"))

        assert evaluate(make_snapshot(), policy, last, NOW) == []

    def test_absolute_mode(self):
        policy = NotificationPolicy(
            drawdown_threshold=Decimal("500"), drawdown_mode=DrawdownMode.ABSOLUTE
        )
        last = PriorState(periodic_sent_at=NOW, reference_value=Decimal("12600"))

        events = evaluate(make_snapshot(), policy, last, NOW)

        assert kinds(events) == [NotificationKind.DRAWDOWN_ALERT]
        assert events[0].breached_value == Decimal("600")


class TestEvaluate:
    """Tests for combined evaluation"""

    def test_all_conditions_in_order(self, policy):
        events = evaluate(
            make_snapshot("12", "-10", pnl="-2000"),
            policy,
            PriorState(reference_value=Decimal("20000")),
            NOW,
        )

        assert kinds(events) == [
            NotificationKind.PERIODIC,
            NotificationKind.EXPOSURE_ALERT,
            NotificationKind.DRAWDOWN_ALERT,
        ]
        assert all(e.snapshot.symbol == "BNBUSDT" for e in events)

    def test_deterministic_and_stateless(self, policy):
        last = PriorState(periodic_sent_at=NOW - timedelta(hours=1), reference_value=Decimal("15000"))
        snapshot = make_snapshot("12", "-10")

        first = evaluate(snapshot, policy, last, NOW)
        second = evaluate(snapshot, policy, last, NOW)

        assert first == second
        assert last.periodic_sent_at == NOW - timedelta(hours=1)


class TestCalcDrawdown:
    """Tests for calc_drawdown"""

    def test_gain_is_negative(self):
        assert calc_drawdown(Decimal("110"), Decimal("100"), DrawdownMode.PERCENT) == Decimal("-0.1")

    def test_non_positive_reference(self):
        assert calc_drawdown(Decimal("10"), Decimal("0"), DrawdownMode.PERCENT) is None
        assert calc_drawdown(Decimal("10"), Decimal("0"), DrawdownMode.ABSOLUTE) == Decimal("-10")


class TestPriorState:
    """Tests for PriorState reference tracking"""

    def test_high_water_mark(self):
        state = PriorState()
        state.update_reference(Decimal("100"))
        state.update_reference(Decimal("120"))
        state.update_reference(Decimal("90"))

        assert state.reference_value == Decimal("120")

    def test_fixed_reference(self):
        state = PriorState(reference_value=Decimal("100"), track_high_water=False)
        state.update_reference(Decimal("150"))

        assert state.reference_value == Decimal("100")
