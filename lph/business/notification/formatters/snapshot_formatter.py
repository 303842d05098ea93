"""
Snapshot Formatter - 快照消息格式化器

将 MonitoringSnapshot / NotificationEvent 格式化为 (title, content) 纯文本。
金额仅在展示时截断精度，不影响计算。
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from lph.business.config.notification_config import DrawdownMode
from lph.business.monitoring.models import NotificationEvent, NotificationKind
from lph.engine.models import HedgeAction, MonitoringSnapshot

# 展示精度
AMOUNT_PLACES = Decimal("0.0001")
VALUE_PLACES = Decimal("0.01")


def fmt(value: Decimal, places: Decimal = AMOUNT_PLACES) -> str:
    """格式化 Decimal，固定小数位"""
    return str(value.quantize(places, rounding=ROUND_HALF_UP))


def fmt_pct(value: Decimal) -> str:
    """格式化比例为百分数"""
    return f"{fmt(value * 100, VALUE_PLACES)}%"


class SnapshotFormatter:
    """快照格式化器

    Usage:
        formatter = SnapshotFormatter(templates)
        title, content = formatter.format_event(event, "BNB")
    """

    DEFAULT_TITLES = {
        NotificationKind.PERIODIC: "📊 LP 对冲监控",
        NotificationKind.EXPOSURE_ALERT: "⚠️ 敞口偏离预警",
        NotificationKind.DRAWDOWN_ALERT: "🔻 回撤预警",
    }

    TEMPLATE_KEYS = {
        NotificationKind.PERIODIC: "periodic_title",
        NotificationKind.EXPOSURE_ALERT: "exposure_title",
        NotificationKind.DRAWDOWN_ALERT: "drawdown_title",
    }

    def __init__(
        self,
        templates: Optional[dict[str, str]] = None,
        drawdown_mode: DrawdownMode = DrawdownMode.PERCENT,
    ) -> None:
        self.templates = templates or {}
        self.drawdown_mode = drawdown_mode

    def title_for(self, kind: NotificationKind) -> str:
        return self.templates.get(self.TEMPLATE_KEYS[kind], self.DEFAULT_TITLES[kind])

    def format_snapshot(self, snapshot: MonitoringSnapshot, base_label: str = "BASE") -> str:
        """格式化快照正文"""
        lines = [
            f"Block: {snapshot.block_number}",
            f"Symbol: {snapshot.symbol}",
            f"{base_label} Price: {fmt(snapshot.base_price_usdt)} USDT",
            "",
            "[AMM]",
            f"{base_label}: {fmt(snapshot.amm_base_amount)}",
            f"USDT: {fmt(snapshot.amm_usdt_amount, VALUE_PLACES)}",
            f"Fees: {fmt(snapshot.amm_collectable_base)} {base_label} + "
            f"{fmt(snapshot.amm_collectable_usdt, VALUE_PLACES)} USDT "
            f"(≈ {fmt(snapshot.amm_collectable_value_usdt, VALUE_PLACES)} USDT)",
            f"Value: {fmt(snapshot.amm_total_value_usdt, VALUE_PLACES)} USDT",
            "",
            "[Futures]",
            f"Position: {fmt(snapshot.futures_position)} {base_label}",
            f"Unrealized PnL: {fmt(snapshot.unrealized_pnl, VALUE_PLACES)} USDT",
            f"Updated: {snapshot.futures_datetime:%Y-%m-%d %H:%M:%S} UTC",
            "",
            "[Exposure]",
            f"{base_label} Delta: {fmt(snapshot.base_delta)}",
            f"Delta Ratio: {fmt_pct(snapshot.base_delta_ratio)}",
            f"Total Value: {fmt(snapshot.total_value_usdt, VALUE_PLACES)} USDT",
        ]
        return "\n".join(lines)

    def format_event(
        self,
        event: NotificationEvent,
        base_label: str = "BASE",
    ) -> tuple[str, str]:
        """格式化通知事件

        Returns:
            (title, content)
        """
        title = self.title_for(event.kind)
        body = self.format_snapshot(event.snapshot, base_label)

        if event.kind == NotificationKind.EXPOSURE_ALERT:
            header = (
                f"敞口偏离 {fmt_pct(event.breached_value)} "
                f"> 阈值 {fmt_pct(event.threshold)}"
            )
            return title, f"{header}\n\n{body}"

        if event.kind == NotificationKind.DRAWDOWN_ALERT:
            if self.drawdown_mode == DrawdownMode.PERCENT:
                header = (
                    f"回撤 {fmt_pct(event.breached_value)} "
                    f"> 阈值 {fmt_pct(event.threshold)}"
                )
            else:
                header = (
                    f"回撤 {fmt(event.breached_value, VALUE_PLACES)} USDT "
                    f"> 阈值 {fmt(event.threshold, VALUE_PLACES)} USDT"
                )
            return title, f"{header}\n\n{body}"

        return title, body

    def format_action(self, action: HedgeAction, order: Optional[dict] = None) -> tuple[str, str]:
        """格式化下单通知"""
        title = self.templates.get("order_title", "🛒 对冲下单")
        content = f"{action.action_type.value}: {action.symbol} qty={action.quantity}"
        if order:
            if order.get("dry_run"):
                content += "\n(dry run, 未实际下单)"
            else:
                content += f"\norderId={order.get('orderId')} status={order.get('status')}"
        return title, content
