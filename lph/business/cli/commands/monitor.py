"""
Monitor Command - 对冲监控命令

- lph monitor: 轮询监控 → 决策 →（可选）下单 →（可选）推送
- lph status: 输出一次快照与决策
"""

import json
import logging
import sys
from decimal import Decimal, InvalidOperation
from typing import Optional

import click

from lph.business.config.hedge_config import ConfigError, HedgeConfig
from lph.business.config.notification_config import NotificationConfig
from lph.business.monitoring.data_bridge import HedgeDataBridge
from lph.business.monitoring.models import PriorState, TickResult
from lph.business.monitoring.pipeline import SKIPPABLE_ERRORS, HedgeMonitor
from lph.business.notification.channels.telegram import TelegramChannel
from lph.business.notification.dispatcher import MessageDispatcher
from lph.business.notification.formatters.snapshot_formatter import SnapshotFormatter
from lph.business.trading.executor import HedgeExecutor
from lph.data.providers.binance_provider import BinancePerpsClient
from lph.data.providers.uniswap_provider import UniswapV3PositionManager
from lph.engine.position.hedge import decide

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """配置日志"""
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def load_hedge_config(path: Optional[str]) -> HedgeConfig:
    """加载并校验对冲配置，失败时退出"""
    try:
        config = HedgeConfig.load(path)
        config.validate()
    except ConfigError as e:
        click.echo(f"❌ 配置错误: {e}", err=True)
        sys.exit(3)
    return config


def build_bridge(config: HedgeConfig, client: BinancePerpsClient) -> HedgeDataBridge:
    amm_source = UniswapV3PositionManager(config.rpc_url, config.position_manager)
    return HedgeDataBridge(amm_source, client, config)


@click.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="对冲配置文件路径",
)
@click.option(
    "--notify-config",
    type=click.Path(exists=True),
    help="通知配置文件路径",
)
@click.option(
    "--once",
    is_flag=True,
    help="只运行一个周期",
)
@click.option(
    "--interval",
    "-i",
    type=int,
    default=None,
    help="轮询间隔（秒），默认取配置",
)
@click.option(
    "--execute/--dry-run",
    default=None,
    help="是否实际下单（默认取配置 auto_execute）",
)
@click.option(
    "--push/--no-push",
    default=True,
    help="是否推送到 Telegram",
)
@click.option(
    "--reference-value",
    type=str,
    default=None,
    help="固定回撤参考值（USDT），默认使用高水位",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="显示详细日志",
)
def monitor(
    config: Optional[str],
    notify_config: Optional[str],
    once: bool,
    interval: Optional[int],
    execute: Optional[bool],
    push: bool,
    reference_value: Optional[str],
    verbose: bool,
) -> None:
    """运行 LP 对冲监控

    \b
    示例：
      # 单次运行，不下单
      lph monitor --once --dry-run

      # 每 60 秒轮询，自动下单并推送
      lph monitor -i 60 --execute --push
    """
    setup_logging(verbose)
    hedge_config = load_hedge_config(config)
    notification_config = NotificationConfig.load(notify_config)

    dry_run = not (execute if execute is not None else hedge_config.auto_execute)

    state = PriorState()
    if reference_value is not None:
        try:
            reference = Decimal(reference_value)
        except InvalidOperation:
            click.echo(f"❌ 参数错误: --reference-value 不是有效数字: {reference_value}", err=True)
            sys.exit(3)
        state = PriorState(reference_value=reference, track_high_water=False)

    client = BinancePerpsClient.from_env()
    dispatcher = None
    if push:
        channel = TelegramChannel.from_env()
        if not channel.is_available:
            click.echo("⚠️ Telegram 未配置，推送已关闭", err=True)
        else:
            dispatcher = MessageDispatcher(
                channel,
                notification_config,
                state=state,
                base_label=hedge_config.base_label,
            )

    hedge_monitor = HedgeMonitor(
        hedge_config,
        build_bridge(hedge_config, client),
        executor=HedgeExecutor(client, dry_run=dry_run),
        dispatcher=dispatcher,
        notification_config=notification_config,
        state=state,
    )

    mode = "DRY RUN" if dry_run else "LIVE"
    click.echo(f"🔍 LP 对冲监控 [{mode}] {hedge_config.symbol}")
    click.echo("-" * 50)

    if once:
        result = hedge_monitor.run_once()
        _output_text(result, hedge_config.base_label)
        sys.exit(3 if result.skipped else 0)

    try:
        hedge_monitor.run_forever(interval)
    except KeyboardInterrupt:
        click.echo("\n👋 监控已停止")


@click.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="对冲配置文件路径",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"]),
    default="text",
    help="输出格式",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="显示详细日志",
)
def status(config: Optional[str], output: str, verbose: bool) -> None:
    """输出当前快照与对冲决策（不下单、不推送）"""
    setup_logging(verbose)
    hedge_config = load_hedge_config(config)
    client = BinancePerpsClient.from_env()
    hedge_monitor = HedgeMonitor(hedge_config, build_bridge(hedge_config, client))

    try:
        snapshot = hedge_monitor.snapshot()
    except SKIPPABLE_ERRORS as e:
        click.echo(f"❌ 获取快照失败: {e}", err=True)
        sys.exit(3)

    action = decide(
        snapshot,
        hedge_config.base_delta_ratio_threshold,
        hedge_config.base_delta_threshold,
    )

    if output == "json":
        data = {
            "snapshot": snapshot.to_dict(),
            "action": {
                "type": action.action_type.value,
                "symbol": action.symbol,
                "quantity": action.quantity,
            },
        }
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        click.echo(SnapshotFormatter().format_snapshot(snapshot, hedge_config.base_label))
        click.echo()
        click.echo(f"🎯 决策: {action}")


def _output_text(result: TickResult, base_label: str) -> None:
    """文本格式输出单个周期"""
    if result.skipped:
        click.echo(f"⏭️ 周期跳过: {result.error}")
        return

    click.echo(SnapshotFormatter().format_snapshot(result.snapshot, base_label))
    click.echo()
    click.echo(f"🎯 决策: {result.action}")
    if result.order:
        click.echo(f"🛒 订单: {json.dumps(result.order, ensure_ascii=False, default=str)}")
    if result.error:
        click.echo(f"❌ {result.error}")
    if result.events:
        click.echo(f"📤 通知: {', '.join(e.kind.value for e in result.events)}")
