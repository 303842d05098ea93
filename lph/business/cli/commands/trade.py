"""
Trade Command - 手动下单命令

- lph open-sell SYMBOL AMOUNT: 卖一价挂 SELL 限价单（加空）
- lph close-short SYMBOL AMOUNT: 买一价挂 reduceOnly BUY 限价单（减空）
"""

import json
import logging
import sys

import click

from lph.business.cli.commands.monitor import setup_logging
from lph.business.trading.executor import HedgeExecutor
from lph.data.providers.base import ProviderError
from lph.data.providers.binance_provider import BinancePerpsClient
from lph.engine.models import HedgeAction

logger = logging.getLogger(__name__)


def _run_order(action: HedgeAction, dry_run: bool, yes: bool) -> None:
    if not dry_run and not yes:
        click.confirm(f"确认下单 {action}?", abort=True)

    executor = HedgeExecutor(BinancePerpsClient.from_env(), dry_run=dry_run)
    try:
        order = executor.execute(action)
    except ProviderError as e:
        click.echo(f"❌ 下单失败: {e}", err=True)
        sys.exit(3)

    click.echo(json.dumps(order, indent=2, ensure_ascii=False, default=str))


@click.command("open-sell")
@click.argument("symbol")
@click.argument("amount")
@click.option("--dry-run", is_flag=True, help="仅打印订单，不下单")
@click.option("--yes", "-y", is_flag=True, help="跳过确认")
@click.option("--verbose", "-v", is_flag=True, help="显示详细日志")
def open_sell(symbol: str, amount: str, dry_run: bool, yes: bool, verbose: bool) -> None:
    """加空：以卖一价挂 SELL 限价单

    \b
    示例：
      lph open-sell BNBUSDT 0.1
    """
    setup_logging(verbose)
    _run_order(HedgeAction.open_sell(symbol.upper(), amount), dry_run, yes)


@click.command("close-short")
@click.argument("symbol")
@click.argument("amount")
@click.option("--dry-run", is_flag=True, help="仅打印订单，不下单")
@click.option("--yes", "-y", is_flag=True, help="跳过确认")
@click.option("--verbose", "-v", is_flag=True, help="显示详细日志")
def close_short(symbol: str, amount: str, dry_run: bool, yes: bool, verbose: bool) -> None:
    """减空：以买一价挂 reduceOnly BUY 限价单

    \b
    示例：
      lph close-short BNBUSDT 0.1
    """
    setup_logging(verbose)
    _run_order(HedgeAction.close_sell(symbol.upper(), amount), dry_run, yes)
