"""
Market Command - 行情与链上仓位查询

- lph funding SYMBOL: 最近资金费率
- lph positions: 列出 owner 的全部 Uniswap V3 仓位
"""

import logging
import sys
from decimal import Decimal
from typing import Optional

import click

from lph.business.cli.commands.monitor import setup_logging
from lph.business.config.hedge_config import ConfigError, HedgeConfig
from lph.data.providers.base import ProviderError
from lph.data.providers.binance_provider import BinancePerpsClient
from lph.data.providers.uniswap_provider import UniswapV3PositionManager
from lph.data.utils import to_decimal

logger = logging.getLogger(__name__)


@click.command()
@click.argument("symbol")
@click.option("--limit", "-n", type=int, default=10, help="返回条数")
@click.option("--verbose", "-v", is_flag=True, help="显示详细日志")
def funding(symbol: str, limit: int, verbose: bool) -> None:
    """查询最近资金费率

    \b
    示例：
      lph funding BNBUSDT -n 5
    """
    setup_logging(verbose)
    client = BinancePerpsClient.from_env()
    try:
        rates = client.get_funding_rates(symbol.upper(), limit=limit)
    except ProviderError as e:
        click.echo(f"❌ 查询失败: {e}", err=True)
        sys.exit(3)

    if not rates:
        click.echo("无资金费率记录")
        return

    click.echo(f"💰 {symbol.upper()} 资金费率")
    click.echo("-" * 60)
    for rate in rates:
        mark = f"{rate.mark_price}" if rate.mark_price is not None else "-"
        click.echo(
            f"{rate.funding_datetime:%Y-%m-%d %H:%M} UTC  "
            f"{rate.funding_rate * 100:+.4f}%  mark={mark}"
        )

    average = sum((r.funding_rate for r in rates), Decimal(0)) / len(rates)
    click.echo("-" * 60)
    click.echo(f"平均: {average * 100:+.4f}%")


@click.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="对冲配置文件路径",
)
@click.option("--owner", type=str, default=None, help="仓位持有地址，默认取配置")
@click.option("--verbose", "-v", is_flag=True, help="显示详细日志")
def positions(config: Optional[str], owner: Optional[str], verbose: bool) -> None:
    """列出 owner 的 Uniswap V3 仓位"""
    setup_logging(verbose)
    try:
        hedge_config = HedgeConfig.load(config)
    except ConfigError as e:
        click.echo(f"❌ 配置错误: {e}", err=True)
        sys.exit(3)
    owner = owner or hedge_config.owner
    if not (owner and hedge_config.rpc_url and hedge_config.position_manager):
        click.echo("❌ 需要配置 owner / rpc_url / position_manager", err=True)
        sys.exit(3)

    reader = UniswapV3PositionManager(hedge_config.rpc_url, hedge_config.position_manager)
    try:
        block = reader.get_block_number()
        items = reader.list_positions(owner, block)
    except ProviderError as e:
        click.echo(f"❌ 读取失败: {e}", err=True)
        sys.exit(3)

    decimals = hedge_config.token_decimals
    click.echo(f"📋 {owner} @ block {block}: {len(items)} 个仓位")
    for p in items:
        click.echo("-" * 60)
        click.echo(f"#{p.token_id}  liquidity={p.liquidity}")
        click.echo(f"  token0 {p.token0}")
        click.echo(
            f"    withdrawable={to_decimal(p.withdrawable_amount0, decimals)} "
            f"collectable={to_decimal(p.collectable_amount0, decimals)}"
        )
        click.echo(f"  token1 {p.token1}")
        click.echo(
            f"    withdrawable={to_decimal(p.withdrawable_amount1, decimals)} "
            f"collectable={to_decimal(p.collectable_amount1, decimals)}"
        )
