"""
CLI Main Entry Point - 命令行主入口

使用 Click 库构建命令行工具。
"""

import click

from lph import __version__
from lph.business.cli.commands.market import funding, positions
from lph.business.cli.commands.monitor import monitor, status
from lph.business.cli.commands.trade import close_short, open_sell


@click.group()
@click.version_option(version=__version__, prog_name="lph")
def cli() -> None:
    """LP 对冲系统 - 命令行工具

    提供敞口监控、对冲下单、资金费率与链上仓位查询。
    """
    pass


# 注册子命令
cli.add_command(monitor)
cli.add_command(status)
cli.add_command(open_sell)
cli.add_command(close_short)
cli.add_command(funding)
cli.add_command(positions)


if __name__ == "__main__":
    cli()
