"""
CLI Commands - 命令行子命令
"""

from lph.business.cli.commands.market import funding, positions
from lph.business.cli.commands.monitor import monitor, status
from lph.business.cli.commands.trade import close_short, open_sell

__all__ = ["monitor", "status", "open_sell", "close_short", "funding", "positions"]
