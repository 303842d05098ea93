"""
Configuration - 配置管理

- hedge_config: 账户、交易对、对冲阈值
- notification_config: 通知策略与调度参数
"""

from lph.business.config.hedge_config import ConfigError, HedgeConfig
from lph.business.config.notification_config import (
    DrawdownMode,
    NotificationConfig,
    NotificationPolicy,
    SilentHours,
)

__all__ = [
    "ConfigError",
    "HedgeConfig",
    "DrawdownMode",
    "NotificationConfig",
    "NotificationPolicy",
    "SilentHours",
]
