"""
Notification Configuration - 通知配置管理

两部分：
- NotificationPolicy: 通知触发策略（纯阈值，供 policy.evaluate 使用）
- NotificationConfig: 策略 + 调度参数（去重窗口、静默时段、消息模板）

## 触发条件

| 事件           | 条件                                                   |
|----------------|--------------------------------------------------------|
| PERIODIC       | 距上次定期推送 >= min_interval（首次总是推送）          |
| EXPOSURE_ALERT | abs(base_delta_ratio) > deviation_threshold            |
| DRAWDOWN_ALERT | 总价值相对参考值回撤 > drawdown_threshold（可选）       |
"""

from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml

DEFAULT_CONFIG_PATH = (
    Path(__file__).parent.parent.parent.parent / "config" / "notification" / "telegram.yaml"
)


class DrawdownMode(str, Enum):
    """回撤计算方式"""

    ABSOLUTE = "absolute"  # reference - total (USDT)
    PERCENT = "percent"  # (reference - total) / reference


@dataclass(frozen=True)
class NotificationPolicy:
    """通知触发策略

    Attributes:
        min_interval: 定期推送最小间隔
        deviation_threshold: abs(base_delta_ratio) 预警阈值
        drawdown_threshold: 回撤预警阈值，None 表示关闭回撤预警
        drawdown_mode: 回撤计算方式
    """

    min_interval: timedelta = timedelta(minutes=10)
    deviation_threshold: Decimal = Decimal("0.1")
    drawdown_threshold: Optional[Decimal] = None
    drawdown_mode: DrawdownMode = DrawdownMode.PERCENT


@dataclass
class SilentHours:
    """静默时段（跨午夜时 start > end）"""

    enabled: bool = False
    start: str = "23:00"
    end: str = "07:00"


@dataclass
class NotificationConfig:
    """通知配置"""

    policy: NotificationPolicy = field(default_factory=NotificationPolicy)

    # 同一预警持续存在时，重复推送的最小间隔（秒）
    dedup_window: int = 1800
    silent_hours: SilentHours = field(default_factory=SilentHours)

    # 消息模板
    templates: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NotificationConfig":
        """从字典创建配置"""
        config = cls()

        if "policy" in data:
            p = data["policy"] or {}
            default = NotificationPolicy()
            drawdown = p.get("drawdown_threshold")
            config.policy = NotificationPolicy(
                min_interval=timedelta(
                    seconds=p.get("min_interval", default.min_interval.total_seconds())
                ),
                deviation_threshold=Decimal(
                    str(p.get("deviation_threshold", default.deviation_threshold))
                ),
                drawdown_threshold=Decimal(str(drawdown)) if drawdown is not None else None,
                drawdown_mode=DrawdownMode(p.get("drawdown_mode", default.drawdown_mode.value)),
            )

        if "rate_limit" in data:
            rl = data["rate_limit"] or {}
            config.dedup_window = rl.get("dedup_window", config.dedup_window)
            silent = rl.get("silent_hours", {})
            config.silent_hours = SilentHours(
                enabled=silent.get("enabled", False),
                start=silent.get("start", "23:00"),
                end=silent.get("end", "07:00"),
            )

        if "templates" in data:
            config.templates = dict(data["templates"] or {})

        return config

    @classmethod
    def from_yaml(cls, path: str | Path) -> "NotificationConfig":
        """从 YAML 文件加载配置"""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def load(cls, path: str | Path | None = None) -> "NotificationConfig":
        """加载默认配置"""
        config_file = Path(path) if path else DEFAULT_CONFIG_PATH
        if config_file.exists():
            return cls.from_yaml(config_file)
        return cls()
