"""
Hedge Configuration - 对冲配置管理

加载 LP 对冲监控的配置参数：账户地址、交易对、触发阈值、轮询间隔。

## 阈值说明

| 参数                         | 默认值 | 说明                                        |
|------------------------------|--------|---------------------------------------------|
| base_delta_ratio_threshold n | 0.05   | abs(base_delta_ratio) > n 才触发调仓        |
| base_delta_threshold m       | 0.1    | abs(base_delta) > m 才触发调仓，同时为下单步长 |

优先级: 环境变量 (LPH_*) > YAML 文件 > dataclass 默认值
"""

import logging
import os
from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "lph" / "hedge.yaml"


class ConfigError(Exception):
    """配置缺失或非法"""

    pass


@dataclass
class HedgeConfig:
    """对冲配置

    Usage:
        config = HedgeConfig.load()
        n = config.base_delta_ratio_threshold
        m = config.base_delta_threshold
    """

    # === 账户 ===
    owner: str = ""  # LP 仓位所有者地址
    position_manager: str = ""  # NonfungiblePositionManager 合约地址
    rpc_url: str = ""

    # === 交易对 (默认 BSC 上的 BNB/USDT) ===
    symbol: str = "BNBUSDT"
    base_label: str = "BNB"
    base_token_address: str = "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c"  # WBNB
    usdt_token_address: str = "0x55d398326f99059fF775485246999027B3197955"  # USDT (BSC)
    token_decimals: int = 18

    # === 触发阈值 ===
    base_delta_ratio_threshold: Decimal = Decimal("0.05")  # n
    base_delta_threshold: Decimal = Decimal("0.1")  # m, 也是下单步长

    # === 运行 ===
    poll_interval: int = 90  # 秒
    auto_execute: bool = False  # False 时只记录决策，不下单

    _ENV_PREFIX = "LPH_"

    _DECIMAL_FIELDS = {"base_delta_ratio_threshold", "base_delta_threshold"}
    _INT_FIELDS = {"token_decimals", "poll_interval"}
    _BOOL_FIELDS = {"auto_execute"}

    # YAML 分组 -> 字段
    _SECTIONS = ("account", "pair", "hedge", "monitor")

    @classmethod
    def _coerce(cls, name: str, value: Any) -> Any:
        """按字段类型转换配置值"""
        if name in cls._DECIMAL_FIELDS:
            try:
                return Decimal(str(value))
            except InvalidOperation as e:
                raise ConfigError(f"Invalid decimal for {name}: {value!r}") from e
        if name in cls._INT_FIELDS:
            try:
                return int(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid integer for {name}: {value!r}") from e
        if name in cls._BOOL_FIELDS:
            if isinstance(value, bool):
                return value
            return str(value).lower() in ("true", "1", "yes")
        return str(value).strip()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HedgeConfig":
        """从字典创建配置

        支持分组格式 (account/pair/hedge/monitor) 和扁平格式，
        缺失字段使用 dataclass 默认值。
        """
        flat: dict[str, Any] = {}
        for key, value in data.items():
            if key in cls._SECTIONS and isinstance(value, dict):
                flat.update(value)
            else:
                flat[key] = value

        valid_fields = {f.name for f in fields(cls)}
        unknown = set(flat) - valid_fields
        if unknown:
            logger.warning(f"Ignoring unknown hedge config keys: {sorted(unknown)}")

        kwargs = {k: cls._coerce(k, v) for k, v in flat.items() if k in valid_fields and v is not None}
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "HedgeConfig":
        """从 YAML 文件加载配置"""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def load(cls, path: str | Path | None = None) -> "HedgeConfig":
        """加载配置

        优先级: 环境变量 > YAML 文件 > dataclass 字段默认值
        环境变量命名规则: LPH_ + 字段名大写，如 LPH_SYMBOL
        """
        config_file = Path(path) if path else DEFAULT_CONFIG_PATH
        config = cls.from_yaml(config_file) if config_file.exists() else cls()
        return config.with_env_overrides()

    def with_env_overrides(self) -> "HedgeConfig":
        """应用 LPH_* 环境变量覆盖"""
        load_dotenv()
        for f in fields(self):
            val = os.getenv(f"{self._ENV_PREFIX}{f.name.upper()}")
            if val is not None:
                setattr(self, f.name, self._coerce(f.name, val))
        return self

    def validate(self) -> None:
        """检查实盘运行所需字段

        Raises:
            ConfigError: 缺少必填字段或阈值非法
        """
        missing = [name for name in ("owner", "position_manager", "rpc_url", "symbol") if not getattr(self, name)]
        if missing:
            raise ConfigError(
                f"Missing hedge config: {', '.join(missing)} "
                f"(set in YAML or via {self._ENV_PREFIX}<FIELD> env vars)"
            )
        if self.base_delta_ratio_threshold < 0:
            raise ConfigError("base_delta_ratio_threshold must be non-negative")
        if self.base_delta_threshold <= 0:
            raise ConfigError("base_delta_threshold must be positive (it is also the order step size)")
        if self.poll_interval <= 0:
            raise ConfigError("poll_interval must be positive")

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = str(value) if isinstance(value, Decimal) else value
        return result
