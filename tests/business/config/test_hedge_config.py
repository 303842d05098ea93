"""Tests for hedge configuration"""

from decimal import Decimal

import pytest

from lph.business.config.hedge_config import ConfigError, HedgeConfig

YAML_TEXT = """
account:
  owner: "0x1111111111111111111111111111111111111111"
  position_manager: "0x46A15B0b27311cedF172AB29E4f4766fbE7F4364"
  rpc_url: "https://bsc.rpc.test"

pair:
  symbol: BNBUSDT
  base_label: BNB

hedge:
  base_delta_ratio_threshold: 0.08
  base_delta_threshold: 0.25
  auto_execute: true

monitor:
  poll_interval: 60
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "hedge.yaml"
    path.write_text(YAML_TEXT, encoding="utf-8")
    return path


class TestHedgeConfig:
    """Tests for HedgeConfig"""

    def test_defaults(self):
        config = HedgeConfig()

        assert config.symbol == "BNBUSDT"
        assert config.base_delta_ratio_threshold == Decimal("0.05")
        assert config.base_delta_threshold == Decimal("0.1")
        assert config.poll_interval == 90
        assert config.auto_execute is False

    def test_from_yaml_sections(self, config_file):
        config = HedgeConfig.from_yaml(config_file)

        assert config.owner == "0x1111111111111111111111111111111111111111"
        assert config.rpc_url == "https://bsc.rpc.test"
        assert config.base_delta_ratio_threshold == Decimal("0.08")
        assert config.base_delta_threshold == Decimal("0.25")
        assert config.auto_execute is True
        assert config.poll_interval == 60

    def test_thresholds_are_exact_decimals(self):
        config = HedgeConfig.from_dict({"base_delta_ratio_threshold": 0.1})

        assert config.base_delta_ratio_threshold == Decimal("0.1")

    def test_flat_dict_and_unknown_keys(self):
        config = HedgeConfig.from_dict({"symbol": "ETHUSDT", "unknown_key": 1})

        assert config.symbol == "ETHUSDT"

    def test_invalid_decimal(self):
        with pytest.raises(ConfigError):
            HedgeConfig.from_dict({"base_delta_threshold": "abc"})

    def test_invalid_integer(self):
        with pytest.raises(ConfigError, match="poll_interval"):
            HedgeConfig.from_dict({"monitor": {"poll_interval": "fast"}})

    def test_invalid_env_value(self, config_file, monkeypatch):
        monkeypatch.setenv("LPH_BASE_DELTA_THRESHOLD", "abc")

        with pytest.raises(ConfigError, match="base_delta_threshold"):
            HedgeConfig.load(config_file)

    def test_env_overrides_yaml(self, config_file, monkeypatch):
        monkeypatch.setenv("LPH_SYMBOL", "ETHUSDT")
        monkeypatch.setenv("LPH_BASE_DELTA_THRESHOLD", "0.5")
        monkeypatch.setenv("LPH_AUTO_EXECUTE", "false")

        config = HedgeConfig.load(config_file)

        assert config.symbol == "ETHUSDT"
        assert config.base_delta_threshold == Decimal("0.5")
        assert config.auto_execute is False
        assert config.poll_interval == 60

    def test_validate_missing_fields(self):
        with pytest.raises(ConfigError, match="owner"):
            HedgeConfig().validate()

    def test_validate_threshold(self, config_file):
        config = HedgeConfig.from_yaml(config_file)
        config.validate()

        config.base_delta_threshold = Decimal("0")
        with pytest.raises(ConfigError):
            config.validate()

    def test_to_dict(self):
        data = HedgeConfig().to_dict()

        assert data["base_delta_ratio_threshold"] == "0.05"
        assert data["poll_interval"] == 90
