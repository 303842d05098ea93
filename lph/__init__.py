"""LP hedge monitor: exposure reconciliation between an AMM LP position and a perpetual futures hedge."""

__version__ = "0.1.0"
