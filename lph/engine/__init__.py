"""Calculation Engine Layer.

Pure calculations over venue holdings; no I/O.

Architecture:
- models/: snapshot and hedge action value objects
- position/: exposure reconciliation
    - token_mapping: token0/token1 -> BASE/USDT normalization
    - snapshot: MonitoringSnapshot builder
    - hedge: hedge trigger and order sizing
"""
