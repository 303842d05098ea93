"""Data Layer.

Raw position data from the two venues, normalized into decimal holdings:
- models/: holding and market data containers
- providers/: Uniswap V3 position reader and Binance USDT-M futures client
- utils/: on-chain unit conversion
"""
