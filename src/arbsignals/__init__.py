"""
DEX/CEX Spread & Arbitrage Signal Service.

Reconciles on-chain pool snapshots, aggregated CEX prices and the current
DEX consensus price into ranked, cost-adjusted arbitrage signals.
"""

__version__ = "1.0.0"
