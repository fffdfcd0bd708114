"""Simulated DEX arbitrage detection, StatelessVM transaction execution and health checks."""

__version__ = "0.1.0"
__all__ = ["__version__"]