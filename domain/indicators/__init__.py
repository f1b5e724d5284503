"""
Technical indicators module

Exports:
- Momentum: RSI, calculate_rsi
"""

from domain.indicators.momentum import DEFAULT_RSI_PERIOD, NEUTRAL_RSI, RSI, calculate_rsi

__all__ = [
    "RSI",
    "calculate_rsi",
    "DEFAULT_RSI_PERIOD",
    "NEUTRAL_RSI",
]
