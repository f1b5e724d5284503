"""
Momentum indicators

Implementations:
- RSI: Relative Strength Index (simple-average variant over a fixed window)
"""

from collections.abc import Sequence

import numpy as np

DEFAULT_RSI_PERIOD = 14

# Returned when the window is too short to say anything
NEUTRAL_RSI = 50.0


def calculate_rsi(prices: Sequence[float], period: int = DEFAULT_RSI_PERIOD) -> float:
    """
    Compute RSI from the first period + 1 prices of an oldest-first sequence

    Recomputed from scratch on every call: gains and losses are simple sums
    over `period` consecutive differences, not Wilder's exponential smoothing.

    Args:
        prices: Prices ordered oldest first
        period: Number of differences (default: 14)

    Returns:
        RSI in [0, 100]; NEUTRAL_RSI when fewer than period + 1 prices

    Example:
        >>> calculate_rsi([1.0, 1.1, 1.2])
        50.0
        >>> calculate_rsi([1.0 + i * 0.1 for i in range(15)])
        100.0
    """
    if len(prices) < period + 1:
        return NEUTRAL_RSI

    closes = np.asarray(prices, dtype=float)[: period + 1]
    diffs = np.diff(closes)

    gains = float(diffs[diffs > 0].sum())
    losses = float(-diffs[diffs < 0].sum())

    avg_gain = gains / period
    avg_loss = losses / period

    if avg_loss == 0.0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


class RSI:
    """
    Relative Strength Index

    Formula:
        RS = Average Gain / Average Loss (over N differences)
        RSI = 100 - (100 / (1 + RS))

    Interpretation:
        - RSI > 70: Overbought
        - RSI < 30: Oversold
        - RSI = 50: Neutral (also returned when history is insufficient)

    Stateless: the same window always yields the same value.

    Example:
        >>> rsi = RSI(period=14)
        >>> value = rsi.calculate(window)
        >>> if value > 70:
        ...     print("Overbought")
    """

    def __init__(self, period: int = DEFAULT_RSI_PERIOD):
        """
        Initialize RSI

        Args:
            period: Look-back period in differences (default: 14)
        """
        if period < 1:
            raise ValueError(f"RSI: period must be >= 1, got {period}")

        self.period = period
        self.name = f"RSI_{period}"

    @property
    def required_prices(self) -> int:
        """Prices needed before a real (non-neutral) value is produced"""
        return self.period + 1

    def calculate(self, prices: Sequence[float]) -> float:
        """Calculate RSI (neutral 50.0 if the window is too short)"""
        return calculate_rsi(prices, self.period)

    def __repr__(self) -> str:
        return f"RSI(period={self.period})"
