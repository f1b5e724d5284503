"""
Emission gate - decide whether a window has enough history to publish

The gate is the only admission check in the live loop, which makes the
short-window branch of calculate_rsi() unreachable from the engine. That
branch stays: it is part of the calculator's standalone contract.
"""

from domain.windows.price_window import DEFAULT_WINDOW_SIZE


class EmissionGate:
    """Admit windows holding at least `min_prices` prices"""

    def __init__(self, min_prices: int = DEFAULT_WINDOW_SIZE):
        self.min_prices = min_prices

    def should_emit(self, window_length: int) -> bool:
        return window_length >= self.min_prices
