"""Bounded per-asset price windows"""

from domain.windows.price_window import DEFAULT_WINDOW_SIZE, WindowStore

__all__ = ["WindowStore", "DEFAULT_WINDOW_SIZE"]
