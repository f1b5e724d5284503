"""
Per-asset bounded price windows

Each asset key owns an oldest-first window of the most recent prices.
Appending beyond capacity evicts exactly the oldest price (FIFO).
"""

from collections import deque

# 14 differences need 15 prices
DEFAULT_WINDOW_SIZE = 15


class WindowStore:
    """
    In-memory store of recent prices keyed by asset

    Design principle:
    - Explicitly owned and injected (no module-level state)
    - Windows are created on first sight and live for the process lifetime
    - Prices are stored as given (no validation)
    - Not safe for concurrent mutation of the same key

    Example:
        >>> store = WindowStore()
        >>> store.record("SOL", 1.0)
        (1.0,)
        >>> store.record("SOL", 1.1)
        (1.0, 1.1)
    """

    def __init__(self, capacity: int = DEFAULT_WINDOW_SIZE):
        """
        Initialize store

        Args:
            capacity: Maximum prices kept per asset (default: 15)
        """
        if capacity < 1:
            raise ValueError(f"Window capacity must be >= 1, got {capacity}")

        self.capacity = capacity
        self._windows: dict[str, deque[float]] = {}

    def record(self, asset_key: str, price: float) -> tuple[float, ...]:
        """
        Append price to the asset's window, evicting the oldest if over capacity

        Args:
            asset_key: Asset identifier
            price: Latest trade price

        Returns:
            Read-only snapshot of the window, oldest first
        """
        window = self._windows.get(asset_key)
        if window is None:
            window = self._windows[asset_key] = deque()

        window.append(price)
        if len(window) > self.capacity:
            window.popleft()

        return tuple(window)

    def get(self, asset_key: str) -> tuple[float, ...]:
        """Snapshot of an asset's window (empty if never seen)"""
        return tuple(self._windows.get(asset_key, ()))

    def keys(self) -> list[str]:
        """Asset keys seen so far, in first-seen order"""
        return list(self._windows)

    def __contains__(self, asset_key: str) -> bool:
        return asset_key in self._windows

    def __len__(self) -> int:
        return len(self._windows)
