"""Models module - Pydantic data models"""

from .market_data import IndicatorResult, TradeEvent

__all__ = [
    "TradeEvent",
    "IndicatorResult",
]
