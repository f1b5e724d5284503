"""
Validators module

Payload validators for streamed market data
"""

from core.validators.market_data import TradeEventValidator

__all__ = ["TradeEventValidator"]
