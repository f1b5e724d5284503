"""
RSI Service - Real-time RSI calculation

Event-driven service that:
1. Consumes trade events from Kafka
2. Keeps a bounded price window per token
3. Calculates a 14-period RSI once the window is full
4. Publishes RSI events back to Kafka
"""

from services.rsi_service.engine import RSIStreamEngine
from services.rsi_service.gate import EmissionGate

__all__ = ["RSIStreamEngine", "EmissionGate"]
