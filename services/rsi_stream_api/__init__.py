"""
RSI Stream API - Server-Sent Events relay

Consumes rsi-data under its own consumer group and pushes every record to
connected browsers on GET /events.
"""

from services.rsi_stream_api.app import create_app
from services.rsi_stream_api.broadcaster import RSIBroadcaster

__all__ = ["RSIBroadcaster", "create_app"]
