"""
Trade Ingestion Service - Replay a trades CSV onto the trade-data topic
"""

from services.trade_ingestion.csv_source import TradeCsvIngestor

__all__ = ["TradeCsvIngestor"]
