"""
Trade Ingestion Service - Entry Point

Replays config `ingestion.trades_csv` (streaming.yaml) onto the trade-data
topic, then exits.

Usage:
    python -m services.trade_ingestion.main
"""

import asyncio
import logging
import sys

from config.settings import get_settings
from factory.client_factory import create_stream_producer
from services.rsi_service.main import configure_logging
from services.trade_ingestion.csv_source import TradeCsvIngestor

logger = logging.getLogger(__name__)


async def main() -> dict[str, int]:
    """Publish the configured CSV and close the producer"""
    settings = get_settings()
    producer = create_stream_producer()

    await producer.connect()
    logger.info("✅ Kafka producer connected")

    try:
        ingestor = TradeCsvIngestor(
            producer=producer,
            csv_path=settings.TRADE_CSV_PATH,
            stream_name=settings.KAFKA_TOPIC_TRADE_DATA,
        )
        return await ingestor.run()
    finally:
        await producer.close()


def run() -> None:
    """Console script entry point"""
    settings = get_settings()
    configure_logging(settings.LOG_DIR, settings.LOG_LEVEL, log_name="trade_ingestion")

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Goodbye!")
    except Exception as e:
        logger.error(f"❌ Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    run()
