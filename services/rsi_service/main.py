"""
RSI Service - Event-driven RSI calculation

Pattern:
- Consumes trade events from Kafka (trade-data)
- Keeps the 15 most recent prices per token in memory
- Publishes a 14-period RSI to Kafka (rsi-data) once a token has 15 prices
- NO persistence (windows are rebuilt from live traffic after a restart)

Usage:
    python -m services.rsi_service.main
"""

import asyncio
import logging
import signal
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from config.settings import get_settings
from factory.client_factory import create_stream_consumer, create_stream_producer
from services.rsi_service.engine import RSIStreamEngine

logger = logging.getLogger(__name__)

_fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(log_dir: str, level: str = "INFO", log_name: str = "rsi_service") -> None:
    """
    Console (INFO+) and rotating error file (ERROR+) handlers

    Args:
        log_dir: Directory for <log_name>_errors.log
        level: Root logging level
        log_name: Log file prefix
    """
    Path(log_dir).mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(_fmt))

    error_file = RotatingFileHandler(
        Path(log_dir) / f"{log_name}_errors.log",
        maxBytes=5 * 1024 * 1024,  # 5MB
        backupCount=3,
    )
    error_file.setLevel(logging.ERROR)
    error_file.setFormatter(logging.Formatter(_fmt))

    logging.basicConfig(level=level.upper(), handlers=[console, error_file], force=True)


class RSIService:
    """
    RSI Service - Kafka in, Kafka out

    Flow:
    1. Connect consumer (trade-data) and producer (rsi-data)
    2. Feed every trade through RSIStreamEngine
    3. Stop on end of stream or SIGINT/SIGTERM

    Connection failures at startup are fatal; per-event failures are not.
    """

    def __init__(self):
        self.settings = get_settings()
        self._loop: asyncio.AbstractEventLoop | None = None

        logger.info("🔧 Initializing clients...")
        self.consumer = create_stream_consumer()
        self.producer = create_stream_producer()

        self.engine = RSIStreamEngine(
            producer=self.producer,
            output_stream=self.settings.KAFKA_TOPIC_RSI_DATA,
        )

    async def start(self) -> None:
        """Connect adapters and run the engine until stopped"""
        logger.info("=" * 60)
        logger.info("RSI Service started (event-driven mode)")
        logger.info("=" * 60)
        logger.info(f"  Brokers: {self.settings.KAFKA_BOOTSTRAP_SERVERS}")
        logger.info(f"  Group:   {self.settings.KAFKA_CONSUMER_GROUP}")
        logger.info(f"  Input:   {self.settings.KAFKA_TOPIC_TRADE_DATA}")
        logger.info(f"  Output:  {self.settings.KAFKA_TOPIC_RSI_DATA}")
        logger.info("=" * 60)

        self._loop = asyncio.get_running_loop()

        try:
            await self.consumer.connect()
            await self.consumer.subscribe([self.settings.KAFKA_TOPIC_TRADE_DATA])
            logger.info("✅ Connected to Kafka consumer")

            await self.producer.connect()
            logger.info("✅ Connected to Kafka producer")

        except Exception as e:
            logger.error(f"❌ Failed to connect stream adapters: {e}")
            await self.stop()
            raise

        try:
            await self.engine.run(self.consumer)
        finally:
            await self.stop()

    def request_stop(self) -> None:
        """Thread/signal-safe stop request"""
        if self._loop is not None and self._loop.is_running():
            self._loop.call_soon_threadsafe(self.engine.stop)
        else:
            self.engine.stop()

    async def stop(self) -> None:
        """Graceful shutdown"""
        logger.info("🛑 Stopping RSI Service...")
        self.engine.stop()

        if self.consumer:
            await self.consumer.close()
        if self.producer:
            await self.producer.close()

        logger.info("✅ RSI Service stopped")


def signal_handler(service):
    """Handle SIGINT/SIGTERM"""

    def handler(signum, frame):
        logger.info(f"Received signal {signum}")
        service.request_stop()

    return handler


async def main() -> None:
    """Main entry point"""
    service = RSIService()

    signal.signal(signal.SIGINT, signal_handler(service))
    signal.signal(signal.SIGTERM, signal_handler(service))

    await service.start()


def run() -> None:
    """Console script entry point"""
    settings = get_settings()
    configure_logging(settings.LOG_DIR, settings.LOG_LEVEL)

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Goodbye!")
    except Exception as e:
        logger.error(f"❌ Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    run()
