"""
Kafka consumer implementation

Event-driven consumer for the trade-data topic
"""

import asyncio
import logging
from collections.abc import AsyncIterator

from aiokafka import AIOKafkaConsumer
from aiokafka.errors import ConsumerStoppedError, KafkaError

from config.settings import get_settings
from core.interfaces.streaming_consumer import BaseStreamConsumer

logger = logging.getLogger(__name__)


class KafkaStreamConsumer(BaseStreamConsumer):
    """
    Kafka stream consumer implementation

    Features:
    - Async message consumption (one message at a time, in partition order)
    - Auto-commit every 1s, or manual commit() when auto_commit=False
    - Consumer group from streaming.yaml
    - Raw payloads (decoding is done by the caller)
    - Transient errors logged and retried; stop() ends iteration
    """

    def __init__(self, group_id: str | None = None, auto_commit: bool = True):
        """
        Args:
            group_id: Consumer group (default: KAFKA_CONSUMER_GROUP)
            auto_commit: Let aiokafka commit offsets; if False the caller owns commit()
        """
        self.settings = get_settings()
        self.group_id = group_id or self.settings.KAFKA_CONSUMER_GROUP
        self.auto_commit = auto_commit
        self.consumer = None
        self._topics = []

    async def connect(self) -> None:
        """Initialize Kafka consumer"""
        try:
            self.consumer = AIOKafkaConsumer(
                bootstrap_servers=self.settings.KAFKA_BOOTSTRAP_SERVERS,
                group_id=self.group_id,
                auto_offset_reset=self.settings.KAFKA_AUTO_OFFSET_RESET,
                enable_auto_commit=self.auto_commit,
                auto_commit_interval_ms=1000,  # Commit every 1s
            )

            await self.consumer.start()

            logger.info(
                f"✓ Connected to Kafka consumer: {self.settings.KAFKA_BOOTSTRAP_SERVERS} "
                f"(group: {self.group_id})"
            )
        except Exception as e:
            logger.error(f"✗ Failed to connect Kafka consumer: {e}")
            raise

    async def subscribe(self, topics: list[str]) -> None:
        """
        Subscribe to topics

        Args:
            topics: List of topic names to subscribe to
        """
        if not self.consumer:
            raise RuntimeError("Kafka consumer not connected")

        self._topics = topics
        self.consumer.subscribe(topics=topics)

        logger.info(f"✓ Subscribed to topics: {', '.join(topics)}")

    async def consume(self) -> AsyncIterator[bytes | None]:
        """
        Consume messages from subscribed topics

        Yields:
            Raw message value (None for empty messages)
        """
        if not self.consumer:
            raise RuntimeError("Kafka consumer not connected")

        if not self._topics:
            raise RuntimeError("No topics subscribed")

        backoff = self.settings.STREAM_CONSUME_RETRY_BACKOFF_MS / 1000

        while True:
            try:
                message = await self.consumer.getone()
            except ConsumerStoppedError:
                logger.info("Kafka consumer stopped, ending stream")
                return
            except KafkaError as e:
                logger.warning(f"⚠ Transient Kafka consume error: {e} - retrying in {backoff:.1f}s")
                await asyncio.sleep(backoff)
                continue

            logger.debug(
                f"Consumed message from {message.topic}: "
                f"Partition={message.partition}, Offset={message.offset}"
            )

            yield message.value

    async def commit(self) -> None:
        """
        Commit offsets of the messages consumed so far

        Manual-commit hook for consumers built with auto_commit=False; with
        auto-commit on, aiokafka already commits every second.
        """
        if not self.consumer:
            raise RuntimeError("Kafka consumer not connected")

        await self.consumer.commit()
        logger.debug("Committed consumer offset")

    async def close(self) -> None:
        """Cleanup connections"""
        if self.consumer:
            await self.consumer.stop()
            logger.info("✓ Kafka consumer closed")
