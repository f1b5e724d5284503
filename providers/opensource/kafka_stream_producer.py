"""
Kafka implementation of stream producer

Works with Kafka (KRaft mode) - no ZooKeeper needed
"""

import json
import logging
from typing import Any

from aiokafka import AIOKafkaProducer

from config.settings import get_settings
from core.interfaces.streaming_producer import BaseStreamProducer

logger = logging.getLogger(__name__)


class KafkaStreamProducer(BaseStreamProducer):
    """
    Kafka stream producer

    Architecture:
        StreamEngine → send_record() → send_and_wait() → Kafka
                          ↓ (bounded retry in BaseStreamProducer)

    Features:
    - JSON serialisation, UTF-8 keys (same key → same partition → ordering)
    - Waits for leader ack so failures surface to the retry loop
    - Small linger for light batching
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.settings = get_settings()
        self.producer = None

    async def connect(self) -> None:
        """Connect to Kafka"""
        try:
            self.producer = AIOKafkaProducer(
                bootstrap_servers=self.settings.KAFKA_BOOTSTRAP_SERVERS,
                value_serializer=lambda v: json.dumps(v, default=str).encode("utf-8"),
                key_serializer=lambda k: k.encode("utf-8") if k else None,
                acks=1,  # Leader ack
                max_request_size=1048576,  # 1MB max message size
                linger_ms=5,
            )

            await self.producer.start()

            logger.info(f"✓ Connected to Kafka: {self.settings.KAFKA_BOOTSTRAP_SERVERS}")
        except Exception as e:
            logger.error(f"✗ Failed to connect to Kafka: {e}")
            raise

    async def _send_impl(self, stream_name: str, data: dict[str, Any], partition_key: str) -> None:
        """Send one record and wait for the broker ack"""
        if not self.producer:
            raise RuntimeError("Kafka producer not connected")

        await self.producer.send_and_wait(topic=stream_name, value=data, key=partition_key)

    async def close(self) -> None:
        """Flush and close Kafka producer"""
        if self.producer:
            try:
                await self.producer.stop()
                logger.info("✓ Kafka producer closed")
            except Exception as e:
                logger.error(f"Error closing Kafka producer: {e}")

        stats = self.get_stats()
        if stats["failed"] > 0:
            logger.warning(f"Stream producer gave up on {stats['failed']} records total")
