#!/usr/bin/env python3
"""
Create the trade-data and rsi-data topics (no-op for topics that exist)

Usage:
    python scripts/create_topics.py
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from aiokafka.admin import AIOKafkaAdminClient, NewTopic

from config.settings import get_settings

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


async def main():
    """Main entry point"""
    settings = get_settings()
    wanted = [settings.KAFKA_TOPIC_TRADE_DATA, settings.KAFKA_TOPIC_RSI_DATA]

    admin = AIOKafkaAdminClient(bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS)
    await admin.start()

    try:
        existing = set(await admin.list_topics())
        missing = [topic for topic in wanted if topic not in existing]

        if not missing:
            logger.info(f"✓ Topics already exist: {', '.join(wanted)}")
            return

        await admin.create_topics(
            [NewTopic(name=topic, num_partitions=1, replication_factor=1) for topic in missing]
        )
        logger.info(f"✓ Created topics: {', '.join(missing)}")
    finally:
        await admin.close()


if __name__ == "__main__":
    asyncio.run(main())
