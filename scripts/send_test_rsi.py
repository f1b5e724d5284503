#!/usr/bin/env python3
"""
Publish random RSI records to rsi-data (demo feed for the SSE relay)

Usage:
    python scripts/send_test_rsi.py [--interval 2.0] [--count 0]
"""

import argparse
import asyncio
import logging
import random
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.settings import get_settings
from core.models.market_data import IndicatorResult
from factory.client_factory import create_stream_producer

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

DEMO_TOKENS = ["SOLANA", "BITCOIN", "ETHEREUM", "BONK"]


async def main(interval: float, count: int):
    """Send `count` records (0 = until interrupted)"""
    settings = get_settings()
    producer = create_stream_producer()
    await producer.connect()
    logger.info("✓ Producer connected")

    sent = 0
    try:
        while count == 0 or sent < count:
            result = IndicatorResult(
                asset_key=random.choice(DEMO_TOKENS),
                rsi=random.uniform(0.0, 100.0),
            )
            await producer.send_record(
                stream_name=settings.KAFKA_TOPIC_RSI_DATA,
                data=result.to_dict(),
                partition_key=result.asset_key,
            )
            sent += 1
            logger.info(f"📤 Message {sent} sent: {result.to_dict()}")
            await asyncio.sleep(interval)
    finally:
        await producer.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--interval", type=float, default=2.0, help="Seconds between records")
    parser.add_argument("--count", type=int, default=0, help="Records to send (0 = forever)")
    args = parser.parse_args()

    try:
        asyncio.run(main(args.interval, args.count))
    except KeyboardInterrupt:
        logger.info("Goodbye!")
