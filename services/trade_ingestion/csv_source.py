"""
CSV trade source

Reads exported trades (one row per trade) and publishes each row as a
JSON record keyed by token, so every token keeps its CSV order downstream.

Expected columns: token_address, price_in_sol, block_time (others are forwarded).
"""

import csv
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from core.interfaces.streaming_producer import BaseStreamProducer

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("token_address", "price_in_sol", "block_time")


class TradeCsvIngestor:
    """Publish trades from a CSV file to a stream"""

    def __init__(self, producer: BaseStreamProducer, csv_path: str | Path, stream_name: str):
        self.producer = producer
        self.csv_path = Path(csv_path)
        self.stream_name = stream_name

    def iter_rows(self) -> Iterator[dict[str, str]]:
        """Yield CSV rows as dicts (header row gives the keys)"""
        if not self.csv_path.exists():
            raise FileNotFoundError(f"Trades CSV not found: {self.csv_path}")

        with open(self.csv_path, newline="", encoding="utf-8") as f:
            yield from csv.DictReader(f)

    @staticmethod
    def build_record(row: dict[str, str]) -> dict[str, Any] | None:
        """
        Convert a CSV row to a trade record

        Returns:
            Record with price_in_sol as float, or None if the row is unusable
        """
        if any(not (row.get(col) or "").strip() for col in REQUIRED_COLUMNS):
            return None

        try:
            price = float(row["price_in_sol"])
        except ValueError:
            return None

        record = {k: v for k, v in row.items() if k is not None}
        record["token_address"] = row["token_address"].strip()
        record["block_time"] = row["block_time"].strip()
        record["price_in_sol"] = price
        return record

    async def run(self) -> dict[str, int]:
        """
        Publish every usable row

        Returns:
            Counters: rows, sent, skipped, failed
        """
        stats = {"rows": 0, "sent": 0, "skipped": 0, "failed": 0}

        for line_no, row in enumerate(self.iter_rows(), start=2):
            stats["rows"] += 1

            record = self.build_record(row)
            if record is None:
                stats["skipped"] += 1
                logger.warning(f"Skipping malformed CSV row {line_no}: {row}")
                continue

            try:
                await self.producer.send_record(
                    stream_name=self.stream_name,
                    data=record,
                    partition_key=record["token_address"],
                )
                stats["sent"] += 1
            except Exception as e:
                stats["failed"] += 1
                logger.error(f"✗ Failed to publish CSV row {line_no}: {e}")

        logger.info(
            f"✅ CSV ingestion complete: {stats['sent']} sent, "
            f"{stats['skipped']} skipped, {stats['failed']} failed"
        )
        return stats
