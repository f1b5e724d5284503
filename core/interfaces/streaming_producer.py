import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)


class BaseStreamProducer(ABC):
    """
    Abstract interface for stream producers (publishing messages)

    send_record() awaits the provider acknowledgement and retries failed
    sends a bounded number of times before raising. Callers decide whether
    a final failure is fatal.

    Implementations:
    - KafkaStreamProducer (Open-source)

    Architecture:
        StreamEngine → send_record() → _send_impl() → Kafka
                            ↑ retry (linear backoff)
    """

    def __init__(self, max_retries: int | None = None, retry_backoff_ms: int | None = None):
        from config.settings import get_settings

        settings = get_settings()

        self.max_retries = settings.STREAM_PUBLISH_RETRIES if max_retries is None else max_retries
        self.retry_backoff_ms = (
            settings.STREAM_PUBLISH_RETRY_BACKOFF_MS if retry_backoff_ms is None else retry_backoff_ms
        )
        self._sent_count = 0
        self._failed_count = 0
        self._retry_count = 0

    @abstractmethod
    async def connect(self) -> None:
        """Connect to streaming service"""

    @abstractmethod
    async def _send_impl(self, stream_name: str, data: dict[str, Any], partition_key: str) -> None:
        """
        Provider-specific send implementation (Kafka, ...)

        Must raise on failure so send_record() can retry.
        """

    async def send_record(
        self, stream_name: str, data: dict[str, Any], partition_key: str
    ) -> dict[str, Any]:
        """
        Send a single record, retrying transient failures

        Args:
            stream_name: Stream/topic name
            data: Record data (JSON serialisable)
            partition_key: Partition key for per-key ordering

        Returns:
            {"status": "sent", "attempts": n}

        Raises:
            Exception: The last send error once retries are exhausted
        """
        attempts = self.max_retries + 1

        for attempt in range(1, attempts + 1):
            try:
                await self._send_impl(stream_name, data, partition_key)
                self._sent_count += 1
                return {"status": "sent", "attempts": attempt}

            except Exception as e:
                if attempt >= attempts:
                    self._failed_count += 1
                    logger.error(
                        f"✗ Send to {stream_name}/{partition_key} failed after "
                        f"{attempts} attempts: {e}"
                    )
                    raise

                self._retry_count += 1
                delay = self.retry_backoff_ms * attempt / 1000
                logger.warning(
                    f"⚠ Send to {stream_name}/{partition_key} failed "
                    f"(attempt {attempt}/{attempts}): {e} - retrying in {delay:.2f}s"
                )
                await asyncio.sleep(delay)

    def get_stats(self) -> dict[str, int]:
        """Send counters: sent, failed, retries"""
        return {
            "sent": self._sent_count,
            "failed": self._failed_count,
            "retries": self._retry_count,
        }

    @abstractmethod
    async def close(self) -> None:
        """Flush pending records and close connection"""
