"""
Abstract interface for stream consumers (consuming messages)
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator


class BaseStreamConsumer(ABC):
    """
    Abstract interface for stream consumers (ingestion adapter)

    Contract:
    - consume() yields raw payloads (bytes, or None for empty messages)
    - Decoding is left to the caller so malformed payloads can be skipped
    - Transient broker errors are absorbed inside consume()
    - Iteration ends when the stream ends or the consumer is closed

    Implementations:
    - KafkaStreamConsumer (Open-source)
    """

    @abstractmethod
    async def connect(self) -> None:
        """Establish connection to stream service"""

    @abstractmethod
    async def subscribe(self, topics: list[str]) -> None:
        """
        Subscribe to topics

        Args:
            topics: List of topic names to subscribe to
        """

    @abstractmethod
    def consume(self) -> AsyncIterator[bytes | None]:
        """
        Consume messages from subscribed topics

        Yields:
            Raw message payload

        Example:
            async for payload in consumer.consume():
                print(payload)
        """

    @abstractmethod
    async def commit(self) -> None:
        """Commit current offset (acknowledge message processing)"""

    @abstractmethod
    async def close(self) -> None:
        """Cleanup connections"""
