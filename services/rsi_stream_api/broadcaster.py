"""
RSI broadcaster - fan rsi-data records out to connected SSE clients

Each client gets its own bounded queue of pre-formatted SSE frames; a client
that stops reading loses new frames instead of slowing down the others.
"""

import asyncio
import json
import logging
import math
from datetime import UTC, datetime
from typing import Any

from core.interfaces.streaming_consumer import BaseStreamConsumer

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> float:
    raise ValueError(f"Non-finite number literal: {name}")


class RSIBroadcaster:
    """
    In-memory fan-out of RSI records

    Usage:
        broadcaster = RSIBroadcaster()
        queue = broadcaster.register()
        broadcaster.broadcast({"token": "SOL", "timestamp": "...", "rsi": 71.2})
        frame = await queue.get()  # 'data: {...}\\n\\n'
    """

    def __init__(self, queue_size: int = 100):
        if queue_size < 1:
            raise ValueError(f"queue_size must be >= 1, got {queue_size}")

        self.queue_size = queue_size
        self._clients: set[asyncio.Queue] = set()
        self._broadcasts = 0
        self._dropped_frames = 0

    @property
    def client_count(self) -> int:
        return len(self._clients)

    def register(self) -> asyncio.Queue:
        """Add a client and return the queue its frames arrive on"""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        self._clients.add(queue)
        return queue

    def unregister(self, queue: asyncio.Queue) -> None:
        self._clients.discard(queue)

    @staticmethod
    def normalize(payload: bytes | str | None) -> Any | None:
        """
        Turn a raw rsi-data value into the object sent to clients

        Valid JSON is relayed as-is. Anything else is wrapped as an UNKNOWN
        record whose rsi is the payload read as a number (0 if it is not one).

        Returns:
            The record, or None for empty messages
        """
        if payload is None:
            return None

        raw = payload.decode("utf-8", errors="replace") if isinstance(payload, bytes) else payload
        if not raw:
            return None

        try:
            return json.loads(raw, parse_constant=_reject_constant)
        except ValueError:
            pass

        try:
            rsi = float(raw)
        except ValueError:
            rsi = 0.0
        if not math.isfinite(rsi):
            rsi = 0.0

        return {
            "token": "UNKNOWN",
            "timestamp": datetime.now(UTC).isoformat(),
            "rsi": rsi,
        }

    def broadcast(self, record: Any) -> int:
        """
        Queue one record for every connected client

        Returns:
            Number of clients the frame was queued for
        """
        data = json.dumps(record, separators=(",", ":"))
        frame = f"data: {data}\n\n"

        delivered = 0
        for queue in list(self._clients):
            try:
                queue.put_nowait(frame)
                delivered += 1
            except asyncio.QueueFull:
                self._dropped_frames += 1
                logger.warning("⚠️ SSE client queue full, frame dropped")

        self._broadcasts += 1
        logger.info(f"📤 Broadcasted to {delivered} client(s): {data}")
        return delivered

    async def relay(self, consumer: BaseStreamConsumer) -> None:
        """Broadcast every record from a connected, subscribed consumer until it ends"""
        async for payload in consumer.consume():
            record = self.normalize(payload)
            if record is None:
                continue
            self.broadcast(record)

    def get_stats(self) -> dict[str, int]:
        return {
            "clients": self.client_count,
            "broadcasts": self._broadcasts,
            "dropped_frames": self._dropped_frames,
        }
