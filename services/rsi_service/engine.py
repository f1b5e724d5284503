"""
RSI Stream Engine - per-event orchestration

Flow (strictly sequential, one event at a time):
    Consumer → validate payload → WindowStore.record()
             → EmissionGate.should_emit() → RSI.calculate()
             → IndicatorResult → Producer.send_record()

Suspension points:
- Waiting for the next payload from the consumer
- Waiting for the producer to acknowledge a result

Both honour stop(); an event in flight at shutdown may be dropped.
"""

import asyncio
import contextlib
import logging
import math
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from config.settings import get_settings
from core.interfaces.streaming_consumer import BaseStreamConsumer
from core.interfaces.streaming_producer import BaseStreamProducer
from core.models.market_data import IndicatorResult, TradeEvent
from core.validators.market_data import TradeEventValidator
from domain.indicators.momentum import RSI
from domain.windows.price_window import WindowStore
from services.rsi_service.gate import EmissionGate

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class RSIStreamEngine:
    """
    Turn a stream of trades into a stream of RSI values

    Owns the per-asset WindowStore; every collaborator is injectable so the
    pipeline can be exercised without a broker.
    """

    def __init__(
        self,
        producer: BaseStreamProducer,
        output_stream: str | None = None,
        window_store: WindowStore | None = None,
        gate: EmissionGate | None = None,
        indicator: RSI | None = None,
        validator: TradeEventValidator | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """
        Initialize engine

        Args:
            producer: Publisher adapter (already connected)
            output_stream: Topic for RSI events (default: KAFKA_TOPIC_RSI_DATA)
            window_store: Per-asset price windows (default: indicator.required_prices)
            gate: Emission gate (default: indicator.required_prices)
            indicator: RSI calculator (default: period 14)
            validator: Payload decoder
            clock: Source of emission timestamps (UTC)
        """
        self.producer = producer
        self.output_stream = output_stream or get_settings().KAFKA_TOPIC_RSI_DATA
        self.indicator = indicator or RSI()
        self.window_store = window_store or WindowStore(self.indicator.required_prices)
        self.gate = gate or EmissionGate(self.indicator.required_prices)
        self.validator = validator or TradeEventValidator()
        self.clock = clock

        if self.window_store.capacity < self.indicator.required_prices:
            raise ValueError(
                f"Window capacity {self.window_store.capacity} is too small for "
                f"{self.indicator!r} (needs {self.indicator.required_prices} prices)"
            )

        self._stop_event = asyncio.Event()
        self._received = 0
        self._skipped = 0
        self._emitted = 0
        self._publish_failures = 0
        self._errors = 0

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Request a clean exit at the next suspension point"""
        if not self._stop_event.is_set():
            logger.info("🛑 Stop requested")
        self._stop_event.set()

    async def process_message(self, payload: Any) -> IndicatorResult | None:
        """
        Process one raw payload

        Steps:
        1. Decode (malformed → skip, nothing mutated)
        2. Record price in the asset's window
        3. Check the emission gate
        4. Calculate RSI and publish

        Args:
            payload: Raw message value (bytes/str/dict/None)

        Returns:
            The IndicatorResult handed to the producer, or None if nothing was emitted
        """
        self._received += 1

        trade, error = self.validator.parse(payload)
        if trade is None:
            self._skipped += 1
            logger.warning(f"Dropped trade payload: {error}")
            return None

        return await self.process_trade(trade)

    async def process_trade(self, trade: TradeEvent) -> IndicatorResult | None:
        """Record a decoded trade and publish RSI if the gate admits it"""
        window = self.window_store.record(trade.asset_key, trade.price)

        if not self.gate.should_emit(len(window)):
            logger.debug(
                f"Warming up {trade.asset_key}: {len(window)}/{self.gate.min_prices} prices"
            )
            return None

        rsi = self.indicator.calculate(window)
        if not math.isfinite(rsi):
            # Differences of extreme prices overflow to inf, inf/inf is NaN
            self._skipped += 1
            logger.warning(f"⚠️ Non-finite RSI for {trade.asset_key}, window {window}: skipped")
            return None

        result = IndicatorResult(
            asset_key=trade.asset_key,
            emitted_at=self.clock(),
            rsi=rsi,
        )

        if self.stopped:
            logger.info(f"Shutdown in progress, not publishing RSI for {trade.asset_key}")
            return None

        try:
            await self.producer.send_record(
                stream_name=self.output_stream,
                data=result.to_dict(),
                partition_key=result.asset_key,
            )
        except Exception as e:
            # Window stays updated; only this emission is lost
            self._publish_failures += 1
            logger.error(f"✗ Failed to publish RSI for {trade.asset_key}: {e}")
            return None

        self._emitted += 1
        logger.info(f"📤 Sent RSI for {result.asset_key}: {result.rsi:.2f}")
        return result

    async def run(self, consumer: BaseStreamConsumer) -> None:
        """
        Consume until the stream ends or stop() is called

        Args:
            consumer: Ingestion adapter (connected and subscribed)
        """
        stream = consumer.consume()
        next_payload = None
        stop_waiter = asyncio.ensure_future(self._stop_event.wait())

        logger.info("🔄 RSI engine running...")

        try:
            while not self.stopped:
                next_payload = asyncio.ensure_future(stream.__anext__())

                await asyncio.wait(
                    {next_payload, stop_waiter}, return_when=asyncio.FIRST_COMPLETED
                )

                if not next_payload.done():
                    break

                try:
                    payload = next_payload.result()
                except StopAsyncIteration:
                    logger.info("Input stream ended")
                    break

                try:
                    await self.process_message(payload)
                except Exception as e:
                    self._errors += 1
                    logger.error(f"❌ Error processing trade payload: {e}", exc_info=True)

        finally:
            stop_waiter.cancel()
            if next_payload is not None and not next_payload.done():
                next_payload.cancel()
                with contextlib.suppress(asyncio.CancelledError, StopAsyncIteration):
                    await next_payload

            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

            stats = self.get_stats()
            logger.info(
                f"RSI engine exited: received={stats['received']}, "
                f"emitted={stats['emitted']}, skipped={stats['skipped']}, "
                f"publish_failures={stats['publish_failures']}"
            )

    def get_stats(self) -> dict[str, int]:
        """
        Get processing statistics

        Returns:
            Dictionary with received, skipped, emitted, publish_failures,
            errors and assets_tracked
        """
        return {
            "received": self._received,
            "skipped": self._skipped,
            "emitted": self._emitted,
            "publish_failures": self._publish_failures,
            "errors": self._errors,
            "assets_tracked": len(self.window_store),
        }
