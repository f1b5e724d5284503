"""
RSI Stream API - Server-Sent Events relay for rsi-data

Endpoints:
- GET /events: text/event-stream, one `data:` frame per RSI record
- GET /health: {status, clients, timestamp}

The Kafka relay runs as a background task. If it cannot connect the HTTP
side keeps serving; clients simply receive no events.
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from config.settings import get_settings
from core.interfaces.streaming_consumer import BaseStreamConsumer
from factory.client_factory import create_stream_consumer
from services.rsi_stream_api.broadcaster import RSIBroadcaster

logger = logging.getLogger(__name__)


async def sse_frames(broadcaster: RSIBroadcaster, retry_ms: int) -> AsyncIterator[str]:
    """Frames for one client: the retry hint, then every broadcast record"""
    queue = broadcaster.register()
    logger.info(f"📡 New SSE client connected ({broadcaster.client_count} total)")

    try:
        yield f"retry: {retry_ms}\n\n"
        while True:
            yield await queue.get()
    finally:
        broadcaster.unregister(queue)
        logger.info(f"SSE client disconnected ({broadcaster.client_count} left)")


async def relay_rsi_stream(
    broadcaster: RSIBroadcaster,
    consumer_factory: Callable[[], BaseStreamConsumer],
    topic: str,
) -> None:
    """
    Connect a consumer to `topic` and broadcast until the stream ends

    Connection and consume failures are logged, never raised.
    """
    consumer = None

    try:
        logger.info("🔄 Connecting RSI relay...")
        consumer = consumer_factory()
        await consumer.connect()
        await consumer.subscribe([topic])
        logger.info(f"✅ Relaying {topic} to SSE clients")

        await broadcaster.relay(consumer)
        logger.info("RSI relay stream ended")

    except Exception as e:
        logger.error(f"❌ RSI relay failed: {e}")
        logger.warning("⚠️ SSE server still running, but not receiving RSI events")

    finally:
        if consumer is not None:
            await consumer.close()


def create_app(
    broadcaster: RSIBroadcaster | None = None,
    consumer_factory: Callable[[], BaseStreamConsumer] | None = None,
) -> FastAPI:
    """
    Build the SSE relay app

    Args:
        broadcaster: Client fan-out (default: SSE_CLIENT_QUEUE_SIZE per client)
        consumer_factory: Builds the rsi-data consumer (default: factory with SSE_CONSUMER_GROUP)
    """
    settings = get_settings()
    broadcaster = broadcaster or RSIBroadcaster(settings.SSE_CLIENT_QUEUE_SIZE)
    consumer_factory = consumer_factory or (
        lambda: create_stream_consumer(group_id=settings.SSE_CONSUMER_GROUP)
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 RSI Stream API starting up...")
        relay_task = asyncio.create_task(
            relay_rsi_stream(broadcaster, consumer_factory, settings.KAFKA_TOPIC_RSI_DATA)
        )

        yield

        relay_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await relay_task
        logger.info("✅ RSI Stream API stopped")

    app = FastAPI(
        title="RSI Stream API",
        description="Server-Sent Events relay for RSI values",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.broadcaster = broadcaster

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.get("/events")
    async def events() -> StreamingResponse:
        """Stream RSI records as they arrive"""
        return StreamingResponse(
            sse_frames(broadcaster, settings.SSE_RETRY_MS),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )

    @app.get("/health")
    async def health() -> dict:
        """Health check endpoint"""
        return {
            "status": "ok",
            "clients": broadcaster.client_count,
            "timestamp": datetime.now(UTC).isoformat(),
        }

    return app
