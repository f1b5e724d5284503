"""
Unit tests for the RSI Stream API (SSE relay)

Broadcaster fan-out, SSE framing, relay failure handling and the HTTP routes.
Kafka is replaced by in-memory consumers.
"""

import json
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from services.rsi_stream_api.app import create_app, relay_rsi_stream, sse_frames
from services.rsi_stream_api.broadcaster import RSIBroadcaster
from tests.fakes import ListConsumer

RECORD = {"token": "SOL", "timestamp": "2024-06-01T12:30:00+00:00", "rsi": 71.5}
FRAME = 'data: {"token":"SOL","timestamp":"2024-06-01T12:30:00+00:00","rsi":71.5}\n\n'


class UnreachableConsumer(ListConsumer):
    """Consumer whose broker is down"""

    async def connect(self) -> None:
        raise ConnectionError("no broker")


@pytest.fixture
def broadcaster():
    return RSIBroadcaster(queue_size=10)


@pytest.mark.unit
class TestRSIBroadcaster:
    """Test client fan-out"""

    def test_broadcast_reaches_every_client(self, broadcaster):
        first = broadcaster.register()
        second = broadcaster.register()

        assert broadcaster.broadcast(RECORD) == 2
        assert first.get_nowait() == FRAME
        assert second.get_nowait() == FRAME

    def test_unregistered_client_gets_nothing(self, broadcaster):
        queue = broadcaster.register()
        broadcaster.unregister(queue)

        assert broadcaster.broadcast(RECORD) == 0
        assert queue.empty()
        assert broadcaster.client_count == 0

    def test_slow_client_drops_frames(self):
        broadcaster = RSIBroadcaster(queue_size=1)
        slow = broadcaster.register()

        broadcaster.broadcast(RECORD)
        assert broadcaster.broadcast(RECORD) == 0

        assert slow.qsize() == 1
        assert broadcaster.get_stats() == {"clients": 1, "broadcasts": 2, "dropped_frames": 1}

    def test_invalid_queue_size(self):
        with pytest.raises(ValueError):
            RSIBroadcaster(queue_size=0)


@pytest.mark.unit
class TestNormalize:
    """Test raw rsi-data values become client records"""

    def test_json_relayed_as_is(self):
        assert RSIBroadcaster.normalize(json.dumps(RECORD).encode("utf-8")) == RECORD

    @pytest.mark.parametrize("payload", [None, b"", ""])
    def test_empty_message_skipped(self, payload):
        assert RSIBroadcaster.normalize(payload) is None

    @pytest.mark.parametrize(
        "payload, rsi",
        [(b"not json", 0.0), (b"+42.5", 42.5), (b"NaN", 0.0), (b"Infinity", 0.0)],
    )
    def test_non_json_wrapped_as_unknown(self, payload, rsi):
        record = RSIBroadcaster.normalize(payload)

        assert record["token"] == "UNKNOWN"
        assert record["rsi"] == rsi
        assert datetime.fromisoformat(record["timestamp"]).utcoffset().total_seconds() == 0

    @pytest.mark.asyncio
    async def test_relay_broadcasts_consumed_records(self, broadcaster):
        queue = broadcaster.register()
        consumer = ListConsumer([json.dumps(RECORD).encode("utf-8"), None, b""])

        await broadcaster.relay(consumer)

        assert queue.qsize() == 1
        assert queue.get_nowait() == FRAME
        assert broadcaster.get_stats()["broadcasts"] == 1


@pytest.mark.unit
class TestSSEFrames:
    """Test the per-client event stream"""

    @pytest.mark.asyncio
    async def test_retry_hint_then_records(self, broadcaster):
        frames = sse_frames(broadcaster, retry_ms=10000)

        assert await anext(frames) == "retry: 10000\n\n"
        assert broadcaster.client_count == 1

        broadcaster.broadcast(RECORD)

        assert await anext(frames) == FRAME

    @pytest.mark.asyncio
    async def test_disconnect_unregisters_client(self, broadcaster):
        frames = sse_frames(broadcaster, retry_ms=10000)
        await anext(frames)

        await frames.aclose()

        assert broadcaster.client_count == 0


@pytest.mark.unit
class TestRelayTask:
    """Test the Kafka side of the relay"""

    @pytest.mark.asyncio
    async def test_subscribes_to_topic_and_closes(self, broadcaster):
        consumer = ListConsumer([json.dumps(RECORD)])
        queue = broadcaster.register()

        await relay_rsi_stream(broadcaster, lambda: consumer, "rsi-data")

        assert consumer.topics == ["rsi-data"]
        assert consumer.closed
        assert queue.get_nowait() == FRAME

    @pytest.mark.asyncio
    async def test_connection_failure_is_not_raised(self, broadcaster):
        consumer = UnreachableConsumer([])

        await relay_rsi_stream(broadcaster, lambda: consumer, "rsi-data")

        assert consumer.closed
        assert consumer.topics == []

    @pytest.mark.asyncio
    async def test_factory_failure_is_not_raised(self, broadcaster):
        def no_provider():
            raise NotImplementedError("Kinesis consumer not implemented yet")

        await relay_rsi_stream(broadcaster, no_provider, "rsi-data")


@pytest.mark.unit
class TestRSIStreamAPI:
    """Test HTTP routes"""

    @pytest.fixture
    def client(self, broadcaster):
        app = create_app(broadcaster, consumer_factory=lambda: ListConsumer([]))
        with TestClient(app) as client:
            yield client

    def test_health(self, client):
        resp = client.get("/health")

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["clients"] == 0
        assert datetime.fromisoformat(body["timestamp"]).utcoffset().total_seconds() == 0

    def test_health_counts_clients(self, client, broadcaster):
        broadcaster.register()

        assert client.get("/health").json()["clients"] == 1

    def test_cors_allows_any_origin(self, client):
        resp = client.get("/health", headers={"Origin": "http://localhost:3000"})

        assert resp.headers["access-control-allow-origin"] == "*"

    def test_serves_while_kafka_is_down(self, broadcaster):
        app = create_app(broadcaster, consumer_factory=lambda: UnreachableConsumer([]))

        with TestClient(app) as client:
            resp = client.get("/health")

        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    @pytest.mark.asyncio
    async def test_events_route_streams_sse(self, broadcaster):
        app = create_app(broadcaster, consumer_factory=lambda: ListConsumer([]))
        route = next(r for r in app.routes if getattr(r, "path", None) == "/events")

        response = await route.endpoint()

        assert response.media_type == "text/event-stream"
        assert response.headers["cache-control"] == "no-cache"

        body = response.body_iterator
        assert await anext(body) == "retry: 10000\n\n"
        assert broadcaster.client_count == 1

        await body.aclose()
        assert broadcaster.client_count == 0
