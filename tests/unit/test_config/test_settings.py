"""
Unit tests for settings configuration

Tests YAML config loading for Kafka topics and stream retry policy.
"""

import pytest

from config.settings import Settings, get_settings
from core.utils.config import get_nested, load_yaml, load_yaml_safe


@pytest.mark.unit
class TestKafkaSettings:
    """Test Kafka settings from streaming.yaml"""

    def test_topics(self):
        """Test input/output topic names"""
        settings = get_settings()

        assert settings.KAFKA_TOPIC_TRADE_DATA == "trade-data"
        assert settings.KAFKA_TOPIC_RSI_DATA == "rsi-data"

    def test_consumer_group(self):
        settings = get_settings()

        assert settings.KAFKA_CONSUMER_GROUP == "rsi-group"
        assert settings.KAFKA_AUTO_OFFSET_RESET in ("latest", "earliest")

    def test_bootstrap_servers(self):
        settings = get_settings()

        assert isinstance(settings.KAFKA_BOOTSTRAP_SERVERS, str)
        assert ":" in settings.KAFKA_BOOTSTRAP_SERVERS


@pytest.mark.unit
class TestStreamRetrySettings:
    """Test retry policy settings"""

    def test_publish_retries(self):
        settings = get_settings()

        assert isinstance(settings.STREAM_PUBLISH_RETRIES, int)
        assert settings.STREAM_PUBLISH_RETRIES >= 0

    def test_backoffs(self):
        settings = get_settings()

        assert settings.STREAM_PUBLISH_RETRY_BACKOFF_MS > 0
        assert settings.STREAM_CONSUME_RETRY_BACKOFF_MS > 0


@pytest.mark.unit
class TestSSESettings:
    """Test SSE relay settings"""

    def test_relay_defaults(self):
        settings = get_settings()

        assert settings.SSE_PORT == 4000
        assert settings.SSE_CONSUMER_GROUP == "sse-group"
        assert settings.SSE_CONSUMER_GROUP != settings.KAFKA_CONSUMER_GROUP
        assert settings.SSE_RETRY_MS == 10000
        assert settings.SSE_CLIENT_QUEUE_SIZE > 0


@pytest.mark.unit
class TestEnvironmentSettings:
    """Test .env-backed fields"""

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("CLOUD_PROVIDER", "aws")

        settings = Settings()

        assert settings.LOG_LEVEL == "DEBUG"
        assert settings.CLOUD_PROVIDER == "aws"

    def test_singleton(self):
        assert get_settings() is get_settings()


@pytest.mark.unit
class TestYamlHelpers:
    """Test core.utils.config helpers"""

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "streaming.yaml"
        path.write_text("kafka:\n  topics:\n    rsi_data: custom-rsi\n")

        assert load_yaml(path) == {"kafka": {"topics": {"rsi_data": "custom-rsi"}}}

    def test_load_yaml_missing_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_yaml(tmp_path / "missing.yaml")

    def test_load_yaml_safe_missing_is_empty(self, tmp_path):
        assert load_yaml_safe(tmp_path / "missing.yaml") == {}

    def test_load_yaml_safe_invalid_is_empty(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("kafka: [unclosed\n")

        assert load_yaml_safe(path) == {}

    def test_empty_file_is_empty_dict(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_yaml(path) == {}

    def test_get_nested(self):
        config = {"kafka": {"topics": {"trade_data": "t"}}}

        assert get_nested(config, "kafka", "topics", "trade_data") == "t"
        assert get_nested(config, "kafka", "missing", default=3) == 3
        assert get_nested(config, "kafka", "topics", "trade_data", "deeper", default=None) is None
