"""
Application Settings - Load from YAML configs + .env secrets

Design Philosophy:
- Service configs (brokers, topics, retry policy) → YAML files (public, versioned in git)
- Environment and secrets → .env file (gitignored)

Uses Pydantic for validation and type safety
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.utils.config import get_nested, load_provider_config


class Settings(BaseSettings):
    """
    Application settings

    Architecture:
    - Infrastructure configs → config/providers/streaming.yaml (public)
    - Environment / secrets → .env (gitignored)

    Usage:
        from config.settings import get_settings

        settings = get_settings()
        print(settings.KAFKA_BOOTSTRAP_SERVERS)  # From streaming.yaml
        print(settings.LOG_LEVEL)  # From .env
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields in .env
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Load YAML configs from files (cached at class level)
        if not hasattr(Settings, "_yaml_loaded"):
            Settings._streaming_config = load_provider_config("streaming")
            Settings._yaml_loaded = True

    # ============================================
    # ENVIRONMENT (.env only)
    # ============================================
    ENVIRONMENT: str = Field(default="local", description="Environment: local, dev, staging, prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_DIR: str = Field(default="data/logs", description="Directory for rotating error logs")

    # ============================================
    # CLOUD PROVIDER (.env only)
    # ============================================
    CLOUD_PROVIDER: str = Field(
        default="opensource",
        description="Cloud provider: opensource (Kafka), aws, localstack, gcp, azure",
    )

    # ============================================
    # KAFKA (from YAML)
    # ============================================
    @property
    def KAFKA_BOOTSTRAP_SERVERS(self) -> str:
        """Kafka bootstrap servers from streaming.yaml"""
        return get_nested(
            self._streaming_config, "kafka", "bootstrap_servers", default="localhost:9092"
        )

    @property
    def KAFKA_CONSUMER_GROUP(self) -> str:
        """Consumer group id for the RSI service"""
        return get_nested(self._streaming_config, "kafka", "consumer_group", default="rsi-group")

    @property
    def KAFKA_AUTO_OFFSET_RESET(self) -> str:
        """Where a new consumer group starts reading (latest/earliest)"""
        return get_nested(self._streaming_config, "kafka", "auto_offset_reset", default="latest")

    @property
    def KAFKA_TOPIC_TRADE_DATA(self) -> str:
        """Input topic carrying trade events"""
        return get_nested(
            self._streaming_config, "kafka", "topics", "trade_data", default="trade-data"
        )

    @property
    def KAFKA_TOPIC_RSI_DATA(self) -> str:
        """Output topic carrying RSI events"""
        return get_nested(self._streaming_config, "kafka", "topics", "rsi_data", default="rsi-data")

    # ============================================
    # STREAM RETRY POLICY (from YAML)
    # ============================================
    @property
    def STREAM_PUBLISH_RETRIES(self) -> int:
        """Extra publish attempts after the first failure"""
        return int(get_nested(self._streaming_config, "stream", "publish_retries", default=3))

    @property
    def STREAM_PUBLISH_RETRY_BACKOFF_MS(self) -> int:
        """Backoff step between publish attempts (linear)"""
        return int(
            get_nested(self._streaming_config, "stream", "publish_retry_backoff_ms", default=100)
        )

    @property
    def STREAM_CONSUME_RETRY_BACKOFF_MS(self) -> int:
        """Pause after a transient consume error"""
        return int(
            get_nested(self._streaming_config, "stream", "consume_retry_backoff_ms", default=500)
        )

    # ============================================
    # SSE RELAY (from YAML)
    # ============================================
    @property
    def SSE_HOST(self) -> str:
        return get_nested(self._streaming_config, "sse", "host", default="0.0.0.0")

    @property
    def SSE_PORT(self) -> int:
        return int(get_nested(self._streaming_config, "sse", "port", default=4000))

    @property
    def SSE_CONSUMER_GROUP(self) -> str:
        """Consumer group for the relay (separate from the RSI service)"""
        return get_nested(self._streaming_config, "sse", "consumer_group", default="sse-group")

    @property
    def SSE_RETRY_MS(self) -> int:
        """Reconnect delay advertised to EventSource clients"""
        return int(get_nested(self._streaming_config, "sse", "retry_ms", default=10000))

    @property
    def SSE_CLIENT_QUEUE_SIZE(self) -> int:
        """Events buffered per client before new ones are dropped"""
        return int(get_nested(self._streaming_config, "sse", "client_queue_size", default=100))

    # ============================================
    # TRADE INGESTION (from YAML)
    # ============================================
    @property
    def TRADE_CSV_PATH(self) -> str:
        """CSV file replayed by the trade ingestion service"""
        return get_nested(
            self._streaming_config, "ingestion", "trades_csv", default="data/trades_data.csv"
        )


# Singleton pattern
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """
    Get application settings (singleton)

    Returns:
        Settings instance

    Example:
        >>> settings = get_settings()
        >>> print(settings.KAFKA_TOPIC_TRADE_DATA)
        trade-data
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
