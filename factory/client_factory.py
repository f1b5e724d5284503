"""
Client factory - Auto-create stream adapters based on configuration

Dependency injection pattern for cloud-agnostic code
"""

import logging

from config.settings import get_settings
from core.interfaces.streaming_consumer import BaseStreamConsumer
from core.interfaces.streaming_producer import BaseStreamProducer

logger = logging.getLogger(__name__)

_UNIMPLEMENTED_PROVIDERS = {
    "aws": "Kinesis",
    "localstack": "Kinesis",
    "gcp": "GCP PubSub",
    "azure": "Azure EventHub",
}


def _unsupported(provider: str) -> ValueError:
    return ValueError(
        f"Unsupported cloud provider: {provider}. "
        f"Supported: opensource (Kafka), aws, localstack, gcp, azure"
    )


def create_stream_producer() -> BaseStreamProducer:
    """
    Create stream producer based on CLOUD_PROVIDER config

    Returns:
        BaseStreamProducer: Kafka (opensource)

    Raises:
        NotImplementedError: Provider is known but has no producer yet
        ValueError: Provider is unknown

    Examples:
        >>> # .env: CLOUD_PROVIDER=opensource
        >>> producer = create_stream_producer()  # Returns KafkaStreamProducer
    """
    settings = get_settings()
    provider = settings.CLOUD_PROVIDER.lower()

    if provider == "opensource":
        from providers.opensource.kafka_stream_producer import KafkaStreamProducer

        logger.info("✓ Creating KafkaStreamProducer (opensource)")
        return KafkaStreamProducer()

    elif provider in _UNIMPLEMENTED_PROVIDERS:
        raise NotImplementedError(f"{_UNIMPLEMENTED_PROVIDERS[provider]} producer not implemented yet")

    else:
        raise _unsupported(provider)


def create_stream_consumer(group_id: str | None = None) -> BaseStreamConsumer:
    """
    Create stream consumer based on CLOUD_PROVIDER config

    Args:
        group_id: Consumer group override (default: KAFKA_CONSUMER_GROUP)

    Returns:
        BaseStreamConsumer: Kafka (opensource)

    Raises:
        NotImplementedError: Provider is known but has no consumer yet
        ValueError: Provider is unknown

    Examples:
        >>> # .env: CLOUD_PROVIDER=opensource
        >>> consumer = create_stream_consumer()  # Returns KafkaStreamConsumer
    """
    settings = get_settings()
    provider = settings.CLOUD_PROVIDER.lower()

    if provider == "opensource":
        from providers.opensource.kafka_stream_consumer import KafkaStreamConsumer

        logger.info("✓ Creating KafkaStreamConsumer (opensource)")
        return KafkaStreamConsumer(group_id=group_id)

    elif provider in _UNIMPLEMENTED_PROVIDERS:
        raise NotImplementedError(f"{_UNIMPLEMENTED_PROVIDERS[provider]} consumer not implemented yet")

    else:
        raise _unsupported(provider)
