"""Factory package - Dependency injection for cloud-agnostic code"""

from .client_factory import create_stream_consumer, create_stream_producer

__all__ = [
    "create_stream_producer",
    "create_stream_consumer",
]
