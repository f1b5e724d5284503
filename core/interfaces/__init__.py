"""Interfaces module - Abstract base classes for stream adapters"""

from .streaming_consumer import BaseStreamConsumer
from .streaming_producer import BaseStreamProducer

__all__ = [
    "BaseStreamConsumer",
    "BaseStreamProducer",
]
