"""Infrastructure layer implementations for tagcache."""

from tagcache.infrastructure.backends import InMemoryCacheBackend, SqliteCacheBackend
from tagcache.infrastructure.serializers import JsonSerializer

__all__ = [
    "InMemoryCacheBackend",
    "SqliteCacheBackend",
    "JsonSerializer",
]
