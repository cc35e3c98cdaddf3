"""Storage backends."""

from tagcache.infrastructure.backends.memory import InMemoryCacheBackend
from tagcache.infrastructure.backends.sqlite import SqliteCacheBackend

__all__ = [
    "InMemoryCacheBackend",
    "SqliteCacheBackend",
]
