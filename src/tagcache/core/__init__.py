"""Core domain layer for tagcache."""

from tagcache.core.entities import CacheConfig, CacheEntry
from tagcache.core.exceptions import CacheError, SerializationError, StorageError
from tagcache.core.interfaces import ICache, ICacheBackend, ISerializer
from tagcache.core.services import CacheEngine, CacheNamespace

__all__ = [
    # Entities
    "CacheConfig",
    "CacheEntry",
    # Exceptions
    "CacheError",
    "SerializationError",
    "StorageError",
    # Interfaces
    "ICache",
    "ICacheBackend",
    "ISerializer",
    # Services
    "CacheEngine",
    "CacheNamespace",
]
