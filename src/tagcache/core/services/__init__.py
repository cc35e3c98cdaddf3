"""Domain services for tagcache."""

from tagcache.core.services.cache_engine import CacheEngine
from tagcache.core.services.namespace import CacheNamespace

__all__ = [
    "CacheEngine",
    "CacheNamespace",
]
