"""Domain entities for tagcache."""

from tagcache.core.entities.cache_config import CacheConfig
from tagcache.core.entities.cache_entry import CacheEntry

__all__ = [
    "CacheConfig",
    "CacheEntry",
]
