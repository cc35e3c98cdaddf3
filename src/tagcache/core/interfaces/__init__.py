"""Core interfaces (Protocol classes) for tagcache."""

from tagcache.core.interfaces.cache import ICache
from tagcache.core.interfaces.cache_backend import ICacheBackend
from tagcache.core.interfaces.serializer import ISerializer

__all__ = [
    "ICache",
    "ICacheBackend",
    "ISerializer",
]
