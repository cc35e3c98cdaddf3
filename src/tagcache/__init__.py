"""tagcache - key-value caching with tags, hierarchical keys and namespaces.

A small cache library with time-based expiration, tag-based grouped
invalidation and ``/``-delimited hierarchical keys and tags, over an
in-memory or a SQLite backend. Both backends behave identically.

Example:
    from tagcache import CacheConfig, CacheEngine

    cache = CacheEngine.sqlite("var/cache.db", CacheConfig(default_ttl=300))

    # Get-or-compute: the producer only runs on a miss
    profile = cache.get("user/123/profile", lambda: load_profile(123), tags="users")

    # Hierarchical delete: user/123 and everything under user/123/
    cache.delete("user/123", recursive=True)

    # Tag invalidation, including nested tags such as users/admins
    cache.clear("users", recursive=True)

Namespaces:
    user = cache.namespace("user/123", tags=["users"], ttl=60)
    user.set("settings", {"theme": "dark"})   # stored as user/123/settings
    user.namespace("posts").set("1", {...})   # stored as user/123/posts/1

    # Careful: clear() through a namespace is NOT scoped to it
    user.clear("users")   # clears "users" across the whole cache
"""

from tagcache.core.entities import CacheConfig, CacheEntry
from tagcache.core.exceptions import CacheError, SerializationError, StorageError
from tagcache.core.interfaces import ICache, ICacheBackend, ISerializer
from tagcache.core.services import CacheEngine, CacheNamespace
from tagcache.decorators import cached, configure, invalidates
from tagcache.infrastructure import (
    InMemoryCacheBackend,
    JsonSerializer,
    SqliteCacheBackend,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core entities
    "CacheConfig",
    "CacheEntry",
    # Exceptions
    "CacheError",
    "SerializationError",
    "StorageError",
    # Core interfaces
    "ICache",
    "ICacheBackend",
    "ISerializer",
    # Core services
    "CacheEngine",
    "CacheNamespace",
    # Infrastructure implementations
    "InMemoryCacheBackend",
    "SqliteCacheBackend",
    "JsonSerializer",
    # Decorators
    "cached",
    "invalidates",
    "configure",
]
