"""Cache engine - runs cache operations against one storage backend."""

import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path
from types import TracebackType
from typing import Any

from tagcache.core.entities.cache_config import CacheConfig
from tagcache.core.entities.cache_entry import CacheEntry
from tagcache.core.interfaces.cache import TTL, Tags
from tagcache.core.interfaces.cache_backend import ICacheBackend
from tagcache.core.interfaces.serializer import ISerializer
from tagcache.core.services.namespace import CacheNamespace
from tagcache.utils.paths import descendant_prefix, normalize_tags, to_seconds

logger = logging.getLogger(__name__)


class CacheEngine:
    """Domain service implementing the cache contract on a backend.

    The engine resolves producers, serializes values, computes expiry
    times and works out which keys a hierarchical delete or clear
    touches. The backend only stores rows; each logical operation runs
    inside one backend transaction so an entry and its tag rows always
    change together.

    Concurrency note: two callers missing the same key in ``get`` may
    both run their producer and both store the result. The last write
    wins. Each ``get`` call runs its producer at most once. Hit and miss
    counters have their own lock, so one engine can be shared between
    threads.
    """

    def __init__(
        self,
        backend: ICacheBackend,
        serializer: ISerializer | None = None,
        config: CacheConfig | None = None,
    ) -> None:
        """Initialize the cache engine.

        Args:
            backend: The storage backend.
            serializer: Codec for values. Defaults to JSON.
            config: Optional cache configuration. Uses defaults if not provided.
        """
        if serializer is None:
            from tagcache.infrastructure.serializers.json import JsonSerializer

            serializer = JsonSerializer()

        self._backend = backend
        self._serializer = serializer
        self._config = config or CacheConfig()

        # Statistics
        self._stats_lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @classmethod
    def in_memory(
        cls,
        config: CacheConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> "CacheEngine":
        """Create an engine over a fresh, non-persistent in-memory backend.

        Args:
            config: Optional cache configuration.
            clock: Source of the current time, for tests.

        Returns:
            A new CacheEngine.
        """
        from tagcache.infrastructure.backends.memory import InMemoryCacheBackend

        return cls(backend=InMemoryCacheBackend(clock=clock), config=config)

    @classmethod
    def sqlite(
        cls,
        path: str | Path,
        config: CacheConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> "CacheEngine":
        """Create an engine over a SQLite database file.

        The file and its schema are created if missing. Whether expired
        entries are swept on open is decided once, here, from
        ``config.cleanup_odds``.

        Args:
            path: Database file path.
            config: Optional cache configuration.
            clock: Source of the current time, for tests.

        Returns:
            A new CacheEngine.
        """
        from tagcache.infrastructure.backends.sqlite import SqliteCacheBackend

        config = config or CacheConfig()
        backend = SqliteCacheBackend(
            path,
            clean_on_open=config.should_clean(),
            clock=clock,
        )
        return cls(backend=backend, config=config)

    @property
    def config(self) -> CacheConfig:
        """Get the cache configuration."""
        return self._config

    @property
    def backend(self) -> ICacheBackend:
        """Get the storage backend."""
        return self._backend

    @property
    def stats(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with hits, misses, and total lookups made by ``get``.
        """
        with self._stats_lock:
            return {
                "hits": self._hits,
                "misses": self._misses,
                "total": self._hits + self._misses,
            }

    def get(
        self,
        key: str,
        default: Any | Callable[[], Any] = None,
        ttl: TTL | None = None,
        tags: Tags = (),
    ) -> Any:
        """Get an item, or cache and return ``default`` on a miss.

        Args:
            key: The cache key.
            default: Value stored on a miss. A zero-argument callable is
                called once per miss and never on a hit.
            ttl: TTL for the stored default. None uses the config default.
            tags: Tags for the stored default.

        Returns:
            The cached value, the stored default, or None on a miss
            without default.
        """
        data = self._backend.load(key)

        if data is not None:
            self._record(hit=True)
            return self._serializer.deserialize(data)

        self._record(hit=False)
        if default is None:
            return None
        return self.set(key, default, ttl=ttl, tags=tags)

    def set(
        self,
        key: str,
        value: Any | Callable[[], Any],
        ttl: TTL | None = None,
        tags: Tags = (),
    ) -> Any:
        """Store an item, replacing its value, expiry and tags.

        Args:
            key: The cache key.
            value: The value, or a zero-argument callable producing it.
            ttl: Time-to-live. None uses the config default.
            tags: A tag or tags. Duplicates are ignored.

        Returns:
            The concrete value that was stored.
        """
        if callable(value):
            value = value()

        effective_ttl = to_seconds(ttl if ttl is not None else self._config.default_ttl)
        entry = CacheEntry.create(
            key=key,
            value=self._serializer.serialize(value),
            now=self._backend.now(),
            ttl=effective_ttl,
            tags=normalize_tags(tags),
        )
        self._backend.store(entry)
        return value

    def has(self, key: str) -> bool:
        """Check if an unexpired item exists. Never modifies the cache."""
        return self._backend.contains(key)

    def delete(self, key: str, recursive: bool = False) -> "CacheEngine":
        """Delete an item if present.

        With ``recursive``, every item whose key starts with ``key/`` is
        deleted too. ``"user1"`` is not under ``"user"``.

        Args:
            key: The cache key.
            recursive: Also delete keys nested under this one.

        Returns:
            This engine.
        """
        with self._backend.transaction():
            keys = [key]
            if recursive:
                keys.extend(self._backend.keys_with_prefix(descendant_prefix(key)))
            removed = self._backend.remove(keys)

        logger.debug("Deleted %d entries for %r (recursive=%s)", removed, key, recursive)
        return self

    def clear(self, tags: Tags, recursive: bool = False) -> "CacheEngine":
        """Delete every item associated with the given tag or tags.

        With ``recursive``, items carrying a tag nested under one of the
        given tags (``tag/...``) are deleted too. Unknown tags are ignored.

        Args:
            tags: A tag or tags.
            recursive: Also clear tags nested under these ones.

        Returns:
            This engine.
        """
        tags = normalize_tags(tags)

        with self._backend.transaction():
            keys: set[str] = set()
            for tag in tags:
                keys.update(self._backend.keys_with_tag(tag))
                if recursive:
                    keys.update(self._backend.keys_with_tag_prefix(descendant_prefix(tag)))
            removed = self._backend.remove(keys)

        logger.debug("Cleared %d entries for tags %r (recursive=%s)", removed, tags, recursive)
        return self

    def namespace(
        self,
        prefix: str,
        tags: Tags = (),
        ttl: TTL | None = None,
    ) -> CacheNamespace:
        """Return a view of this cache whose keys live under ``prefix/``.

        Args:
            prefix: Namespace prefix. Empty means no key rewriting.
            tags: Tags added to every item set through the view.
            ttl: TTL used by the view when a call supplies none.

        Returns:
            A CacheNamespace wrapping this engine.
        """
        return CacheNamespace(self, prefix, tags=tags, ttl=ttl)

    def flush(self) -> "CacheEngine":
        """Completely flush the cache, deleting all items and tags."""
        self._backend.flush()
        with self._stats_lock:
            self._hits = 0
            self._misses = 0
        logger.debug("Flushed cache")
        return self

    def clean(self) -> "CacheEngine":
        """Remove all expired items from the cache."""
        removed = self._backend.purge_expired()
        logger.debug("Cleaned %d expired entries", removed)
        return self

    def compact(self) -> "CacheEngine":
        """Reclaim unused backend storage space.

        WARNING: For SQLite this can be slow and locks the database
        during the operation.
        """
        self._backend.compact()
        return self

    def close(self) -> None:
        """Release backend resources."""
        self._backend.close()

    def _record(self, hit: bool) -> None:
        with self._stats_lock:
            if hit:
                self._hits += 1
            else:
                self._misses += 1

    def __enter__(self) -> "CacheEngine":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
